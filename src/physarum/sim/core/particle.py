from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pygame.math import Vector2

from ..utils.math2d import Vector
from ..utils.quaternion import Quaternion

Heading = Union[Vector2, Quaternion]


@dataclass(frozen=True, slots=True)
class Particle:
    position: Vector
    heading: Heading
    origin: Vector
    age: int = 0

    def heading_components(self) -> tuple[float, ...]:
        if isinstance(self.heading, Quaternion):
            return self.heading.as_tuple()
        return (self.heading.x, self.heading.y)
