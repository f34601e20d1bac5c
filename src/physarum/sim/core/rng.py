from __future__ import annotations

import math
import random
from typing import Optional, Sequence, TypeVar

from pygame.math import Vector2

from ..utils.quaternion import Quaternion

T = TypeVar("T")


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_bool(self, probability: float) -> bool:
        if probability <= 0.0:
            return False
        return self._random.random() < probability

    def next_unit_circle(self) -> Vector2:
        angle = self._random.uniform(0, 2 * math.pi)
        vector = Vector2()
        vector.from_polar((1, math.degrees(angle)))
        return vector

    def next_unit_quaternion(self) -> Quaternion:
        # Shoemake's uniform sampling of SO(3)
        u1 = self._random.random()
        u2 = self._random.uniform(0, 2 * math.pi)
        u3 = self._random.uniform(0, 2 * math.pi)
        a = math.sqrt(1.0 - u1)
        b = math.sqrt(u1)
        return Quaternion(a * math.sin(u2), a * math.cos(u2), b * math.sin(u3), b * math.cos(u3)).normalized()

    def sample_choice(self, items: Sequence[T]) -> Optional[T]:
        if not items:
            return None
        return self._random.choice(items)
