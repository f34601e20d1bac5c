from __future__ import annotations

import math
from typing import Sequence, Union

from pygame.math import Vector2, Vector3

Vector = Union[Vector2, Vector3]


def _make_vector(components: Sequence[float]) -> Vector:
    if len(components) == 2:
        return Vector2(components[0], components[1])
    return Vector3(components[0], components[1], components[2])


def _wrap_value(value: float, size: float) -> float:
    if not math.isfinite(value) or size <= 0:
        return value
    wrapped = value % size
    # -1e-18 % 10.0 rounds up to 10.0
    if wrapped >= size:
        return 0.0
    return wrapped


def _rotate_planar(heading: Vector2, angle: float) -> Vector2:
    if angle == 0.0:
        return Vector2(heading)
    return heading.rotate_rad(angle).normalize()
