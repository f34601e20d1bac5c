from __future__ import annotations

import math
from dataclasses import dataclass

from pygame.math import Vector3

FORWARD = Vector3(1.0, 0.0, 0.0)
UP = Vector3(0.0, 0.0, 1.0)
SIDE = Vector3(0.0, 1.0, 0.0)


@dataclass(frozen=True, slots=True)
class Quaternion:
    w: float
    x: float
    y: float
    z: float

    @staticmethod
    def identity() -> "Quaternion":
        return Quaternion(1.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_axis_angle(axis: Vector3, angle: float) -> "Quaternion":
        length = axis.length()
        if length < 1e-12:
            return Quaternion.identity()
        half = 0.5 * angle
        s = math.sin(half) / length
        return Quaternion(math.cos(half), axis.x * s, axis.y * s, axis.z * s)

    def length_squared(self) -> float:
        return self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalized(self) -> "Quaternion":
        mag = self.length()
        if mag < 1e-12:
            return Quaternion.identity()
        return Quaternion(self.w / mag, self.x / mag, self.y / mag, self.z / mag)

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        return Quaternion(
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
        )

    def rotate(self, vector: Vector3) -> Vector3:
        # v' = v + 2w (q x v) + 2 q x (q x v), with q the vector part
        qx, qy, qz = self.x, self.y, self.z
        tx = 2.0 * (qy * vector.z - qz * vector.y)
        ty = 2.0 * (qz * vector.x - qx * vector.z)
        tz = 2.0 * (qx * vector.y - qy * vector.x)
        return Vector3(
            vector.x + self.w * tx + (qy * tz - qz * ty),
            vector.y + self.w * ty + (qz * tx - qx * tz),
            vector.z + self.w * tz + (qx * ty - qy * tx),
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.w, self.x, self.y, self.z)
