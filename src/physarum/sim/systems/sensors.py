from __future__ import annotations

from typing import List, Protocol, Sequence, Tuple

from pygame.math import Vector2, Vector3

from ..core.particle import Heading
from ..utils.math2d import Vector, _rotate_planar
from ..utils.quaternion import FORWARD, SIDE, UP, Quaternion
from .steering import Turn

ProbeTriple = Tuple[Vector, Vector, Vector]


class SensorModel(Protocol):
    dimensions: int

    def forward(self, heading: Heading) -> Vector: ...

    def probes(self, position: Vector, heading: Heading, spread: float, distance: float) -> List[ProbeTriple]: ...

    def turn(self, heading: Heading, turns: Sequence[Turn], angle: float) -> Heading: ...


class PlanarSensorModel:
    """Single steering axis; headings are unit ``Vector2``."""

    dimensions = 2

    def forward(self, heading: Vector2) -> Vector2:
        return heading

    def probes(self, position: Vector2, heading: Vector2, spread: float, distance: float) -> List[ProbeTriple]:
        left = position + heading.rotate_rad(spread) * distance
        center = position + heading * distance
        right = position + heading.rotate_rad(-spread) * distance
        return [(left, center, right)]

    def turn(self, heading: Vector2, turns: Sequence[Turn], angle: float) -> Vector2:
        return _rotate_planar(heading, int(turns[0]) * angle)


class SpatialSensorModel:
    """Yaw and pitch steering axes, each sensed independently; headings are unit quaternions.

    The body frame looks along +x; yaw turns about body +z, pitch about body +y.
    """

    dimensions = 3
    axes: Tuple[Vector3, Vector3] = (UP, SIDE)

    def forward(self, heading: Quaternion) -> Vector3:
        return heading.rotate(FORWARD)

    def probes(self, position: Vector3, heading: Quaternion, spread: float, distance: float) -> List[ProbeTriple]:
        triples: List[ProbeTriple] = []
        center = position + heading.rotate(FORWARD) * distance
        for axis in self.axes:
            left = position + (heading * Quaternion.from_axis_angle(axis, spread)).rotate(FORWARD) * distance
            right = position + (heading * Quaternion.from_axis_angle(axis, -spread)).rotate(FORWARD) * distance
            triples.append((left, center, right))
        return triples

    def turn(self, heading: Quaternion, turns: Sequence[Turn], angle: float) -> Quaternion:
        rotated = heading
        changed = False
        for axis, turn in zip(self.axes, turns):
            if turn == Turn.STRAIGHT:
                continue
            rotated = rotated * Quaternion.from_axis_angle(axis, int(turn) * angle)
            changed = True
        if not changed:
            return heading
        return rotated.normalized()


def sensor_model_for(dimensions: int) -> SensorModel:
    if dimensions == 2:
        return PlanarSensorModel()
    if dimensions == 3:
        return SpatialSensorModel()
    raise ValueError(f"No sensor model for {dimensions} dimensions")
