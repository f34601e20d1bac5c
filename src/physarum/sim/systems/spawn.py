from __future__ import annotations

from typing import Sequence, Tuple

from ..core.particle import Heading, Particle
from ..core.rng import DeterministicRng
from ..utils.math2d import Vector, _make_vector


class SpawnPolicy:
    """Uniform position inside the extent, uniform heading over the full angular range."""

    def __init__(self, extent: Sequence[int]):
        self._extent: Tuple[int, ...] = tuple(int(size) for size in extent)

    @property
    def extent(self) -> Tuple[int, ...]:
        return self._extent

    def position(self, rng: DeterministicRng) -> Vector:
        return _make_vector([rng.next_float() * size for size in self._extent])

    def heading(self, rng: DeterministicRng) -> Heading:
        if len(self._extent) == 3:
            return rng.next_unit_quaternion()
        return rng.next_unit_circle()

    def spawn(self, rng: DeterministicRng) -> Particle:
        origin = self.position(rng)
        return Particle(position=_make_vector(list(origin)), heading=self.heading(rng), origin=origin, age=0)
