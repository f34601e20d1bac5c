from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from ..utils.math2d import Vector, _make_vector, _wrap_value

Cell = Tuple[int, ...]


def _neighbor_counts(shape: Tuple[int, ...]) -> np.ndarray:
    counts = np.ones(shape, dtype=np.float64)
    ndim = len(shape)
    for axis, size in enumerate(shape):
        if size < 2:
            continue
        lower = [slice(None)] * ndim
        upper = [slice(None)] * ndim
        lower[axis] = slice(0, size - 1)
        upper[axis] = slice(1, size)
        counts[tuple(lower)] += 1.0
        counts[tuple(upper)] += 1.0
    return counts


class MediumField:
    """Dense trail-concentration grid indexed ``[x, y]`` or ``[x, y, z]``."""

    def __init__(self, extent: Sequence[int]):
        self._extent = tuple(int(size) for size in extent)
        self._data = np.zeros(self._extent, dtype=np.float64)
        self._counts = _neighbor_counts(self._extent)

    @property
    def extent(self) -> Tuple[int, ...]:
        return self._extent

    @property
    def dimensions(self) -> int:
        return len(self._extent)

    @property
    def data(self) -> np.ndarray:
        return self._data

    def clear(self) -> None:
        self._data.fill(0.0)

    def total(self) -> float:
        return float(self._data.sum())

    def peak(self) -> float:
        if self._data.size == 0:
            return 0.0
        return float(self._data.max())

    def sample(self, position: Vector) -> Optional[Cell]:
        cell = []
        for coord, size in zip(position, self._extent):
            if not math.isfinite(coord) or coord < 0.0 or coord >= size:
                return None
            cell.append(int(coord))
        return tuple(cell)

    def wrap(self, position: Vector) -> Vector:
        return _make_vector([_wrap_value(coord, size) for coord, size in zip(position, self._extent)])

    def value_at(self, position: Vector, wrap: bool = False) -> Optional[float]:
        if wrap:
            position = self.wrap(position)
        cell = self.sample(position)
        if cell is None:
            return None
        return float(self._data[cell])

    def deposit(self, cell: Cell, amount: float) -> None:
        self._data[cell] += amount

    def relax_into(
        self,
        back: "MediumField",
        decay_rate: float,
        diffusion_rate: float,
        dt: float,
        time_scaled: bool = False,
        source: Optional[np.ndarray] = None,
    ) -> None:
        if back is self:
            raise ValueError("Cannot relax a medium into itself")
        if back.extent != self._extent:
            raise ValueError(f"Extent mismatch: {self._extent} vs {back.extent}")
        front = self._data if source is None else source
        if front.shape != self._extent:
            raise ValueError(f"Source shape {front.shape} does not match extent {self._extent}")
        if front is back.data:
            raise ValueError("Source aliases the back buffer")
        if front.size == 0:
            return

        total = front.copy()
        ndim = front.ndim
        for axis, size in enumerate(self._extent):
            if size < 2:
                continue
            lower = [slice(None)] * ndim
            upper = [slice(None)] * ndim
            lower[axis] = slice(0, size - 1)
            upper[axis] = slice(1, size)
            total[tuple(lower)] += front[tuple(upper)]
            total[tuple(upper)] += front[tuple(lower)]
        total /= self._counts

        factor = 1.0 - decay_rate * dt if time_scaled else 1.0 - decay_rate
        out = back.data
        # lerp toward the neighborhood mean, then decay
        np.subtract(total, front, out=out)
        out *= diffusion_rate
        out += front
        out *= factor


def relax(
    front: MediumField,
    back: MediumField,
    decay_rate: float,
    diffusion_rate: float,
    dt: float,
    time_scaled: bool = False,
    source: Optional[np.ndarray] = None,
) -> MediumField:
    front.relax_into(back, decay_rate, diffusion_rate, dt, time_scaled=time_scaled, source=source)
    return back
