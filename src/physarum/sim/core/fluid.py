from __future__ import annotations

import math
from typing import Protocol

import numpy as np
from scipy.ndimage import map_coordinates

from .config import FluidConfig


class MediumAdvector(Protocol):
    def advect(self, field: np.ndarray, viscosity: float) -> np.ndarray: ...

    def reset(self) -> None: ...


def _neighbor_sum(x: np.ndarray) -> np.ndarray:
    padded = np.pad(x, 1, mode="edge")
    return padded[:-2, 1:-1] + padded[2:, 1:-1] + padded[1:-1, :-2] + padded[1:-1, 2:]


def _central_difference(x: np.ndarray, axis: int) -> np.ndarray:
    padded = np.pad(x, 1, mode="edge")
    if axis == 0:
        return 0.5 * (padded[2:, 1:-1] - padded[:-2, 1:-1])
    return 0.5 * (padded[1:-1, 2:] - padded[1:-1, :-2])


def _diffuse(x0: np.ndarray, rate: float, dt: float, iterations: int) -> np.ndarray:
    a = dt * rate
    if a <= 0.0 or x0.size == 0:
        return x0.copy()
    x = x0.copy()
    for _ in range(iterations):
        x = (x0 + a * _neighbor_sum(x)) / (1.0 + 4.0 * a)
    return x


def _advect(field: np.ndarray, u: np.ndarray, v: np.ndarray, dt: float) -> np.ndarray:
    if field.size == 0:
        return field.copy()
    width, height = field.shape
    xs, ys = np.meshgrid(np.arange(width, dtype=np.float64), np.arange(height, dtype=np.float64), indexing="ij")
    # semi-Lagrangian back trace
    coords = np.stack((xs - dt * u, ys - dt * v))
    return map_coordinates(field, coords, order=1, mode="nearest")


def _set_walls(u: np.ndarray, v: np.ndarray) -> None:
    u[0, :] = 0.0
    u[-1, :] = 0.0
    v[:, 0] = 0.0
    v[:, -1] = 0.0


def _project(u: np.ndarray, v: np.ndarray, iterations: int) -> tuple[np.ndarray, np.ndarray]:
    divergence = _central_difference(u, 0) + _central_difference(v, 1)
    pressure = np.zeros_like(u)
    for _ in range(iterations):
        pressure = (_neighbor_sum(pressure) - divergence) / 4.0
    u = u - _central_difference(pressure, 0)
    v = v - _central_difference(pressure, 1)
    _set_walls(u, v)
    return u, v


def advect_density(
    field: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    dt: float,
    diffusion: float,
    iterations: int = 20,
) -> np.ndarray:
    """Return a new field: ``field`` diffused by ``diffusion`` then carried along ``(u, v)`` for ``dt``."""
    if field.shape != u.shape or field.shape != v.shape:
        raise ValueError(f"Velocity shape {u.shape} does not match field shape {field.shape}")
    diffused = _diffuse(field, diffusion, dt, iterations)
    return _advect(diffused, u, v, dt)


class FluidField:
    """2D stable-fluids velocity solver driven by a rotating point force at the grid center."""

    def __init__(self, width: int, height: int, config: FluidConfig):
        self._config = config
        self._shape = (int(width), int(height))
        self._u = np.zeros(self._shape, dtype=np.float64)
        self._v = np.zeros(self._shape, dtype=np.float64)
        self._time = 0.0

    @property
    def u(self) -> np.ndarray:
        return self._u

    @property
    def v(self) -> np.ndarray:
        return self._v

    @property
    def time(self) -> float:
        return self._time

    @property
    def angular_step(self) -> float:
        if self._config.angular_step is not None:
            return self._config.angular_step
        return math.pi / max(1, self._shape[0])

    def reset(self) -> None:
        self._u.fill(0.0)
        self._v.fill(0.0)
        self._time = 0.0

    def force(self) -> None:
        width, height = self._shape
        if width == 0 or height == 0:
            return
        self._time += self.angular_step
        magnitude = self._config.force_scale * width
        center = (width // 2, height // 2)
        self._u[center] = -magnitude * math.cos(self._time)
        self._v[center] = -magnitude * math.sin(self._time)

    def step(self, dt: float, viscosity: float) -> None:
        if self._u.size == 0:
            return
        iterations = self._config.solver_iterations
        u = _diffuse(self._u, viscosity, dt, iterations)
        v = _diffuse(self._v, viscosity, dt, iterations)
        u, v = _project(u, v, iterations)
        u, v = _advect(u, u, v, dt), _advect(v, u, v, dt)
        self._u, self._v = _project(u, v, iterations)


class FluidAdvector:
    """Steps a ``FluidField`` once per call and carries the medium along its velocity."""

    def __init__(self, fluid: FluidField, config: FluidConfig):
        self._fluid = fluid
        self._config = config

    @property
    def fluid(self) -> FluidField:
        return self._fluid

    def reset(self) -> None:
        self._fluid.reset()

    def advect(self, field: np.ndarray, viscosity: float) -> np.ndarray:
        dt = self._config.time_step
        self._fluid.force()
        self._fluid.step(dt, viscosity)
        return advect_density(
            field,
            self._fluid.u,
            self._fluid.v,
            dt,
            self._config.diffusion,
            iterations=self._config.solver_iterations,
        )
