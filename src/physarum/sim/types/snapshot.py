from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..core.particle import Particle


@dataclass(frozen=True, slots=True)
class Frame:
    """Read-only view of the front buffers handed to a visualizer."""

    particles: Sequence[Particle]
    medium: np.ndarray


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Agent-only state for one tick, as consumed by the trace recorder."""

    tick: int
    extent: Tuple[int, ...]
    particles: Tuple[Particle, ...]
