from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    respawns: int
    out_of_bounds: int
    random_deaths: int
    average_age: float
    total_concentration: float
    peak_concentration: float
    tick_duration_ms: float = 0.0
