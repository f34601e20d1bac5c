from __future__ import annotations

from ..core.medium import MediumField
from ..core.population import PopulationStats
from ..types.metrics import TickMetrics


def create_metrics(
    tick: int,
    population: int,
    stats: PopulationStats,
    medium: MediumField,
    duration_ms: float,
) -> TickMetrics:
    average_age = stats.age_sum / population if population > 0 else 0.0
    return TickMetrics(
        tick=tick,
        population=population,
        respawns=stats.respawns,
        out_of_bounds=stats.out_of_bounds,
        random_deaths=stats.random_deaths,
        average_age=average_age,
        total_concentration=medium.total(),
        peak_concentration=medium.peak(),
        tick_duration_ms=duration_ms,
    )
