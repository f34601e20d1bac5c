from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..record import TraceRecorder
from ..sim.core.config import SimulationConfig
from ..sim.core.engine import SimulationEngine
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "population",
    "respawns",
    "out_of_bounds",
    "random_deaths",
    "avg_age",
    "total_concentration",
    "peak_concentration",
    "tick_ms",
]


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.respawns,
        metrics.out_of_bounds,
        metrics.random_deaths,
        f"{metrics.average_age:.4f}",
        f"{metrics.total_concentration:.6f}",
        f"{metrics.peak_concentration:.6f}",
        f"{tick_ms:.3f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p99": _percentile(sorted_values, 0.99),
    }


def load_run_config(config_path: Optional[Path], seed: Optional[int]) -> SimulationConfig:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    return config


def run_headless(
    steps: int,
    seed: Optional[int] = None,
    log_path: Optional[Path] = None,
    deterministic_log: bool = False,
    config_path: Optional[Path] = None,
    record_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
) -> SimulationEngine:
    config = load_run_config(config_path, seed)
    engine = SimulationEngine(config)
    recorder = TraceRecorder(engine.extent) if record_path else None

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    respawn_series: list[float] = []
    mass_series: list[float] = []
    try:
        for _ in range(steps):
            if recorder is not None:
                recorder.record(engine)
            metrics = engine.step()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            respawn_series.append(float(metrics.respawns))
            mass_series.append(metrics.total_concentration)
            if writer:
                writer.writerow(_format_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if recorder is not None:
        recorder.save(record_path)

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "extent": list(engine.extent),
            "agent_count": config.agent_count,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "respawns": _summary_stats(respawn_series),
            "total_concentration": _summary_stats(mass_series),
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    logger.info("Ran %d ticks (seed=%s)", steps, config.seed)
    return engine


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless slime mold simulation")
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument("--record", type=Path, default=None, help="Binary trace file of agent snapshots")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write summary stats.")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        config_path=args.config,
        record_path=args.record,
        summary_path=args.summary,
    )


if __name__ == "__main__":
    main()
