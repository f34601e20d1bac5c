from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

import yaml

BOUNDARY_MODES = ("clamp", "wrap")
TIE_BREAK_POLICIES = ("straight", "random")


class ConfigError(ValueError):
    """Raised when a configuration is structurally unusable."""


@dataclass
class SlimeConfig:
    # Angle between the center sensor and each side sensor (radians)
    sensor_spread: float = 0.8
    # Turn rate, radians per unit time
    turn_speed: float = 1.8
    decay_rate: float = 0.05
    deposit_rate: float = 1.0
    move_speed: float = 1.0
    sample_dist: float = 3.0
    diffusion_rate: float = 0.1
    viscosity: float = 0.0
    # Per-tick probability that an agent is respawned regardless of position
    death_rate: float = 0.0


@dataclass
class FluidConfig:
    enabled: bool = False
    time_step: float = 1e-2
    diffusion: float = 1e-10
    force_scale: float = 1.0
    angular_step: Optional[float] = None
    solver_iterations: int = 20


@dataclass
class SimulationConfig:
    extent: Tuple[int, ...] = (200, 200)
    agent_count: int = 2000
    seed: int = 42
    time_step: float = 0.5
    boundary: str = "clamp"
    tie_break: str = "straight"
    time_scaled_decay: bool = False
    slime: SlimeConfig = field(default_factory=SlimeConfig)
    fluid: FluidConfig = field(default_factory=FluidConfig)

    @property
    def dimensions(self) -> int:
        return len(self.extent)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def validate_config(config: SimulationConfig) -> SimulationConfig:
    extent = tuple(int(size) for size in config.extent)
    if len(extent) not in (2, 3):
        raise ConfigError(f"extent must have 2 or 3 axes, got {len(extent)}")
    if any(size < 0 for size in extent):
        raise ConfigError(f"extent sizes must be non-negative, got {extent}")
    if config.agent_count < 0:
        raise ConfigError(f"agent_count must be non-negative, got {config.agent_count}")
    if config.boundary not in BOUNDARY_MODES:
        raise ConfigError(f"Unknown boundary mode: {config.boundary}")
    if config.tie_break not in TIE_BREAK_POLICIES:
        raise ConfigError(f"Unknown tie-break policy: {config.tie_break}")
    if config.fluid.enabled and len(extent) != 2:
        raise ConfigError("Fluid coupling is only available for 2D extents")
    return replace(config, extent=extent)


def load_config(raw: dict) -> SimulationConfig:
    try:
        slime = SlimeConfig(**raw.get("slime", {}))
        fluid = FluidConfig(**raw.get("fluid", {}))
        sim_values = {k: v for k, v in raw.items() if k not in {"slime", "fluid"}}
        if "extent" in sim_values:
            sim_values["extent"] = tuple(sim_values["extent"])
        config = SimulationConfig(slime=slime, fluid=fluid, **sim_values)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
    return validate_config(config)
