from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional, Sequence, Tuple

from .config import SimulationConfig, SlimeConfig, validate_config
from .fluid import FluidAdvector, FluidField, MediumAdvector
from .medium import MediumField, relax
from .population import AgentPopulation
from .rng import DeterministicRng
from ..systems import metrics as metrics_system
from ..systems.sensors import SensorModel, sensor_model_for
from ..systems.spawn import SpawnPolicy
from ..types.metrics import TickMetrics
from ..types.snapshot import Frame, Snapshot

logger = logging.getLogger(__name__)


class SimulationEngine:
    """Coupled medium/agent stepping engine with explicit front/back buffers.

    Both the medium and the population live in two-slot lists. ``_front``
    names the slot that readers see; a tick writes the other slot and then
    flips the index once, so the medium and the agents change identity
    together.
    """

    def __init__(self, config: SimulationConfig, rng: Optional[DeterministicRng] = None):
        self._config = validate_config(config)
        self._rng = rng if rng is not None else DeterministicRng(config.seed)
        extent = self._config.extent
        self._spawn = SpawnPolicy(extent)
        self._sensors: SensorModel = sensor_model_for(len(extent))
        self._media = [MediumField(extent), MediumField(extent)]
        self._populations = [AgentPopulation([]), AgentPopulation([])]
        self._front = 0
        self._tick = 0
        self._metrics: TickMetrics | None = None
        self._advector: MediumAdvector | None = None
        if self._config.fluid.enabled:
            self._advector = FluidAdvector(FluidField(extent[0], extent[1], self._config.fluid), self._config.fluid)
        self._bootstrap_population()
        logger.info(
            "Created engine extent=%s agents=%d seed=%s boundary=%s fluid=%s",
            extent,
            self._config.agent_count,
            self._rng.seed,
            self._config.boundary,
            self._config.fluid.enabled,
        )

    @classmethod
    def create(cls, extent: Sequence[int], agent_count: int, seed: int = 0, **overrides) -> "SimulationEngine":
        config = SimulationConfig(extent=tuple(extent), agent_count=agent_count, seed=seed, **overrides)
        return cls(config)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def extent(self) -> Tuple[int, ...]:
        return self._config.extent

    @property
    def dimensions(self) -> int:
        return self._media[self._front].dimensions

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def population(self) -> AgentPopulation:
        return self._populations[self._front]

    @property
    def medium(self) -> MediumField:
        return self._media[self._front]

    @property
    def advector(self) -> MediumAdvector | None:
        return self._advector

    def reset(self) -> None:
        self._rng.reset()
        for medium in self._media:
            medium.clear()
        if self._advector is not None:
            self._advector.reset()
        self._front = 0
        self._tick = 0
        self._metrics = None
        self._bootstrap_population()

    def step(self, slime: SlimeConfig | None = None, dt: float | None = None) -> TickMetrics:
        start = perf_counter()
        config = self._config
        slime = slime if slime is not None else config.slime
        dt = dt if dt is not None else config.time_step

        front_medium = self._media[self._front]
        back_medium = self._media[1 - self._front]
        front_population = self._populations[self._front]
        back_population = self._populations[1 - self._front]

        source = None
        if self._advector is not None:
            source = self._advector.advect(front_medium.data, slime.viscosity)
        relax(
            front_medium,
            back_medium,
            slime.decay_rate,
            slime.diffusion_rate,
            dt,
            time_scaled=config.time_scaled_decay,
            source=source,
        )

        stats = front_population.advance(
            back_population,
            front_medium,
            back_medium,
            self._sensors,
            self._spawn,
            slime,
            dt,
            self._rng,
            wrap=config.boundary == "wrap",
            tie_break=config.tie_break,
        )

        self._front = 1 - self._front
        self._tick += 1

        elapsed_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            self._tick, len(back_population), stats, back_medium, elapsed_ms
        )
        if stats.respawns:
            logger.debug(
                "tick %d: %d respawned (%d out of bounds, %d random)",
                self._tick,
                stats.respawns,
                stats.out_of_bounds,
                stats.random_deaths,
            )
        return self._metrics

    def frame(self) -> Frame:
        medium = self._media[self._front].data.view()
        medium.flags.writeable = False
        return Frame(particles=tuple(self._populations[self._front]), medium=medium)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tick=self._tick,
            extent=self._config.extent,
            particles=tuple(self._populations[self._front]),
        )

    def _bootstrap_population(self) -> None:
        particles = [self._spawn.spawn(self._rng) for _ in range(self._config.agent_count)]
        self._populations = [AgentPopulation(particles), AgentPopulation(particles)]
