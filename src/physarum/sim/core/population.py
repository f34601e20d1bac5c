from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence

from .config import SlimeConfig
from .medium import MediumField
from .particle import Particle
from .rng import DeterministicRng
from ..systems.sensors import SensorModel
from ..systems.spawn import SpawnPolicy
from ..systems.steering import decide_turn


@dataclass(slots=True)
class PopulationStats:
    out_of_bounds: int = 0
    random_deaths: int = 0
    age_sum: int = 0

    @property
    def respawns(self) -> int:
        return self.out_of_bounds + self.random_deaths


class AgentPopulation:
    """Fixed-size ordered collection of particles; one half of a front/back pair."""

    def __init__(self, particles: Sequence[Particle]):
        self._particles: List[Particle] = list(particles)

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._particles)

    def __getitem__(self, index: int) -> Particle:
        return self._particles[index]

    def __setitem__(self, index: int, particle: Particle) -> None:
        self._particles[index] = particle

    def advance(
        self,
        back: "AgentPopulation",
        front_field: MediumField,
        back_field: MediumField,
        sensors: SensorModel,
        spawn: SpawnPolicy,
        slime: SlimeConfig,
        dt: float,
        rng: DeterministicRng,
        wrap: bool = False,
        tie_break: str = "straight",
    ) -> PopulationStats:
        """Step every agent from this (front) population into ``back``.

        Sensing reads only ``front_field``; deposits land only in ``back_field``.
        """
        if len(back) != len(self._particles):
            raise ValueError("Front and back populations differ in size")

        stats = PopulationStats()
        spread = slime.sensor_spread
        distance = slime.sample_dist
        turn_angle = slime.turn_speed * dt
        step_length = slime.move_speed * dt
        deposit = slime.deposit_rate * dt
        death_rate = slime.death_rate
        back_particles = back._particles

        for index, particle in enumerate(self._particles):
            turns = [
                decide_turn(
                    front_field.value_at(left, wrap),
                    front_field.value_at(center, wrap),
                    front_field.value_at(right, wrap),
                    tie_break,
                    rng,
                )
                for left, center, right in sensors.probes(particle.position, particle.heading, spread, distance)
            ]
            heading = sensors.turn(particle.heading, turns, turn_angle)
            position = particle.position + sensors.forward(heading) * step_length
            if wrap:
                position = back_field.wrap(position)

            dies = death_rate > 0.0 and rng.next_bool(death_rate)
            cell = back_field.sample(position)
            if cell is not None:
                back_field.deposit(cell, deposit)
            if cell is None or dies:
                if cell is None:
                    stats.out_of_bounds += 1
                else:
                    stats.random_deaths += 1
                back_particles[index] = spawn.spawn(rng)
                continue

            age = particle.age + 1
            back_particles[index] = Particle(position=position, heading=heading, origin=particle.origin, age=age)
            stats.age_sum += age

        return stats
