from __future__ import annotations

from pathlib import Path

import pytest
from pytest import approx

from physarum.sim.core.config import ConfigError, SimulationConfig, load_config

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


def test_defaults_describe_clamped_2d_run():
    config = SimulationConfig()
    assert config.dimensions == 2
    assert config.boundary == "clamp"
    assert config.tie_break == "straight"
    assert config.fluid.enabled is False
    assert config.slime.sensor_spread == approx(0.8)


def test_load_config_builds_nested_sections():
    config = load_config(
        {
            "extent": [30, 20, 10],
            "agent_count": 12,
            "boundary": "wrap",
            "slime": {"decay_rate": 0.2, "death_rate": 0.05},
        }
    )

    assert config.extent == (30, 20, 10)
    assert config.dimensions == 3
    assert config.agent_count == 12
    assert config.slime.decay_rate == approx(0.2)
    assert config.slime.death_rate == approx(0.05)
    assert config.slime.turn_speed == approx(1.8)


def test_load_config_rejects_unknown_keys_and_values():
    with pytest.raises(ConfigError):
        load_config({"slime": {"wobble": 1.0}})
    with pytest.raises(ConfigError):
        load_config({"gravity": 9.8})
    with pytest.raises(ConfigError):
        load_config({"boundary": "mirror"})
    with pytest.raises(ConfigError):
        load_config({"extent": [4, 4, 4], "fluid": {"enabled": True}})


def test_from_yaml_round_trip(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(
        "extent: [50, 40]\n"
        "seed: 9\n"
        "tie_break: random\n"
        "slime:\n"
        "  sample_dist: 4.5\n"
        "fluid:\n"
        "  enabled: true\n"
        "  angular_step: 0.1\n"
    )

    config = SimulationConfig.from_yaml(path)

    assert config.extent == (50, 40)
    assert config.seed == 9
    assert config.tie_break == "random"
    assert config.slime.sample_dist == approx(4.5)
    assert config.fluid.enabled is True
    assert config.fluid.angular_step == approx(0.1)


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SimulationConfig.from_yaml(path) == SimulationConfig()


@pytest.mark.parametrize("name", ["default.yaml", "fluid.yaml", "volume.yaml"])
def test_shipped_configs_load(name):
    config = SimulationConfig.from_yaml(CONFIG_DIR / name)
    assert config.dimensions in (2, 3)
