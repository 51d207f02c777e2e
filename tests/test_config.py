import logging

import pytest

from terrain_streamer.host.config.value_default import (
    VALIDATION_RULES,
    WORLD,
    ConfigurationError,
    get_defaults,
    get_parameter_config,
    validate_parameter_set,
)
from terrain_streamer.host.config.world_config import BudgetConfig, WorldConfig


def test_world_defaults():
    config = WorldConfig.from_defaults()
    assert config.world_scale == 6000.0
    assert config.depth_divider == 1000.0
    assert config.map_size == 10000.0
    assert config.resolution == 257
    assert config.distant_resolution == 33
    assert config.high_res_rings == 2
    assert config.seed == 0


def test_budget_defaults():
    config = BudgetConfig.from_defaults()
    assert config.use_budget
    assert config.base_budget == 10000
    assert config.adaptive
    assert config.target_fps == 60.0
    assert config.adjust_step == 1000
    assert config.min_budget == 3000


def test_overrides_are_applied():
    config = WorldConfig.from_defaults(resolution=65, seed=12)
    assert config.resolution == 65
    assert config.seed == 12
    assert config.map_size == 10000.0


def test_map_depth():
    assert WorldConfig.from_defaults().map_depth(20) == pytest.approx(120.0)


def test_config_is_immutable():
    config = WorldConfig.from_defaults()
    with pytest.raises(AttributeError):
        config.resolution = 9


@pytest.mark.parametrize("overrides", [
    {"resolution": 33, "distant_resolution": 33},
    {"resolution": 1},
    {"distant_resolution": 1},
    {"world_scale": 0.0},
    {"map_size": -5.0},
    {"high_res_rings": -1},
])
def test_invalid_world_config(overrides):
    with pytest.raises(ConfigurationError):
        WorldConfig.from_defaults(**overrides)


@pytest.mark.parametrize("overrides", [
    {"base_budget": 0},
    {"min_budget": 0},
    {"adjust_step": -1},
    {"target_fps": 0.0},
])
def test_invalid_budget_config(overrides):
    with pytest.raises(ConfigurationError):
        BudgetConfig.from_defaults(**overrides)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_get_parameter_config():
    assert get_parameter_config("world", "resolution") == WORLD.RESOLUTION
    with pytest.raises(ValueError):
        get_parameter_config("world", "unknown")
    with pytest.raises(ValueError):
        get_parameter_config("weather", "resolution")


def test_get_defaults_uses_lowercase_names():
    defaults = get_defaults("iteration")
    assert defaults["depth"] == 20
    assert defaults["offset_x"] == 100.0


def test_validate_parameter_set_warnings():
    ok, warnings, errors = validate_parameter_set("world", {"resolution": 17, "distant_resolution": 33})
    assert ok
    assert errors == []
    assert any("distant_resolution" in warning for warning in warnings)

    ok, warnings, _ = validate_parameter_set("budget", {"base_budget": 500, "min_budget": 3000})
    assert ok
    assert len(warnings) == 2


def test_validate_parameter_set_errors():
    ok, _, errors = validate_parameter_set("world", {"resolution": 9, "distant_resolution": 9})
    assert not ok
    assert len(errors) == 1


@pytest.mark.parametrize("overrides", [
    {"world_offset_x": -150000.0},
    {"world_offset_x": 150000.0},
    {"world_scale": 0.5},
    {"seed": -1},
])
def test_values_outside_slider_range_only_warn(overrides, caplog):
    with caplog.at_level(logging.WARNING):
        config = WorldConfig.from_defaults(**overrides)
    for name, value in overrides.items():
        assert getattr(config, name) == value
    assert any("empfohlenem" in record.getMessage() for record in caplog.records)


def test_below_minimum_is_a_warning_not_an_error():
    ok, warnings, errors = validate_parameter_set("world", {"world_offset_y": -200000.0})
    assert ok
    assert errors == []
    assert len(warnings) == 1


def test_cross_parameter_messages_come_from_validation_rules():
    _, _, errors = validate_parameter_set("world", {"resolution": 17, "distant_resolution": 17})
    assert errors == [VALIDATION_RULES.WORLD_CONSTRAINTS["lod_distinguishable"]]

    _, warnings, _ = validate_parameter_set("budget", {"base_budget": 5000, "min_budget": 6000})
    assert warnings == [VALIDATION_RULES.BUDGET_CONSTRAINTS["floor_below_base"]]
