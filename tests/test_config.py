from pathlib import Path

import pytest

from core.config import VisualizerConfig, parse_args


def test_defaults():
    config, args = parse_args([])
    assert config.power_scale_frequencies == pytest.approx(1.02)
    assert config.ceiling_frequency == pytest.approx(15000.0)
    assert config.floor_frequency == 0.0
    assert config.output_scale == 1.0
    assert config.buffer_target == 3
    assert config.spectrum_size == 512
    assert config.layout is None
    assert not args.list_devices


def test_short_flags_and_layout():
    config, _ = parse_args(["-p", "0.99", "-c", "8000", "-f", "40", "-s", "2.5", "shape.obj"])
    assert config.power_scale_frequencies == pytest.approx(0.99)
    assert config.ceiling_frequency == 8000.0
    assert config.floor_frequency == 40.0
    assert config.output_scale == 2.5
    assert config.layout == Path("shape.obj")


def test_long_options():
    config, args = parse_args([
        "--buffer-target", "4", "--size", "256", "--device", "Monitor",
        "--fps", "30", "--log-level", "debug", "--list-devices",
    ])
    assert config.buffer_target == 4
    assert config.spectrum_size == 256
    assert config.device == "Monitor"
    assert config.fps == 30
    assert config.log_level == "debug"
    assert args.list_devices


def test_invalid_values_exit():
    with pytest.raises(SystemExit):
        parse_args(["-c", "100", "-f", "200"])
    with pytest.raises(SystemExit):
        parse_args(["--buffer-target", "0"])


@pytest.mark.parametrize("kwargs", [
    {"power_scale_frequencies": 0.0},
    {"floor_frequency": -1.0},
    {"spectrum_size": 1},
    {"output_scale": -1.0},
    {"log_level": "loud"},
])
def test_validate_rejects(kwargs):
    with pytest.raises(ValueError):
        VisualizerConfig(**kwargs).validate()


def test_config_is_immutable():
    config = VisualizerConfig()
    with pytest.raises(AttributeError):
        config.buffer_target = 10
