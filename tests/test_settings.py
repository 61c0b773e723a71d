import logging
from pathlib import Path

import pytest
import yaml

from sensorwatch.errors import ConfigurationError
from sensorwatch.io import load_dashboard_settings, load_settings, settings_from_mapping, setup_logging


def test_default_settings_structure():
    data = load_settings()
    assert data["polling"] == {"interval_ms": 2000, "window_s": 300}
    assert "chart" in data and "gauges" in data
    assert data["sensors"]["cpu_tctl"]["chip"] == "k10temp"


def test_default_dashboard_settings():
    settings = load_dashboard_settings()
    assert settings.interval_ms == 2000
    assert settings.window_s == 300
    assert (settings.bounds.floor, settings.bounds.ceiling, settings.bounds.padding) == (25.0, 90.0, 2.0)
    assert settings.gauges.warn == 34.0
    assert [metric.name for metric in settings.metrics] == ["cpu_tctl", "cpu_ccd", "coolant1", "coolant2", "gpu"]
    assert settings.log_file is None


def test_empty_mapping_uses_defaults():
    settings = settings_from_mapping({})
    assert settings.interval_ms == 2000
    assert settings.window_s == 300
    gpu = settings.metrics[-1]
    assert gpu.chip is None


def test_sensor_override_rewires_chip(tmp_path: Path):
    settings_path = tmp_path / "settings.yml"
    settings_path.write_text(
        yaml.safe_dump(
            {
                "polling": {"interval_ms": 1000, "window_s": 60},
                "sensors": {"gpu": {"chip": "amdgpu", "label": "edge"}},
            }
        )
    )
    settings = load_dashboard_settings(settings_path)
    assert settings.interval_ms == 1000
    gpu = settings.metrics[-1]
    assert (gpu.name, gpu.chip, gpu.sensor, gpu.label) == ("gpu", "amdgpu", "edge", "RTX 4070")


@pytest.mark.parametrize(
    "data",
    [
        {"polling": {"interval_ms": 0}},
        {"polling": {"interval_ms": 12.5}},
        {"polling": {"window_s": -1}},
        {"polling": {"window_s": "five minutes"}},
        {"polling": []},
        {"chart": {"floor": 90, "ceiling": 25}},
        {"gauges": {"span": 0}},
        {"sensors": {"fan1": {"chip": "nct6798"}}},
        {"sensors": {"gpu": "amdgpu"}},
        {"polling": {"interval_ms": float("nan")}},
        {"polling": {"window_s": float("inf")}},
        {"chart": {"padding": float("nan")}},
        {"logging": {"level": "VERBOSE"}},
    ],
)
def test_invalid_settings_raise_configuration_error(data):
    with pytest.raises(ConfigurationError):
        settings_from_mapping(data)


def test_malformed_yaml(tmp_path: Path):
    settings_path = tmp_path / "settings.yml"
    settings_path.write_text("polling: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_settings(settings_path)


def test_missing_settings_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.yml")


def test_setup_logging_writes_file(tmp_path: Path):
    log_path = tmp_path / "logs" / "dashboard.log"
    setup_logging("DEBUG", log_path)
    try:
        logging.getLogger("sensorwatch.test").debug("hello from the dashboard")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello from the dashboard" in log_path.read_text()
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.basicConfig(force=True)


def test_non_finite_yaml_values_rejected(tmp_path: Path):
    settings_path = tmp_path / "settings.yml"
    settings_path.write_text("polling:\n  interval_ms: .nan\n  window_s: .inf\n")
    with pytest.raises(ConfigurationError):
        load_dashboard_settings(settings_path)


def test_log_level_is_normalised():
    assert settings_from_mapping({"logging": {"level": "debug"}}).log_level == "DEBUG"
