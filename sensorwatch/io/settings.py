import dataclasses
import logging
import math
import os
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml

from sensorwatch.errors import ConfigurationError
from sensorwatch.sensors.metrics import METRICS, METRICS_BY_NAME, MetricSpec
from sensorwatch.telemetry.bounds import DEFAULT_CEILING, DEFAULT_FLOOR, DEFAULT_PADDING, BoundsPolicy

PROJECT_MARKERS: Iterable[str] = (".git", "pyproject.toml", "config")
DEFAULT_SETTINGS_PATH = Path("config/settings.yml")

DEFAULT_INTERVAL_MS = 2000
DEFAULT_WINDOW_S = 5 * 60

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

PathLike = Union[str, os.PathLike]


def find_project_root(markers: Iterable[str] = PROJECT_MARKERS) -> Path:
    """Attempt to locate the repository root by walking up until a marker file/dir appears."""
    start = Path(__file__).resolve().parent
    for candidate in [start] + list(start.parents):
        for marker in markers:
            if (candidate / marker).exists():
                return candidate
    return start


def _resolve(path: PathLike, project_root: Path) -> Path:
    target = Path(path)
    if not target.is_absolute():
        target = project_root / target
    return target


def _load_yaml(target: Path) -> Dict[str, Any]:
    if not target.exists():
        raise FileNotFoundError(f"settings file not found: {target}")
    try:
        with open(target, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in settings file {target}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"settings file {target} must contain a mapping")
    return data


def load_settings(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """Load the YAML settings file, defaulting to ``config/settings.yml`` under the project root."""
    project_root = find_project_root()
    target = _resolve(path or DEFAULT_SETTINGS_PATH, project_root)
    return _load_yaml(target)


@dataclass(frozen=True, slots=True)
class GaugeSettings:
    """Scale and color thresholds for the coolant gauges."""

    minimum: float = 25.0
    span: float = 20.0
    warn: float = 34.0
    critical: float = 38.0


@dataclass(frozen=True, slots=True)
class DashboardSettings:
    """Validated startup configuration."""

    interval_ms: int = DEFAULT_INTERVAL_MS
    window_s: float = DEFAULT_WINDOW_S
    bounds: BoundsPolicy = field(default_factory=BoundsPolicy)
    gauges: GaugeSettings = field(default_factory=GaugeSettings)
    metrics: Tuple[MetricSpec, ...] = METRICS
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"'{key}' must be a mapping")
    return section


def _number(section: Mapping[str, Any], key: str, default: float, context: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{context}.{key} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{context}.{key} must be finite, got {value!r}")
    return float(value)


def _sensor_overrides(section: Mapping[str, Any]) -> Tuple[MetricSpec, ...]:
    unknown = sorted(set(section) - set(METRICS_BY_NAME))
    if unknown:
        raise ConfigurationError(f"Unknown metrics in sensors section: {', '.join(unknown)}")
    specs = []
    for spec in METRICS:
        override = section.get(spec.name)
        if override is None:
            specs.append(spec)
            continue
        if not isinstance(override, Mapping):
            raise ConfigurationError(f"sensors.{spec.name} must be a mapping with 'chip' and 'label'")
        specs.append(
            dataclasses.replace(
                spec,
                chip=override.get("chip", spec.chip),
                sensor=override.get("label", spec.sensor),
            )
        )
    return tuple(specs)


def settings_from_mapping(data: Mapping[str, Any]) -> DashboardSettings:
    """Build :class:`DashboardSettings` from a raw settings mapping, filling defaults."""
    polling = _section(data, "polling")
    chart = _section(data, "chart")
    gauges = _section(data, "gauges")
    logging_cfg = _section(data, "logging")

    interval_ms = _number(polling, "interval_ms", DEFAULT_INTERVAL_MS, "polling")
    window_s = _number(polling, "window_s", DEFAULT_WINDOW_S, "polling")
    if interval_ms <= 0 or interval_ms != int(interval_ms):
        raise ConfigurationError(f"polling.interval_ms must be a positive integer, got {interval_ms}")
    if window_s <= 0:
        raise ConfigurationError(f"polling.window_s must be positive, got {window_s}")

    bounds = BoundsPolicy(
        floor=_number(chart, "floor", DEFAULT_FLOOR, "chart"),
        ceiling=_number(chart, "ceiling", DEFAULT_CEILING, "chart"),
        padding=_number(chart, "padding", DEFAULT_PADDING, "chart"),
    )

    defaults = GaugeSettings()
    gauge_settings = GaugeSettings(
        minimum=_number(gauges, "minimum", defaults.minimum, "gauges"),
        span=_number(gauges, "span", defaults.span, "gauges"),
        warn=_number(gauges, "warn", defaults.warn, "gauges"),
        critical=_number(gauges, "critical", defaults.critical, "gauges"),
    )
    if gauge_settings.span <= 0:
        raise ConfigurationError(f"gauges.span must be positive, got {gauge_settings.span}")

    log_level = str(logging_cfg.get("level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    log_file = logging_cfg.get("file")
    return DashboardSettings(
        interval_ms=int(interval_ms),
        window_s=window_s,
        bounds=bounds,
        gauges=gauge_settings,
        metrics=_sensor_overrides(_section(data, "sensors")),
        log_level=log_level,
        log_file=Path(log_file) if log_file else None,
    )


def load_dashboard_settings(path: Optional[PathLike] = None) -> DashboardSettings:
    """Load and validate the dashboard settings file."""
    return settings_from_mapping(load_settings(path))


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[PathLike] = None) -> None:
    """Configure console logging, plus a rotating file log when ``log_file`` is set."""
    handlers: list = [logging.StreamHandler()]
    if log_file:
        target = _resolve(log_file, find_project_root())
        target.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                target,
                maxBytes=1_000_000,
                backupCount=3,
                encoding="utf-8",
            )
        )
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
