"""Sensor interfaces (hwmon temperatures, GPU, synthetic demo data)."""

from .metrics import CHART_METRICS, GAUGE_METRICS, METRIC_NAMES, METRICS, MetricSpec, label_for
from .mock import SyntheticSource
from .source import HwmonSource, NvidiaSmiReader, SnapshotSource

__all__ = [
    "CHART_METRICS",
    "GAUGE_METRICS",
    "METRICS",
    "METRIC_NAMES",
    "HwmonSource",
    "MetricSpec",
    "NvidiaSmiReader",
    "SnapshotSource",
    "SyntheticSource",
    "label_for",
]
