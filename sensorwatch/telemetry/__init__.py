"""Sliding-window telemetry buffers and chart scaling."""

from .bounds import BoundsPolicy, chart_bounds, compute_bounds
from .series import SENTINEL, MetricSeries
from .store import SeriesView, TelemetryStore, capacity_for

__all__ = [
    "SENTINEL",
    "BoundsPolicy",
    "MetricSeries",
    "SeriesView",
    "TelemetryStore",
    "capacity_for",
    "chart_bounds",
    "compute_bounds",
]
