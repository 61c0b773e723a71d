"""Graphical user interface components for the sensor dashboard."""

from __future__ import annotations

from .model import (
    ChartLine,
    DashboardView,
    GaugeLevel,
    GaugeState,
    TableRow,
    build_view,
)

__all__ = [
    "ChartLine",
    "DashboardView",
    "GaugeLevel",
    "GaugeState",
    "TableRow",
    "build_view",
]
