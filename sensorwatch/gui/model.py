"""View models shared between the telemetry store and the Qt widgets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from sensorwatch.io.settings import GaugeSettings
from sensorwatch.sensors.metrics import label_for
from sensorwatch.telemetry import BoundsPolicy, TelemetryStore, chart_bounds


class GaugeLevel(Enum):
    """Color hint for a gauge reading."""

    NORMAL = "green"
    WARNING = "yellow"
    CRITICAL = "red"


@dataclass(slots=True)
class TableRow:
    """One line of the current/min/max table."""

    label: str
    current: str
    minimum: str
    maximum: str

    def cells(self) -> List[str]:
        return [self.label, self.current, self.minimum, self.maximum]


@dataclass(slots=True)
class GaugeState:
    """Everything needed to draw one gauge."""

    title: str
    value: float
    ratio: float
    level: GaugeLevel

    @property
    def text(self) -> str:
        return f"{self.value:.1f}C"


@dataclass(slots=True)
class ChartLine:
    name: str
    legend: str
    ticks: List[float]
    values: List[float]


@dataclass(slots=True)
class DashboardView:
    """Aggregated state for one redraw."""

    lines: List[ChartLine]
    x_bounds: Tuple[float, float]
    x_labels: List[str]
    y_bounds: Tuple[float, float]
    rows: List[TableRow]
    gauges: List[GaugeState]


TABLE_HEADER = ["Sensor", "Curr", "Min", "Max"]


def format_reading(value: float) -> str:
    return f"{value:.1f}"


def format_age(seconds: float) -> str:
    """Render a duration as ``5m ago``, ``2m30s ago`` or ``now``."""
    seconds = int(round(seconds))
    if seconds <= 0:
        return "now"
    minutes, secs = divmod(seconds, 60)
    if minutes and secs:
        return f"{minutes}m{secs}s ago"
    if minutes:
        return f"{minutes}m ago"
    return f"{secs}s ago"


def axis_labels(window_s: float) -> List[str]:
    return [format_age(window_s), format_age(window_s / 2), format_age(0)]


def gauge_ratio(value: float, settings: GaugeSettings) -> float:
    return min(max((value - settings.minimum) / settings.span, 0.0), 1.0)


def gauge_level(value: float, settings: GaugeSettings) -> GaugeLevel:
    if value < settings.warn:
        return GaugeLevel.NORMAL
    if value < settings.critical:
        return GaugeLevel.WARNING
    return GaugeLevel.CRITICAL


def gauge_state(title: str, value: float, settings: GaugeSettings) -> GaugeState:
    return GaugeState(
        title=title,
        value=value,
        ratio=gauge_ratio(value, settings),
        level=gauge_level(value, settings),
    )


def table_rows(store: TelemetryStore) -> List[TableRow]:
    """Current and all-time extrema for every metric, sentinel dips included."""
    rows = []
    for view in store.views():
        low, high = view.range()
        rows.append(
            TableRow(
                label=label_for(view.name),
                current=format_reading(view.latest()),
                minimum=format_reading(low),
                maximum=format_reading(high),
            )
        )
    return rows


def build_view(
    store: TelemetryStore,
    chart_metrics: Sequence[str],
    gauge_metrics: Sequence[str],
    window_s: float,
    policy: BoundsPolicy,
    gauges: GaugeSettings,
) -> DashboardView:
    chart_views = store.views(chart_metrics)
    lines = []
    for view in chart_views:
        samples = view.samples
        lines.append(
            ChartLine(
                name=view.name,
                legend=f"{label_for(view.name)} ({format_reading(view.latest())})",
                ticks=[tick for tick, _ in samples],
                values=[value for _, value in samples],
            )
        )
    return DashboardView(
        lines=lines,
        x_bounds=store.window(),
        x_labels=axis_labels(window_s),
        y_bounds=chart_bounds(chart_views, policy),
        rows=table_rows(store),
        gauges=[gauge_state(label_for(name), store.view(name).latest(), gauges) for name in gauge_metrics],
    )
