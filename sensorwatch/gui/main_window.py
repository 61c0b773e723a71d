"""Qt-based main window for the sensor dashboard."""

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional, Sequence

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QGroupBox,
    QHBoxLayout,
    QMainWindow,
    QProgressBar,
    QSplitter,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from sensorwatch.gui.model import TABLE_HEADER, DashboardView, GaugeState, TableRow, build_view
from sensorwatch.gui.widgets import TelemetryPlot
from sensorwatch.io.settings import DashboardSettings
from sensorwatch.sensors.metrics import CHART_METRICS, GAUGE_METRICS, label_for
from sensorwatch.telemetry import TelemetryStore

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Layout constants
WINDOW_DEFAULT_SIZE = (1200, 800)
WINDOW_TITLE = "sensorwatch"
BOTTOM_PANEL_HEIGHT = 220
TABLE_MIN_WIDTH = 340
QUIT_KEY = "q"

GAUGE_STYLE = (
    "QProgressBar {{ border: 1px solid gray; text-align: center; font-weight: bold; }}"
    "QProgressBar::chunk {{ background-color: {color}; }}"
)


class TemperatureTable(QGroupBox):
    """Current, minimum and maximum reading per sensor."""

    def __init__(self) -> None:
        super().__init__()
        self.table = QTableWidget(0, len(TABLE_HEADER))
        self.table.setHorizontalHeaderLabels(TABLE_HEADER)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionMode(QTableWidget.NoSelection)
        self.setMinimumWidth(TABLE_MIN_WIDTH)
        layout = QVBoxLayout()
        layout.addWidget(self.table)
        self.setLayout(layout)

    def update_rows(self, rows: Sequence[TableRow]) -> None:
        self.table.setRowCount(len(rows))
        for idx, row in enumerate(rows):
            for col, text in enumerate(row.cells()):
                item = QTableWidgetItem(text)
                if col:
                    item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.table.setItem(idx, col, item)
        self.table.resizeColumnsToContents()


class CoolantGauge(QGroupBox):
    """Horizontal bar gauge for one coolant probe."""

    def __init__(self, title: str) -> None:
        super().__init__(title)
        self.bar = QProgressBar()
        self.bar.setRange(0, 1000)
        self.bar.setTextVisible(True)
        layout = QVBoxLayout()
        layout.addWidget(self.bar)
        self.setLayout(layout)

    def update_state(self, state: GaugeState) -> None:
        self.setTitle(state.title)
        self.bar.setValue(int(round(state.ratio * 1000)))
        self.bar.setFormat(state.text)
        self.bar.setStyleSheet(GAUGE_STYLE.format(color=state.level.value))


class MainWindow(QMainWindow):
    """Chart on top, coolant gauges and the sensor table underneath."""

    def __init__(self, gauge_titles: Sequence[str]) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(*WINDOW_DEFAULT_SIZE)

        self.plot = TelemetryPlot()
        self.table = TemperatureTable()
        self.gauges: List[CoolantGauge] = [CoolantGauge(title) for title in gauge_titles]

        gauge_column = QWidget()
        gauge_layout = QVBoxLayout()
        for gauge in self.gauges:
            gauge_layout.addWidget(gauge)
        gauge_column.setLayout(gauge_layout)

        bottom = QWidget()
        bottom_layout = QHBoxLayout()
        bottom_layout.addWidget(gauge_column, stretch=1)
        bottom_layout.addWidget(self.table)
        bottom.setLayout(bottom_layout)
        bottom.setFixedHeight(BOTTOM_PANEL_HEIGHT)

        splitter = QSplitter(Qt.Vertical)
        splitter.addWidget(self.plot)
        splitter.addWidget(bottom)
        splitter.setStretchFactor(0, 1)
        self.setCentralWidget(splitter)

        self.quit_shortcut = QShortcut(QKeySequence(QUIT_KEY), self)
        self.quit_shortcut.activated.connect(self.close)

    def update_view(self, view: DashboardView) -> None:
        self.plot.refresh(view)
        self.table.update_rows(view.rows)
        for gauge, state in zip(self.gauges, view.gauges):
            gauge.update_state(state)


def run_dashboard(
    snapshot_provider: Callable[[], Mapping[str, float]],
    settings: Optional[DashboardSettings] = None,
    chart_metrics: Sequence[str] = CHART_METRICS,
    gauge_metrics: Sequence[str] = GAUGE_METRICS,
) -> None:
    """Build the store, open the window and poll ``snapshot_provider`` on every tick.

    Runs until the window is closed or the quit key is pressed. An exception
    raised while polling or drawing stops the event loop and is re-raised here.
    """
    settings = settings or DashboardSettings()
    store = TelemetryStore.initialize(
        [metric.name for metric in settings.metrics],
        settings.interval_ms,
        settings.window_s,
        snapshot_provider,
    )

    app = QApplication.instance() or QApplication([])
    window = MainWindow([label_for(name) for name in gauge_metrics])
    failures: List[Exception] = []

    def render() -> None:
        view = build_view(store, chart_metrics, gauge_metrics, settings.window_s, settings.bounds, settings.gauges)
        window.update_view(view)

    def on_tick() -> None:
        try:
            store.poll(snapshot_provider)
            render()
        except Exception as exc:
            failures.append(exc)
            timer.stop()
            app.quit()

    timer = QTimer()
    timer.timeout.connect(on_tick)
    timer.start(settings.interval_ms)

    LOGGER.info("Dashboard running; press '%s' to quit", QUIT_KEY)
    window.show()
    render()
    app.exec()
    timer.stop()
    LOGGER.info("Dashboard stopped after %d ticks", store.ticks)
    if failures:
        raise failures[0]
