"""Temperature chart widget embedded in Qt."""

from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtWidgets import QSizePolicy, QWidget, QVBoxLayout
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from matplotlib.lines import Line2D

from sensorwatch.gui.model import DashboardView

LINE_COLORS = ("tab:red", "tab:blue", "tab:green", "tab:orange", "tab:purple")


class TelemetryPlot(QWidget):
    """Embeds a Matplotlib plot that overlays the chart metrics."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._figure = Figure(figsize=(8, 5))
        self._canvas = FigureCanvas(self._figure)
        self._canvas.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        layout = QVBoxLayout()
        layout.addWidget(self._canvas)
        self.setLayout(layout)

        self._ax = self._figure.add_subplot(111)
        self._ax.set_ylabel("Temp [°C]")
        self._ax.grid(True, linestyle="--", linewidth=0.3)
        self._lines: Dict[str, Line2D] = {}

        self._figure.tight_layout()

    def _line_for(self, name: str) -> Line2D:
        line = self._lines.get(name)
        if line is None:
            color = LINE_COLORS[len(self._lines) % len(LINE_COLORS)]
            line = self._ax.plot([], [], color=color)[0]
            self._lines[name] = line
        return line

    def refresh(self, view: DashboardView) -> None:
        for chart_line in view.lines:
            line = self._line_for(chart_line.name)
            line.set_data(chart_line.ticks, chart_line.values)
            line.set_label(chart_line.legend)
        self._ax.legend(loc="upper left")

        x_min, x_max = view.x_bounds
        if x_min == x_max:
            x_max = x_min + 1.0
        self._ax.set_xlim(x_min, x_max)
        self._ax.set_xticks([x_min, (x_min + x_max) / 2, x_max])
        self._ax.set_xticklabels(view.x_labels)

        y_min, y_max = view.y_bounds
        if y_min == y_max:
            y_min -= 1.0
            y_max += 1.0
        self._ax.set_ylim(y_min, y_max)

        self._canvas.draw_idle()
