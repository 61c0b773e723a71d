from .telemetry_plot import TelemetryPlot

__all__ = ["TelemetryPlot"]
