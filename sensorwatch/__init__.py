"""Live hardware temperature dashboard with a sliding-window telemetry buffer."""

__all__ = ["telemetry", "sensors", "io", "gui"]
__version__ = "0.1.0"
