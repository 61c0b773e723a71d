"""I/O utilities (configuration, logging)."""

from .settings import (
    DEFAULT_SETTINGS_PATH,
    DashboardSettings,
    GaugeSettings,
    find_project_root,
    load_dashboard_settings,
    load_settings,
    settings_from_mapping,
    setup_logging,
)

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "DashboardSettings",
    "GaugeSettings",
    "find_project_root",
    "load_settings",
    "load_dashboard_settings",
    "settings_from_mapping",
    "setup_logging",
]
