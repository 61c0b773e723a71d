"""Exceptions shared across the dashboard packages."""


class ConfigurationError(ValueError):
    """Raised at startup when timing, bounds or sensor settings are unusable."""
