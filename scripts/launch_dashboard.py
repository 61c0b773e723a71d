#!/usr/bin/env python3
"""Launch the live sensor dashboard."""

from __future__ import annotations

import argparse
import logging
import sys

from sensorwatch.errors import ConfigurationError
from sensorwatch.gui.main_window import run_dashboard
from sensorwatch.io import load_dashboard_settings, setup_logging
from sensorwatch.sensors import HwmonSource, SyntheticSource

LOGGER = logging.getLogger("sensorwatch")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--settings", help="Optional path to a settings YAML file.")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use synthetic readings instead of the hwmon/nvidia-smi sensors.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the log level from the settings file.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    try:
        settings = load_dashboard_settings(args.settings)
    except (ConfigurationError, FileNotFoundError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    setup_logging(args.log_level or settings.log_level, settings.log_file)

    source = SyntheticSource() if args.mock else HwmonSource(settings.metrics)
    LOGGER.info("Reading sensors from %s", type(source).__name__)
    try:
        run_dashboard(source.read, settings)
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    return 0


if __name__ == "__main__":
    sys.exit(main())
