"""Synthetic readings for running the dashboard without sensor hardware."""

from __future__ import annotations

import itertools
import math
from typing import Dict, Iterable, Optional

from sensorwatch.sensors.metrics import METRIC_NAMES
from sensorwatch.telemetry.series import SENTINEL

# baseline, amplitude, period (in ticks)
_WAVEFORMS = {
    "cpu_tctl": (55.0, 12.0, 18.0),
    "cpu_ccd": (52.0, 14.0, 12.0),
    "coolant1": (33.0, 3.0, 60.0),
    "coolant2": (32.5, 3.5, 75.0),
    "gpu": (48.0, 10.0, 30.0),
}


class SyntheticSource:
    """Deterministic sine waves per metric, one step per :meth:`read` call."""

    def __init__(self, dropouts: Optional[Iterable[str]] = None, start: int = 0) -> None:
        self.dropouts = set(dropouts or ())
        self._counter = itertools.count(start)

    def read(self) -> Dict[str, float]:
        step = next(self._counter)
        values: Dict[str, float] = {}
        for name in METRIC_NAMES:
            if name in self.dropouts:
                values[name] = SENTINEL
                continue
            baseline, amplitude, period = _WAVEFORMS[name]
            values[name] = round(baseline + amplitude * math.sin(2 * math.pi * step / period), 2)
        return values

    __call__ = read
