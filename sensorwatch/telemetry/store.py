"""Lockstep container for every tracked metric series."""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from sensorwatch.errors import ConfigurationError
from sensorwatch.telemetry.series import SENTINEL, MetricSeries, Sample

LOGGER = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Mapping[str, float]]


def capacity_for(interval_ms: int, window_s: float) -> int:
    """Number of samples needed to cover ``window_s`` at ``interval_ms``.

    Integer division; a window shorter than one interval clamps to a single
    sample, which leaves the dashboard without history.
    """
    if not math.isfinite(interval_ms) or int(interval_ms) <= 0:
        raise ConfigurationError(f"poll interval must be a positive whole number of ms, got {interval_ms}")
    if not math.isfinite(window_s) or window_s <= 0:
        raise ConfigurationError(f"history window must be positive, got {window_s} s")
    interval_ms = int(interval_ms)
    capacity = int(window_s * 1000) // interval_ms
    if capacity < 1:
        LOGGER.warning(
            "History window %ss is shorter than the %d ms poll interval; keeping one sample",
            window_s,
            interval_ms,
        )
        return 1
    return capacity


class SeriesView:
    """Read-only handle on a series, handed to the renderer."""

    __slots__ = ("_name", "_series")

    def __init__(self, name: str, series: MetricSeries) -> None:
        self._name = name
        self._series = series

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._series.capacity

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return self._series.samples

    def values(self) -> List[float]:
        return list(self._series.values())

    def latest(self) -> float:
        return self._series.latest()

    def range(self) -> Tuple[float, float]:
        return self._series.range()

    def __len__(self) -> int:
        return len(self._series)

    def __repr__(self) -> str:
        low, high = self.range()
        return f"SeriesView({self._name!r}, latest={self.latest():.1f}, min={low:.1f}, max={high:.1f})"


class TelemetryStore:
    """Owns one :class:`MetricSeries` per metric and advances them together."""

    def __init__(self, capacity: int, series: Mapping[str, MetricSeries]) -> None:
        if not series:
            raise ConfigurationError("at least one metric must be tracked")
        for name, item in series.items():
            if item.capacity != capacity or len(item) != capacity or item.last_tick() != capacity - 1:
                raise ConfigurationError(
                    f"series '{name}' must be freshly initialized with capacity {capacity}, "
                    f"got {len(item)} samples ending at tick {item.last_tick():g}"
                )
        self._capacity = capacity
        self._series: Dict[str, MetricSeries] = dict(series)
        self._window = [0.0, float(capacity - 1)]
        self._ticks = 0

    @classmethod
    def initialize(
        cls,
        metric_names: Sequence[str],
        interval_ms: int,
        window_s: float,
        snapshot_provider: SnapshotProvider,
    ) -> "TelemetryStore":
        """Size the buffers from the timing settings and seed them with one snapshot."""
        names = list(dict.fromkeys(metric_names))
        if not names:
            raise ConfigurationError("at least one metric must be tracked")
        capacity = capacity_for(interval_ms, window_s)
        snapshot = snapshot_provider()
        series = {name: MetricSeries.initialize(capacity, _reading(snapshot, name)) for name in names}
        LOGGER.info(
            "Tracking %d metrics with %d samples each (%d ms interval, %ss window)",
            len(names),
            capacity,
            interval_ms,
            window_s,
        )
        return cls(capacity, series)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def metric_names(self) -> Tuple[str, ...]:
        return tuple(self._series)

    @property
    def ticks(self) -> int:
        return self._ticks

    def tick(self, snapshot: Mapping[str, float]) -> None:
        # Convert first so a bad reading cannot leave the series out of step.
        readings = {name: _reading(snapshot, name) for name in self._series}
        for name, series in self._series.items():
            series.advance(readings[name])
        self._window[0] += 1.0
        self._window[1] += 1.0
        self._ticks += 1

    def poll(self, snapshot_provider: SnapshotProvider) -> Mapping[str, float]:
        """Fetch one snapshot and advance every series with it."""
        snapshot = snapshot_provider()
        self.tick(snapshot)
        return snapshot

    def view(self, metric_name: str) -> SeriesView:
        try:
            series = self._series[metric_name]
        except KeyError:
            raise KeyError(f"Unknown metric '{metric_name}'") from None
        return SeriesView(metric_name, series)

    def views(self, metric_names: Optional[Iterable[str]] = None) -> List[SeriesView]:
        names = self._series if metric_names is None else metric_names
        return [self.view(name) for name in names]

    def window(self) -> Tuple[float, float]:
        return self._window[0], self._window[1]

    def __iter__(self) -> Iterator[SeriesView]:
        return iter(self.views())

    def __len__(self) -> int:
        return len(self._series)


def _reading(snapshot: Mapping[str, float], name: str) -> float:
    value = snapshot.get(name)
    if value is None:
        return SENTINEL
    value = float(value)
    if not math.isfinite(value):
        return SENTINEL
    return value
