"""Y-axis bounds for a chart that overlays several metric series."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from sensorwatch.errors import ConfigurationError
from sensorwatch.telemetry.store import SeriesView

DEFAULT_FLOOR = 25.0
DEFAULT_CEILING = 90.0
DEFAULT_PADDING = 2.0
SENTINEL_THRESHOLD = 0.01


@dataclass(frozen=True, slots=True)
class BoundsPolicy:
    """Padding and clamping applied to the live value range."""

    floor: float = DEFAULT_FLOOR
    ceiling: float = DEFAULT_CEILING
    padding: float = DEFAULT_PADDING
    sentinel_threshold: float = SENTINEL_THRESHOLD

    def __post_init__(self) -> None:
        if self.floor >= self.ceiling:
            raise ConfigurationError(f"chart floor {self.floor} must be below ceiling {self.ceiling}")
        if self.padding < 0:
            raise ConfigurationError(f"chart padding must not be negative, got {self.padding}")

    def clamp(self, value: float) -> float:
        return min(max(value, self.floor), self.ceiling)

    @property
    def fallback(self) -> Tuple[float, float]:
        return self.floor, self.ceiling


def compute_bounds(
    series_values: Iterable[Sequence[float]],
    policy: BoundsPolicy = BoundsPolicy(),
) -> Tuple[float, float]:
    """Return ``(low, high)`` covering every real reading in the given windows.

    Positions where any series is still at a placeholder or sentinel reading
    (below ``policy.sentinel_threshold``), or holds a non-finite value, are
    ignored so a missing sensor does not drag the axis down to zero. When nothing survives, the full
    ``(floor, ceiling)`` range is returned. Both bounds always lie inside
    ``[floor, ceiling]``.
    """
    columns = [list(values) for values in series_values]
    if not columns:
        return policy.fallback

    # Series share a tick domain; align on the newest samples if lengths drift.
    width = min(len(values) for values in columns)
    if width == 0:
        return policy.fallback
    columns = [values[len(values) - width:] for values in columns]

    lows: List[float] = []
    highs: List[float] = []
    for position in zip(*columns):
        if not all(math.isfinite(value) for value in position):
            continue
        low, high = min(position), max(position)
        if low < policy.sentinel_threshold or high < policy.sentinel_threshold:
            continue
        lows.append(low)
        highs.append(high)

    if not lows:
        return policy.fallback

    low = policy.clamp(min(lows) - policy.padding)
    high = policy.clamp(max(highs) + policy.padding)
    return low, high


def chart_bounds(views: Iterable[SeriesView], policy: BoundsPolicy = BoundsPolicy()) -> Tuple[float, float]:
    """Convenience wrapper taking store views instead of raw value lists."""
    return compute_bounds((view.values() for view in views), policy)
