"""Fixed-capacity sliding window of samples for one metric."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, Tuple

from sensorwatch.errors import ConfigurationError

SENTINEL = 0.0

Sample = Tuple[float, float]


@dataclass
class MetricSeries:
    """Rolling window of ``(tick_index, value)`` samples plus all-time extrema.

    The window always holds exactly ``capacity`` samples. Until real readings
    have scrolled the whole window, the oldest entries are zero placeholders.
    ``running_min``/``running_max`` cover every real value ever passed in,
    including ones that have already been evicted.
    """

    capacity: int
    first_value: float = SENTINEL
    running_min: float = field(init=False)
    running_max: float = field(init=False)
    _samples: Deque[Sample] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ConfigurationError(f"series capacity must be at least 1, got {self.capacity}")
        self.first_value = float(self.first_value)
        self._samples = deque(maxlen=self.capacity)
        for index in range(self.capacity - 1):
            self._samples.append((float(index), SENTINEL))
        self._samples.append((float(self.capacity - 1), self.first_value))
        self.running_min = self.first_value
        self.running_max = self.first_value

    @classmethod
    def initialize(cls, capacity: int, first_value: float) -> "MetricSeries":
        return cls(capacity=capacity, first_value=first_value)

    def advance(self, next_value: float) -> None:
        """Evict the oldest sample and append ``next_value`` at the next tick."""
        next_value = float(next_value)
        last_tick = self._samples[-1][0]
        # maxlen drops the oldest entry on append
        self._samples.append((last_tick + 1.0, next_value))
        if next_value < self.running_min:
            self.running_min = next_value
        if next_value > self.running_max:
            self.running_max = next_value

    def latest(self) -> float:
        return self._samples[-1][1]

    def range(self) -> Tuple[float, float]:
        return self.running_min, self.running_max

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return tuple(self._samples)

    def values(self) -> Iterator[float]:
        return (value for _, value in self._samples)

    def first_tick(self) -> float:
        return self._samples[0][0]

    def last_tick(self) -> float:
        return self._samples[-1][0]

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)
