"""Snapshot sources that turn sensor hardware into metric readings."""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Set, Tuple

import psutil

from sensorwatch.sensors.metrics import GPU, METRICS, MetricSpec
from sensorwatch.telemetry.series import SENTINEL

LOGGER = logging.getLogger(__name__)

NVIDIA_SMI_COMMAND = [
    "nvidia-smi",
    "--query-gpu=temperature.gpu",
    "--format=csv,noheader,nounits",
]
NVIDIA_SMI_TIMEOUT_S = 2.0

TemperatureReader = Callable[[], Mapping[str, list]]
GpuReader = Callable[[], Optional[float]]


class SnapshotSource(Protocol):
    """Interface for anything that can produce one reading per metric."""

    def read(self) -> Dict[str, float]:
        """Return the current value of every metric, ``0.0`` when unavailable."""
        raise NotImplementedError


def read_hwmon_temperatures() -> Mapping[str, list]:
    try:
        return psutil.sensors_temperatures() or {}
    except AttributeError:
        # psutil only exposes hwmon temperatures on Linux and FreeBSD
        return {}


class NvidiaSmiReader:
    """Reads the first GPU's core temperature through ``nvidia-smi``.

    After the first failure the tool is assumed absent and never spawned again.
    """

    def __init__(self, command: Optional[List[str]] = None, timeout_s: float = NVIDIA_SMI_TIMEOUT_S) -> None:
        self.command = list(command or NVIDIA_SMI_COMMAND)
        self.timeout_s = timeout_s
        self.available = True

    def __call__(self) -> Optional[float]:
        if not self.available:
            return None
        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                check=True,
            )
            return float(result.stdout.strip().splitlines()[0])
        except (OSError, subprocess.SubprocessError, ValueError, IndexError) as exc:
            LOGGER.warning("GPU temperature unavailable, disabling nvidia-smi polling: %s", exc)
            self.available = False
            return None


class HwmonSource:
    """Snapshot source backed by the kernel hwmon interface and nvidia-smi."""

    def __init__(
        self,
        metrics: Iterable[MetricSpec] = METRICS,
        temperature_reader: TemperatureReader = read_hwmon_temperatures,
        gpu_reader: Optional[GpuReader] = None,
    ) -> None:
        self.metrics: Tuple[MetricSpec, ...] = tuple(metrics)
        self._read_temperatures = temperature_reader
        self._read_gpu = gpu_reader if gpu_reader is not None else NvidiaSmiReader()
        self._missing: Set[str] = set()

    def read(self) -> Dict[str, float]:
        temperatures = self._read_temperatures()
        values: Dict[str, float] = {}
        for spec in self.metrics:
            if spec.name == GPU.name and spec.chip is None:
                value = self._read_gpu()
            else:
                value = _lookup(temperatures, spec)
            values[spec.name] = self._settle(spec, value)
        return values

    __call__ = read

    def _settle(self, spec: MetricSpec, value: Optional[float]) -> float:
        if value is None:
            if spec.name not in self._missing:
                LOGGER.warning("No reading for %s (%s); reporting %.1f", spec.label, spec.name, SENTINEL)
                self._missing.add(spec.name)
            return SENTINEL
        if spec.name in self._missing:
            LOGGER.info("Reading for %s (%s) is back", spec.label, spec.name)
            self._missing.discard(spec.name)
        return float(value)


def _lookup(temperatures: Mapping[str, list], spec: MetricSpec) -> Optional[float]:
    if spec.chip is None:
        return None
    entries = temperatures.get(spec.chip) or []
    for entry in entries:
        if spec.sensor is None or entry.label == spec.sensor:
            if entry.current is None:
                return None
            return float(entry.current)
    return None
