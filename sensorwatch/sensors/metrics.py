"""Fixed catalogue of metrics shown on the dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class MetricSpec:
    """One tracked metric and the hwmon entry that feeds it by default."""

    name: str
    label: str
    chip: Optional[str] = None
    sensor: Optional[str] = None


CPU_CTL = MetricSpec("cpu_tctl", "7800 X3D CTL", chip="k10temp", sensor="Tctl")
CPU_CCD = MetricSpec("cpu_ccd", "7800 X3D CCD", chip="k10temp", sensor="Tccd1")
COOLANT_1 = MetricSpec("coolant1", "Coolant 1", chip="quadro", sensor="Coolant 1")
COOLANT_2 = MetricSpec("coolant2", "Coolant 2", chip="quadro", sensor="Coolant 2")
GPU = MetricSpec("gpu", "RTX 4070")

METRICS: Tuple[MetricSpec, ...] = (CPU_CTL, CPU_CCD, COOLANT_1, COOLANT_2, GPU)
METRIC_NAMES: Tuple[str, ...] = tuple(spec.name for spec in METRICS)
METRICS_BY_NAME: Dict[str, MetricSpec] = {spec.name: spec for spec in METRICS}

CHART_METRICS: Tuple[str, ...] = (CPU_CTL.name, COOLANT_1.name, GPU.name)
GAUGE_METRICS: Tuple[str, ...] = (COOLANT_1.name, COOLANT_2.name)


def label_for(name: str) -> str:
    spec = METRICS_BY_NAME.get(name)
    return spec.label if spec else name
