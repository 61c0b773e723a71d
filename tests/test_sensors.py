import subprocess
from collections import namedtuple

from sensorwatch.sensors import METRIC_NAMES, HwmonSource, NvidiaSmiReader, SyntheticSource

Entry = namedtuple("Entry", ["label", "current", "high", "critical"])

TEMPERATURES = {
    "k10temp": [Entry("Tctl", 61.25, None, None), Entry("Tccd1", 55.0, None, None)],
    "quadro": [Entry("Coolant 1", 31.5, None, None), Entry("Coolant 2", 32.0, None, None)],
}


def test_hwmon_source_maps_chips_to_metrics():
    source = HwmonSource(temperature_reader=lambda: TEMPERATURES, gpu_reader=lambda: 47.0)
    assert source.read() == {
        "cpu_tctl": 61.25,
        "cpu_ccd": 55.0,
        "coolant1": 31.5,
        "coolant2": 32.0,
        "gpu": 47.0,
    }


def test_hwmon_source_substitutes_sentinel(caplog):
    source = HwmonSource(temperature_reader=lambda: {"k10temp": TEMPERATURES["k10temp"]}, gpu_reader=lambda: None)
    with caplog.at_level("WARNING"):
        first = source.read()
        second = source.read()
    assert first["coolant1"] == 0.0 and first["coolant2"] == 0.0 and first["gpu"] == 0.0
    assert first == second
    # one warning per missing metric, not per poll
    assert caplog.text.count("No reading for") == 3


def test_hwmon_source_without_hwmon_support():
    source = HwmonSource(temperature_reader=dict, gpu_reader=lambda: None)
    assert source.read() == {name: 0.0 for name in METRIC_NAMES}


def test_nvidia_smi_reader_parses_output(monkeypatch):
    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 0, stdout="46\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert NvidiaSmiReader()() == 46.0


def test_nvidia_smi_reader_disables_itself(monkeypatch):
    calls = []

    def fake_run(command, **kwargs):
        calls.append(command)
        raise FileNotFoundError("nvidia-smi")

    monkeypatch.setattr(subprocess, "run", fake_run)
    reader = NvidiaSmiReader()
    assert reader() is None
    assert reader() is None
    assert len(calls) == 1
    assert reader.available is False


def test_synthetic_source_is_deterministic():
    first = SyntheticSource().read()
    again = SyntheticSource().read()
    assert first == again
    assert set(first) == set(METRIC_NAMES)
    assert all(value > 0.01 for value in first.values())


def test_synthetic_source_dropouts():
    source = SyntheticSource(dropouts=["gpu"])
    for _ in range(3):
        assert source.read()["gpu"] == 0.0


def test_nvidia_smi_reader_survives_permission_error(monkeypatch):
    def fake_run(command, **kwargs):
        raise PermissionError("nvidia-smi")

    monkeypatch.setattr(subprocess, "run", fake_run)
    reader = NvidiaSmiReader()
    assert reader() is None
    assert reader.available is False

    source = HwmonSource(temperature_reader=dict, gpu_reader=reader)
    assert source.read()["gpu"] == 0.0
