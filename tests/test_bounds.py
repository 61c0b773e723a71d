import pytest

from sensorwatch.errors import ConfigurationError
from sensorwatch.telemetry import BoundsPolicy, TelemetryStore, chart_bounds, compute_bounds


def test_all_sentinel_series_fall_back_to_full_range():
    assert compute_bounds([[0.0] * 6, [0.0] * 6]) == (25.0, 90.0)


def test_no_series_falls_back_to_full_range():
    assert compute_bounds([]) == (25.0, 90.0)


def test_padding_applied_around_live_range():
    low, high = compute_bounds([[40.0, 45.0, 50.0], [35.0, 36.0, 37.0]])
    assert low == 33.0
    assert high == 52.0


def test_peak_above_ceiling_is_clamped():
    policy = BoundsPolicy(floor=25.0, ceiling=90.0, padding=2.0)
    low, high = compute_bounds([[80.0, 95.0], [30.0, 30.0]], policy)
    assert high == 90.0
    assert low == 28.0


def test_low_readings_clamp_to_floor():
    assert compute_bounds([[20.0, 21.0]]) == (25.0, 25.0)


def test_bounds_never_leave_policy_range():
    policy = BoundsPolicy(floor=25.0, ceiling=90.0, padding=2.0)
    for values in ([120.0, 130.0], [1.0, 2.0], [10.0, 150.0], [89.5, 89.9]):
        low, high = compute_bounds([values], policy)
        assert 25.0 <= low <= 90.0
        assert 25.0 <= high <= 90.0


def test_placeholder_positions_are_ignored():
    # Only the last position has a reading from both series.
    low, high = compute_bounds([[0.0, 0.0, 60.0], [0.0, 40.0, 45.0]])
    assert (low, high) == (43.0, 62.0)


def test_one_missing_sensor_drops_every_position():
    assert compute_bounds([[50.0, 55.0], [0.0, 0.0]]) == (25.0, 90.0)


def test_threshold_is_exclusive():
    policy = BoundsPolicy(floor=0.0, ceiling=100.0, padding=0.0)
    assert compute_bounds([[0.005, 0.01]], policy) == (0.01, 0.01)


def test_unequal_lengths_align_on_newest():
    low, high = compute_bounds([[99.0, 50.0, 60.0], [40.0, 41.0]], BoundsPolicy(padding=0.0))
    assert (low, high) == (40.0, 60.0)


def test_chart_bounds_reads_store_views():
    snapshots = iter([{"a": 40.0, "b": 50.0}, {"a": 44.0, "b": 52.0}])
    store = TelemetryStore.initialize(["a", "b"], 1000, 3, lambda: next(snapshots))
    views = store.views(["a", "b"])
    assert chart_bounds(views) == (38.0, 52.0)
    store.tick(next(snapshots))
    assert chart_bounds(views) == (38.0, 54.0)


def test_bounds_follow_window_not_history():
    store = TelemetryStore.initialize(["a"], 1000, 2, lambda: {"a": 85.0})
    store.tick({"a": 40.0})
    store.tick({"a": 41.0})
    assert store.view("a").range() == (40.0, 85.0)
    assert chart_bounds(store.views(["a"])) == (38.0, 43.0)


@pytest.mark.parametrize("kwargs", [{"floor": 90.0, "ceiling": 25.0}, {"floor": 50.0, "ceiling": 50.0}, {"padding": -1.0}])
def test_policy_validation(kwargs):
    with pytest.raises(ConfigurationError):
        BoundsPolicy(**kwargs)


def test_nan_reading_does_not_leak_into_bounds():
    snapshots = iter([{"a": 40.0, "b": 50.0}, {"a": float("nan"), "b": 55.0}, {"a": 41.0, "b": 56.0}])
    store = TelemetryStore.initialize(["a", "b"], 1000, 2, lambda: next(snapshots))
    store.tick(next(snapshots))
    store.tick(next(snapshots))
    low, high = chart_bounds(store.views(["a", "b"]))
    assert 25.0 <= low <= 90.0 and 25.0 <= high <= 90.0
    assert (low, high) == (39.0, 58.0)


def test_non_finite_positions_are_skipped():
    nan, inf = float("nan"), float("inf")
    assert compute_bounds([[nan, 40.0, inf], [50.0, 45.0, 50.0]]) == (38.0, 47.0)
    assert compute_bounds([[nan, nan]]) == (25.0, 90.0)
