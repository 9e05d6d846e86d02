from __future__ import annotations

import threading

from hypothesis import given, strategies as st

from embench.metrics import LatencyRecorder
from embench.metrics.recorder import nearest_rank_index


def _recorder(samples: list[float]) -> LatencyRecorder:
    recorder = LatencyRecorder()
    for sample in samples:
        recorder.record(sample)
    return recorder


def test_worked_example_nearest_rank() -> None:
    summary = _recorder([5, 1, 9, 3, 7]).finalize()
    assert summary.count == 5
    assert summary.min_ms == 1
    assert summary.median_ms == 5
    # ceil(0.9 * 5) - 1 == 4 and ceil(0.99 * 5) - 1 == 4
    assert summary.p90_ms == 9
    assert summary.p99_ms == 9
    assert summary.max_ms == 9


def test_index_arithmetic() -> None:
    assert nearest_rank_index(50, 5) == 2
    assert nearest_rank_index(90, 5) == 4
    assert nearest_rank_index(90, 10) == 8
    assert nearest_rank_index(99, 100) == 98
    assert nearest_rank_index(29, 100) == 28
    assert nearest_rank_index(0, 3) == 0
    assert nearest_rank_index(100, 3) == 2


def test_empty_set_reports_zero() -> None:
    summary = LatencyRecorder().finalize()
    assert summary.count == 0
    assert (summary.min_ms, summary.median_ms, summary.p90_ms, summary.p99_ms, summary.max_ms) == (
        0.0,
        0.0,
        0.0,
        0.0,
        0.0,
    )


def test_concurrent_records_are_not_lost() -> None:
    recorder = LatencyRecorder()

    def worker() -> None:
        for i in range(1000):
            recorder.record(float(i))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(recorder) == 8000
    assert recorder.finalize().max_ms == 999.0


@given(st.lists(st.floats(min_value=0.0, max_value=60_000.0), min_size=1, max_size=200))
def test_percentiles_are_ordered_samples(samples: list[float]) -> None:
    summary = _recorder(samples).finalize()
    assert summary.min_ms <= summary.median_ms <= summary.p90_ms <= summary.p99_ms <= summary.max_ms
    for value in (summary.median_ms, summary.p90_ms, summary.p99_ms):
        assert value in samples
    assert summary.min_ms == min(samples)
    assert summary.max_ms == max(samples)
