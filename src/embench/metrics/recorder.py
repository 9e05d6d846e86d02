from __future__ import annotations

import threading
from typing import Sequence

import numpy as np

from embench.metrics.models import LatencySummary


def nearest_rank_index(percent: int, n: int) -> int:
    """Index of the nearest-rank percentile in a sorted sample of size ``n``.

    ``ceil(percent / 100 * n) - 1`` clamped to ``[0, n - 1]``, computed on
    integers so that values such as 29% of 100 do not drift through float
    rounding.
    """
    if n <= 0:
        msg = "Sample set is empty"
        raise ValueError(msg)
    rank = -(-percent * n // 100)
    return min(max(rank - 1, 0), n - 1)


def nearest_rank(ordered: Sequence[float], percent: int) -> float:
    return float(ordered[nearest_rank_index(percent, len(ordered))])


class LatencyRecorder:
    """Collects latency samples from concurrent workers.

    Samples are retained and sorted once in :meth:`finalize`.
    """

    def __init__(self) -> None:
        self._samples: list[float] = []
        self._lock = threading.Lock()

    def record(self, latency_ms: float) -> None:
        with self._lock:
            self._samples.append(latency_ms)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def finalize(self) -> LatencySummary:
        with self._lock:
            samples = np.asarray(self._samples, dtype=float)
        if samples.size == 0:
            return LatencySummary.empty()
        ordered = np.sort(samples, kind="stable")
        return LatencySummary(
            count=int(ordered.size),
            min_ms=float(ordered[0]),
            median_ms=nearest_rank(ordered, 50),
            p90_ms=nearest_rank(ordered, 90),
            p99_ms=nearest_rank(ordered, 99),
            max_ms=float(ordered[-1]),
            mean_ms=float(np.mean(ordered)),
            stddev_ms=float(np.std(ordered)),
        )
