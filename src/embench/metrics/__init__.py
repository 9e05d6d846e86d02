from __future__ import annotations

from embench.metrics.aggregator import aggregate
from embench.metrics.models import (
    Attempt,
    BenchmarkResult,
    LatencySummary,
    ProgressSnapshot,
    RunPhase,
)
from embench.metrics.recorder import LatencyRecorder, nearest_rank
from embench.metrics.report import format_csv_row, format_text

__all__ = [
    "Attempt",
    "BenchmarkResult",
    "LatencyRecorder",
    "LatencySummary",
    "ProgressSnapshot",
    "RunPhase",
    "aggregate",
    "format_csv_row",
    "format_text",
    "nearest_rank",
]
