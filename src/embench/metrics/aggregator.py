from __future__ import annotations

from embench.metrics.models import BenchmarkResult, LatencySummary, ProgressSnapshot


def aggregate(
    snapshot: ProgressSnapshot,
    latency: LatencySummary,
    duration_sec: float,
    cancelled: bool = False,
) -> BenchmarkResult:
    completed = snapshot.completed
    if duration_sec > 0:
        rps = completed / duration_sec
    else:
        rps = 0.0
    return BenchmarkResult(
        total_requests=completed,
        failed_requests=snapshot.failed,
        min_latency=latency.min_ms,
        median_latency=latency.median_ms,
        p90_latency=latency.p90_ms,
        p99_latency=latency.p99_ms,
        max_latency=latency.max_ms,
        requests_per_second=rps,
        mean_latency=latency.mean_ms,
        stddev_latency=latency.stddev_ms,
        latency_samples=latency.count,
        duration_sec=duration_sec,
        issued_requests=snapshot.issued,
        aborted_requests=snapshot.issued - completed,
        non_2xx=snapshot.non_2xx,
        transport_errors=snapshot.transport_errors,
        timeouts=snapshot.timeouts,
        cancelled=cancelled,
        status_codes=dict(snapshot.status_codes),
    )
