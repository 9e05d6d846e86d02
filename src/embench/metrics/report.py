from __future__ import annotations

from embench.config import BenchmarkConfig
from embench.metrics.models import BenchmarkResult


def _plain(value: float) -> str:
    # Min and max are reported unpadded, like the raw histogram bounds.
    return str(round(value, 2))


def format_text(result: BenchmarkResult) -> str:
    lines = [
        "",
        "Benchmark Results:",
        "-----------------",
        f"Total Requests: {result.total_requests}",
        f"Failed Requests: {result.failed_requests}",
        f"Fail Rate: {result.fail_rate_pct:.2f}%",
        f"  Transport errors: {result.transport_errors}",
        f"  Timeouts: {result.timeouts}",
    ]
    if result.cancelled:
        lines.append(f"Stopped early: {result.aborted_requests} in-flight requests aborted")
    lines += [
        "",
        "Latency:",
        f"  Min: {_plain(result.min_latency)} ms",
        f"  Median: {result.median_latency:.2f} ms",
        f"  P90: {result.p90_latency:.2f} ms",
        f"  P99: {result.p99_latency:.2f} ms",
        f"  Max: {_plain(result.max_latency)} ms",
        f"  Mean: {result.mean_latency:.2f} ms",
        f"  Stddev: {result.stddev_latency:.2f} ms",
        f"  Samples: {result.latency_samples}",
        "",
        "Throughput:",
        f"  Requests per second: {result.requests_per_second:.2f}",
        f"  Duration: {result.duration_sec:.2f} s",
        "",
    ]
    return "\n".join(lines)


def format_csv_row(config: BenchmarkConfig, result: BenchmarkResult) -> str:
    fields = [
        config.model,
        str(config.tokens_per_request),
        str(config.batch_size),
        str(config.concurrency),
        _plain(result.min_latency),
        f"{result.median_latency:.2f}",
        f"{result.p90_latency:.2f}",
        f"{result.p99_latency:.2f}",
        _plain(result.max_latency),
        f"{result.requests_per_second:.2f}",
    ]
    return ",".join(fields)
