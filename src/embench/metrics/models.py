from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from embench.errors import AttemptError, ErrorType


class RunPhase(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class Attempt:
    started_at: float
    finished_at: float
    latency_ms: float
    status_code: int | None
    error: AttemptError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def has_latency_sample(self) -> bool:
        # Only responses are sampled; transport failures have no status code.
        return self.status_code is not None

    @property
    def error_type(self) -> ErrorType | None:
        return self.error.error_type if self.error is not None else None


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    phase: RunPhase
    total: int
    issued: int
    completed: int
    failed: int
    non_2xx: int = 0
    transport_errors: int = 0
    timeouts: int = 0
    status_codes: Mapping[int, int] = field(default_factory=dict)

    @property
    def in_flight(self) -> int:
        return self.issued - self.completed


@dataclass(frozen=True, slots=True)
class LatencySummary:
    count: int
    min_ms: float
    median_ms: float
    p90_ms: float
    p99_ms: float
    max_ms: float
    mean_ms: float = 0.0
    stddev_ms: float = 0.0

    @classmethod
    def empty(cls) -> LatencySummary:
        return cls(count=0, min_ms=0.0, median_ms=0.0, p90_ms=0.0, p99_ms=0.0, max_ms=0.0)


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    total_requests: int
    failed_requests: int
    min_latency: float
    median_latency: float
    p90_latency: float
    p99_latency: float
    max_latency: float
    requests_per_second: float
    mean_latency: float = 0.0
    stddev_latency: float = 0.0
    latency_samples: int = 0
    duration_sec: float = 0.0
    issued_requests: int = 0
    aborted_requests: int = 0
    non_2xx: int = 0
    transport_errors: int = 0
    timeouts: int = 0
    cancelled: bool = False
    status_codes: Mapping[int, int] = field(default_factory=dict)

    @property
    def fail_rate_pct(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.failed_requests / self.total_requests * 100
