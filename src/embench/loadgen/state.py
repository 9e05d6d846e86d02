from __future__ import annotations

import threading
from collections import Counter

from embench.errors import ErrorType
from embench.metrics import Attempt, ProgressSnapshot, RunPhase


class RunState:
    """Counters shared by the worker slots of one run.

    Every mutation and every snapshot happens under one lock so that pollers on
    other threads never observe a partial update.
    """

    def __init__(self, total: int) -> None:
        self.total = total
        self.issued = 0
        self.completed = 0
        self.failed = 0
        self.non_2xx = 0
        self.transport_errors = 0
        self.timeouts = 0
        self.status_codes: Counter[int] = Counter()
        self.phase = RunPhase.RUNNING
        self._lock = threading.Lock()

    def try_issue(self) -> bool:
        with self._lock:
            if self.phase is not RunPhase.RUNNING or self.issued >= self.total:
                return False
            self.issued += 1
            return True

    def complete(self, attempt: Attempt) -> None:
        with self._lock:
            self.completed += 1
            if attempt.status_code is not None:
                self.status_codes[attempt.status_code] += 1
            if attempt.success:
                return
            self.failed += 1
            if attempt.error_type is ErrorType.HTTP_STATUS:
                self.non_2xx += 1
            else:
                self.transport_errors += 1
                if attempt.error_type is ErrorType.TIMEOUT:
                    self.timeouts += 1

    def drain(self) -> bool:
        with self._lock:
            if self.phase is not RunPhase.RUNNING:
                return False
            self.phase = RunPhase.DRAINING
            return True

    def finish(self) -> None:
        with self._lock:
            self.phase = RunPhase.STOPPED

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                phase=self.phase,
                total=self.total,
                issued=self.issued,
                completed=self.completed,
                failed=self.failed,
                non_2xx=self.non_2xx,
                transport_errors=self.transport_errors,
                timeouts=self.timeouts,
                status_codes=dict(self.status_codes),
            )
