from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time
from typing import Awaitable, Callable

import httpx

from embench.config import LoadTestSpec
from embench.loadgen.client import send_attempt
from embench.loadgen.state import RunState
from embench.metrics import (
    BenchmarkResult,
    LatencyRecorder,
    ProgressSnapshot,
    RunPhase,
    aggregate,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressSnapshot], Awaitable[None]]


class LoadEngine:
    """Closed-loop load generator.

    ``concurrency`` worker slots share one pooled client. Each slot issues its
    next attempt as soon as its previous one completes, until ``num_requests``
    attempts have been issued or :meth:`stop` is called. An engine drives a
    single run; a stop requested before :meth:`run` makes the run return
    without issuing anything.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        progress: ProgressCallback | None = None,
        progress_interval_sec: float = 1.0,
        drain_timeout_sec: float = 5.0,
    ) -> None:
        self._transport = transport
        self._progress = progress
        self._progress_interval_sec = progress_interval_sec
        self._drain_timeout_sec = drain_timeout_sec
        self._cancel = threading.Event()
        self._stop_lock = threading.Lock()
        self._state: RunState | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._wake: asyncio.Event | None = None

    def stop(self) -> None:
        """Stop issuing attempts. Safe to call repeatedly and from any thread."""
        with self._stop_lock:
            if self._cancel.is_set():
                return
            self._cancel.set()
        logger.warning("Stop requested, draining in-flight requests")
        state = self._state
        if state is not None:
            state.drain()
        loop, wake = self._loop, self._wake
        if loop is not None and wake is not None and not loop.is_closed():
            loop.call_soon_threadsafe(wake.set)

    def snapshot(self) -> ProgressSnapshot | None:
        state = self._state
        return state.snapshot() if state is not None else None

    async def run(self, spec: LoadTestSpec) -> BenchmarkResult:
        spec.validate()
        state = RunState(total=spec.num_requests)
        recorder = LatencyRecorder()
        self._state = state
        self._loop = asyncio.get_running_loop()
        wake = asyncio.Event()
        self._wake = wake
        if self._cancel.is_set():
            state.drain()
            wake.set()

        logger.info(
            "Running %d requests against %s with %d connections",
            spec.num_requests,
            spec.url,
            spec.concurrency,
        )
        limits = httpx.Limits(
            max_connections=spec.concurrency,
            max_keepalive_connections=spec.concurrency,
        )
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(limits=limits, transport=self._transport) as client:
                workers = [
                    asyncio.create_task(self._worker(client, spec, state, recorder))
                    for _ in range(spec.concurrency)
                ]
                reporter = None
                if self._progress is not None:
                    reporter = asyncio.create_task(self._report_progress(self._progress, state))
                try:
                    await self._wait_for(workers, wake)
                finally:
                    if reporter is not None:
                        reporter.cancel()
                        with contextlib.suppress(asyncio.CancelledError):
                            await reporter
            duration = time.perf_counter() - started
        finally:
            state.finish()
            self._loop = None
            self._wake = None

        snapshot = state.snapshot()
        if self._progress is not None:
            await _emit(self._progress, snapshot)
        result = aggregate(
            snapshot,
            recorder.finalize(),
            duration,
            cancelled=self._cancel.is_set(),
        )
        logger.info(
            "Run finished: %d completed, %d failed, %d aborted in %.2fs",
            result.total_requests,
            result.failed_requests,
            result.aborted_requests,
            result.duration_sec,
        )
        return result

    async def _worker(
        self,
        client: httpx.AsyncClient,
        spec: LoadTestSpec,
        state: RunState,
        recorder: LatencyRecorder,
    ) -> None:
        while state.try_issue():
            attempt = await send_attempt(client, spec)
            if attempt.has_latency_sample:
                recorder.record(attempt.latency_ms)
            state.complete(attempt)

    async def _wait_for(self, workers: list[asyncio.Task[None]], stop_event: asyncio.Event) -> None:
        all_done = asyncio.gather(*workers)
        wake = asyncio.create_task(stop_event.wait())
        try:
            await asyncio.wait({all_done, wake}, return_when=asyncio.FIRST_COMPLETED)
            if all_done.done():
                all_done.result()
                return
            try:
                await asyncio.wait_for(asyncio.shield(all_done), self._drain_timeout_sec)
            except asyncio.TimeoutError:
                in_flight = sum(1 for w in workers if not w.done())
                logger.warning(
                    "Drain grace period of %.1fs expired, aborting %d in-flight requests",
                    self._drain_timeout_sec,
                    in_flight,
                )
        finally:
            pending = [w for w in workers if not w.done()]
            for worker in pending:
                worker.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            if all_done.done() and not all_done.cancelled():
                all_done.exception()
            wake.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await wake

    async def _report_progress(self, progress: ProgressCallback, state: RunState) -> None:
        while state.phase is not RunPhase.STOPPED:
            await asyncio.sleep(self._progress_interval_sec)
            await _emit(progress, state.snapshot())


async def _emit(progress: ProgressCallback, snapshot: ProgressSnapshot) -> None:
    try:
        await progress(snapshot)
    except Exception:
        # Progress display must not fail the run.
        logger.exception("Progress callback failed")
