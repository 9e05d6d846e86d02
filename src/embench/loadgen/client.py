from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from embench.config import LoadTestSpec
from embench.errors import (
    AttemptError,
    AttemptHttpError,
    AttemptTimeout,
    AttemptTransportError,
    ErrorType,
)
from embench.metrics import Attempt

logger = logging.getLogger(__name__)


async def _post(
    client: httpx.AsyncClient,
    spec: LoadTestSpec,
    headers: dict[str, str],
    body: Mapping[str, Any],
) -> httpx.Response:
    try:
        return await client.request(
            spec.method,
            spec.url,
            headers=headers,
            json=body,
            timeout=spec.timeout_sec,
        )
    except httpx.TimeoutException as exc:
        raise AttemptTimeout(f"{type(exc).__name__}: {exc}") from exc
    except httpx.ConnectError as exc:
        raise AttemptTransportError(f"ConnectError: {exc}", ErrorType.CONNECT) from exc
    except httpx.ReadError as exc:
        raise AttemptTransportError(f"ReadError: {exc}", ErrorType.READ) from exc
    except httpx.HTTPError as exc:
        raise AttemptTransportError(f"{type(exc).__name__}: {exc}", ErrorType.OTHER) from exc


async def send_attempt(client: httpx.AsyncClient, spec: LoadTestSpec) -> Attempt:
    """Perform one request of the run, without retrying.

    Latency spans from just before the request is sent to receipt of the full
    response body, or to the point where the transport gave up.
    """
    headers = spec.request_headers()
    body = spec.body_factory()
    start = time.perf_counter()
    error: AttemptError | None
    try:
        resp = await _post(client, spec, headers, body)
    except AttemptTransportError as exc:
        finished = time.perf_counter()
        logger.debug("Attempt failed at transport level: %s", exc)
        return Attempt(
            started_at=start,
            finished_at=finished,
            latency_ms=(finished - start) * 1000.0,
            status_code=None,
            error=exc,
        )
    finished = time.perf_counter()
    error = None
    if not resp.is_success:
        error = AttemptHttpError(resp.status_code)
        logger.debug("Attempt returned HTTP %s", resp.status_code)
    return Attempt(
        started_at=start,
        finished_at=finished,
        latency_ms=(finished - start) * 1000.0,
        status_code=resp.status_code,
        error=error,
    )
