from __future__ import annotations

import random
from functools import partial
from typing import Any, Sequence

from embench.config import BenchmarkConfig, LoadTestSpec, Mode


def generate_batch(
    corpus: Sequence[str],
    batch_size: int,
    rng: random.Random | None = None,
) -> list[str]:
    if not corpus:
        msg = "Corpus must not be empty"
        raise ValueError(msg)
    if batch_size < 1:
        msg = f"Batch size must be at least 1, got {batch_size}"
        raise ValueError(msg)
    rng = rng or random
    return rng.choices(corpus, k=batch_size)


def build_payload(
    corpus: Sequence[str],
    model: str,
    mode: Mode,
    batch_size: int,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    return {
        "input": generate_batch(corpus, batch_size, rng),
        "model": model,
        "input_type": mode.value,
        "encoding_format": "float",
    }


def embedding_spec(
    config: BenchmarkConfig,
    corpus: Sequence[str],
    rng: random.Random | None = None,
) -> LoadTestSpec:
    config.validate()
    if not corpus:
        msg = "Corpus must not be empty"
        raise ValueError(msg)
    fragments = tuple(corpus)
    return LoadTestSpec(
        url=config.endpoint,
        concurrency=config.concurrency,
        num_requests=config.num_requests,
        body_factory=partial(
            build_payload, fragments, config.model, config.mode, config.batch_size, rng
        ),
        headers=dict(config.headers),
        timeout_sec=config.timeout_sec,
    )
