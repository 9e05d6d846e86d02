from __future__ import annotations

import random

import pytest
from hypothesis import given, strategies as st

from embench.config import BenchmarkConfig, Mode
from embench.loadgen.body import build_payload, embedding_spec, generate_batch


def test_singleton_corpus_repeats_fragment() -> None:
    batch = generate_batch(["only"], 1000)
    assert len(batch) == 1000
    assert set(batch) == {"only"}


def test_rejects_empty_corpus() -> None:
    with pytest.raises(ValueError):
        generate_batch([], 3)


def test_rejects_non_positive_batch() -> None:
    with pytest.raises(ValueError):
        generate_batch(["a"], 0)


def test_seeded_rng_is_reproducible() -> None:
    corpus = [f"fragment {i}" for i in range(50)]
    first = generate_batch(corpus, 20, random.Random(3))
    second = generate_batch(corpus, 20, random.Random(3))
    assert first == second


@given(
    corpus=st.lists(st.text(min_size=1), min_size=1, max_size=20),
    batch_size=st.integers(min_value=1, max_value=64),
)
def test_batch_draws_from_corpus(corpus: list[str], batch_size: int) -> None:
    snapshot = list(corpus)
    batch = generate_batch(corpus, batch_size)
    assert len(batch) == batch_size
    assert all(fragment in corpus for fragment in batch)
    assert corpus == snapshot


def test_payload_shape() -> None:
    payload = build_payload(["a", "b"], "e5-small", Mode.PASSAGE, 4, random.Random(1))
    assert payload["model"] == "e5-small"
    assert payload["input_type"] == "passage"
    assert payload["encoding_format"] == "float"
    assert len(payload["input"]) == 4


def test_embedding_spec_targets_embeddings_path() -> None:
    config = BenchmarkConfig(
        url="http://embed.test/",
        model="e5-small",
        mode=Mode.QUERY,
        batch_size=2,
        concurrency=3,
        num_requests=7,
        headers={"Authorization": "Bearer t"},
    )
    spec = embedding_spec(config, ["x", "y"])
    assert spec.url == "http://embed.test/v1/embeddings"
    assert spec.concurrency == 3
    assert spec.num_requests == 7
    assert spec.method == "POST"
    assert spec.request_headers() == {
        "Content-Type": "application/json",
        "Authorization": "Bearer t",
    }
    body = spec.body_factory()
    assert len(body["input"]) == 2
    assert body["input_type"] == "query"
