from __future__ import annotations

import asyncio
from typing import Sequence

import httpx
import pytest

from embench.corpus import chunk_text, extract_text, fetch_corpus
from embench.errors import CorpusFetchError

PAGE = """
<html>
  <head><title>ignored title</title><style>body { color: red; }</style></head>
  <body>
    <h1>What   is it doing?</h1>
    <script>var tracking = 1;</script>
    <p>It is just
       adding one word at a time.</p>
  </body>
</html>
"""


class WordCodec:
    """One token per whitespace-separated word."""

    def __init__(self) -> None:
        self._ids: dict[str, int] = {}
        self._words: list[str] = []

    def encode(self, text: str) -> list[int]:
        tokens = []
        for word in text.split():
            if word not in self._ids:
                self._ids[word] = len(self._words)
                self._words.append(word)
            tokens.append(self._ids[word])
        return tokens

    def decode(self, tokens: Sequence[int]) -> str:
        return " ".join(self._words[t] for t in tokens)


def test_extract_text_drops_scripts_and_styles() -> None:
    text = extract_text(PAGE)
    assert text == "What is it doing? It is just adding one word at a time."


def test_chunk_text_splits_by_token_count() -> None:
    chunks = chunk_text("a b c d e", 2, WordCodec())
    assert chunks == ["a b", "c d", "e"]


def test_chunk_text_rejects_zero_size() -> None:
    with pytest.raises(ValueError):
        chunk_text("a b", 0, WordCodec())


def test_fetch_corpus() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, html=PAGE))
    chunks = asyncio.run(
        fetch_corpus("http://docs.test/page", 4, codec=WordCodec(), transport=transport)
    )
    assert chunks == ["What is it doing?", "It is just adding", "one word at a", "time."]


@pytest.mark.parametrize("status", [404, 500])
def test_fetch_corpus_bad_status(status: int) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(status))
    with pytest.raises(CorpusFetchError):
        asyncio.run(fetch_corpus("http://docs.test/page", 4, codec=WordCodec(), transport=transport))


def test_fetch_corpus_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    with pytest.raises(CorpusFetchError):
        asyncio.run(
            fetch_corpus(
                "http://docs.test/page", 4, codec=WordCodec(), transport=httpx.MockTransport(handler)
            )
        )


def test_fetch_corpus_empty_page() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, html="<html><body></body></html>"))
    with pytest.raises(CorpusFetchError):
        asyncio.run(fetch_corpus("http://docs.test/page", 4, codec=WordCodec(), transport=transport))
