from __future__ import annotations

import logging
from typing import Protocol, Sequence

import httpx
import tiktoken
from bs4 import BeautifulSoup

from embench.errors import CorpusFetchError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"


class TokenCodec(Protocol):
    def encode(self, text: str) -> list[int]:
        ...

    def decode(self, tokens: Sequence[int]) -> str:
        ...


def default_codec() -> TokenCodec:
    return tiktoken.get_encoding(DEFAULT_ENCODING)


def extract_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    root = soup.body or soup
    return " ".join(root.get_text(" ").split())


def chunk_text(text: str, tokens_per_chunk: int, codec: TokenCodec) -> list[str]:
    """Split ``text`` into pieces of at most ``tokens_per_chunk`` tokens each."""
    if tokens_per_chunk < 1:
        msg = f"tokens_per_chunk must be at least 1, got {tokens_per_chunk}"
        raise ValueError(msg)
    tokens = codec.encode(text)
    return [
        codec.decode(tokens[i : i + tokens_per_chunk])
        for i in range(0, len(tokens), tokens_per_chunk)
    ]


async def fetch_html(client: httpx.AsyncClient, url: str) -> str:
    try:
        resp = await client.get(url, follow_redirects=True)
    except httpx.HTTPError as exc:
        msg = f"Failed to fetch content from {url}: {exc}"
        raise CorpusFetchError(msg) from exc
    if resp.status_code != 200:
        msg = f"Failed to fetch content: {resp.status_code}"
        raise CorpusFetchError(msg)
    return resp.text


async def fetch_corpus(
    url: str,
    tokens_per_chunk: int,
    *,
    codec: TokenCodec | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout_sec: float = 30.0,
) -> list[str]:
    async with httpx.AsyncClient(transport=transport, timeout=timeout_sec) as client:
        html = await fetch_html(client, url)
    chunks = chunk_text(extract_text(html), tokens_per_chunk, codec or default_codec())
    if not chunks:
        msg = f"No text content found at {url}"
        raise CorpusFetchError(msg)
    logger.info("Split %s into %d chunks of %d tokens", url, len(chunks), tokens_per_chunk)
    return chunks
