from __future__ import annotations

from embench.corpus.web import TokenCodec, chunk_text, extract_text, fetch_corpus

__all__ = ["TokenCodec", "chunk_text", "extract_text", "fetch_corpus"]
