from __future__ import annotations

from embench.config.models import (
    DEFAULT_CORPUS_URL,
    BenchmarkConfig,
    LoadTestSpec,
    Mode,
)

__all__ = [
    "DEFAULT_CORPUS_URL",
    "BenchmarkConfig",
    "LoadTestSpec",
    "Mode",
]
