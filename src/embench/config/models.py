from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from embench.errors import ConfigurationError

DEFAULT_CORPUS_URL = (
    "https://writings.stephenwolfram.com/2023/02/what-is-chatgpt-doing-and-why-does-it-work/"
)
EMBEDDINGS_PATH = "/v1/embeddings"


class Mode(str, Enum):
    QUERY = "query"
    PASSAGE = "passage"

    @property
    def tokens_per_fragment(self) -> int:
        # Convention shared by corpus chunking and the CSV token column.
        return 20 if self is Mode.QUERY else 300


BodyFactory = Callable[[], Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class LoadTestSpec:
    url: str
    concurrency: int
    num_requests: int
    body_factory: BodyFactory
    headers: Mapping[str, str] = field(default_factory=dict)
    method: str = "POST"
    timeout_sec: float = 30.0

    def validate(self) -> None:
        if not self.url:
            raise ConfigurationError("Target URL must not be empty")
        if self.concurrency < 1:
            msg = f"Concurrency must be at least 1, got {self.concurrency}"
            raise ConfigurationError(msg)
        if self.num_requests < 1:
            msg = f"Number of requests must be at least 1, got {self.num_requests}"
            raise ConfigurationError(msg)
        if self.timeout_sec <= 0:
            msg = f"Timeout must be positive, got {self.timeout_sec}"
            raise ConfigurationError(msg)

    def request_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", **self.headers}


@dataclass(frozen=True, slots=True)
class BenchmarkConfig:
    url: str
    model: str
    mode: Mode
    batch_size: int
    concurrency: int
    num_requests: int = 1000
    timeout_sec: float = 30.0
    corpus_url: str = DEFAULT_CORPUS_URL
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def endpoint(self) -> str:
        return self.url.rstrip("/") + EMBEDDINGS_PATH

    @property
    def tokens_per_request(self) -> int:
        return self.mode.tokens_per_fragment * self.batch_size

    def validate(self) -> None:
        if not self.url:
            raise ConfigurationError(
                "URL must be provided via --url flag or URL_ENDPOINT environment variable"
            )
        if not self.model:
            raise ConfigurationError(
                "Model must be provided via --model flag or MODEL_NAME environment variable"
            )
        if self.batch_size < 1:
            msg = f"Batch size must be at least 1, got {self.batch_size}"
            raise ConfigurationError(msg)
        if self.concurrency < 1:
            msg = f"Concurrency must be at least 1, got {self.concurrency}"
            raise ConfigurationError(msg)
        if self.num_requests < 1:
            msg = f"Number of requests must be at least 1, got {self.num_requests}"
            raise ConfigurationError(msg)
        if self.timeout_sec <= 0:
            msg = f"Timeout must be positive, got {self.timeout_sec}"
            raise ConfigurationError(msg)

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "url": self.endpoint,
            "model": self.model,
            "mode": self.mode.value,
            "batch_size": self.batch_size,
            "concurrency": self.concurrency,
            "num_requests": self.num_requests,
            "timeout_sec": self.timeout_sec,
            "corpus_url": self.corpus_url,
            "headers": dict(self.headers),
        }
