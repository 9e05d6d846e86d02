from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    OTHER = "other"
    HTTP_STATUS = "http_status"


class EmbenchError(Exception):
    """Base class for every error raised by embench."""


class ConfigurationError(EmbenchError, ValueError):
    """A benchmark or load spec field is missing or invalid."""


class CorpusFetchError(EmbenchError):
    """The corpus page could not be fetched or produced no fragments."""


class AttemptError(EmbenchError):
    """Failure of a single attempt.

    These are recorded on the attempt and folded into run counters; the engine
    never raises them to the caller of ``run()``.
    """

    error_type: ErrorType = ErrorType.OTHER

    def __init__(self, message: str, error_type: ErrorType | None = None) -> None:
        super().__init__(message)
        if error_type is not None:
            self.error_type = error_type


class AttemptTransportError(AttemptError):
    error_type = ErrorType.CONNECT


class AttemptTimeout(AttemptTransportError):
    error_type = ErrorType.TIMEOUT


class AttemptHttpError(AttemptError):
    error_type = ErrorType.HTTP_STATUS

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
