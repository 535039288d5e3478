"""Result type returned by release API operations.

Network operations never raise for expected failures; they return an
``ApiResult`` which is either a success carrying a value or a failure
carrying the reason, so callers can tell "not found" apart from a
transport error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    """Why a release API operation produced no value."""

    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"
    INVALID_RESPONSE = "invalid_response"
    NO_MATCH = "no_match"
    IO_ERROR = "io_error"


@dataclass(slots=True, frozen=True)
class ApiResult(Generic[T]):
    """Outcome of a single release API operation.

    Attributes:
        value: Result value on success (None for valueless successes)
        failure: Failure kind, None on success
        reason: Human-readable failure description
        status: HTTP status code when a response was received

    """

    value: T | None = None
    failure: FailureKind | None = None
    reason: str = ""
    status: int | None = None

    @property
    def ok(self) -> bool:
        """Return True if the operation succeeded."""
        return self.failure is None

    @classmethod
    def success(cls, value: T | None = None, status: int | None = None) -> ApiResult[T]:
        """Build a successful result."""
        return cls(value=value, status=status)

    @classmethod
    def fail(
        cls,
        failure: FailureKind,
        reason: str,
        status: int | None = None,
    ) -> ApiResult[T]:
        """Build a failed result."""
        return cls(failure=failure, reason=reason, status=status)

    def unwrap(self) -> T:
        """Return the value, raising ValueError if the operation failed."""
        if self.failure is not None or self.value is None:
            msg = f"No value: {self.reason or 'empty result'}"
            raise ValueError(msg)
        return self.value
