"""
Submission outcomes.

A submission either carries a value or a SubmitError describing which step
failed. Callers that prefer exceptions use ``unwrap()``, which raises the
single ApiUpdateFailedError for every kind of failure.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class SubmitErrorKind(str, Enum):
    """Which step of a submission failed."""
    PAYLOAD_SERIALIZATION = 'payload_serialization'
    TRANSPORT = 'transport'
    ERROR_RESPONSE = 'error_response'
    EMPTY_BODY = 'empty_body'
    RESPONSE_DESERIALIZATION = 'response_deserialization'


@dataclass(frozen=True)
class SubmitError:
    """Failure details visible to callers.

    The raw body of an error response is logged but deliberately not kept here.
    """
    kind: SubmitErrorKind
    message: str
    site_url: str
    status_code: Optional[int] = None

    def __str__(self):
        return self.message


class ApiUpdateFailedError(Exception):
    """Raised when an update to the Jira API could not be completed."""

    def __init__(self, error: SubmitError):
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class SubmitResult(Generic[T]):
    """Outcome of a single submission: exactly one of value or error is set."""
    value: Optional[T] = None
    error: Optional[SubmitError] = None

    @classmethod
    def success(cls, value: T) -> 'SubmitResult[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: SubmitError) -> 'SubmitResult[T]':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise ApiUpdateFailedError."""
        if self.error is not None:
            raise ApiUpdateFailedError(self.error)
        return self.value
