"""
Tagged results returned across the persistence boundary.

A store call either succeeds with a payload or fails with a structured
``StoreError``. Callers must check ``error`` before trusting ``value``:
an empty list and a failed fetch are different outcomes.
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel

T = TypeVar("T")

UNAVAILABLE_MESSAGE = "Service temporarily unavailable, please try again later"


class StoreErrorKind(str, Enum):
    UNREACHABLE = "unreachable"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class StoreError(BaseModel):
    kind: StoreErrorKind
    message: str


class StoreResult(BaseModel, Generic[T]):
    value: Optional[T] = None
    error: Optional[StoreError] = None

    @classmethod
    def ok(cls, value: T) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: StoreErrorKind, message: str) -> "StoreResult[T]":
        return cls(error=StoreError(kind=kind, message=message))

    @property
    def is_ok(self) -> bool:
        return self.error is None


def store_error_to_http(error: StoreError) -> HTTPException:
    if error.kind == StoreErrorKind.NOT_FOUND:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if error.kind == StoreErrorKind.VALIDATION:
        # Store validation messages are shown to the user as-is
        return HTTPException(status_code=422, detail=error.message)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_MESSAGE)


def unwrap(result: StoreResult[T]) -> T:
    """Return the payload of a successful result or raise the matching HTTPException."""
    if result.error is not None:
        raise store_error_to_http(result.error)
    return result.value
