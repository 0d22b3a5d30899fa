from __future__ import annotations

from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(Enum):
    # a business rule rejected the input (GPA bounds, minimum age, email shape)
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # no record carries the requested identifier
    NOT_FOUND = "NOT_FOUND"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ResultError(Exception):
    """Raised by ``Result.unwrap`` when the result is a failure."""

    def __init__(self, error: ErrorKind, detail: str):
        super().__init__(detail)
        self.error = error
        self.detail = detail


class Result(Generic[T]):
    """
    Outcome of a store operation.

    Attributes:
        success (bool): Whether the operation succeeded.
        value (T | None): Payload of a successful operation.
        error (ErrorKind | None): Machine-readable failure kind.
        detail (str | None): Human-readable failure message.
    """

    def __init__(
        self,
        success: bool,
        value: Optional[T] = None,
        error: Optional[ErrorKind] = None,
        detail: Optional[str] = None,
    ):
        self._success = success
        self._value = value
        self._error = error
        self._detail = detail

    @property
    def success(self) -> bool:
        return self._success

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def error(self) -> Optional[ErrorKind]:
        return self._error

    @property
    def detail(self) -> Optional[str]:
        return self._detail

    @classmethod
    def succeed(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: ErrorKind, detail: str) -> "Result[T]":
        return cls(success=False, error=error, detail=detail)

    def unwrap(self) -> T:
        if not self._success:
            raise ResultError(self._error or ErrorKind.INTERNAL_ERROR, self._detail or "")
        return self._value  # type: ignore[return-value]

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "error": self.error.value if self.error else None,
            "detail": self.detail,
        }

    def __bool__(self) -> bool:
        return self._success

    def __str__(self) -> str:
        if self.success:
            return "Success"
        return f"Error: {self.error.value if self.error else ''} ({self.detail or ''})"
