"""
Typed outcomes for service operations.

Business-rule violations are returned, never raised: every service call
hands back a Result that is either a success (optionally carrying a value)
or a failure carrying an Error with a stable code.
"""

import enum
import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Broad category of a failure, for mapping onto transport status codes."""
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    WINDOW_CLOSED = "WINDOW_CLOSED"
    VALIDATION = "VALIDATION"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class Error:
    code: str
    description: str
    kind: ErrorKind


class Result(Generic[T]):
    """
    Outcome of a service operation.

    A success never carries an error and a failure always does; reading the
    value of a failure is a programming error.
    """

    __slots__ = ("_value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None, *, is_success: bool):
        if is_success and error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not is_success and error is None:
            raise ValueError("A failed result must carry an error")
        self._value = value
        self.error = error

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @property
    def value(self) -> T:
        if self.error is not None:
            raise ValueError(f"Failed result has no value ({self.error.code})")
        return self._value

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value, None, is_success=True)

    @classmethod
    def failure(cls, error: Error) -> "Result[T]":
        return cls(None, error, is_success=False)

    def __repr__(self):
        if self.error is not None:
            return f"<Result(failure={self.error.code})>"
        return f"<Result(success, value={self._value!r})>"


def service_operation(func: Callable[..., Result]) -> Callable[..., Result]:
    """
    Guard a service function that takes a Session as its first argument.

    Unexpected exceptions roll the session back, get logged with their
    traceback, and come back as CommonErrors.INTERNAL_ERROR so that no
    internal detail reaches the caller.
    """
    from hireme.core.errors import CommonErrors

    @functools.wraps(func)
    def wrapper(db, *args: Any, **kwargs: Any) -> Result:
        try:
            return func(db, *args, **kwargs)
        except Exception as e:
            db.rollback()
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            return Result.failure(CommonErrors.INTERNAL_ERROR)

    return wrapper
