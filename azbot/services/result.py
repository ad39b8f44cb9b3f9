from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

AUTH_ERROR = "auth_error"
REMOTE_ERROR = "remote_error"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a remote lookup: rendered text, or an error with its code."""

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: str = REMOTE_ERROR) -> "Result[T]":
        return Result(ok=False, error=error, error_code=code)
