"""
repositories/exceptions.py
--------------------------
Domain-level errors raised by the singer repository.

Low-level psycopg2 and JSON errors are translated into one of four kinds
at the repository boundary. The original error is chained as `__cause__`
and is also available as `.cause`.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    BAD_VALUE = "bad_value"
    UNKNOWN = "unknown"


class SingerError(Exception):
    """Base class for singer repository errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DuplicateError(SingerError):
    """Raised when a singer with the same id already exists."""

    kind = ErrorKind.DUPLICATE


class NotFoundError(SingerError):
    """Raised when no singer has the requested id."""

    kind = ErrorKind.NOT_FOUND


class BadValueError(SingerError):
    """Raised when singer data cannot be encoded or a stored row is corrupt."""

    kind = ErrorKind.BAD_VALUE


class UnknownError(SingerError):
    """Raised for any other storage failure (connectivity, deadline, engine)."""

    kind = ErrorKind.UNKNOWN


__all__ = [
    "ErrorKind",
    "SingerError",
    "DuplicateError",
    "NotFoundError",
    "BadValueError",
    "UnknownError",
]
