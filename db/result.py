"""Result type returned by store write operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Classification of a failed store operation."""

    VALIDATION = "validation"
    DURABILITY = "durability"
    TRANSIENT = "transient"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Result:
    """Outcome of an operation that must not raise across the categorization loop.

    Attributes:
        ok: True if the operation succeeded.
        value: Optional payload of a successful operation.
        error: Human readable description of the failure.
        kind: Classification of the failure, None on success.
    """

    ok: bool
    value: Any = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "Result":
        return cls(ok=False, error=error, kind=kind)

    def __bool__(self) -> bool:
        return self.ok
