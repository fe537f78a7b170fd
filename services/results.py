# services/results.py
from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class Outcome(enum.Enum):
    OK = "ok"
    AUTHORIZATION_DENIED = "authorization_denied"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a mutating service call.

    Exactly one of success-with-data, AuthorizationDenied or NotFound.
    Storage failures are never folded into a Result; they propagate.
    """
    outcome: Outcome
    data: Optional[T] = None

    @classmethod
    def ok(cls, data: Any) -> "Result":
        return cls(Outcome.OK, data)

    @classmethod
    def denied(cls) -> "Result":
        return cls(Outcome.AUTHORIZATION_DENIED)

    @classmethod
    def not_found(cls) -> "Result":
        return cls(Outcome.NOT_FOUND)

    @property
    def is_ok(self) -> bool:
        return self.outcome is Outcome.OK

    @property
    def is_denied(self) -> bool:
        return self.outcome is Outcome.AUTHORIZATION_DENIED

    @property
    def is_not_found(self) -> bool:
        return self.outcome is Outcome.NOT_FOUND


class ReferentialIntegrityError(Exception):
    """Raised when a foreign key names a parent row that does not exist."""
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r} does not reference an existing row")


class DuplicateUserError(Exception):
    """Raised when a username or email is already registered."""
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"A user with {field} '{value}' already exists")
