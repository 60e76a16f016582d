"""Explicit success/failure values returned by the service layer."""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Closed set of failure kinds a request can end in."""
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    DUPLICATE_KEY = "duplicate_key"
    DATABASE_UNAVAILABLE = "database_unavailable"
    UNEXPECTED = "unexpected"


# Every ErrorKind must appear here
ERROR_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_KEY: 400,
    ErrorKind.DATABASE_UNAVAILABLE: 503,
    ErrorKind.UNEXPECTED: 500,
}

GENERIC_ERROR_MESSAGE = "Something went wrong, try again later"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]


Result = Union[Ok[T], Failure]


def not_found(entry_id: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, f"No entry with id {entry_id}")
