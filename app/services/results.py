"""Tagged results returned by the repositories instead of raw storage exceptions."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ResultStatus(str, Enum):
    OK = "ok"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class RepositoryResult(Generic[T]):
    """Outcome of a storage operation: a status tag plus the entity when status is OK."""

    status: ResultStatus
    value: T | None = None

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.OK

    @classmethod
    def success(cls, value: T) -> "RepositoryResult[T]":
        return cls(ResultStatus.OK, value)

    @classmethod
    def conflict(cls) -> "RepositoryResult[T]":
        return cls(ResultStatus.CONFLICT)

    @classmethod
    def not_found(cls) -> "RepositoryResult[T]":
        return cls(ResultStatus.NOT_FOUND)

    @classmethod
    def internal_error(cls) -> "RepositoryResult[T]":
        return cls(ResultStatus.INTERNAL_ERROR)
