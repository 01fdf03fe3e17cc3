"""
Operation Result Value Objects.

Folder operations report expected failures as values instead of raising,
so callers can branch on conflicts without exception handling. A result is
either a ``Success`` carrying a payload or a ``Failure`` carrying an
``ErrorKind`` and, for conflicts, the conflict details.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, Literal, TypeVar

from chaycards.domain.entities.folder import Folder
from chaycards.domain.value_objects.folder_conflict import FolderConflict, NameConflict

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Failure taxonomy for folder operations.

    Validation kinds (returned as values):
        NOT_FOUND, NAME_CONFLICT, CIRCULAR_REFERENCE
    Storage kinds (raised by the store, surfaced by the queue):
        STORAGE_ERROR, INVALID_DATA
    Queue kinds:
        CANCELLED: the queue was cleared before the operation ran
    """

    NOT_FOUND = "not_found"
    NAME_CONFLICT = "name_conflict"
    CIRCULAR_REFERENCE = "circular_reference"
    STORAGE_ERROR = "storage_error"
    INVALID_DATA = "invalid_data"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful operation with its payload."""

    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class Failure:
    """Failed operation.

    Attributes:
        kind: What went wrong
        message: Human-readable description
        conflict: Conflict details for NAME_CONFLICT / CIRCULAR_REFERENCE
    """

    kind: ErrorKind
    message: str
    conflict: FolderConflict | None = None
    success: Literal[False] = False

    @property
    def is_conflict(self) -> bool:
        """Whether this is a resolvable conflict that should pause the queue."""
        return self.kind is ErrorKind.NAME_CONFLICT

    @property
    def suggested_name(self) -> str | None:
        """Suggested alternative name for name conflicts."""
        if isinstance(self.conflict, NameConflict):
            return self.conflict.suggested_name
        return None

    @classmethod
    def not_found(cls, folder_id: str | None, what: str = "Folder") -> "Failure":
        """Factory for a missing folder."""
        return cls(kind=ErrorKind.NOT_FOUND, message=f"{what} {folder_id} not found")

    @classmethod
    def from_conflict(cls, conflict: FolderConflict) -> "Failure":
        """Factory mapping a detected conflict to its error kind."""
        kind = (
            ErrorKind.NAME_CONFLICT
            if isinstance(conflict, NameConflict)
            else ErrorKind.CIRCULAR_REFERENCE
        )
        return cls(kind=kind, message=conflict.message, conflict=conflict)


OperationResult = Success[T] | Failure


@dataclass(frozen=True)
class ReplaceOutcome:
    """Payload of a successful replace.

    Attributes:
        folder: The moved source folder in its new location
        removed_ids: Ids of every folder deleted by the replace
    """

    folder: Folder
    removed_ids: frozenset[str]
