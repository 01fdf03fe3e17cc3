"""Port interface for folder tree persistence."""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from chaycards.domain.entities.folder import Folder
from chaycards.domain.value_objects.operation_result import ErrorKind


class FolderRecord(BaseModel):
    """Persisted shape of a single folder."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    parent_id: str | None = None
    created_at: datetime
    modified_at: datetime

    @classmethod
    def from_folder(cls, folder: Folder) -> "FolderRecord":
        return cls(
            id=folder.id,
            name=folder.name,
            parent_id=folder.parent_id,
            created_at=folder.created_at,
            modified_at=folder.modified_at,
        )

    def to_folder(self) -> Folder:
        return Folder(
            id=self.id,
            name=self.name,
            parent_id=self.parent_id,
            created_at=self.created_at,
            modified_at=self.modified_at,
        )


class FolderDocument(BaseModel):
    """Persisted folder collection with its metadata.

    ``version`` is the document schema version; ``last_backup`` is stamped
    by the store on every save.
    """

    folders: list[FolderRecord]
    version: int = 1
    last_backup: datetime


@runtime_checkable
class FolderStore(Protocol):
    """Port for folder tree persistence.

    The store owns durable storage and is the source of truth across
    restarts. Implementations must fail loudly: an unreadable or corrupt
    store raises StorageError instead of returning an empty collection.
    """

    async def load_folders(self) -> list[Folder]:
        """Load the full folder collection.

        Returns:
            Every persisted folder (unordered)

        Raises:
            StorageError: If the store cannot be read or is corrupt
        """
        ...

    async def save_folders(self, folders: list[Folder]) -> list[Folder]:
        """Persist the full replacement collection atomically.

        Args:
            folders: Complete new collection

        Returns:
            The collection as persisted

        Raises:
            StorageError: If the write fails (nothing is partially applied)
        """
        ...

    async def restore_folders(self) -> list[Folder]:
        """Load the most recent backup (disaster recovery only).

        Raises:
            StorageError: If no usable backup exists
        """
        ...


class StorageError(Exception):
    """Raised when the folder store fails.

    Attributes:
        kind: STORAGE_ERROR for I/O faults, INVALID_DATA for corrupt data
        context: Extra diagnostic details (paths, original error)
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.STORAGE_ERROR,
        context: dict[str, Any] | None = None,
    ):
        self.kind = kind
        self.context = context or {}
        super().__init__(message)

    def is_retryable(self) -> bool:
        """I/O faults may succeed on retry; corrupt data never will."""
        return self.kind is ErrorKind.STORAGE_ERROR


class InvalidDataError(StorageError):
    """Raised when persisted data is malformed."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, kind=ErrorKind.INVALID_DATA, context=context)
