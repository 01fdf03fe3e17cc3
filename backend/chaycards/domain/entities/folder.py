"""Folder entity representing a node in the folder tree."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Self, TypedDict

import ulid


class FolderDict(TypedDict):
    """Folder data structure for serialization."""

    id: str
    name: str
    parent_id: str | None
    created_at: str
    modified_at: str


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Folder:
    """Folder entity.

    Folders form a forest: a folder with ``parent_id=None`` is a root.
    Names are unique among siblings (case-insensitively), which is enforced
    by the folder operations rather than by the entity itself.

    Attributes:
        id: Unique, immutable identifier (ULID)
        name: Display name, never blank
        parent_id: Parent folder id, or None for a root folder
        created_at: When the folder was created (UTC)
        modified_at: Last structural change to this folder (UTC)
    """

    id: str
    name: str
    parent_id: str | None
    created_at: datetime
    modified_at: datetime

    @classmethod
    def create(cls, name: str, parent_id: str | None, now: datetime | None = None) -> Self:
        """Create a new folder with a fresh id and timestamps.

        Args:
            name: Folder name
            parent_id: Parent folder id, or None for root
            now: Creation timestamp (defaults to current UTC time)

        Returns:
            New folder
        """
        timestamp = now or _now()
        return cls(
            id=str(ulid.ULID()),
            name=name,
            parent_id=parent_id,
            created_at=timestamp,
            modified_at=timestamp,
        )

    @property
    def is_root(self) -> bool:
        """Whether the folder sits at the top of the tree."""
        return self.parent_id is None

    def has_name(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.casefold() == name.casefold()

    def with_name(self, name: str, now: datetime | None = None) -> Self:
        """Return a renamed copy."""
        return replace(self, name=name, modified_at=now or _now())

    def with_parent(self, parent_id: str | None, now: datetime | None = None) -> Self:
        """Return a copy moved under ``parent_id``."""
        return replace(self, parent_id=parent_id, modified_at=now or _now())

    def renamed_and_moved(
        self, name: str, parent_id: str | None, now: datetime | None = None
    ) -> Self:
        """Return a copy with both name and parent changed."""
        return replace(self, name=name, parent_id=parent_id, modified_at=now or _now())

    def to_dict(self) -> FolderDict:
        """Convert folder to dictionary for persistence."""
        return {
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: FolderDict) -> Self:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            parent_id=data.get("parent_id"),
            created_at=datetime.fromisoformat(data["created_at"]),
            modified_at=datetime.fromisoformat(data["modified_at"]),
        )
