"""Request value objects for folder mutations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CreateFolderRequest:
    """Create ``name`` under ``parent_id`` (None = root)."""

    name: str
    parent_id: str | None = None


@dataclass(frozen=True)
class MoveFolderRequest:
    """Move ``source_id`` under ``target_id`` (None = root)."""

    source_id: str
    target_id: str | None


@dataclass(frozen=True)
class RenameFolderRequest:
    id: str
    new_name: str


@dataclass(frozen=True)
class ReplaceFolderRequest:
    """Move ``source_id`` under ``target_id``, deleting same-named folders there."""

    source_id: str
    target_id: str | None


@dataclass(frozen=True)
class RenameAndMoveFolderRequest:
    """Resolve a move conflict by moving under a new name."""

    id: str
    new_name: str
    target_id: str | None
