"""Folder conflict value objects produced by the conflict detector."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NameConflict:
    """A sibling already uses the requested name (case-insensitive).

    Attributes:
        conflicting_id: Id of the sibling holding the name
        original_name: Name that was requested
        suggested_name: Unused alternative, e.g. "Report (copy 1)"
        message: Human-readable description
    """

    conflicting_id: str
    original_name: str
    suggested_name: str
    message: str


@dataclass(frozen=True)
class CircularConflict:
    """A move would make a folder its own ancestor.

    There is never a suggested alternative: the only resolution is to
    choose a different target.
    """

    source_id: str
    target_id: str | None
    message: str


FolderConflict = NameConflict | CircularConflict
