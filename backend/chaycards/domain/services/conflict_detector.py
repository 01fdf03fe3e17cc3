"""
Folder Conflict Detector.

Pure functions over a snapshot of the folder collection. They never mutate
their inputs and never touch storage, so callers can run them
synchronously before enqueueing a mutation.
"""

from collections.abc import Sequence

from chaycards.domain.constants import COPY_SUFFIX, NUMBERED_COPY_SUFFIX
from chaycards.domain.entities.folder import Folder
from chaycards.domain.value_objects.folder_conflict import (
    CircularConflict,
    FolderConflict,
    NameConflict,
)

from .folder_tree import descendant_ids, index_folders, iter_ancestor_ids, siblings_of


def generate_unique_name(base_name: str, siblings: Sequence[Folder]) -> str:
    """Suggest a sibling-unique variant of ``base_name``.

    Tries "<name> (copy)" first, then "<name> (copy N)" with the smallest
    N >= 1 not already taken. Counting is numeric, so "(copy 10)" never
    shadows "(copy 2)". Terminates within len(siblings) + 1 candidates.
    """
    taken = {folder.name.casefold() for folder in siblings}
    candidate = f"{base_name}{COPY_SUFFIX}"
    if candidate.casefold() not in taken:
        return candidate

    n = 1
    while True:
        candidate = f"{base_name}{NUMBERED_COPY_SUFFIX.format(n=n)}"
        if candidate.casefold() not in taken:
            return candidate
        n += 1


def detect_name_conflict(
    name: str,
    parent_id: str | None,
    folders: Sequence[Folder],
    exclude_id: str | None = None,
) -> NameConflict | None:
    """Check whether ``name`` is already used under ``parent_id``.

    Args:
        name: Requested name
        parent_id: Parent to check (None = root level)
        folders: Current folder collection
        exclude_id: Folder to ignore, used when renaming in place

    Returns:
        NameConflict with a suggested name, or None
    """
    siblings = siblings_of(parent_id, folders)
    conflicting = next(
        (f for f in siblings if f.id != exclude_id and f.has_name(name)),
        None,
    )
    if conflicting is None:
        return None

    return NameConflict(
        conflicting_id=conflicting.id,
        original_name=name,
        suggested_name=generate_unique_name(conflicting.name, siblings),
        message=f'A folder named "{name}" already exists in this location',
    )


def detect_circular_conflict(
    source_id: str,
    target_id: str | None,
    folders: Sequence[Folder],
) -> CircularConflict | None:
    """Check whether moving ``source_id`` under ``target_id`` creates a cycle.

    Walks the ancestor chain from the target. Reaching the source means the
    target is the source itself or one of its descendants. Revisiting an id
    means the stored tree is already corrupt.
    """
    if target_id is None:
        return None

    by_id = index_folders(folders)
    visited: set[str] = set()
    for current in iter_ancestor_ids(target_id, by_id):
        if current == source_id:
            return CircularConflict(
                source_id=source_id,
                target_id=target_id,
                message="Cannot move a folder into its own subfolder",
            )
        if current in visited:
            return CircularConflict(
                source_id=source_id,
                target_id=target_id,
                message="Circular reference detected in folder structure",
            )
        visited.add(current)

    return None


def detect_move_conflict(
    source_id: str,
    target_id: str | None,
    folders: Sequence[Folder],
) -> FolderConflict | None:
    """Check a move for conflicts, circular first.

    A circular move is structurally impossible, so it wins over a name
    clash that could otherwise be resolved by renaming.

    Returns:
        The first conflict found, or None (also None if source is unknown)
    """
    source = next((f for f in folders if f.id == source_id), None)
    if source is None:
        return None

    circular = detect_circular_conflict(source_id, target_id, folders)
    if circular is not None:
        return circular

    return detect_name_conflict(source.name, target_id, folders, exclude_id=source_id)


def get_folders_to_delete(folders: Sequence[Folder], folder_id: str) -> frozenset[str]:
    """Return the folder id plus all of its transitive children."""
    return descendant_ids(folder_id, folders)


def find_replace_targets(
    source: Folder,
    target_id: str | None,
    folders: Sequence[Folder],
) -> list[Folder]:
    """Folders under ``target_id`` that a replace of ``source`` would overwrite."""
    return [
        f
        for f in siblings_of(target_id, folders)
        if f.id != source.id and f.has_name(source.name)
    ]


def detect_replace_conflict(
    source_id: str,
    target_id: str | None,
    folders: Sequence[Folder],
) -> CircularConflict | None:
    """Check a replace for structural impossibilities.

    Rejects a target inside the source subtree, and a replace whose
    overwritten folder is an ancestor of the source.
    """
    circular = detect_circular_conflict(source_id, target_id, folders)
    if circular is not None:
        return circular

    by_id = index_folders(folders)
    source = by_id.get(source_id)
    if source is None:
        return None

    ancestors: set[str] = set()
    for current in iter_ancestor_ids(source.parent_id, by_id):
        if current in ancestors:
            break
        ancestors.add(current)

    for replaced in find_replace_targets(source, target_id, folders):
        if replaced.id in ancestors:
            return CircularConflict(
                source_id=source_id,
                target_id=target_id,
                message=f'Cannot replace "{replaced.name}": it contains the folder being moved',
            )
    return None
