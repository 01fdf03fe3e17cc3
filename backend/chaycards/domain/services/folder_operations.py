"""Folder operations: validated, atomic mutations of the folder collection."""

import logging
from collections.abc import Sequence

from chaycards.domain.entities.folder import Folder
from chaycards.domain.value_objects.folder_requests import (
    CreateFolderRequest,
    MoveFolderRequest,
    RenameAndMoveFolderRequest,
    RenameFolderRequest,
    ReplaceFolderRequest,
)
from chaycards.domain.value_objects.operation_result import (
    ErrorKind,
    Failure,
    OperationResult,
    ReplaceOutcome,
    Success,
)
from chaycards.ports.folder_store import FolderStore, StorageError

from .conflict_detector import (
    detect_circular_conflict,
    detect_name_conflict,
    find_replace_targets,
    get_folders_to_delete,
)

logger = logging.getLogger(__name__)


class FolderOperations:
    """Validated folder mutations backed by a FolderStore.

    Every operation takes the current collection, validates against it and,
    on success, persists the complete new collection before returning.
    Validation failures come back as ``Failure`` values and persist nothing.
    Storage faults raise ``StorageError``.
    """

    def __init__(self, store: FolderStore):
        """Initialize folder operations.

        Args:
            store: Port for folder persistence
        """
        self._store = store

    async def create_folder(
        self, request: CreateFolderRequest, folders: Sequence[Folder]
    ) -> OperationResult[Folder]:
        """Create a folder under ``request.parent_id``.

        Returns:
            Success with the new folder, or Failure (NAME_CONFLICT for a
            blank or duplicate name, NOT_FOUND for an unknown parent)
        """
        name = request.name.strip()
        if not name:
            return self._reject(Failure(ErrorKind.NAME_CONFLICT, "Folder name cannot be empty"))

        if request.parent_id is not None and not _contains(folders, request.parent_id):
            return self._reject(Failure.not_found(request.parent_id, "Parent folder"))

        conflict = detect_name_conflict(name, request.parent_id, folders)
        if conflict is not None:
            return self._reject(Failure.from_conflict(conflict))

        folder = Folder.create(name, request.parent_id)
        await self._persist([*folders, folder])

        logger.info(f"Created folder {folder.id} ({folder.name!r}) under {folder.parent_id}")
        return Success(folder)

    async def rename_folder(
        self, request: RenameFolderRequest, folders: Sequence[Folder]
    ) -> OperationResult[Folder]:
        """Rename a folder in place.

        Returns:
            Success with the renamed folder, or Failure (NOT_FOUND,
            NAME_CONFLICT with a suggested name)
        """
        folder = _find(folders, request.id)
        if folder is None:
            return self._reject(Failure.not_found(request.id))

        name = request.new_name.strip()
        if not name:
            return self._reject(Failure(ErrorKind.NAME_CONFLICT, "Folder name cannot be empty"))

        conflict = detect_name_conflict(name, folder.parent_id, folders, exclude_id=folder.id)
        if conflict is not None:
            return self._reject(Failure.from_conflict(conflict))

        renamed = folder.with_name(name)
        await self._persist(_replace_one(folders, renamed))

        logger.info(f"Renamed folder {folder.id}: {folder.name!r} -> {renamed.name!r}")
        return Success(renamed)

    async def move_folder(
        self, request: MoveFolderRequest, folders: Sequence[Folder]
    ) -> OperationResult[Folder]:
        """Move a folder under a new parent.

        Name clashes at the destination are not checked here; the state
        manager checks them before enqueueing so the user can resolve them.

        Returns:
            Success with the moved folder, or Failure (NOT_FOUND,
            CIRCULAR_REFERENCE)
        """
        folder = _find(folders, request.source_id)
        if folder is None:
            return self._reject(Failure.not_found(request.source_id, "Source folder"))

        if request.target_id is not None and not _contains(folders, request.target_id):
            return self._reject(Failure.not_found(request.target_id, "Target folder"))

        circular = detect_circular_conflict(folder.id, request.target_id, folders)
        if circular is not None:
            return self._reject(Failure.from_conflict(circular))

        moved = folder.with_parent(request.target_id)
        await self._persist(_replace_one(folders, moved))

        logger.info(f"Moved folder {folder.id}: {folder.parent_id} -> {moved.parent_id}")
        return Success(moved)

    async def delete_folder(
        self, folder_id: str, folders: Sequence[Folder]
    ) -> OperationResult[frozenset[str]]:
        """Delete a folder and its whole subtree.

        Returns:
            Success with the removed ids, or Failure (NOT_FOUND)
        """
        if not _contains(folders, folder_id):
            return self._reject(Failure.not_found(folder_id))

        removed = get_folders_to_delete(folders, folder_id)
        await self._persist([f for f in folders if f.id not in removed])

        logger.info(f"Deleted folder {folder_id} ({len(removed)} folders removed)")
        return Success(removed)

    async def replace_folder(
        self, request: ReplaceFolderRequest, folders: Sequence[Folder]
    ) -> OperationResult[ReplaceOutcome]:
        """Move the source under the target, deleting same-named folders there.

        The overwritten folders are removed together with their subtrees,
        except that nothing inside the source subtree is ever removed.

        Returns:
            Success with the moved folder and removed ids, or Failure
            (NOT_FOUND, CIRCULAR_REFERENCE)
        """
        source = _find(folders, request.source_id)
        if source is None:
            return self._reject(Failure.not_found(request.source_id, "Source folder"))

        if request.target_id is not None and not _contains(folders, request.target_id):
            return self._reject(Failure.not_found(request.target_id, "Target folder"))

        circular = detect_circular_conflict(source.id, request.target_id, folders)
        if circular is not None:
            return self._reject(Failure.from_conflict(circular))

        removed: set[str] = set()
        for replaced in find_replace_targets(source, request.target_id, folders):
            removed |= get_folders_to_delete(folders, replaced.id)
        removed -= get_folders_to_delete(folders, source.id)

        moved = source.with_parent(request.target_id)
        updated = [moved if f.id == source.id else f for f in folders if f.id not in removed]
        await self._persist(updated)

        logger.info(
            f"Replaced into {request.target_id}: moved {source.id}, removed {len(removed)} folders"
        )
        return Success(ReplaceOutcome(folder=moved, removed_ids=frozenset(removed)))

    async def rename_and_move_folder(
        self, request: RenameAndMoveFolderRequest, folders: Sequence[Folder]
    ) -> OperationResult[Folder]:
        """Move a folder under a new name in one step.

        The new name is validated against the target's children, not the
        folder's current siblings.

        Returns:
            Success with the updated folder, or Failure (NOT_FOUND,
            NAME_CONFLICT, CIRCULAR_REFERENCE)
        """
        folder = _find(folders, request.id)
        if folder is None:
            return self._reject(Failure.not_found(request.id))

        if request.target_id is not None and not _contains(folders, request.target_id):
            return self._reject(Failure.not_found(request.target_id, "Target folder"))

        name = request.new_name.strip()
        if not name:
            return self._reject(Failure(ErrorKind.NAME_CONFLICT, "Folder name cannot be empty"))

        circular = detect_circular_conflict(folder.id, request.target_id, folders)
        if circular is not None:
            return self._reject(Failure.from_conflict(circular))

        conflict = detect_name_conflict(name, request.target_id, folders, exclude_id=folder.id)
        if conflict is not None:
            return self._reject(Failure.from_conflict(conflict))

        updated = folder.renamed_and_moved(name, request.target_id)
        await self._persist(_replace_one(folders, updated))

        logger.info(
            f"Renamed and moved folder {folder.id}: {folder.name!r} -> {updated.name!r}, "
            f"{folder.parent_id} -> {updated.parent_id}"
        )
        return Success(updated)

    async def _persist(self, folders: list[Folder]) -> list[Folder]:
        """Save the full collection, normalizing unexpected faults.

        Raises:
            StorageError: If the store fails for any reason
        """
        try:
            return await self._store.save_folders(folders)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to save folders: {e}",
                context={"original_error": repr(e)},
            ) from e

    @staticmethod
    def _reject(failure: Failure) -> Failure:
        logger.debug(f"Folder operation rejected ({failure.kind}): {failure.message}")
        return failure


def _find(folders: Sequence[Folder], folder_id: str) -> Folder | None:
    return next((f for f in folders if f.id == folder_id), None)


def _contains(folders: Sequence[Folder], folder_id: str) -> bool:
    return any(f.id == folder_id for f in folders)


def _replace_one(folders: Sequence[Folder], updated: Folder) -> list[Folder]:
    return [updated if f.id == updated.id else f for f in folders]