"""Folder state manager: the live folder tree and its subscribers."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Self

from chaycards.domain.entities.folder import Folder
from chaycards.domain.entities.queued_operation import QueuedOperation
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
from chaycards.domain.value_objects.operation_status import OperationKind, OperationStatus
from chaycards.ports.folder_store import FolderStore

from .conflict_detector import (
    detect_circular_conflict,
    detect_move_conflict,
    detect_name_conflict,
    detect_replace_conflict,
)
from .folder_operations import FolderOperations
from .folder_tree import path_to, siblings_of
from .operation_queue import OperationQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FolderState:
    """Snapshot published to subscribers.

    Attributes:
        folders: Every loaded folder
        current_folder_id: Navigation cursor (None = root level)
        is_loading: True until the first load finishes
        load_error: Message of the last failed load, if any
        queue_status: Status of the operation at the head of the queue,
            None when the queue is idle
    """

    folders: tuple[Folder, ...] = ()
    current_folder_id: str | None = None
    is_loading: bool = True
    load_error: str | None = None
    queue_status: OperationStatus | None = None


StateListener = Callable[[FolderState], None]


class FolderStateManager:
    """Owns the in-memory folder tree while it is loaded.

    Lifecycle: construct with a store, ``await load()``, then use. Every
    mutation is serialized through the OperationQueue. Each queued thunk
    reads the tree at execution time and applies its local update before
    returning, so the next operation always sees the result of the
    previous one.

    Cheap conflict checks run synchronously before enqueueing; a request
    that already conflicts with the current tree is rejected without a
    queue round-trip. A conflict that only appears at execution time (the
    tree changed while the request waited) pauses the queue instead.

    A mutation that times out is followed by a reload from the store
    before the next one runs, since its save may still have landed.
    """

    def __init__(self, store: FolderStore, queue: OperationQueue | None = None):
        """Initialize the state manager.

        Args:
            store: Port for folder persistence
            queue: Operation queue (a default one is created if omitted)
        """
        self._store = store
        self._operations = FolderOperations(store)
        self._queue = queue or OperationQueue()
        self._state = FolderState()
        self._listeners: list[StateListener] = []
        self._detach_queue = self._queue.add_listener(self._on_queue_transition)

    @classmethod
    async def open(cls, store: FolderStore, queue: OperationQueue | None = None) -> Self:
        """Create a manager and load its folders."""
        manager = cls(store, queue)
        await manager.load()
        return manager

    # --- State access ---

    @property
    def state(self) -> FolderState:
        return self._state

    def get_state(self) -> FolderState:
        """Get the current state snapshot."""
        return self._state

    @property
    def is_ready(self) -> bool:
        return not self._state.is_loading and self._state.load_error is None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener, calling it immediately with the current state.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        listener(self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Folder state listener failed")

    def _on_queue_transition(self, operation: QueuedOperation) -> None:
        self._sync_queue_status()

    def _sync_queue_status(self) -> None:
        head = self._queue.current_operation
        status = head.status if head is not None else None
        if status != self._state.queue_status:
            self._set_state(queue_status=status)

    # --- Loading ---

    async def load(self) -> FolderState:
        """Load the full folder collection from the store.

        Raises:
            StorageError: If the store is unreadable or corrupt. The error is
                recorded in ``load_error``; the tree is never silently emptied.
        """
        self._set_state(is_loading=True, load_error=None)
        try:
            folders = await self._store.load_folders()
        except Exception as e:
            logger.error(f"Error loading folders: {e}")
            self._set_state(is_loading=False, load_error=str(e))
            raise

        logger.info(f"Loaded {len(folders)} folders")
        self._set_state(folders=tuple(folders), is_loading=False)
        return self._state

    async def _resync(self) -> None:
        """Reload the tree after a timed-out mutation.

        The abandoned save may still have reached the store, so the store
        is treated as authoritative. A cursor pointing at a folder that no
        longer exists is reset to the root level.
        """
        folders = await self._store.load_folders()
        current = self._state.current_folder_id
        if current is not None and not any(f.id == current for f in folders):
            current = None
        logger.warning(f"Re-synced {len(folders)} folders from store after timeout")
        self._set_state(folders=tuple(folders), current_folder_id=current)

    # --- Mutations ---

    async def create_folder(self, request: CreateFolderRequest) -> OperationResult[Folder]:
        """Create a folder; appends it to local state on success."""
        name = request.name.strip()
        if not name:
            return _blank_name()
        conflict = detect_name_conflict(name, request.parent_id, self._state.folders)
        if conflict is not None:
            return Failure.from_conflict(conflict)

        async def execute() -> OperationResult[Folder]:
            result = await self._operations.create_folder(request, self._state.folders)
            if isinstance(result, Success):
                self._set_state(folders=(*self._state.folders, result.data))
            return result

        return await self._queue.queue_operation(
            OperationKind.CREATE, execute, on_timeout=self._resync
        )

    async def rename_folder(self, request: RenameFolderRequest) -> OperationResult[Folder]:
        """Rename a folder; updates its name locally on success."""
        name = request.new_name.strip()
        if not name:
            return _blank_name()
        folder = self._find(request.id)
        if folder is not None:
            conflict = detect_name_conflict(
                name, folder.parent_id, self._state.folders, exclude_id=folder.id
            )
            if conflict is not None:
                return Failure.from_conflict(conflict)

        async def execute() -> OperationResult[Folder]:
            result = await self._operations.rename_folder(request, self._state.folders)
            if isinstance(result, Success):
                self._put(result.data)
            return result

        return await self._queue.queue_operation(
            OperationKind.RENAME, execute, on_timeout=self._resync
        )

    async def move_folder(self, request: MoveFolderRequest) -> OperationResult[Folder]:
        """Move a folder, rejecting circular moves and name clashes up front."""
        conflict = detect_move_conflict(request.source_id, request.target_id, self._state.folders)
        if conflict is not None:
            logger.debug(f"Move of {request.source_id} rejected: {conflict.message}")
            return Failure.from_conflict(conflict)

        async def execute() -> OperationResult[Folder]:
            folders = self._state.folders
            # Re-check names: an earlier queued operation may have taken the name.
            source = next((f for f in folders if f.id == request.source_id), None)
            if source is not None:
                clash = detect_name_conflict(
                    source.name, request.target_id, folders, exclude_id=source.id
                )
                if clash is not None:
                    return Failure.from_conflict(clash)

            result = await self._operations.move_folder(request, folders)
            if isinstance(result, Success):
                self._put(result.data)
            return result

        return await self._queue.queue_operation(
            OperationKind.MOVE, execute, on_timeout=self._resync
        )

    async def rename_and_move_folder(
        self, request: RenameAndMoveFolderRequest
    ) -> OperationResult[Folder]:
        """Resolve a move conflict by moving the folder under a new name."""
        name = request.new_name.strip()
        if not name:
            return _blank_name()
        folders = self._state.folders
        circular = detect_circular_conflict(request.id, request.target_id, folders)
        if circular is not None:
            return Failure.from_conflict(circular)
        conflict = detect_name_conflict(name, request.target_id, folders, exclude_id=request.id)
        if conflict is not None:
            return Failure.from_conflict(conflict)

        async def execute() -> OperationResult[Folder]:
            result = await self._operations.rename_and_move_folder(request, self._state.folders)
            if isinstance(result, Success):
                self._put(result.data)
            return result

        return await self._queue.queue_operation(
            OperationKind.MOVE, execute, on_timeout=self._resync
        )

    async def replace_folder(self, request: ReplaceFolderRequest) -> OperationResult[ReplaceOutcome]:
        """Move the source into the target, overwriting same-named folders.

        If the cursor pointed at a removed folder it moves to the target.
        """
        conflict = detect_replace_conflict(request.source_id, request.target_id, self._state.folders)
        if conflict is not None:
            return Failure.from_conflict(conflict)

        async def execute() -> OperationResult[ReplaceOutcome]:
            result = await self._operations.replace_folder(request, self._state.folders)
            if isinstance(result, Success):
                outcome = result.data
                folders = tuple(
                    outcome.folder if f.id == outcome.folder.id else f
                    for f in self._state.folders
                    if f.id not in outcome.removed_ids
                )
                current = self._state.current_folder_id
                if current in outcome.removed_ids:
                    current = request.target_id
                self._set_state(folders=folders, current_folder_id=current)
            return result

        return await self._queue.queue_operation(
            OperationKind.REPLACE, execute, on_timeout=self._resync
        )

    async def delete_folder(self, folder_id: str) -> OperationResult[frozenset[str]]:
        """Delete a folder and its subtree.

        If the cursor pointed into the deleted subtree it moves to the
        deleted folder's former parent.
        """

        async def execute() -> OperationResult[frozenset[str]]:
            deleted = self._find(folder_id)
            result = await self._operations.delete_folder(folder_id, self._state.folders)
            if isinstance(result, Success):
                removed = result.data
                current = self._state.current_folder_id
                if current in removed:
                    current = deleted.parent_id if deleted else None
                self._set_state(
                    folders=tuple(f for f in self._state.folders if f.id not in removed),
                    current_folder_id=current,
                )
            return result

        return await self._queue.queue_operation(
            OperationKind.DELETE, execute, on_timeout=self._resync
        )

    async def restore_folders(self) -> OperationResult[list[Folder]]:
        """Replace the tree with the store's latest backup.

        The restored collection is saved back so the store and the local
        cache agree. A cursor pointing at a folder missing from the backup
        is reset to the root level.
        """

        async def execute() -> OperationResult[list[Folder]]:
            restored = await self._store.restore_folders()
            saved = await self._store.save_folders(restored)
            current = self._state.current_folder_id
            if current is not None and not any(f.id == current for f in saved):
                current = None
            self._set_state(folders=tuple(saved), current_folder_id=current)
            logger.info(f"Restored {len(saved)} folders from backup")
            return Success(list(saved))

        return await self._queue.queue_operation(
            OperationKind.REPLACE, execute, on_timeout=self._resync
        )

    # --- Queue control ---

    def resume_operation_queue(self) -> bool:
        """Discard the conflicted operation and continue draining."""
        resumed = self._queue.resume_queue()
        if resumed:
            self._sync_queue_status()
        return resumed

    def clear_operation_queue(self) -> int:
        """Abandon all queued operations."""
        abandoned = self._queue.clear_queue()
        self._sync_queue_status()
        return abandoned

    # --- Navigation ---

    def set_current_folder(self, folder_id: str | None) -> None:
        """Move the navigation cursor (not queued: navigation is not a mutation)."""
        self._set_state(current_folder_id=folder_id)

    def get_current_folder(self) -> Folder | None:
        current = self._state.current_folder_id
        return self._find(current) if current is not None else None

    def get_current_folders(self) -> list[Folder]:
        """Children of the current folder (root folders when at the root)."""
        return siblings_of(self._state.current_folder_id, self._state.folders)

    def get_folder_path(self, folder_id: str) -> list[Folder]:
        """Breadcrumb from the root down to ``folder_id``."""
        return path_to(folder_id, self._state.folders)

    def close(self) -> None:
        """Detach from the queue and drop all subscribers."""
        self._detach_queue()
        self._listeners.clear()

    # --- Helpers ---

    def _find(self, folder_id: str) -> Folder | None:
        return next((f for f in self._state.folders if f.id == folder_id), None)

    def _put(self, folder: Folder) -> None:
        self._set_state(
            folders=tuple(folder if f.id == folder.id else f for f in self._state.folders)
        )


def _blank_name() -> Failure:
    return Failure(ErrorKind.NAME_CONFLICT, "Folder name cannot be empty")
