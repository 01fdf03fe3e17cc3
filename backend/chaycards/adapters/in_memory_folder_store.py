"""In-memory folder store for development and testing.

Nothing survives a restart. Use CHAYCARDS_FOLDER_STORE=memory to enable.
"""

import logging

from chaycards.domain.entities.folder import Folder
from chaycards.ports.folder_store import StorageError

logger = logging.getLogger(__name__)


class InMemoryFolderStore:
    """FolderStore implementation holding folders in a list.

    The collection that was current before each save is kept as the single
    backup, so ``restore_folders`` behaves like the file store's newest
    backup.

    Useful for:
    - Unit tests of the state manager and queue
    - Running without a data directory
    """

    def __init__(self, folders: list[Folder] | None = None) -> None:
        self._folders: list[Folder] = list(folders or [])
        self._backup: list[Folder] | None = None
        self.save_count = 0
        self._fail_next_save: StorageError | None = None
        self._fail_next_load: StorageError | None = None

    @property
    def folders(self) -> list[Folder]:
        """Persisted folders (copy)."""
        return list(self._folders)

    def fail_next_save(self, error: StorageError | None = None) -> None:
        """Make the next save raise ``error`` (a generic StorageError by default)."""
        self._fail_next_save = error or StorageError("Simulated write failure")

    def fail_next_load(self, error: StorageError | None = None) -> None:
        self._fail_next_load = error or StorageError("Simulated read failure")

    async def load_folders(self) -> list[Folder]:
        if self._fail_next_load is not None:
            error, self._fail_next_load = self._fail_next_load, None
            raise error
        return list(self._folders)

    async def save_folders(self, folders: list[Folder]) -> list[Folder]:
        if self._fail_next_save is not None:
            error, self._fail_next_save = self._fail_next_save, None
            logger.debug(f"Failing save on request: {error}")
            raise error
        self._backup = list(self._folders)
        self._folders = list(folders)
        self.save_count += 1
        return list(self._folders)

    async def restore_folders(self) -> list[Folder]:
        if self._backup is None:
            raise StorageError("No backups available")
        return list(self._backup)
