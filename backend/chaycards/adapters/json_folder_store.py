"""JSON file folder store with rolling backups.

Layout under ``data_dir``:
    folders.json                 current document
    backups/folders-<ts>.json    one backup per save, newest kept
"""

import asyncio
import json
import logging
import os
import tempfile
import threading
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from chaycards.domain.constants import (
    BACKUPS_DIRNAME,
    DEFAULT_MAX_BACKUPS,
    FOLDER_DATA_VERSION,
    FOLDERS_FILENAME,
)
from chaycards.domain.entities.folder import Folder
from chaycards.infrastructure.retry import (
    TransientError,
    is_transient_os_error,
    retry_operation,
)
from chaycards.ports.folder_store import (
    FolderDocument,
    FolderRecord,
    InvalidDataError,
    StorageError,
)

logger = logging.getLogger(__name__)


class JsonFolderStore:
    """FolderStore implementation backed by a JSON document.

    Async-safe: file I/O runs in a worker thread under an asyncio.Lock, and
    a threading.Lock keeps writes ordered even if an awaiting caller is
    cancelled while its thread is still writing. Writes are atomic (temp
    file + rename), so a failed save never leaves a half-written document.
    """

    def __init__(self, data_dir: str | Path, max_backups: int = DEFAULT_MAX_BACKUPS):
        """Initialize the store.

        Args:
            data_dir: Directory holding folders.json and backups/
            max_backups: Number of backups to keep (oldest pruned first)
        """
        self._data_dir = Path(data_dir)
        self._max_backups = max_backups
        self._lock = asyncio.Lock()
        self._io_lock = threading.Lock()

    @property
    def folders_path(self) -> Path:
        return self._data_dir / FOLDERS_FILENAME

    @property
    def backups_path(self) -> Path:
        return self._data_dir / BACKUPS_DIRNAME

    # --- FolderStore port ---

    async def load_folders(self) -> list[Folder]:
        """Load folders, creating an empty document on first run.

        Raises:
            InvalidDataError: If the document is not valid JSON or schema
            StorageError: If the file cannot be read
        """
        async with self._lock:
            document = await self._with_retry(self._load_sync)
        return [record.to_folder() for record in document.folders]

    async def save_folders(self, folders: list[Folder]) -> list[Folder]:
        """Persist the full collection and write a backup.

        Raises:
            StorageError: If the write fails
        """
        async with self._lock:
            document = await self._with_retry(self._save_sync, folders)
        return [record.to_folder() for record in document.folders]

    async def restore_folders(self, backup_file: str | None = None) -> list[Folder]:
        """Read a backup (the newest one unless ``backup_file`` is given).

        The current document is not modified; callers save the result.

        Raises:
            StorageError: If no backup exists or it cannot be read
            InvalidDataError: If the backup is corrupt
        """
        async with self._lock:
            document = await self._with_retry(self._restore_sync, backup_file)
        return [record.to_folder() for record in document.folders]

    async def list_backups(self) -> list[str]:
        """Backup filenames, oldest first."""
        return await asyncio.to_thread(self._list_backups_sync)

    # --- Retry wrapper ---

    async def _with_retry(self, func, *args):
        async def attempt():
            try:
                return await asyncio.to_thread(func, *args)
            except OSError as e:
                if is_transient_os_error(e):
                    raise TransientError(str(e)) from e
                raise StorageError(
                    f"Folder store I/O failed: {e}",
                    context={"path": str(self._data_dir), "original_error": repr(e)},
                ) from e

        try:
            return await retry_operation(
                attempt,
                retryable_exceptions=(TransientError,),
                on_retry=lambda n, exc: logger.info(f"Retrying folder store I/O ({n}): {exc}"),
            )
        except TransientError as e:
            raise StorageError(
                f"Folder store busy: {e}",
                context={"path": str(self._data_dir)},
            ) from e

    # --- Synchronous implementations ---

    def _load_sync(self) -> FolderDocument:
        with self._io_lock:
            if not self.folders_path.exists():
                logger.info(f"No folder document at {self.folders_path}, creating initial state")
                return self._write_document_sync([])
            return self._read_document(self.folders_path)

    def _save_sync(self, folders: list[Folder]) -> FolderDocument:
        with self._io_lock:
            return self._write_document_sync(folders)

    def _restore_sync(self, backup_file: str | None) -> FolderDocument:
        with self._io_lock:
            backups = self._list_backups_sync()
            if backup_file is None:
                if not backups:
                    raise StorageError(
                        "No backups available",
                        context={"backups_path": str(self.backups_path)},
                    )
                backup_file = backups[-1]
            elif backup_file not in backups:
                raise StorageError(
                    f"Backup {backup_file} not found",
                    context={"backups_path": str(self.backups_path)},
                )
            logger.info(f"Restoring folders from backup {backup_file}")
            return self._read_document(self.backups_path / backup_file)

    def _write_document_sync(self, folders: list[Folder]) -> FolderDocument:
        document = FolderDocument(
            folders=[FolderRecord.from_folder(f) for f in folders],
            version=FOLDER_DATA_VERSION,
            last_backup=datetime.now(UTC),
        )
        payload = document.model_dump_json(indent=2)

        self._data_dir.mkdir(parents=True, exist_ok=True)
        _atomic_write(self.folders_path, payload)
        self._write_backup_sync(payload, document.last_backup)
        logger.debug(f"Saved {len(folders)} folders to {self.folders_path}")
        return document

    def _write_backup_sync(self, payload: str, stamp: datetime) -> None:
        self.backups_path.mkdir(parents=True, exist_ok=True)
        name = f"folders-{stamp.strftime('%Y%m%dT%H%M%S%fZ')}.json"
        _atomic_write(self.backups_path / name, payload)

        backups = self._list_backups_sync()
        for stale in backups[: max(0, len(backups) - self._max_backups)]:
            (self.backups_path / stale).unlink(missing_ok=True)

    def _list_backups_sync(self) -> list[str]:
        if not self.backups_path.is_dir():
            return []
        return sorted(
            p.name
            for p in self.backups_path.iterdir()
            if p.name.startswith("folders-") and p.suffix == ".json"
        )

    @staticmethod
    def _read_document(path: Path) -> FolderDocument:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return FolderDocument.model_validate(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidDataError(
                f"Folder document {path.name} is not valid JSON",
                context={"path": str(path), "original_error": str(e)},
            ) from e
        except ValidationError as e:
            raise InvalidDataError(
                f"Invalid folder data structure in {path.name}",
                context={"path": str(path), "errors": e.errors(include_url=False)},
            ) from e


def _atomic_write(path: Path, payload: str) -> None:
    """Write ``payload`` to ``path`` via a temp file and rename."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
