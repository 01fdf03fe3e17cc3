"""
Composition Root.

Centralized dependency wiring for the application.
All factory functions that instantiate adapters belong here to maintain
hexagonal architecture (domain NEVER imports from adapters).
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

from chaycards import config
from chaycards.adapters.in_memory_folder_store import InMemoryFolderStore
from chaycards.adapters.json_folder_store import JsonFolderStore
from chaycards.domain.services.folder_state_manager import FolderStateManager
from chaycards.domain.services.operation_queue import OperationQueue
from chaycards.domain.services.review_service import ReviewService
from chaycards.infrastructure.sqlite_flashcard_repository import SqliteFlashcardRepository
from chaycards.ports.folder_store import FolderStore

logger = logging.getLogger(__name__)


def load_environment(env_path: str | Path | None = None) -> None:
    """Load .env (project root by default) before reading configuration."""
    if env_path is None:
        env_path = Path(__file__).parent.parent.parent.parent / ".env"
    load_dotenv(env_path)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(
        level=level or config.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_folder_store() -> FolderStore:
    """Create the folder store selected by CHAYCARDS_FOLDER_STORE.

    Raises:
        ValueError: If the configured store kind is unknown
    """
    kind = config.get_folder_store_kind()
    if kind == config.FOLDER_STORE_MEMORY:
        logger.info("Using in-memory folder store")
        return InMemoryFolderStore()
    if kind == config.FOLDER_STORE_JSON:
        data_dir = config.get_data_dir()
        logger.info(f"Using JSON folder store at {data_dir}")
        return JsonFolderStore(data_dir, max_backups=config.get_max_backups())
    raise ValueError(f"Unknown folder store: {kind!r}")


async def create_folder_state_manager(store: FolderStore | None = None) -> FolderStateManager:
    """Create and load a FolderStateManager.

    Args:
        store: Folder store to use (configured store if omitted)

    Raises:
        StorageError: If the initial load fails
    """
    queue = OperationQueue(operation_timeout=config.get_operation_timeout())
    return await FolderStateManager.open(store or create_folder_store(), queue)


def create_review_service() -> ReviewService:
    """Create ReviewService backed by the SQLite review database."""
    return ReviewService(SqliteFlashcardRepository(config.get_review_db_path()))
