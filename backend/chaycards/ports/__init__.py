# Ports layer - Abstract interfaces (Protocols)

from .flashcard_repository import CardNotFoundError, FlashcardRepository
from .folder_store import (
    FolderDocument,
    FolderRecord,
    FolderStore,
    InvalidDataError,
    StorageError,
)

__all__ = [
    "CardNotFoundError",
    "FlashcardRepository",
    "FolderDocument",
    "FolderRecord",
    "FolderStore",
    "InvalidDataError",
    "StorageError",
]
