# Adapters layer - Concrete implementations (JSON file store, in-memory stores)

from .in_memory_flashcard_repository import InMemoryFlashcardRepository
from .in_memory_folder_store import InMemoryFolderStore
from .json_folder_store import JsonFolderStore

__all__ = [
    "InMemoryFlashcardRepository",
    "InMemoryFolderStore",
    "JsonFolderStore",
]
