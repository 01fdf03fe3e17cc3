"""Domain entities - objects with identity."""

from .folder import Folder, FolderDict
from .flashcard import CardStatus, Flashcard
from .queued_operation import OperationThunk, QueuedOperation

__all__ = [
    "CardStatus",
    "Flashcard",
    "Folder",
    "FolderDict",
    "OperationThunk",
    "QueuedOperation",
]
