# Domain layer - Business logic (NO adapter dependencies)
# Entities are imported first: value objects reference Folder.

from .entities import CardStatus, Flashcard, Folder, QueuedOperation
from .value_objects import (
    ErrorKind,
    Failure,
    OperationKind,
    OperationResult,
    OperationStatus,
    ReviewPerformance,
    ReviewQuality,
    SpacedRepetitionState,
    Success,
)

__all__ = [
    "CardStatus",
    "ErrorKind",
    "Failure",
    "Flashcard",
    "Folder",
    "OperationKind",
    "OperationResult",
    "OperationStatus",
    "QueuedOperation",
    "ReviewPerformance",
    "ReviewQuality",
    "SpacedRepetitionState",
    "Success",
]
