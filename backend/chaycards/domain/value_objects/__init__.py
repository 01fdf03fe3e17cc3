"""Domain value objects - immutable objects without identity."""

from .folder_conflict import CircularConflict, FolderConflict, NameConflict
from .folder_requests import (
    CreateFolderRequest,
    MoveFolderRequest,
    RenameAndMoveFolderRequest,
    RenameFolderRequest,
    ReplaceFolderRequest,
)
from .operation_result import ErrorKind, Failure, OperationResult, ReplaceOutcome, Success
from .operation_status import OperationKind, OperationStatus
from .review_quality import ReviewPerformance, ReviewQuality
from .spaced_repetition import ReviewHistoryEntry, SpacedRepetitionState

__all__ = [
    "CircularConflict",
    "CreateFolderRequest",
    "ErrorKind",
    "Failure",
    "FolderConflict",
    "MoveFolderRequest",
    "NameConflict",
    "OperationKind",
    "OperationResult",
    "OperationStatus",
    "RenameAndMoveFolderRequest",
    "RenameFolderRequest",
    "ReplaceFolderRequest",
    "ReplaceOutcome",
    "ReviewHistoryEntry",
    "ReviewPerformance",
    "ReviewQuality",
    "SpacedRepetitionState",
    "Success",
]
