"""Domain services - orchestration and business logic."""

from .conflict_detector import (
    detect_circular_conflict,
    detect_move_conflict,
    detect_name_conflict,
    detect_replace_conflict,
    find_replace_targets,
    generate_unique_name,
    get_folders_to_delete,
)
from .folder_operations import FolderOperations
from .folder_state_manager import FolderState, FolderStateManager, StateListener
from .operation_queue import OperationListener, OperationQueue
from .review_service import ReviewResult, ReviewService
from .scheduler import adjust_ease_factor, record_review, schedule, select_due_cards

__all__ = [
    "detect_circular_conflict",
    "detect_move_conflict",
    "detect_name_conflict",
    "detect_replace_conflict",
    "find_replace_targets",
    "generate_unique_name",
    "get_folders_to_delete",
    "FolderOperations",
    "FolderState",
    "FolderStateManager",
    "StateListener",
    "OperationListener",
    "OperationQueue",
    "ReviewResult",
    "ReviewService",
    "adjust_ease_factor",
    "record_review",
    "schedule",
    "select_due_cards",
]
