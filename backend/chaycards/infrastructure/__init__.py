"""Infrastructure layer - external system integrations."""

from .retry import (
    PermanentError,
    RetryableError,
    TransientError,
    is_transient_os_error,
    retry_operation,
)
from .sqlite_flashcard_repository import SqliteFlashcardRepository

__all__ = [
    "SqliteFlashcardRepository",
    "RetryableError",
    "TransientError",
    "PermanentError",
    "is_transient_os_error",
    "retry_operation",
]
