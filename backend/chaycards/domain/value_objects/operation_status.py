"""Operation status and kind value objects for the folder operation queue."""

from enum import StrEnum


class OperationKind(StrEnum):
    """Kinds of folder mutation that can be queued."""

    CREATE = "create"
    MOVE = "move"
    RENAME = "rename"
    DELETE = "delete"
    REPLACE = "replace"


class OperationStatus(StrEnum):
    """Queued operation lifecycle states.

    State machine:
        PENDING -> PROCESSING -> COMPLETED
                              -> FAILED
                              -> CONFLICT

    States:
        PENDING: Waiting in the queue
        PROCESSING: Head of the queue, execute() running
        COMPLETED: Finished successfully and removed from the queue
        FAILED: Raised or returned an unrecoverable failure, removed
        CONFLICT: Hit a resolvable name conflict; stays at the head and
            blocks the queue until resumed or cleared
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CONFLICT = "conflict"

    def blocks_queue(self) -> bool:
        """Check if this status halts draining."""
        return self is OperationStatus.CONFLICT

    def can_transition_to(self, new_status: "OperationStatus") -> bool:
        """Check if moving to ``new_status`` is a valid transition."""
        return new_status in _VALID_TRANSITIONS[self]


_VALID_TRANSITIONS: dict[OperationStatus, set[OperationStatus]] = {
    OperationStatus.PENDING: {OperationStatus.PROCESSING},
    OperationStatus.PROCESSING: {
        OperationStatus.COMPLETED,
        OperationStatus.FAILED,
        OperationStatus.CONFLICT,
    },
    OperationStatus.COMPLETED: set(),  # Terminal
    OperationStatus.FAILED: set(),  # Terminal
    OperationStatus.CONFLICT: set(),  # Terminal for the queue, resolved out-of-band
}
