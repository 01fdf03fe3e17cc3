"""Queued operation entity for the folder operation queue."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import ulid

from chaycards.domain.value_objects.operation_result import OperationResult
from chaycards.domain.value_objects.operation_status import OperationKind, OperationStatus

OperationThunk = Callable[[], Awaitable[OperationResult[Any]]]
RecoveryHook = Callable[[], Awaitable[None]]


@dataclass(eq=False)
class QueuedOperation:
    """Transient work item in the operation queue.

    Attributes:
        kind: Which folder mutation this is
        execute: Deferred unit of work producing an OperationResult
        id: Unique per enqueue (ULID)
        status: Current lifecycle status
        error: Failure message once failed or in conflict
        result: Final result once the item has left the queue
        enqueued_at: When the item was added
        on_timeout: Awaited after execute() times out, before the next
            item runs; reconciles any state the abandoned work left behind
    """

    kind: OperationKind
    execute: OperationThunk
    id: str = field(default_factory=lambda: str(ulid.ULID()))
    status: OperationStatus = OperationStatus.PENDING
    error: str | None = None
    result: OperationResult[Any] | None = None
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    on_timeout: RecoveryHook | None = field(default=None, repr=False)
    _future: asyncio.Future | None = field(default=None, repr=False)

    def transition_to(self, new_status: OperationStatus) -> None:
        """Transition to a new status.

        Raises:
            ValueError: If transition is invalid
        """
        if not self.status.can_transition_to(new_status):
            raise ValueError(f"Invalid transition from {self.status} to {new_status}")
        self.status = new_status

    def attach_future(self, future: asyncio.Future) -> None:
        self._future = future

    @property
    def future(self) -> asyncio.Future | None:
        """Future resolved with the final result once the item leaves the queue."""
        return self._future

    def resolve(self, result: OperationResult[Any]) -> None:
        """Release the caller awaiting this operation."""
        self.result = result
        if self._future is not None and not self._future.done():
            self._future.set_result(result)

    @property
    def is_resolved(self) -> bool:
        return self._future is not None and self._future.done()
