"""Single-concurrency operation queue for folder mutations."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from chaycards.domain.constants import DEFAULT_OPERATION_TIMEOUT_SECONDS
from chaycards.domain.entities.queued_operation import (
    OperationThunk,
    QueuedOperation,
    RecoveryHook,
)
from chaycards.domain.value_objects.operation_result import ErrorKind, Failure, OperationResult
from chaycards.domain.value_objects.operation_status import OperationKind, OperationStatus
from chaycards.ports.folder_store import StorageError

logger = logging.getLogger(__name__)

OperationListener = Callable[[QueuedOperation], None]


class OperationQueue:
    """Serializes folder mutations so they never interleave.

    Operations run strictly one at a time in FIFO order. Each item moves
    PENDING -> PROCESSING -> COMPLETED | FAILED | CONFLICT:

    - COMPLETED / FAILED: the item is removed and draining continues.
      Raised exceptions (storage faults, timeouts) count as FAILED.
    - CONFLICT: a NAME_CONFLICT result. The item stays at the head and
      blocks everything behind it until resume_queue() or clear_queue().

    A timed-out item is FAILED; its on_timeout hook (if any) is awaited
    before the next item starts.

    Listeners are notified synchronously on every status transition.
    """

    def __init__(self, operation_timeout: float | None = DEFAULT_OPERATION_TIMEOUT_SECONDS):
        """Initialize the queue.

        Args:
            operation_timeout: Seconds before a running execute() is failed;
                None or 0 disables the timeout
        """
        self._queue: deque[QueuedOperation] = deque()
        self._drain_task: asyncio.Task | None = None
        self._listeners: set[OperationListener] = set()
        self._timeout = operation_timeout or None

    # --- Introspection ---

    @property
    def current_operation(self) -> QueuedOperation | None:
        """Head of the queue (processing, in conflict, or about to run)."""
        return self._queue[0] if self._queue else None

    @property
    def pending_count(self) -> int:
        """Number of items still in the queue, head included."""
        return len(self._queue)

    @property
    def is_paused(self) -> bool:
        """Whether a conflict at the head is blocking the queue."""
        head = self.current_operation
        return head is not None and head.status.blocks_queue()

    @property
    def is_draining(self) -> bool:
        return self._drain_task is not None and not self._drain_task.done()

    # --- Listeners ---

    def add_listener(self, listener: OperationListener) -> Callable[[], None]:
        """Register a status-transition listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def _notify(self, operation: QueuedOperation) -> None:
        for listener in list(self._listeners):
            try:
                listener(operation)
            except Exception:
                logger.exception(f"Queue listener failed for operation {operation.id}")

    # --- Enqueueing ---

    def enqueue(
        self,
        kind: OperationKind,
        execute: OperationThunk,
        on_timeout: RecoveryHook | None = None,
    ) -> QueuedOperation:
        """Append an operation and start draining if idle.

        Must be called from within a running event loop. ``on_timeout`` is
        awaited if execute() times out, before the next item starts.

        Returns:
            The queued item; await ``wait_for_result(item)`` for its outcome
        """
        loop = asyncio.get_running_loop()
        operation = QueuedOperation(kind=kind, execute=execute, on_timeout=on_timeout)
        operation.attach_future(loop.create_future())
        self._queue.append(operation)
        logger.debug(f"Queued {kind} operation {operation.id} ({len(self._queue)} in queue)")
        self._notify(operation)

        if not self.is_draining and not self.is_paused:
            self._start_draining()
        return operation

    async def queue_operation(
        self,
        kind: OperationKind,
        execute: OperationThunk,
        on_timeout: RecoveryHook | None = None,
    ) -> OperationResult[Any]:
        """Queue an operation and wait until it leaves the queue.

        Resolves when the item completes, fails, enters conflict, or is
        cancelled by clear_queue().

        Returns:
            The operation's result (Failure with CANCELLED if cleared)
        """
        operation = self.enqueue(kind, execute, on_timeout)
        return await self.wait_for_result(operation)

    @staticmethod
    async def wait_for_result(operation: QueuedOperation) -> OperationResult[Any]:
        if operation.future is None:
            raise ValueError(f"Operation {operation.id} was never queued")
        return await operation.future

    # --- Control ---

    def resume_queue(self) -> bool:
        """Discard the conflicted head and continue draining.

        Only valid while paused; the conflict is assumed to have been
        resolved out-of-band (usually by queueing a replacement operation).

        Returns:
            True if the queue was resumed, False if it was not paused
        """
        if not self.is_paused:
            logger.debug("resume_queue called while not paused - ignoring")
            return False

        discarded = self._queue.popleft()
        logger.info(f"Resuming queue after conflict in {discarded.kind} operation {discarded.id}")
        if self._queue:
            self._start_draining()
        return True

    def clear_queue(self) -> int:
        """Abandon every queued operation, including the one in flight.

        Completed operations are not rolled back. Callers still waiting
        receive a CANCELLED failure.

        Returns:
            Number of operations abandoned
        """
        if self._drain_task is not None and not self._drain_task.done():
            self._drain_task.cancel()
        self._drain_task = None

        abandoned = list(self._queue)
        self._queue.clear()
        for operation in abandoned:
            if not operation.is_resolved:
                operation.error = "Operation cancelled: queue cleared"
                operation.resolve(Failure(ErrorKind.CANCELLED, operation.error))

        if abandoned:
            logger.warning(f"Cleared operation queue, abandoned {len(abandoned)} operations")
        return len(abandoned)

    # --- Draining ---

    def _start_draining(self) -> None:
        self._drain_task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        """Run head operations until the queue is empty or paused."""
        while self._queue:
            operation = self._queue[0]
            operation.transition_to(OperationStatus.PROCESSING)
            self._notify(operation)

            result = await self._run(operation)

            if isinstance(result, Failure) and result.is_conflict:
                operation.error = result.message
                operation.transition_to(OperationStatus.CONFLICT)
            if operation.status.blocks_queue():
                logger.info(f"Queue paused: {operation.kind} operation {operation.id} in conflict")
                self._notify(operation)
                operation.resolve(result)
                return

            self._queue.popleft()
            if isinstance(result, Failure):
                operation.error = result.message
                operation.transition_to(OperationStatus.FAILED)
            else:
                operation.transition_to(OperationStatus.COMPLETED)
            self._notify(operation)
            operation.resolve(result)

    async def _recover(self, operation: QueuedOperation) -> None:
        """Run the timed-out operation's recovery hook, logging its failures."""
        if operation.on_timeout is None:
            return
        try:
            await operation.on_timeout()
        except Exception:
            logger.exception(f"Recovery after timeout of operation {operation.id} failed")

    async def _run(self, operation: QueuedOperation) -> OperationResult[Any]:
        """Execute one operation, converting raised faults into failures."""
        try:
            if self._timeout is None:
                return await operation.execute()
            return await asyncio.wait_for(operation.execute(), self._timeout)
        except TimeoutError:
            logger.warning(
                f"{operation.kind} operation {operation.id} timed out after {self._timeout}s"
            )
            await self._recover(operation)
            return Failure(
                ErrorKind.STORAGE_ERROR,
                f"Operation timed out after {self._timeout}s",
            )
        except StorageError as e:
            logger.warning(f"{operation.kind} operation {operation.id} failed: {e}")
            return Failure(e.kind, str(e))
        except Exception as e:
            logger.warning(f"{operation.kind} operation {operation.id} raised: {e!r}")
            return Failure(ErrorKind.STORAGE_ERROR, f"Operation failed: {e}")
