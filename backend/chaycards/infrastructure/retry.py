"""Retry utilities using tenacity for storage I/O."""

import errno
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_WAIT = 0.05  # seconds
DEFAULT_MAX_WAIT = 1.0  # seconds
DEFAULT_JITTER = 0.05  # seconds

# OS errors worth another attempt (file briefly locked, interrupted call)
TRANSIENT_ERRNOS = frozenset({errno.EAGAIN, errno.EBUSY, errno.EINTR})


class RetryableError(Exception):
    """Base class for errors that should trigger retries."""

    pass


class TransientError(RetryableError):
    """Temporarily locked or busy files, interrupted system calls."""

    pass


class PermanentError(Exception):
    """Errors that should NOT be retried (corrupt data, missing permissions)."""

    pass


def is_transient_os_error(error: BaseException) -> bool:
    """Check if an OSError is likely to succeed on retry."""
    return isinstance(error, OSError) and error.errno in TRANSIENT_ERRNOS


async def retry_operation(
    operation: Callable[..., Awaitable[T]],
    *args,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_wait: float = DEFAULT_INITIAL_WAIT,
    max_wait: float = DEFAULT_MAX_WAIT,
    retryable_exceptions: tuple[type[BaseException], ...] = (RetryableError,),
    on_retry: Callable[[int, Exception], None] | None = None,
    **kwargs,
) -> T:
    """Execute an async operation with exponential backoff retry.

    Wait formula: min(initial * 2^n + random(0, jitter), max)

    Args:
        operation: Async function to execute
        *args: Positional arguments for operation
        max_attempts: Maximum number of attempts
        initial_wait: Initial wait time in seconds
        max_wait: Maximum wait time in seconds
        retryable_exceptions: Exception types to retry on
        on_retry: Optional callback called on each retry with (attempt, exception)
        **kwargs: Keyword arguments for operation

    Returns:
        Result of the operation

    Raises:
        Exception: The last exception once attempts are exhausted, or the
            first non-retryable one
    """
    last_exception: Exception | None = None

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential_jitter(
            initial=initial_wait,
            max=max_wait,
            jitter=DEFAULT_JITTER,
        ),
        retry=retry_if_exception_type(retryable_exceptions),
        reraise=True,
    ):
        with attempt:
            attempt_num = attempt.retry_state.attempt_number
            if attempt_num > 1:
                logger.warning(
                    f"Retry attempt {attempt_num}/{max_attempts} for "
                    f"{getattr(operation, '__name__', 'operation')}"
                )
                if on_retry and last_exception:
                    on_retry(attempt_num, last_exception)
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                last_exception = e
                raise

    raise RuntimeError("No attempts made")
