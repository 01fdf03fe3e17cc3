"""Tests for the retry helper."""

import errno

import pytest

from chaycards.infrastructure.retry import (
    PermanentError,
    TransientError,
    is_transient_os_error,
    retry_operation,
)


async def test_retries_until_success():
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise TransientError("busy")
        return "ok"

    retries = []
    result = await retry_operation(
        flaky, initial_wait=0.001, max_wait=0.01, on_retry=lambda n, e: retries.append(n)
    )

    assert result == "ok"
    assert len(calls) == 3
    assert retries == [2, 3]


async def test_gives_up_after_max_attempts():
    calls = []

    async def always_busy():
        calls.append(1)
        raise TransientError("busy")

    with pytest.raises(TransientError):
        await retry_operation(always_busy, max_attempts=2, initial_wait=0.001)

    assert len(calls) == 2


async def test_permanent_errors_are_not_retried():
    calls = []

    async def broken():
        calls.append(1)
        raise PermanentError("corrupt")

    with pytest.raises(PermanentError):
        await retry_operation(broken, initial_wait=0.001)

    assert len(calls) == 1


async def test_passes_arguments():
    async def add(a, b=0):
        return a + b

    assert await retry_operation(add, 1, b=2) == 3


def test_transient_os_errors():
    assert is_transient_os_error(OSError(errno.EAGAIN, "again"))
    assert is_transient_os_error(OSError(errno.EBUSY, "busy"))
    assert not is_transient_os_error(OSError(errno.ENOENT, "missing"))
    assert not is_transient_os_error(ValueError("nope"))
