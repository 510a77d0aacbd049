"""
Pytest configuration for callback_handler tests.

Provides helpers that stand in for real asynchronous operations: they take an
error-first callback as their last argument and invoke it on a later event
loop iteration, the way I/O completions and timers do.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import pytest


class CallRecorder:
    """Terminal callback that records every invocation."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def args(self) -> tuple[Any, ...]:
        """Arguments of the single recorded call."""
        assert len(self.calls) == 1, f"expected exactly one call, got {self.calls!r}"
        return self.calls[0]


AsyncAction = Callable[..., None]


def _successful_async_action(*args: Any) -> None:
    *values, callback = args
    asyncio.get_running_loop().call_soon(callback, None, *values)


def _failing_async_action(*args: Any) -> None:
    *values, callback = args
    asyncio.get_running_loop().call_soon(callback, RuntimeError("Fail"), *values)


async def _drain(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


@pytest.fixture
def successful_async_action() -> AsyncAction:
    """``action(*values, callback)`` -> ``callback(None, *values)`` on the next loop turn."""
    return _successful_async_action


@pytest.fixture
def failing_async_action() -> AsyncAction:
    """``action(*values, callback)`` -> ``callback(RuntimeError("Fail"), *values)`` on the next loop turn."""
    return _failing_async_action


@pytest.fixture
def drain() -> Callable[..., Awaitable[None]]:
    """Let pending ``call_soon`` callbacks (and the ones they schedule) run."""
    return _drain


@pytest.fixture(autouse=True)
def _creation_context_off(monkeypatch):
    """Run tests with creation-context capture off regardless of CALLBACK_HANDLER_DEBUG."""
    from callback_handler import utils

    monkeypatch.setattr(utils, "DEBUG_HANDLERS", False)
