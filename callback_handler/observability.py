"""
Settlement observability for callback handlers.

This module provides read-only views of handler state and a collector that
records every settlement of the handlers attached to it.

Public API:
    - HandlerStatus: Literal type for handler states
    - CodeLocation: Location where a handler was created
    - HandlerSnapshot: Point-in-time snapshot of a handler
    - SettlementRecord: Record of a single settlement
    - SettlementMonitor: Thread-safe collector of settlement records

Example usage:
    monitor = SettlementMonitor()
    monitor.on_settle(lambda record: print(record.name, record.outcome))

    handler = Handler(done, name="fetch-user", monitor=monitor)
    fetch_user(user_id, handler.next(render))
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from frozendict import frozendict
from loguru import logger as loguru_logger

if TYPE_CHECKING:
    from callback_handler._vendor import Result

loguru_logger = loguru_logger.bind(component="callback_handler")

# Handler status literals
HandlerStatus = Literal["pending", "finalized"]


@dataclass(frozen=True)
class CodeLocation:
    """
    Location information for a code point.

    Attributes:
        filename: Source file path.
        line: Line number in the source file.
        function: Function name where the code is located.
        code: Optional source code snippet.
    """

    filename: str
    line: int
    function: str
    code: str | None = None

    def format(self) -> str:
        """Format as 'filename:line in function'."""
        return f"{self.filename}:{self.line} in {self.function}"


@dataclass(frozen=True)
class HandlerSnapshot:
    """
    Point-in-time snapshot of a handler.

    Attributes:
        name: Optional label given at construction.
        status: "pending" or "finalized".
        pending_hooks: Number of finalize hooks waiting to run.
        outcome: Settled result, or None while pending.
        created_at: Where the handler was constructed, when captured.
        context: Extra metadata derived from the creation location.
    """

    name: str | None
    status: HandlerStatus
    pending_hooks: int
    outcome: Result | None
    created_at: CodeLocation | None = None
    context: frozendict[str, Any] = field(default_factory=frozendict)

    @classmethod
    def build(
        cls,
        *,
        name: str | None,
        finalized: bool,
        pending_hooks: int,
        outcome: Result | None,
        created_at: CodeLocation | None,
    ) -> HandlerSnapshot:
        context: frozendict[str, Any] = frozendict()
        if created_at is not None:
            context = frozendict(
                filename=created_at.filename,
                line=created_at.line,
                function=created_at.function,
            )
        return cls(
            name=name,
            status="finalized" if finalized else "pending",
            pending_hooks=pending_hooks,
            outcome=outcome,
            created_at=created_at,
            context=context,
        )


@dataclass(frozen=True)
class SettlementRecord:
    """
    Record of one handler settlement.

    Attributes:
        name: Label of the settled handler.
        outcome: The result the handler settled with.
        hooks_run: Number of finalize hooks drained at settlement.
        created_at: Where the handler was constructed, when captured.
    """

    name: str | None
    outcome: Result
    hooks_run: int
    created_at: CodeLocation | None = None


# Type alias for on_settle listeners
OnSettleCallback = Callable[[SettlementRecord], None]


@dataclass
class SettlementMonitor:
    """
    Collector of settlement records.

    Handlers constructed with ``monitor=`` report here after their finalize
    hooks have run and before their terminal callback is invoked. Thread-safe
    for external observation.
    """

    _records: list[SettlementRecord] = field(default_factory=list)
    _listeners: list[OnSettleCallback] = field(default_factory=list)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    @property
    def records(self) -> tuple[SettlementRecord, ...]:
        """Settlements observed so far, oldest first."""
        with self._lock:
            return tuple(self._records)

    @property
    def settled_count(self) -> int:
        with self._lock:
            return len(self._records)

    def errors(self) -> tuple[SettlementRecord, ...]:
        """Settlements whose outcome is an error."""
        with self._lock:
            return tuple(r for r in self._records if r.outcome.is_err())

    def on_settle(self, listener: OnSettleCallback) -> SettlementMonitor:
        """Register a listener called with each new record."""
        with self._lock:
            self._listeners.append(listener)
        return self

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def _record(self, record: SettlementRecord) -> None:
        """Internal method to store a record (called by Handler)."""
        with self._lock:
            self._records.append(record)
            listeners = list(self._listeners)

        if record.outcome.is_err():
            loguru_logger.debug(
                "Handler {} settled with error {!r} ({} hooks run)",
                record.name or "<unnamed>",
                record.outcome.err(),
                record.hooks_run,
            )
        else:
            loguru_logger.debug(
                "Handler {} settled with {} value(s) ({} hooks run)",
                record.name or "<unnamed>",
                len(record.outcome.ok() or ()),
                record.hooks_run,
            )

        for listener in listeners:
            listener(record)


__all__ = [
    # Types
    "HandlerStatus",
    "CodeLocation",
    "HandlerSnapshot",
    "SettlementRecord",
    "SettlementMonitor",
    "OnSettleCallback",
]
