"""
Finalize-once handler for error-first callback chains.

A :class:`Handler` wraps one terminal callback and hands out adapters
(``next``, ``next_if``, ``flatten``, ``consume``, ``last``) that can be passed
as the completion callback of any asynchronous operation following the
error-first convention ``callback(err, *values)``. Whichever adapter or
settlement call runs first fixes the outcome; everything after that is a
silent no-op.

Example::

    def done(err, user=None, posts=None):
        ...

    handler = Handler(done)
    fetch_user(user_id, handler.next(
        lambda user: fetch_posts(user, handler.next_if(
            lambda posts: posts,
            lambda posts: handler.success(user, posts),
        ))
    ))
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from callback_handler import utils
from callback_handler._vendor import NO_ERROR, Err, Ok, Result, from_callback_args
from callback_handler.errors import HandlerPendingError
from callback_handler.observability import (
    CodeLocation,
    HandlerSnapshot,
    SettlementMonitor,
    SettlementRecord,
)

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]
Hook = Callable[[], Any]


class Handler:
    """
    Aggregates a chain of error-first callbacks into one terminal callback.

    The terminal callback is invoked at most once. Finalize hooks registered
    while the handler is pending run in registration order right before it;
    hooks registered afterwards are dropped.
    """

    def __init__(
        self,
        callback: Callback,
        *,
        name: str | None = None,
        monitor: SettlementMonitor | None = None,
        capture_context: bool | None = None,
    ) -> None:
        self.callback = callback
        self.name = name
        self.monitor = monitor
        self.outcome: Result | None = None
        self.created_at: CodeLocation | None = None
        if capture_context is None:
            capture_context = utils.DEBUG_HANDLERS
        if capture_context:
            self.created_at = utils.capture_creation_context(skip_frames=2)

        self._is_finalized = False
        self._on_finalize_callbacks: list[Hook] = []
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        state = "finalized" if self._is_finalized else "pending"
        label = f" {self.name!r}" if self.name else ""
        return f"<Handler{label} {state}>"

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def is_finalized(self) -> bool:
        return self._is_finalized

    def result(self) -> Result:
        """Return the settled outcome or raise ``HandlerPendingError``."""
        if self.outcome is None:
            raise HandlerPendingError(self.name)
        return self.outcome

    def snapshot(self) -> HandlerSnapshot:
        with self._lock:
            pending_hooks = len(self._on_finalize_callbacks)
        return HandlerSnapshot.build(
            name=self.name,
            finalized=self._is_finalized,
            pending_hooks=pending_hooks,
            outcome=self.outcome,
            created_at=self.created_at,
        )

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def settle(self, result: Result) -> None:
        """Settle the handler with an explicit ``Ok`` or ``Err``.

        Runs the pending finalize hooks, then invokes the terminal callback
        with ``(error,)`` for ``Err`` or ``(NO_ERROR, *values)`` for ``Ok``.
        Does nothing if the handler already settled.
        """
        if not isinstance(result, Result):
            raise TypeError(f"settle expects an Ok or Err result, got {type(result).__name__}")

        with self._lock:
            if self._is_finalized:
                return
            self._is_finalized = True
            self.outcome = result
            hooks, self._on_finalize_callbacks = self._on_finalize_callbacks, []

        for hook in hooks:
            hook()

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Handler %s settled as %s after %d hook(s)%s",
                self.name or "<unnamed>",
                "error" if result.is_err() else "success",
                len(hooks),
                f" (created at {self.created_at.format()})" if self.created_at else "",
            )
        if self.monitor is not None:
            self.monitor._record(
                SettlementRecord(
                    name=self.name,
                    outcome=result,
                    hooks_run=len(hooks),
                    created_at=self.created_at,
                )
            )

        self.callback(*result.to_callback_args())

    def finalize(self, *args: Any) -> None:
        """Settle from an error-first argument list.

        A truthy first argument settles with that error alone; otherwise the
        terminal callback receives ``NO_ERROR`` followed by the remaining
        arguments.
        """
        if self._is_finalized:
            return
        self.settle(from_callback_args(*args))

    def success(self, *values: Any) -> None:
        self.finalize(NO_ERROR, *values)

    def error(self, err: Any, *rest: Any) -> None:
        self.finalize(err, *rest)

    def on_finalize(self, hook: Hook) -> Handler:
        """Register ``hook`` to run once at settlement; returns ``self``.

        Hooks registered after settlement are dropped.
        """
        with self._lock:
            if not self._is_finalized:
                self._on_finalize_callbacks.append(hook)
        return self

    def handle(self, func: Callable[[Handler], Any]) -> None:
        """Run ``func(self)`` only while the handler is still pending."""
        if not self._is_finalized:
            func(self)

    # ------------------------------------------------------------------
    # Adapters
    # ------------------------------------------------------------------

    def next(self, continuation: Callback) -> Callback:
        """Adapter that proceeds with ``continuation(*values)`` on success.

        An error settles the handler and ``continuation`` is never called.
        """

        def adapter(err: Any = NO_ERROR, *values: Any) -> None:
            if self._is_finalized:
                return
            if err:
                self.settle(Err(err))
            else:
                continuation(*values)

        return adapter

    def next_if(self, predicate: Callable[..., Any], continuation: Callback) -> Callback:
        """Like :meth:`next`, gated by ``predicate(*values)``.

        When the predicate rejects the values the chain is complete: the
        handler settles successfully with those values instead of proceeding.
        """

        def adapter(err: Any = NO_ERROR, *values: Any) -> None:
            if self._is_finalized:
                return
            if err:
                self.settle(Err(err))
            elif predicate(*values):
                continuation(*values)
            else:
                self.settle(Ok(values))

        return adapter

    def last(self) -> Callback:
        """Adapter that settles the handler with whatever it receives."""

        def adapter(*args: Any) -> None:
            self.finalize(*args)

        return adapter

    def flatten(self, continuation: Callback) -> Callback:
        """Like :meth:`next`, spreading the first result value into ``continuation``.

        Only lists and tuples are spread; any other first value (or none at
        all) calls ``continuation()`` without arguments.
        """

        def adapter(err: Any = NO_ERROR, *values: Any) -> None:
            if self._is_finalized:
                return
            if err:
                self.settle(Err(err))
            elif values and isinstance(values[0], (list, tuple)):
                continuation(*values[0])
            else:
                continuation()

        return adapter

    def consume(self, continuation: Callback) -> Callback:
        """Adapter for operations that return a releasable resource.

        Expects ``(err, releaser, *values)``. On success ``releaser`` is
        registered as a finalize hook, so it runs exactly once when the chain
        settles, and ``continuation(*values)`` is called. On error the
        releaser is ignored and the error settles the handler.
        """
        proceed = self.next(continuation)

        def adapter(err: Any = NO_ERROR, releaser: Hook | None = None, *values: Any) -> None:
            if self._is_finalized:
                return
            if not err and releaser is not None:
                self.on_finalize(releaser)
            proceed(err, *values)

        return adapter


__all__ = ["Handler"]
