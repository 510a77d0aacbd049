"""
callback_handler - finalize-once aggregation of error-first callback chains.

A ``Handler`` wraps one terminal callback and produces adapters that can be
handed to asynchronous operations as their completion callback. The first
adapter (or explicit ``success``/``error``/``finalize`` call) to settle the
handler decides the outcome; every later call is a silent no-op.

Example:
    >>> from callback_handler import Handler
    >>>
    >>> def done(err, *values):
    ...     print(err, values)
    >>>
    >>> handler = Handler(done)
    >>> step = handler.next(lambda a, b: handler.success(a + b))
    >>> step(None, 1, 2)
    None (3,)
"""

# Vendored result types
from callback_handler._vendor import (
    NO_ERROR,
    Err,
    Ok,
    Result,
    from_callback_args,
)

from callback_handler.errors import ErrorValue, HandlerPendingError

from callback_handler.handler import Handler

from callback_handler.observability import (
    CodeLocation,
    HandlerSnapshot,
    HandlerStatus,
    SettlementMonitor,
    SettlementRecord,
)

from callback_handler.utils import DEBUG_HANDLERS

__version__ = "0.1.0"

__all__ = [
    # Core
    "Handler",
    # Result types
    "NO_ERROR",
    "Ok",
    "Err",
    "Result",
    "from_callback_args",
    # Errors
    "ErrorValue",
    "HandlerPendingError",
    # Observability
    "CodeLocation",
    "HandlerSnapshot",
    "HandlerStatus",
    "SettlementMonitor",
    "SettlementRecord",
    # Configuration
    "DEBUG_HANDLERS",
]
