from __future__ import annotations

from typing import Any


class HandlerPendingError(RuntimeError):
    """Raised when the outcome of a handler is read before it has settled."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        label = f" {name!r}" if name else ""
        super().__init__(
            f"Handler{label} has not been finalized yet\n"
            f"Hint: Check `handler.is_finalized()` first, or read `handler.outcome` which is None while pending"
        )


class ErrorValue(Exception):
    """Raised by ``Result.unwrap`` when the stored error is not an exception."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Callback reported a non-exception error: {value!r}")


__all__ = ["ErrorValue", "HandlerPendingError"]
