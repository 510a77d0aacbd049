"""
Minimal result types for error-first callback outcomes.

An error-first argument list ``(err, *values)`` is normalised into either
``Ok(values)`` or ``Err(error)`` so the handler can settle on an explicit
sum type instead of slicing positional arguments.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, TypeVar, cast

from callback_handler.errors import ErrorValue

# =========================================================
# Type Vars
# =========================================================
U = TypeVar("U")

# Explicit "no error" marker delivered in the first slot of a successful outcome.
NO_ERROR: Final[None] = None


class Result:
    """Sum type representing either result values or an error value."""

    __slots__ = ()

    def is_ok(self) -> bool:
        """Return ``True`` when the result is successful."""

        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` when the result represents a failure."""

        return isinstance(self, Err)

    def ok(self) -> tuple[Any, ...] | None:
        """Return the contained values, or ``None`` if this is an error."""

        if isinstance(self, Ok):
            return self.values
        return None

    def err(self) -> Any:
        """Return the contained error, or ``None`` if this is a success."""

        if isinstance(self, Err):
            return self.error
        return None

    def unwrap(self) -> tuple[Any, ...]:
        """Return the values or raise the stored error.

        Error values that are not exceptions are raised wrapped in
        :class:`ErrorValue`.
        """

        if isinstance(self, Ok):
            return self.values
        error = cast(Err, self).error
        if isinstance(error, BaseException):
            raise error
        raise ErrorValue(error)

    def unwrap_or(self, default: U) -> tuple[Any, ...] | U:
        """Return the contained values, or ``default`` if this is an error."""

        if isinstance(self, Ok):
            return self.values
        return default

    def map(self, f: Callable[..., Any]) -> Result:
        """Apply ``f`` to the spread values if this is a success.

        ``f`` may return a tuple, which becomes the new values; any other
        return value becomes a single value.
        """

        if isinstance(self, Ok):
            mapped = f(*self.values)
            if isinstance(mapped, tuple):
                return Ok(mapped)
            return Ok((mapped,))
        return self

    def to_callback_args(self) -> tuple[Any, ...]:
        """Render the result back into an error-first argument tuple.

        ``Ok(values)`` becomes ``(NO_ERROR, *values)``; ``Err(error)``
        becomes ``(error,)``.
        """

        if isinstance(self, Ok):
            return (NO_ERROR, *self.values)
        return (cast(Err, self).error,)

    def __bool__(self) -> bool:
        """Truthiness matches :meth:`is_ok`."""

        return self.is_ok()


# =========================================================
# Result / Error
# =========================================================
@dataclass(frozen=True)
class Ok(Result):
    """Success result."""
    values: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Err(Result):
    """Error result."""
    error: Any

    def __post_init__(self) -> None:
        if not self.error:
            raise ValueError(f"Err requires a truthy error value, got {self.error!r}")


def from_callback_args(*args: Any) -> Ok | Err:
    """Normalise an error-first argument list into a ``Result``.

    A truthy first argument is an error and the remaining values are dropped.
    Anything else (including an empty argument list) is a success carrying
    every value after the first slot.
    """

    if args and args[0]:
        return Err(args[0])
    return Ok(tuple(args[1:]))


__all__ = [
    "NO_ERROR",
    "Err",
    "Ok",
    "Result",
    "from_callback_args",
]
