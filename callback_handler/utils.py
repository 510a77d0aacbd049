"""
Utility functions for the callback_handler package.
"""

import linecache
import os
import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from callback_handler.observability import CodeLocation


_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _is_package_internal(path: str) -> bool:
    return os.path.abspath(path).startswith(_PACKAGE_DIR + os.sep)

# Environment variable to control debug mode
DEBUG_HANDLERS = os.environ.get("CALLBACK_HANDLER_DEBUG", "").lower() in ("1", "true", "yes")


def capture_creation_context(skip_frames: int = 2) -> Optional["CodeLocation"]:
    """
    Capture the location of the code that created a handler.

    Frames belonging to this package are skipped so the location points at
    the caller's code rather than ``Handler.__init__``.

    Args:
        skip_frames: Number of frames to skip before searching (default 2 to
            skip this function and its caller)

    Returns:
        CodeLocation of the first frame outside the package, or None when
        frame inspection is unavailable
    """
    from callback_handler.observability import CodeLocation

    try:
        frame = sys._getframe(skip_frames)
    except ValueError:
        return None

    while frame is not None and _is_package_internal(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return None

    filename = frame.f_code.co_filename
    line = frame.f_lineno
    code = linecache.getline(filename, line).strip() or None
    return CodeLocation(
        filename=filename,
        line=line,
        function=frame.f_code.co_name,
        code=code,
    )


__all__ = [
    "DEBUG_HANDLERS",
    "capture_creation_context",
]
