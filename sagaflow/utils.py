"""
Creation-context capture for sagaflow effects.
"""

from __future__ import annotations

import linecache
import os
import sys
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from types import FrameType

    from sagaflow.types import EffectBase, EffectCreationContext

# SAGAFLOW_DEBUG keeps walking the caller chain instead of stopping at the first procedure frame.
DEBUG_EFFECTS = os.environ.get("SAGAFLOW_DEBUG", "").lower() in ("1", "true", "yes")

_LIBRARY_MARKERS = ("/site-packages/", "/lib/python", "/sagaflow/")


def _is_user_frame(path: str) -> bool:
    if path.startswith("<"):
        return True
    normalized = path.replace("\\", "/").lower()
    return not any(marker in normalized for marker in _LIBRARY_MARKERS)


def _source_line(filename: str, line: int) -> str | None:
    return linecache.getline(filename, line).strip() or None


def _describe(frame: FrameType) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "filename": frame.f_code.co_filename,
        "line": frame.f_lineno,
        "function": frame.f_code.co_name,
    }
    code = _source_line(frame.f_code.co_filename, frame.f_lineno)
    if code:
        summary["code"] = code
    return summary


def capture_creation_context(skip_frames: int = 2) -> EffectCreationContext | None:
    """Describe the frame ``skip_frames`` levels up, plus a short chain of its callers.

    Returns None when the interpreter does not expose frames.
    """
    from sagaflow.types import EffectCreationContext

    try:
        origin = sys._getframe(skip_frames)
    except (AttributeError, ValueError):
        return None

    callers: list[dict[str, Any]] = []
    limit = 12 if DEBUG_EFFECTS else 4
    caller = origin.f_back
    while caller is not None and len(callers) < limit:
        callers.append(_describe(caller))
        if not DEBUG_EFFECTS and _is_user_frame(caller.f_code.co_filename):
            break
        caller = caller.f_back

    return EffectCreationContext(
        filename=origin.f_code.co_filename,
        line=origin.f_lineno,
        function=origin.f_code.co_name,
        code=_source_line(origin.f_code.co_filename, origin.f_lineno),
        stack_trace=callers,
    )


E = TypeVar("E", bound="EffectBase")


def create_effect_with_trace(effect: E, skip_frames: int = 3) -> E:
    """Return ``effect`` stamped with the context of the code that built it."""
    from sagaflow.types import EffectBase

    if not isinstance(effect, EffectBase):
        raise TypeError(f"Expected EffectBase, got {type(effect)!r}")
    return effect.with_created_at(capture_creation_context(skip_frames=skip_frames))


__all__ = [
    "DEBUG_EFFECTS",
    "capture_creation_context",
    "create_effect_with_trace",
]
