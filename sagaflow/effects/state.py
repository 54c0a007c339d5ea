"""
Local state effect.

``use_state(default)`` yields a ``(value, setter)`` pair. Calling the setter
never mutates the running procedure: it forks the history at the state step
so a replacement interpreter replays up to it with the new value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .base import EffectBase, create_effect_with_trace


@dataclass(frozen=True)
class HoldStateEffect(EffectBase):
    """Requests a mutable slot whose position in history is its identity."""

    tag: ClassVar[str] = "state"

    default: Any = None


def use_state(default: Any = None) -> HoldStateEffect:
    return create_effect_with_trace(HoldStateEffect(default=default))


def HoldState(default: Any = None) -> HoldStateEffect:  # noqa: N802
    return create_effect_with_trace(HoldStateEffect(default=default), skip_frames=3)


__all__ = [
    "HoldState",
    "HoldStateEffect",
    "use_state",
]
