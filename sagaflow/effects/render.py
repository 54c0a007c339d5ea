"""Render effect: show an intermediate artifact and keep going."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .base import EffectBase, create_effect_with_trace


@dataclass(frozen=True)
class RenderEffect(EffectBase):
    """Produces a user-visible artifact; the procedure resumes immediately."""

    tag: ClassVar[str] = "render"

    artifact: Any


def render(artifact: Any) -> RenderEffect:
    return create_effect_with_trace(RenderEffect(artifact=artifact))


def Render(artifact: Any) -> RenderEffect:  # noqa: N802
    return create_effect_with_trace(RenderEffect(artifact=artifact), skip_frames=3)


__all__ = [
    "Render",
    "RenderEffect",
    "render",
]
