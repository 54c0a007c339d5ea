"""Compute effect: a synchronous value memoized by position and keys."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from ._validators import ensure_zero_arg_callable, normalize_keys
from .base import EffectBase, create_effect_with_trace


@dataclass(frozen=True)
class ComputeEffect(EffectBase):
    """Requests ``fn()``, reusing the cached value while ``keys`` are unchanged."""

    tag: ClassVar[str] = "compute"

    fn: Callable[[], Any]
    keys: tuple[Any, ...]


def _build(fn: Callable[[], Any], keys: Sequence[Any]) -> ComputeEffect:
    ensure_zero_arg_callable(fn, name="fn")
    return ComputeEffect(fn=fn, keys=normalize_keys(keys, name="keys"))


def compute(fn: Callable[[], Any], keys: Sequence[Any]) -> ComputeEffect:
    return create_effect_with_trace(_build(fn, keys))


def Compute(fn: Callable[[], Any], keys: Sequence[Any]) -> ComputeEffect:  # noqa: N802
    return create_effect_with_trace(_build(fn, keys), skip_frames=3)


__all__ = [
    "Compute",
    "ComputeEffect",
    "compute",
]
