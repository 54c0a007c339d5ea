"""Await effect: suspend the procedure until an asynchronous producer settles."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from ._validators import ensure_zero_arg_callable, normalize_keys
from .base import EffectBase, create_effect_with_trace


@dataclass(frozen=True)
class AwaitForEffect(EffectBase):
    """Requests the value of ``producer()`` once it has been awaited.

    ``cache_by`` of ``None`` means the producer runs on every restart that
    reaches this step. A tuple makes the result cacheable by those values.
    """

    tag: ClassVar[str] = "awaitFor"

    producer: Callable[[], Awaitable[Any]]
    cache_by: tuple[Any, ...] | None = None

    @property
    def cacheable(self) -> bool:
        return self.cache_by is not None


def _build(
    producer: Callable[[], Awaitable[Any]], cache_by: Sequence[Any] | None
) -> AwaitForEffect:
    ensure_zero_arg_callable(producer, name="producer")
    keys = None if cache_by is None else normalize_keys(cache_by, name="cache_by")
    return AwaitForEffect(producer=producer, cache_by=keys)


def await_for(
    producer: Callable[[], Awaitable[Any]],
    *,
    cache_by: Sequence[Any] | None = None,
) -> AwaitForEffect:
    return create_effect_with_trace(_build(producer, cache_by))


def AwaitFor(  # noqa: N802
    producer: Callable[[], Awaitable[Any]],
    *,
    cache_by: Sequence[Any] | None = None,
) -> AwaitForEffect:
    return create_effect_with_trace(_build(producer, cache_by), skip_frames=3)


__all__ = [
    "AwaitFor",
    "AwaitForEffect",
    "await_for",
]
