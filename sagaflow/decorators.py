"""Decorator for declaring saga procedures."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from sagaflow.types import SagaGenerator

F = TypeVar("F", bound=Callable[..., SagaGenerator])


def saga(func: F) -> F:
    """Mark a generator function as a saga procedure factory.

    The decorated function still returns a plain generator when called; the
    marker only lets hosts and tooling recognise it. Non-generator functions
    are rejected at decoration time.
    """
    if not inspect.isgeneratorfunction(func):
        raise TypeError(
            f"@saga requires a generator function, got {getattr(func, '__qualname__', func)!r}"
        )

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> SagaGenerator:
        return func(*args, **kwargs)

    wrapper.__sagaflow_saga__ = True  # type: ignore[attr-defined]
    return wrapper  # type: ignore[return-value]


def is_saga(func: object) -> bool:
    return bool(getattr(func, "__sagaflow_saga__", False))


__all__ = ["is_saga", "saga"]
