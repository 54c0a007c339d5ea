"""Runtime validators for effect attribute type checking."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Sequence
from typing import Any


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {_type_name(value)}")


def ensure_zero_arg_callable(value: object, *, name: str) -> None:
    ensure_callable(value, name=name)
    try:
        inspect.signature(value).bind()
    except TypeError as exc:
        raise TypeError(f"{name} callable must accept no required arguments") from exc
    except ValueError:
        # Unable to introspect (e.g., builtins); assume callable accepts zero args.
        pass


def ensure_awaitable(value: object, *, name: str) -> None:
    if not isinstance(value, Awaitable):
        raise TypeError(f"{name} must return an awaitable, got {_type_name(value)}")


def normalize_keys(values: object, *, name: str) -> tuple[Any, ...]:
    """Return ``values`` as a tuple, rejecting strings and non-sequences."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise TypeError(f"{name} must be a list or tuple, got {_type_name(values)}")
    return tuple(values)


__all__ = [
    "ensure_awaitable",
    "ensure_callable",
    "ensure_zero_arg_callable",
    "normalize_keys",
]
