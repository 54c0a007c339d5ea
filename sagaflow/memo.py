"""
Memoization cache keyed by history position and an argument list.

One ``Memo`` lives as long as a logical procedure identity: it is shared by
every interpreter built for that procedure, including the ones created by
state forks and input changes, and dropped when the host remounts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

_PRIMITIVE_TYPES: Final = (type(None), bool, int, float, complex, str, bytes)


class _MemoMiss:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MEMO_MISS"


MEMO_MISS: Final = _MemoMiss()


def _same_value(left: Any, right: Any) -> bool:
    if left is right:
        return True
    # True and False are singletons, so any other bool pairing is a mismatch.
    if isinstance(left, bool) or isinstance(right, bool):
        return False
    if isinstance(left, _PRIMITIVE_TYPES) and isinstance(right, _PRIMITIVE_TYPES):
        return bool(left == right)
    return False


def shallow_equal_args(left: Sequence[Any], right: Sequence[Any]) -> bool:
    """Compare two argument lists element by element without recursing.

    Primitives compare by value, everything else by identity, so a list
    rebuilt on every run never matches a previous one.
    """
    if left is right:
        return True
    if len(left) != len(right):
        return False
    return all(_same_value(a, b) for a, b in zip(left, right))


def shallow_equal_mapping(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    """Compare two mappings key by key using the same rule as ``shallow_equal_args``."""
    if left is right:
        return True
    if left.keys() != right.keys():
        return False
    return all(_same_value(left[key], right[key]) for key in left)


class Memo:
    """Stores ``(args, value)`` pairs per position; values are never replaced."""

    def __init__(self) -> None:
        self._entries: dict[int, list[tuple[tuple[Any, ...], Any]]] = {}

    def remember(self, position: int, args: Sequence[Any], value: Any) -> None:
        entries = self._entries.setdefault(position, [])
        if any(shallow_equal_args(stored, args) for stored, _ in entries):
            return
        entries.append((tuple(args), value))

    def lookup(self, position: int, args: Sequence[Any]) -> Any:
        """Return the value cached for ``args`` at ``position``, or ``MEMO_MISS``."""
        for stored, value in self._entries.get(position, ()):
            if shallow_equal_args(stored, args):
                return value
        return MEMO_MISS

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, position: object) -> bool:
        return position in self._entries

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __repr__(self) -> str:
        return f"Memo(positions={sorted(self._entries)}, entries={len(self)})"


__all__ = [
    "MEMO_MISS",
    "Memo",
    "shallow_equal_args",
    "shallow_equal_mapping",
]
