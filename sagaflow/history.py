"""
Replayable history of the steps an interpreter has taken.

A history is an ordered tuple of entries. Each entry is either a concrete
``Step`` or something that has to be resolved against the interpreter that
will own it: a ``StateSlot`` record, or any callable ``(interpreter) -> Step``.
State steps need this indirection because their setter must fork whichever
interpreter replays them, not the one that first recorded them.

The length of the history when an effect is interpreted is the effect's
position, which is also the first half of every memo key.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Protocol, TypeAlias

from sagaflow.errors import ReplayError

if TYPE_CHECKING:
    from sagaflow.interpreter import SagaInterpreter


class _NoView:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_VIEW"


NO_VIEW: Final = _NoView()


@dataclass(frozen=True)
class Step:
    """A recorded step: the value fed back to the procedure, or a produced view."""

    yielded_value: Any = None
    view: Any = NO_VIEW

    @classmethod
    def yielded(cls, value: Any) -> Step:
        return cls(yielded_value=value)

    @classmethod
    def rendered(cls, artifact: Any) -> Step:
        return cls(view=artifact)

    @property
    def has_view(self) -> bool:
        return self.view is not NO_VIEW


@dataclass(frozen=True)
class StateSlot:
    """Unresolved state step: the slot at ``position`` currently holds ``value``."""

    position: int
    value: Any

    def resolve(self, owner: SagaInterpreter) -> Step:
        return Step.yielded((self.value, StateSetter(owner, self.position)))


class StateOwner(Protocol):
    def fork_state(self, position: int, value: Any) -> None: ...


class StateSetter:
    """Setter handed to the procedure alongside a state value.

    Calling it asks ``owner`` to fork its history at ``position`` with the
    new value. Two setters are equal when they target the same slot of the
    same interpreter.
    """

    __slots__ = ("_owner", "_position")

    def __init__(self, owner: StateOwner, position: int) -> None:
        self._owner = owner
        self._position = position

    @property
    def position(self) -> int:
        return self._position

    def __call__(self, value: Any) -> None:
        self._owner.fork_state(self._position, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateSetter):
            return NotImplemented
        return self._owner is other._owner and self._position == other._position

    def __hash__(self) -> int:
        return hash((id(self._owner), self._position))

    def __repr__(self) -> str:
        return f"StateSetter(position={self._position})"


StepFactory: TypeAlias = Callable[["SagaInterpreter"], Step]
HistoryEntry: TypeAlias = "Step | StateSlot | StepFactory"
ReplayableHistory: TypeAlias = "tuple[HistoryEntry, ...]"


def is_step_factory(entry: object) -> bool:
    return isinstance(entry, StateSlot) or (not isinstance(entry, Step) and callable(entry))


def resolve_entry(entry: HistoryEntry, owner: SagaInterpreter) -> Step:
    """Turn a history entry into the concrete step it stands for under ``owner``."""
    if isinstance(entry, Step):
        return entry
    if isinstance(entry, StateSlot):
        return entry.resolve(owner)
    if callable(entry):
        step = entry(owner)
        if not isinstance(step, Step):
            raise ReplayError(f"Step factory {entry!r} returned {type(step).__name__}, not Step")
        return step
    raise ReplayError(f"History entry must be Step, StateSlot or callable, got {entry!r}")


__all__ = [
    "HistoryEntry",
    "NO_VIEW",
    "ReplayableHistory",
    "StateSetter",
    "StateSlot",
    "Step",
    "StepFactory",
    "is_step_factory",
    "resolve_entry",
]
