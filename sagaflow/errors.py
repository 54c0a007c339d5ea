"""Error types raised by the sagaflow interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sagaflow.effects import AwaitForEffect


class SagaError(Exception):
    """Base class for sagaflow errors."""


class UnknownEffectError(SagaError, TypeError):
    """Raised when a procedure yields something that is not a sagaflow effect.

    The interpreter cannot continue past such a value; the instance is
    terminated before this error propagates to the host.
    """

    def __init__(self, value: Any, position: int) -> None:
        self.value = value
        self.position = position
        message = (
            f"Unknown yielded value at position {position}: {value!r}. "
            "Yield only render, await_for, use_state or compute effects from a saga."
        )
        created_at = getattr(value, "created_at", None)
        if created_at is not None:
            message = f"{message}\n{created_at.format_full()}"
        super().__init__(message)


class ReplayError(SagaError):
    """Raised when a history does not fit the procedure it is replayed into."""


class InterpreterStateError(SagaError):
    """Raised when an operation is not valid in the interpreter's current state."""


@dataclass(eq=False)
class ProducerError(SagaError):
    """Wraps the exception raised by an ``await_for`` producer.

    Attributes:
        original: The exception raised while awaiting the producer
        position: History position of the ``await_for`` step
        effect: The effect whose producer failed
    """

    original: BaseException
    position: int
    effect: AwaitForEffect

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def __str__(self) -> str:
        location = ""
        if self.effect.created_at is not None:
            location = f" (created at {self.effect.created_at.format_location()})"
        return f"await_for producer at position {self.position} failed{location}: {self.original!r}"


__all__ = [
    "InterpreterStateError",
    "ProducerError",
    "ReplayError",
    "SagaError",
    "UnknownEffectError",
]
