"""
Core types shared across sagaflow.

Effects are plain data: a procedure yields them, the interpreter decides
what each one means. ``EffectBase`` is the common frozen dataclass; each
concrete effect declares its protocol ``tag``.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, TypeVar

E = TypeVar("E", bound="EffectBase")


@dataclass(frozen=True)
class EffectCreationContext:
    """Context information about where an effect was created."""

    filename: str
    line: int
    function: str
    code: str | None = None
    stack_trace: list[dict[str, Any]] = field(default_factory=list)

    def format_location(self) -> str:
        """Format the creation location as a string."""
        return f"{self.filename}:{self.line} in {self.function}"

    def format_full(self) -> str:
        """Format the full creation context with stack trace."""
        lines = [f"Effect created at {self.format_location()}"]
        if self.code:
            lines.append(f"    {self.code}")
        if self.stack_trace:
            lines.append("\nCreation stack trace:")
            for frame in self.stack_trace:
                lines.append(
                    f'  File "{frame["filename"]}", line {frame["line"]}, in {frame["function"]}'
                )
                if frame.get("code"):
                    lines.append(f"    {frame['code']}")
        return "\n".join(lines)


@dataclass(frozen=True, kw_only=True)
class EffectBase:
    """Base dataclass for everything a procedure may yield.

    ``tag`` names the effect in the wire-less protocol shared with hosts
    (``"render"``, ``"awaitFor"``, ``"state"``, ``"compute"``).
    """

    tag: ClassVar[str] = ""

    created_at: EffectCreationContext | None = field(default=None, compare=False, repr=False)

    def with_created_at(self: E, created_at: EffectCreationContext | None) -> E:
        if created_at is self.created_at:
            return self
        return replace(self, created_at=created_at)


# A procedure yields effects, receives the value produced for each one and
# finally returns the artifact to show.
SagaGenerator = Generator[EffectBase, Any, Any]
SagaFactory = Callable[..., SagaGenerator]


__all__ = [
    "EffectBase",
    "EffectCreationContext",
    "SagaFactory",
    "SagaGenerator",
]
