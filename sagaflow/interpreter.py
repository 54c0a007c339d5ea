"""
Effect interpreter for sagaflow procedures.

A ``SagaInterpreter`` drives one generator one effect at a time. Each
interpreted effect appends one entry to the interpreter's history; the
history length before appending is the effect's position and keys the
shared ``Memo``. The interpreter emits signals instead of calling back into
a host directly:

* ``READY_TO_CONTINUE``: a step completed and the instance is paused again
* ``FORKED(history)``: a state setter was called; build a new interpreter
  and replay ``history`` into it
* ``DONE``: the procedure returned its final artifact
* ``FAILED(error)``: an ``await_for`` producer raised
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable, Iterable
from typing import Any

from sagaflow.effects import AwaitForEffect, ComputeEffect, HoldStateEffect, RenderEffect
from sagaflow.effects._validators import ensure_awaitable
from sagaflow.errors import InterpreterStateError, ProducerError, ReplayError, UnknownEffectError
from sagaflow.history import (
    HistoryEntry,
    ReplayableHistory,
    StateSlot,
    Step,
    resolve_entry,
)
from sagaflow.memo import MEMO_MISS, Memo
from sagaflow.scheduling import AsyncioScheduler, Scheduler
from sagaflow.signals import Listener, Signal, SignalRegistry
from sagaflow.types import SagaGenerator

logger = logging.getLogger(__name__)


class InterpreterStatus(enum.Enum):
    PAUSED = "paused"
    RUNNING = "running"
    TERMINATED = "terminated"


class SagaInterpreter:
    """Drives a saga generator and records a replayable history of its steps."""

    def __init__(
        self,
        procedure: SagaGenerator,
        *,
        memo: Memo,
        scheduler: Scheduler | None = None,
        empty_view: Any = None,
    ) -> None:
        self._procedure = procedure
        self._memo = memo
        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._empty_view = empty_view
        self._history: list[HistoryEntry] = []
        self._steps: list[Step] = []
        self._signals = SignalRegistry()
        self._status = InterpreterStatus.PAUSED
        self._started = False
        self._error: BaseException | None = None

    @property
    def status(self) -> InterpreterStatus:
        return self._status

    @property
    def memo(self) -> Memo:
        return self._memo

    @property
    def error(self) -> BaseException | None:
        return self._error

    @property
    def history(self) -> ReplayableHistory:
        return tuple(self._history)

    @property
    def terminated(self) -> bool:
        return self._status is InterpreterStatus.TERMINATED

    def on(self, signal: Signal | str, listener: Listener) -> Callable[[], None]:
        """Subscribe ``listener`` to ``signal``; returns an unsubscribe function."""
        return self._signals.on(Signal(signal), listener)

    def resume(self) -> None:
        """Interpret effects until the procedure suspends, completes or is terminated."""
        while self._status is InterpreterStatus.PAUSED:
            self._step()

    def replay(self, history: Iterable[HistoryEntry]) -> None:
        """Position the procedure at the end of ``history`` without re-running its effects.

        Every entry but the last is fed back to the generator; the last one is
        only recorded, since the effect it answers has not been consumed yet.
        """
        entries = list(history)
        if not entries:
            return
        if self._started or self._history:
            raise InterpreterStateError("replay() must be called on a fresh interpreter")

        logger.debug("Replaying %d history entries", len(entries))
        self._started = True
        try:
            next(self._procedure)
            for entry in entries[:-1]:
                step = self._record(entry)
                self._procedure.send(step.yielded_value)
        except StopIteration as stop:
            self._status = InterpreterStatus.TERMINATED
            # A history captured after completion ends with the final artifact.
            if len(self._history) == len(entries) - 1 and self._record(entries[-1]).has_view:
                logger.debug("Replayed history of a completed procedure")
                return
            raise ReplayError(
                f"Procedure returned {stop.value!r} after {len(self._history)} of "
                f"{len(entries)} replayed steps"
            ) from None
        self._record(entries[-1])

    def view(self) -> Any:
        """Return the most recently recorded artifact, or the empty view."""
        for step in reversed(self._steps):
            if step.has_view:
                return step.view
        return self._empty_view

    def terminate(self) -> None:
        """Stop the interpreter; in-flight producers finish but are ignored."""
        if self._status is not InterpreterStatus.TERMINATED:
            logger.debug("Terminating interpreter at position %d", len(self._history))
        self._status = InterpreterStatus.TERMINATED
        self._signals.close()

    def fork_state(self, position: int, value: Any) -> None:
        """Emit a history that ends with the state slot at ``position`` holding ``value``."""
        if self._signals.closed:
            logger.debug("Ignoring state update at position %d on terminated interpreter", position)
            return
        forked: ReplayableHistory = (*self._history[:position], StateSlot(position, value))
        logger.debug("Forking at position %d with %r", position, value)
        self._signals.emit(Signal.FORKED, forked)

    def _record(self, entry: HistoryEntry) -> Step:
        step = resolve_entry(entry, self)
        self._history.append(entry)
        self._steps.append(step)
        return step

    def _step(self) -> None:
        self._status = InterpreterStatus.RUNNING
        self._started = True
        last = self._steps[-1].yielded_value if self._steps else None

        try:
            effect = self._procedure.send(last)
        except StopIteration as stop:
            self._record(Step.rendered(stop.value))
            self._done()
            return
        except BaseException:
            self._status = InterpreterStatus.TERMINATED
            raise

        position = len(self._history)

        try:
            self._interpret(effect, position)
        except BaseException:
            self._status = InterpreterStatus.TERMINATED
            raise

    def _interpret(self, effect: Any, position: int) -> None:
        match effect:
            case RenderEffect(artifact=artifact):
                logger.debug("render at position %d", position)
                self._record(Step.rendered(artifact))
                self._ready()

            case AwaitForEffect():
                self._await_for(effect, position)

            case HoldStateEffect(default=default):
                logger.debug("state at position %d", position)
                self._record(StateSlot(position, default))
                self._ready()

            case ComputeEffect(fn=fn, keys=keys):
                value = self._memo.lookup(position, keys)
                if value is MEMO_MISS:
                    logger.debug("compute miss at position %d", position)
                    value = fn()
                    self._memo.remember(position, keys, value)
                else:
                    logger.debug("compute hit at position %d", position)
                self._record(Step.yielded(value))
                self._ready()

            case _:
                raise UnknownEffectError(effect, position)

    def _await_for(self, effect: AwaitForEffect, position: int) -> None:
        if effect.cache_by is not None:
            cached = self._memo.lookup(position, effect.cache_by)
            if cached is not MEMO_MISS:
                logger.debug("await_for hit at position %d", position)
                self._record(Step.yielded(cached))
                self._ready()
                return

        logger.debug("await_for miss at position %d, suspending", position)
        awaitable = effect.producer()
        ensure_awaitable(awaitable, name="producer")
        self._scheduler.submit(
            awaitable, lambda done: self._settle(done, effect, position)
        )

    def _settle(self, done: asyncio.Future[Any], effect: AwaitForEffect, position: int) -> None:
        if self._status is InterpreterStatus.TERMINATED:
            logger.debug("Discarding await_for result at position %d of terminated interpreter", position)
            return
        if done.cancelled():
            self._fail(ProducerError(asyncio.CancelledError(), position, effect))
            return
        exc = done.exception()
        if exc is not None:
            self._fail(ProducerError(exc, position, effect))
            return

        result = done.result()
        if effect.cache_by is not None:
            self._memo.remember(position, effect.cache_by, result)
        self._record(Step.yielded(result))
        self._ready()

    def _ready(self) -> None:
        # A listener reacting to an earlier signal may have terminated us mid-step.
        if self._status is InterpreterStatus.TERMINATED:
            return
        self._status = InterpreterStatus.PAUSED
        self._signals.emit(Signal.READY_TO_CONTINUE)

    def _done(self) -> None:
        self._status = InterpreterStatus.TERMINATED
        logger.debug("Procedure completed after %d steps", len(self._history))
        self._signals.emit(Signal.DONE)

    def _fail(self, error: ProducerError) -> None:
        self._status = InterpreterStatus.TERMINATED
        self._error = error
        if self._signals.has_listeners(Signal.FAILED):
            self._signals.emit(Signal.FAILED, error)
        else:
            logger.error("%s", error, exc_info=error.original)


__all__ = [
    "InterpreterStatus",
    "SagaInterpreter",
]
