"""
Headless host binding for saga procedures.

``SagaHost`` plays the part a UI component model plays for a saga: it owns
one interpreter per logical procedure identity, re-renders when the
interpreter signals progress, rebuilds the interpreter on state forks and
restarts it when the inputs change. It keeps the last artifact in ``view``
and reports each new one to ``on_update``.

Example:
    >>> @saga
    ... def greeting(name):
    ...     yield render("loading...")
    ...     title = yield await_for(lambda: fetch_title(name), cache_by=[name])
    ...     return f"{title} {name}"
    >>>
    >>> host = SagaHost(greeting, on_update=print)
    >>> host.render(name="Ada")
    'loading...'
    >>> await host.settle()
    Dr. Ada
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from frozendict import frozendict

from sagaflow.errors import InterpreterStateError, ProducerError
from sagaflow.history import ReplayableHistory
from sagaflow.interpreter import SagaInterpreter
from sagaflow.memo import Memo, shallow_equal_mapping
from sagaflow.scheduling import AsyncioScheduler
from sagaflow.signals import Signal
from sagaflow.types import SagaFactory

logger = logging.getLogger(__name__)


class SagaHost:
    def __init__(
        self,
        factory: SagaFactory,
        *,
        scheduler: AsyncioScheduler | None = None,
        on_update: Callable[[Any], None] | None = None,
        empty_view: Any = None,
    ) -> None:
        if not callable(factory):
            raise TypeError(f"factory must be callable, got {type(factory).__name__}")
        self._factory = factory
        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._on_update = on_update
        self._empty_view = empty_view
        self._memo = Memo()
        self._interpreter: SagaInterpreter | None = None
        self._props: frozendict = frozendict()
        self._view: Any = empty_view
        self._rendering = False
        self._mounted = True
        self._error: Exception | None = None

    @property
    def view(self) -> Any:
        return self._view

    @property
    def interpreter(self) -> SagaInterpreter | None:
        return self._interpreter

    @property
    def memo(self) -> Memo:
        return self._memo

    @property
    def props(self) -> frozendict:
        return self._props

    @property
    def error(self) -> Exception | None:
        return self._error

    def render(self, **props: Any) -> Any:
        """Render with ``props``, restarting the procedure when they changed."""
        if not self._mounted:
            raise InterpreterStateError("Cannot render an unmounted SagaHost")
        if self._interpreter is None or not shallow_equal_mapping(self._props, props):
            self._start(frozendict(props))
        return self._refresh()

    def remount(self) -> None:
        """Treat the procedure as a new logical instance: fresh memo, no replay."""
        logger.debug("Remounting %r", self._factory)
        if self._interpreter is not None:
            self._interpreter.terminate()
        self._interpreter = None
        self._memo = Memo()
        self._error = None
        self._view = self._empty_view

    def unmount(self) -> None:
        if self._interpreter is not None:
            self._interpreter.terminate()
        self._mounted = False

    async def settle(self) -> Any:
        """Wait for every in-flight producer, then return the current view.

        Raises the ``ProducerError`` of a failed producer, or the exception the
        procedure raised while being resumed after an await, if any.
        """
        await self._scheduler.drain()
        if self._error is not None:
            raise self._error
        return self._view

    def _start(self, props: frozendict, history: ReplayableHistory | None = None) -> None:
        if self._interpreter is not None:
            self._interpreter.terminate()

        interpreter = SagaInterpreter(
            self._factory(**props),
            memo=self._memo,
            scheduler=self._scheduler,
            empty_view=self._empty_view,
        )
        if history:
            interpreter.replay(history)

        interpreter.on(Signal.READY_TO_CONTINUE, self._on_progress)
        interpreter.on(Signal.DONE, self._on_progress)
        interpreter.on(Signal.FORKED, self._on_forked)
        interpreter.on(Signal.FAILED, self._on_failed)

        self._interpreter = interpreter
        self._props = props
        self._error = None

    def _refresh(self) -> Any:
        if self._interpreter is None:
            raise InterpreterStateError("SagaHost has no interpreter to resume")
        self._rendering = True
        try:
            interpreter = self._interpreter
            interpreter.resume()
            # A state update during the run replaces the interpreter.
            while self._interpreter is not interpreter:
                interpreter = self._interpreter
                interpreter.resume()
            self._view = interpreter.view()
        finally:
            self._rendering = False
        return self._view

    def _rerender(self) -> None:
        if not self._mounted or self._interpreter is None:
            return
        # Runs from signal callbacks, where a raised error would never reach the caller.
        try:
            view = self._refresh()
        except Exception as exc:
            self._error = exc
            logger.exception("Saga %r raised while resuming", self._factory)
            return
        if self._on_update is not None:
            self._on_update(view)

    def _on_progress(self) -> None:
        if not self._rendering:
            self._rerender()

    def _on_forked(self, history: ReplayableHistory) -> None:
        logger.debug("Rebuilding interpreter from forked history of %d steps", len(history))
        self._start(self._props, history)
        if not self._rendering:
            self._rerender()

    def _on_failed(self, error: ProducerError) -> None:
        self._error = error
        logger.warning("Saga %r failed: %s", self._factory, error)


__all__ = ["SagaHost"]
