"""
Pytest configuration for sagaflow tests.

Provides a manual scheduler so interpreter tests can decide exactly when an
``await_for`` producer settles, and a recorder for interpreter signals.
"""

from __future__ import annotations

import inspect
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any

import pytest

from sagaflow import Memo, SagaInterpreter, Signal


class ManualScheduler:
    """Collects submitted producers; tests settle them explicitly."""

    def __init__(self) -> None:
        self.callbacks: list[Any] = []

    @property
    def pending(self) -> int:
        return len(self.callbacks)

    def submit(self, awaitable: Any, on_settled: Any) -> None:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        self.callbacks.append(on_settled)

    def resolve(self, value: Any, index: int = 0) -> None:
        future: Future[Any] = Future()
        future.set_result(value)
        self.callbacks.pop(index)(future)

    def reject(self, error: BaseException, index: int = 0) -> None:
        future: Future[Any] = Future()
        future.set_exception(error)
        self.callbacks.pop(index)(future)


@dataclass
class SignalRecorder:
    events: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def attach(self, interpreter: SagaInterpreter) -> SignalRecorder:
        for signal in Signal:
            interpreter.on(signal, self._listener(signal))
        return self

    def _listener(self, signal: Signal):
        def listener(*args: Any) -> None:
            self.events.append((signal.value, args))

        return listener

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def last(self, name: str) -> tuple[Any, ...]:
        for event_name, args in reversed(self.events):
            if event_name == name:
                return args
        raise AssertionError(f"no {name} signal recorded")


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def memo() -> Memo:
    return Memo()


@pytest.fixture
def make_interpreter(scheduler: ManualScheduler, memo: Memo):
    def make(procedure: Any, **kwargs: Any) -> SagaInterpreter:
        kwargs.setdefault("memo", memo)
        kwargs.setdefault("scheduler", scheduler)
        return SagaInterpreter(procedure, **kwargs)

    return make
