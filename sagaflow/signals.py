"""Per-interpreter observer registry for the signals hosts react to."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Signal(str, Enum):
    READY_TO_CONTINUE = "readyToContinue"
    FORKED = "forked"
    DONE = "done"
    FAILED = "failed"


Listener = Callable[..., Any]


class SignalRegistry:
    """Listeners keyed by signal, owned by a single interpreter.

    ``close()`` drops every listener and makes later ``on``/``emit`` calls
    no-ops, which is how a terminated interpreter goes silent.
    """

    def __init__(self) -> None:
        self._listeners: dict[Signal, list[Listener]] = {signal: [] for signal in Signal}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def on(self, signal: Signal, listener: Listener) -> Callable[[], None]:
        signal = Signal(signal)
        if self._closed:
            return lambda: None
        self._listeners[signal].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners[signal]
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def has_listeners(self, signal: Signal) -> bool:
        return bool(self._listeners[signal])

    def emit(self, signal: Signal, *args: Any) -> None:
        if self._closed:
            logger.debug("Dropping %s signal on closed registry", signal.value)
            return
        # Listeners may close the registry or subscribe while we iterate.
        for listener in list(self._listeners[signal]):
            if self._closed:
                break
            listener(*args)

    def close(self) -> None:
        self._closed = True
        for listeners in self._listeners.values():
            listeners.clear()


__all__ = [
    "Listener",
    "Signal",
    "SignalRegistry",
]
