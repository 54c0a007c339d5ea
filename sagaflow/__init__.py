"""
sagaflow - resumable procedures driven by an effect interpreter.

A saga is a generator that yields effects: render an intermediate artifact,
await an asynchronous value, hold a piece of local state or compute a
memoized value. The interpreter records every step so that a state change
can rebuild the procedure from scratch while replaying, not recomputing,
everything that happened before the changed state.

Example:
    >>> from sagaflow import SagaHost, await_for, render, saga, use_state
    >>>
    >>> @saga
    ... def counter(label):
    ...     yield render("loading...")
    ...     start = yield await_for(load_start, cache_by=[label])
    ...     count, set_count = yield use_state(start)
    ...     return {"label": label, "count": count, "increment": lambda: set_count(count + 1)}
"""

from sagaflow.decorators import is_saga, saga
from sagaflow.effects import (
    AwaitFor,
    AwaitForEffect,
    Compute,
    ComputeEffect,
    HoldState,
    HoldStateEffect,
    Render,
    RenderEffect,
    await_for,
    compute,
    render,
    use_state,
)
from sagaflow.errors import (
    InterpreterStateError,
    ProducerError,
    ReplayError,
    SagaError,
    UnknownEffectError,
)
from sagaflow.history import (
    NO_VIEW,
    HistoryEntry,
    ReplayableHistory,
    StateSetter,
    StateSlot,
    Step,
    StepFactory,
    resolve_entry,
)
from sagaflow.host import SagaHost
from sagaflow.interpreter import InterpreterStatus, SagaInterpreter
from sagaflow.memo import MEMO_MISS, Memo, shallow_equal_args, shallow_equal_mapping
from sagaflow.scheduling import AsyncioScheduler, Scheduler
from sagaflow.signals import Signal
from sagaflow.types import EffectBase, EffectCreationContext, SagaFactory, SagaGenerator

__version__ = "0.1.0"

__all__ = [
    "MEMO_MISS",
    "NO_VIEW",
    "AsyncioScheduler",
    "AwaitFor",
    "AwaitForEffect",
    "Compute",
    "ComputeEffect",
    "EffectBase",
    "EffectCreationContext",
    "HistoryEntry",
    "HoldState",
    "HoldStateEffect",
    "InterpreterStateError",
    "InterpreterStatus",
    "Memo",
    "ProducerError",
    "Render",
    "RenderEffect",
    "ReplayError",
    "ReplayableHistory",
    "SagaError",
    "SagaFactory",
    "SagaGenerator",
    "SagaHost",
    "SagaInterpreter",
    "Scheduler",
    "Signal",
    "StateSetter",
    "StateSlot",
    "Step",
    "StepFactory",
    "UnknownEffectError",
    "await_for",
    "compute",
    "is_saga",
    "render",
    "resolve_entry",
    "saga",
    "shallow_equal_args",
    "shallow_equal_mapping",
    "use_state",
]
