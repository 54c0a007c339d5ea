"""
Effects a saga procedure may yield.

Each effect has a lower-case constructor (``render``) and a capitalised
alias (``Render``); both attach the location the effect was created at.
"""

from .await_for import AwaitFor, AwaitForEffect, await_for
from .base import EffectBase
from .compute import Compute, ComputeEffect, compute
from .render import Render, RenderEffect, render
from .state import HoldState, HoldStateEffect, use_state

__all__ = [
    "AwaitFor",
    "AwaitForEffect",
    "Compute",
    "ComputeEffect",
    "EffectBase",
    "HoldState",
    "HoldStateEffect",
    "Render",
    "RenderEffect",
    "await_for",
    "compute",
    "render",
    "use_state",
]
