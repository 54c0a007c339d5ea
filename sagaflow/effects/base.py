"""
Base imports for effect modules.

This module contains the common imports used across all effect modules.
"""

from sagaflow.types import EffectBase
from sagaflow.utils import create_effect_with_trace

__all__ = ["EffectBase", "create_effect_with_trace"]
