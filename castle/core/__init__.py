"""
Core types and constants for the Castle economy simulator.
"""

# Instead of from castle.core.types import ActionType, you can do: from castle.core import ActionType
from .types import (
    ActionType,
    JobType,
    JOB_REMOVAL_ORDER,
    ActionValidation,
    EnqueueResult,
)
from .actions import Action
from .economy import EconomyConfig, ECONOMY_PRESETS, DEFAULT_ECONOMY, get_economy
from .validation import validate_action_in_state


__all__ = [
    "ActionType",
    "JobType",
    "JOB_REMOVAL_ORDER",
    "ActionValidation",
    "EnqueueResult",
    "Action",
    "EconomyConfig",
    "ECONOMY_PRESETS",
    "DEFAULT_ECONOMY",
    "get_economy",
    "validate_action_in_state",
]
