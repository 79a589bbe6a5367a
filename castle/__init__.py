"""
Castle economy simulator.

A deterministic, turn-based resource economy: actions are queued between
ticks and resolved in a fixed order at the start of the next tick.
"""

from .core import Action, ActionType, EconomyConfig, EnqueueResult, get_economy
from .engine import CastleEngine
from .resolver import InvariantViolation, TickResult, check_invariants, resolve_tick
from .state import CastleState, JobCounts, UpgradeState

__all__ = [
    "Action",
    "ActionType",
    "EconomyConfig",
    "EnqueueResult",
    "get_economy",
    "CastleEngine",
    "InvariantViolation",
    "TickResult",
    "check_invariants",
    "resolve_tick",
    "CastleState",
    "JobCounts",
    "UpgradeState",
]
