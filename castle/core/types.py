"""
Core type definitions for the Castle economy simulator.

This module contains all fundamental types, enums, and constants used
throughout the system. No logic, just pure data structures.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass

# ============================================================================
# JOBS
# ============================================================================

class JobType(Enum):
    """Jobs a worker can be assigned to."""
    MINER = "miners"
    FARMER = "farmers"
    LUMBERJACK = "lumberjacks"
    BUILDER = "builders"

    def __str__(self) -> str:
        return self.value


# Order in which job slots are emptied when workers are lost or fired.
JOB_REMOVAL_ORDER: Tuple[JobType, ...] = (
    JobType.BUILDER,
    JobType.LUMBERJACK,
    JobType.FARMER,
    JobType.MINER,
)


# ============================================================================
# ACTIONS
# ============================================================================

class ActionType(Enum):
    """Kinds of commands a caller can submit to the castle."""
    ASSIGN_JOBS = "AssignJobs"  # Replace the whole job allocation
    HIRE = "Hire"  # Add workers for gold
    FIRE = "Fire"  # Remove workers
    BUY_FOOD = "BuyFood"  # Exchange gold for food
    START_UPGRADE = "StartUpgrade"  # Begin the next castle level

    def __str__(self) -> str:
        return self.value

    @property
    def priority(self) -> int:
        """Apply-phase priority class (lower is applied first)."""
        return {
            ActionType.HIRE: 1,
            ActionType.FIRE: 1,
            ActionType.ASSIGN_JOBS: 2,
            ActionType.START_UPGRADE: 3,
            ActionType.BUY_FOOD: 4,
        }[self]

    @classmethod
    def parse(cls, raw: Any) -> ActionType:
        """
        Resolve an action type from its wire name ("Hire") or enum name ("HIRE").

        Raises:
            ValueError: If the name matches no action kind
        """
        if isinstance(raw, ActionType):
            return raw
        if isinstance(raw, str):
            for member in cls:
                if raw == member.value or raw == member.name:
                    return member
        raise ValueError(f"Unknown action type: {raw!r}")


# ============================================================================
# ACTION VALIDATION
# ============================================================================

@dataclass
class ActionValidation:
    """
    Structured result of validating an action against the live castle state.

    Attributes:
        valid: Whether the action can be applied
        error_code: Machine-readable error code (None if valid)
        message: Human-readable message citing the quantities involved

    Error codes:
        - "JOB_SUM_MISMATCH": AssignJobs total differs from the workforce
        - "INSUFFICIENT_GOLD": Not enough gold for Hire/BuyFood/StartUpgrade
        - "INSUFFICIENT_WORKERS": Fire count exceeds the workforce
        - "UPGRADE_ACTIVE": An upgrade is already in progress
    """
    valid: bool
    error_code: str | None = None
    message: str = ""

    @staticmethod
    def success(message: str = "") -> ActionValidation:
        """Create a validation success result."""
        return ActionValidation(valid=True, error_code=None, message=message)

    @staticmethod
    def fail(error_code: str, message: str) -> ActionValidation:
        """Create a validation failure result."""
        return ActionValidation(valid=False, error_code=error_code, message=message)


# ============================================================================
# ADMISSION
# ============================================================================

@dataclass
class EnqueueResult:
    """
    Outcome of submitting an action to the queue.

    Attributes:
        accepted: True if the action was admitted to the queue
        applies_at_turn: Turn at which the action will be evaluated
        reason: Why the action was refused (admission errors only)
    """
    accepted: bool
    applies_at_turn: Optional[int] = None
    reason: Optional[str] = None

    @staticmethod
    def admitted(applies_at_turn: int) -> EnqueueResult:
        return EnqueueResult(accepted=True, applies_at_turn=applies_at_turn)

    @staticmethod
    def refused(reason: str) -> EnqueueResult:
        return EnqueueResult(accepted=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"accepted": self.accepted}
        if self.applies_at_turn is not None:
            data["applies_at_turn"] = self.applies_at_turn
        if self.reason is not None:
            data["reason"] = self.reason
        return data
