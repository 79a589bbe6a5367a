"""
ActionResolver - Apply-phase resolution of queued actions.

This module handles:
- Ordering drained actions by priority class (stable within a class)
- Re-validating each action against the live state
- Applying accepted actions immediately, one after another
- Recording accepted and rejected actions for the turn log
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Sequence, Tuple
from dataclasses import dataclass

from ..core.types import ActionType, ActionValidation, JobType
from ..core.actions import Action
from ..core.economy import EconomyConfig
from ..core.validation import validate_action_in_state
from ..state.state import JobCounts, UpgradeState

if TYPE_CHECKING:
    from ..state.state import CastleState


@dataclass
class ActionRejection:
    """
    An action refused at apply time.

    Attributes:
        action: The rejected action (never retried)
        error_code: Machine-readable reason code
        reason: Human-readable reason citing the quantities involved
    """
    action: Action
    error_code: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize rejection to a plain dict."""
        return {
            "type": self.action.type.value,
            "params": dict(self.action.params),
            "requested_by": self.action.requested_by,
            "command_id": self.action.command_id,
            "error_code": self.error_code,
            "reason": self.reason,
        }


@dataclass
class ActionResolutionResult:
    """
    Complete result of the apply phase for one tick.

    Attributes:
        applied: Accepted actions in the order they were applied
        rejected: Rejected actions in the order they were evaluated
        logs: One line per evaluated action, in evaluation order
    """
    applied: List[Action]
    rejected: List[ActionRejection]
    logs: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "applied": [action.to_dict() for action in self.applied],
            "rejected": [rejection.to_dict() for rejection in self.rejected],
            "logs": self.logs,
        }


def order_actions(actions: Sequence[Action]) -> List[Action]:
    """
    Order actions for the apply phase.

    Hire/Fire first, then AssignJobs, StartUpgrade, BuyFood. ``sorted`` is
    stable, so submission order is kept within a priority class.
    """
    return sorted(actions, key=lambda action: action.priority)


class ActionResolver:
    """
    Stateless resolver for the apply-queued-actions phase.

    Hired workers join the farmers and fired workers are taken out of the job
    allocation (builders first) as soon as the action is applied, so the job
    sum always matches the workforce. A later AssignJobs in the same tick
    validates against the updated workforce and replaces the allocation.
    """

    def __init__(self, economy: EconomyConfig):
        self.economy = economy

    def resolve_actions(
        self,
        state: CastleState,
        actions: Sequence[Action],
    ) -> ActionResolutionResult:
        """
        Validate and apply every drained action.

        Args:
            state: Current castle state (modified in-place)
            actions: Drained queue in submission order

        Returns:
            ActionResolutionResult with accepted/rejected actions
        """
        applied: List[Action] = []
        rejected: List[ActionRejection] = []
        logs: List[str] = []

        for action in order_actions(actions):
            validation, message = self.resolve_single(state, action)
            logs.append(message)
            if validation.valid:
                applied.append(action)
            else:
                rejected.append(
                    ActionRejection(action=action, error_code=validation.error_code, reason=validation.message)
                )

        return ActionResolutionResult(applied=applied, rejected=rejected, logs=logs)

    def resolve_single(self, state: CastleState, action: Action) -> Tuple[ActionValidation, str]:
        """
        Resolve a single action.

        Args:
            state: Current castle state (modified in-place on success)
            action: Action to validate and apply

        Returns:
            Tuple of (ActionValidation, log message)
        """
        validation = validate_action_in_state(state, action, self.economy)
        if not validation.valid:
            return validation, f"{action.type} rejected: {validation.message}"
        return validation, self._apply(state, action)

    def _apply(self, state: CastleState, action: Action) -> str:
        params = action.params

        if action.type == ActionType.ASSIGN_JOBS:
            state.jobs = JobCounts.from_dict(params)
            return (
                f"Jobs assigned: miners={state.jobs.miners}, farmers={state.jobs.farmers}, "
                f"lumberjacks={state.jobs.lumberjacks}, builders={state.jobs.builders}"
            )

        if action.type == ActionType.HIRE:
            count = params["count"]
            cost = count * self.economy.hire_cost
            state.gold -= cost
            state.workers += count
            state.jobs.set(JobType.FARMER, state.jobs.farmers + count)
            return f"Hired {count} workers for {cost} gold"

        if action.type == ActionType.FIRE:
            count = params["count"]
            state.workers -= count
            state.jobs.shrink(count)
            return f"Fired {count} workers"

        if action.type == ActionType.BUY_FOOD:
            amount = params["amount"]
            cost = amount * self.economy.food_price
            state.gold -= cost
            state.food += amount
            return f"Bought {amount} food for {cost} gold"

        if action.type == ActionType.START_UPGRADE:
            cost = self.economy.upgrade_gold_cost(state.castle_level)
            wood_required = self.economy.upgrade_wood_required(state.castle_level)
            state.gold -= cost
            state.upgrade = UpgradeState.start(state.castle_level + 1, wood_required)
            return (
                f"Started upgrade to level {state.upgrade.target_level} "
                f"(cost: {cost} gold, wood required: {wood_required})"
            )

        raise ValueError(f"No apply rule for action type {action.type!r}")

