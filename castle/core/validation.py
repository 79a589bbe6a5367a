"""
Apply-time action validation.

Admission (``Action._validate``) only checks parameter shape. These checks
run against the live castle state during the apply phase, after any
higher-priority actions of the same tick have already been applied, so both
the resolver and any "what can I afford?" queries use the same rules.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from .economy import EconomyConfig
from .types import ActionValidation, ActionType

if TYPE_CHECKING:
    from ..state.state import CastleState
    from .actions import Action


def validate_action_in_state(
    state: CastleState,
    action: Action,
    economy: EconomyConfig,
) -> ActionValidation:
    """
    Validate an action against the current castle state.

    Args:
        state: Live castle state (already mutated by earlier actions this tick)
        action: Admitted action
        economy: Economy constants for the run

    Returns:
        ActionValidation; failures carry the required vs available quantities
    """
    params = action.params

    if action.type == ActionType.ASSIGN_JOBS:
        total = params["miners"] + params["farmers"] + params["lumberjacks"] + params["builders"]
        if total != state.workers:
            return ActionValidation.fail(
                "JOB_SUM_MISMATCH",
                f"AssignJobs sum ({total}) does not match current workers ({state.workers})",
            )
        return ActionValidation.success()

    if action.type == ActionType.HIRE:
        cost = params["count"] * economy.hire_cost
        if state.gold < cost:
            return ActionValidation.fail(
                "INSUFFICIENT_GOLD",
                f"Not enough gold to hire {params['count']} workers (need {cost}, have {state.gold})",
            )
        return ActionValidation.success()

    if action.type == ActionType.FIRE:
        if state.workers < params["count"]:
            return ActionValidation.fail(
                "INSUFFICIENT_WORKERS",
                f"Cannot fire {params['count']} workers (only have {state.workers})",
            )
        return ActionValidation.success()

    if action.type == ActionType.BUY_FOOD:
        cost = params["amount"] * economy.food_price
        if state.gold < cost:
            return ActionValidation.fail(
                "INSUFFICIENT_GOLD",
                f"Not enough gold to buy {params['amount']} food (need {cost}, have {state.gold})",
            )
        return ActionValidation.success()

    if action.type == ActionType.START_UPGRADE:
        if state.upgrade.active:
            return ActionValidation.fail(
                "UPGRADE_ACTIVE",
                f"An upgrade to level {state.upgrade.target_level} is already in progress",
            )
        cost = economy.upgrade_gold_cost(state.castle_level)
        if state.gold < cost:
            return ActionValidation.fail(
                "INSUFFICIENT_GOLD",
                f"Not enough gold to start upgrade (need {cost}, have {state.gold})",
            )
        return ActionValidation.success()

    raise ValueError(f"No validation rule for action type {action.type!r}")
