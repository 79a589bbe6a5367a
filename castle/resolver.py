"""
Tick resolution - the pure core of the simulator.

``resolve_tick`` takes a castle state and the drained action queue and
returns the next state plus everything that happened along the way. It never
touches its input state, holds no globals and does no I/O, so it can be
unit-tested without an engine, and a replay tool can drive it directly.

Tick order:
1. Apply queued actions (priority order, re-validated one by one)
2. Increment turn
3. Production
4. Construction
5. Upkeep
6. Taxes
7. Clamp resources at zero (reported; should never trigger)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .core.actions import Action
from .core.economy import EconomyConfig, DEFAULT_ECONOMY
from .mechanics import (
    ActionResolver,
    ActionRejection,
    ConstructionResolver,
    ConstructionResult,
    ProductionResolver,
    ProductionResult,
    TaxResolver,
    UpkeepResolver,
    UpkeepResult,
)
from .state.state import CastleState

CLAMPED_RESOURCES = ("gold", "food", "wood")


class InvariantViolation(RuntimeError):
    """A reachable state broke an engine invariant (an apply-time validation bug)."""


@dataclass
class TickResult:
    """
    Everything produced by one tick.

    Attributes:
        turn: The turn number this tick resolved to
        state: The new castle state (owned by the caller)
        applied: Accepted actions in apply order
        rejected: Apply-time rejections in evaluation order
        production, construction, upkeep: Phase results
        taxes: Gold collected in the taxes phase
        clamped: Resources that were negative before the clamp, with their values
        logs: Human-readable phase log lines in order
    """
    turn: int
    state: CastleState
    applied: List[Action]
    rejected: List[ActionRejection]
    production: ProductionResult
    construction: ConstructionResult
    upkeep: UpkeepResult
    taxes: int
    clamped: Dict[str, int] = field(default_factory=dict)
    logs: List[str] = field(default_factory=list)

    def applied_record(self) -> Dict[str, Any]:
        """Turn log record (a): the accepted actions for this tick."""
        return {
            "turn": self.turn,
            "applied": [action.to_dict() for action in self.applied],
        }

    def state_record(self) -> Dict[str, Any]:
        """Turn log record (b): the full state after this tick."""
        state = self.state.to_dict()
        turn = state.pop("turn")
        return {"turn": turn, "state": state}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn": self.turn,
            "state": self.state.to_dict(),
            "applied": [action.to_dict() for action in self.applied],
            "rejected": [rejection.to_dict() for rejection in self.rejected],
            "production": self.production.to_dict(),
            "construction": self.construction.to_dict(),
            "upkeep": self.upkeep.to_dict(),
            "taxes": self.taxes,
            "clamped": dict(self.clamped),
        }


def clamp_resources(state: CastleState) -> Dict[str, int]:
    """
    Floor gold, food and wood at zero (in-place).

    Returns:
        The resources that needed clamping and their pre-clamp values
    """
    clamped: Dict[str, int] = {}
    for name in CLAMPED_RESOURCES:
        value = getattr(state, name)
        if value < 0:
            clamped[name] = value
            setattr(state, name, 0)
    return clamped


def find_invariant_violations(state: CastleState) -> List[str]:
    """List every invariant the state breaks (empty when healthy)."""
    problems: List[str] = []
    for name in CLAMPED_RESOURCES:
        if getattr(state, name) < 0:
            problems.append(f"{name} is negative ({getattr(state, name)})")
    if state.workers < 0:
        problems.append(f"workers is negative ({state.workers})")
    for job, count in state.jobs.to_dict().items():
        if count < 0:
            problems.append(f"{job} is negative ({count})")
    if state.jobs.total != state.workers:
        problems.append(f"jobs sum to {state.jobs.total} but workers is {state.workers}")
    if state.upgrade.active and state.upgrade.wood_required <= 0:
        problems.append(f"active upgrade requires {state.upgrade.wood_required} wood")
    return problems


def check_invariants(state: CastleState) -> None:
    """
    Raise if the state breaks an invariant.

    Raises:
        InvariantViolation: Listing every broken invariant
    """
    problems = find_invariant_violations(state)
    if problems:
        raise InvariantViolation(f"Turn {state.turn}: " + "; ".join(problems))


def resolve_tick(
    state: CastleState,
    actions: Sequence[Action],
    economy: EconomyConfig = DEFAULT_ECONOMY,
) -> TickResult:
    """
    Resolve one tick.

    Args:
        state: State before the tick (not modified)
        actions: Drained queue in submission order
        economy: Economy constants for the run

    Returns:
        TickResult holding the next state
    """
    next_state = state.clone()
    logs: List[str] = []

    resolution = ActionResolver(economy).resolve_actions(next_state, actions)
    logs.extend(resolution.logs)

    next_state.turn += 1

    production = ProductionResolver(economy).resolve(next_state)
    logs.append(str(production))

    construction = ConstructionResolver(economy).resolve(next_state)
    if construction.active:
        logs.append(
            f"Construction: {construction.progress_made} progress"
            + (f", {construction.idle_builders} builders idle (no wood)" if construction.idle_builders else "")
        )
    if construction.completed:
        logs.append(
            f"Upgrade complete! Castle is now level {construction.completed_level} "
            f"(+{construction.bonus} gold bonus)"
        )

    upkeep = UpkeepResolver(economy).resolve(next_state)
    if upkeep.starved:
        logs.append(f"Food shortage! Lost {upkeep.workers_lost} workers (shortage: {upkeep.shortage})")
    else:
        logs.append(f"Upkeep: -{upkeep.food_eaten} food")

    taxes = TaxResolver(economy).resolve(next_state)
    if taxes:
        logs.append(f"Taxes: +{taxes} gold")

    clamped = clamp_resources(next_state)

    return TickResult(
        turn=next_state.turn,
        state=next_state,
        applied=resolution.applied,
        rejected=resolution.rejected,
        production=production,
        construction=construction,
        upkeep=upkeep,
        taxes=taxes,
        clamped=clamped,
        logs=logs,
    )
