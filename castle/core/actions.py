"""
Action definitions and utilities.

Actions represent commands submitted to the castle between ticks. This module provides:
- Action dataclass
- Syntactic (state-independent) parameter validation
- Action factory methods
- Action serialization
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple
import json

from .types import ActionType

# Parameter names required by each action kind, in wire order.
ACTION_PARAMS: Dict[ActionType, Tuple[str, ...]] = {
    ActionType.ASSIGN_JOBS: ("miners", "farmers", "lumberjacks", "builders"),
    ActionType.HIRE: ("count",),
    ActionType.FIRE: ("count",),
    ActionType.BUY_FOOD: ("amount",),
    ActionType.START_UPGRADE: (),
}


def _is_count(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass
class Action:
    """
    A command that will be evaluated at the start of the next tick.

    Actions consist of a type and the integer parameters for that type. The
    parameters are checked on construction; checks that depend on the castle
    state (gold, workforce, active upgrade) are deferred to apply time.

    Use static factory methods for convenient construction:
        - Action.assign_jobs(miners, farmers, lumberjacks, builders)
        - Action.hire(count)
        - Action.fire(count)
        - Action.buy_food(amount)
        - Action.start_upgrade()

    Or construct directly:
        - Action(ActionType.HIRE, {"count": 2}, requested_by="Accountant")
        - Action("Hire", {"count": 2})

    Provenance (``requested_by``, ``command_id``) is carried through to the
    turn log but never consulted by the engine.
    """

    type: ActionType
    params: Dict[str, Any] = field(default_factory=dict)
    requested_by: Optional[str] = None
    command_id: Optional[str] = None

    def __post_init__(self):
        """Validate action parameters after initialization."""
        if not isinstance(self.type, ActionType):
            self.type = ActionType.parse(self.type)
        self.params = dict(self.params)
        self._validate()

    def _validate(self) -> None:
        """
        Validate that parameters match the action type.

        Raises:
            ValueError: If parameters are missing, unexpected or not non-negative integers
        """
        expected = ACTION_PARAMS[self.type]
        unexpected = sorted(set(self.params) - set(expected))
        if unexpected:
            raise ValueError(f"{self.type} action does not accept parameters: {', '.join(unexpected)}")

        for name in expected:
            if name not in self.params:
                raise ValueError(f"{self.type} action requires '{name}' parameter")
            if not _is_count(self.params[name]):
                raise ValueError(
                    f"'{name}' must be a non-negative integer, got {self.params[name]!r}"
                )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert action to a JSON-serializable dictionary.

        Provenance keys are only present when set.
        """
        data: Dict[str, Any] = {
            "type": self.type.value,
            "params": dict(self.params),
        }
        if self.requested_by is not None:
            data["requested_by"] = self.requested_by
        if self.command_id is not None:
            data["command_id"] = self.command_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Action:
        """
        Create an action from a dictionary.

        Accepts both ``requested_by``/``command_id`` and the camelCase
        ``requestedBy``/``commandId`` spellings used by older clients.

        Raises:
            ValueError: If dictionary format is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Action must be a JSON object")
        if "type" not in data:
            raise ValueError("Action dictionary must contain 'type'")

        action_type = ActionType.parse(data["type"])
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError("Action 'params' must be an object")

        return cls(
            type=action_type,
            params=params,
            requested_by=data.get("requested_by", data.get("requestedBy")),
            command_id=data.get("command_id", data.get("commandId")),
        )

    def to_json(self) -> str:
        """Convert action to JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> Action:
        """Create action from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @property
    def priority(self) -> int:
        return self.type.priority

    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.type == ActionType.ASSIGN_JOBS:
            p = self.params
            return (
                f"ASSIGN miners={p['miners']} farmers={p['farmers']} "
                f"lumberjacks={p['lumberjacks']} builders={p['builders']}"
            )
        elif self.type == ActionType.HIRE:
            return f"HIRE {self.params['count']}"
        elif self.type == ActionType.FIRE:
            return f"FIRE {self.params['count']}"
        elif self.type == ActionType.BUY_FOOD:
            return f"BUY_FOOD {self.params['amount']}"
        elif self.type == ActionType.START_UPGRADE:
            return "START_UPGRADE"
        return f"{self.type.name}({self.params})"

    # FACTORY METHODS
    @staticmethod
    def assign_jobs(
        miners: int,
        farmers: int,
        lumberjacks: int,
        builders: int,
        **provenance: Any,
    ) -> Action:
        """
        Create an ASSIGN_JOBS action.

        Args:
            miners, farmers, lumberjacks, builders: New job counts; must sum to the
                workforce at apply time
            **provenance: Optional ``requested_by`` / ``command_id``
        """
        return Action(
            ActionType.ASSIGN_JOBS,
            {"miners": miners, "farmers": farmers, "lumberjacks": lumberjacks, "builders": builders},
            **provenance,
        )

    @staticmethod
    def hire(count: int, **provenance: Any) -> Action:
        """Create a HIRE action for ``count`` workers."""
        return Action(ActionType.HIRE, {"count": count}, **provenance)

    @staticmethod
    def fire(count: int, **provenance: Any) -> Action:
        """Create a FIRE action for ``count`` workers."""
        return Action(ActionType.FIRE, {"count": count}, **provenance)

    @staticmethod
    def buy_food(amount: int, **provenance: Any) -> Action:
        """Create a BUY_FOOD action for ``amount`` food."""
        return Action(ActionType.BUY_FOOD, {"amount": amount}, **provenance)

    @staticmethod
    def start_upgrade(**provenance: Any) -> Action:
        """Create a START_UPGRADE action for the next castle level."""
        return Action(ActionType.START_UPGRADE, {}, **provenance)
