"""
ProductionResolver - Job output for one tick.

Job counts are valid by construction, so production needs no validation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from ..core.economy import EconomyConfig

if TYPE_CHECKING:
    from ..state.state import CastleState


@dataclass
class ProductionResult:
    """Resources produced this tick."""
    gold: int
    food: int
    wood: int

    def to_dict(self) -> Dict[str, Any]:
        return {"gold": self.gold, "food": self.food, "wood": self.wood}

    def __str__(self) -> str:
        return f"Production: +{self.gold} gold, +{self.food} food, +{self.wood} wood"


class ProductionResolver:
    """Stateless resolver for the production phase."""

    def __init__(self, economy: EconomyConfig):
        self.economy = economy

    def resolve(self, state: CastleState) -> ProductionResult:
        """Credit miners, farmers and lumberjacks output to the stockpiles (in-place)."""
        result = ProductionResult(
            gold=state.jobs.miners * self.economy.gold_per_miner,
            food=state.jobs.farmers * self.economy.food_per_farmer,
            wood=state.jobs.lumberjacks * self.economy.wood_per_lumberjack,
        )
        state.gold += result.gold
        state.food += result.food
        state.wood += result.wood
        return result
