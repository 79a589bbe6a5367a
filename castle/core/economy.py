"""
Economy constants.

Two constant sets are in circulation for this game: the rates the engine has
always run with, and the (lower) rates quoted in the player-facing tool
descriptions. Both are available as presets; a single run holds one fixed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict


@dataclass(frozen=True)
class EconomyConfig:
    """
    Fixed economy constants for a run.

    Attributes:
        gold_per_miner: Gold produced per miner per tick (G)
        food_per_farmer: Food produced per farmer per tick (F)
        wood_per_lumberjack: Wood produced per lumberjack per tick (W)
        hire_cost: Gold per hired worker
        food_price: Gold per unit of food bought
        upgrade_gold_per_level: Upgrade gold cost is this times the target level
        upgrade_wood_per_level: Wood required is this times the target level (K)
        completion_bonus: Flat gold granted when an upgrade completes
        tax_rate: Gold per castle level collected every tick
        food_per_worker: Food eaten per worker per tick
        workers_lost_per_shortage: Units of food shortage per worker lost (rounded up)
    """
    gold_per_miner: int = 2
    food_per_farmer: int = 3
    wood_per_lumberjack: int = 1
    hire_cost: int = 5
    food_price: int = 1
    upgrade_gold_per_level: int = 10
    upgrade_wood_per_level: int = 12
    completion_bonus: int = 5
    tax_rate: int = 1
    food_per_worker: int = 1
    workers_lost_per_shortage: int = 2

    def upgrade_gold_cost(self, castle_level: int) -> int:
        return self.upgrade_gold_per_level * (castle_level + 1)

    def upgrade_wood_required(self, castle_level: int) -> int:
        return self.upgrade_wood_per_level * (castle_level + 1)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EconomyConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown economy settings: {', '.join(unknown)}")
        return cls(**data)


ECONOMY_PRESETS: Dict[str, EconomyConfig] = {
    "engine": EconomyConfig(),
    "documented": EconomyConfig(
        gold_per_miner=1,
        food_per_farmer=2,
        wood_per_lumberjack=1,
        upgrade_wood_per_level=20,
    ),
}

DEFAULT_ECONOMY = ECONOMY_PRESETS["engine"]


def get_economy(name: str) -> EconomyConfig:
    """
    Look up an economy preset by name.

    Raises:
        ValueError: If no preset has that name
    """
    try:
        return ECONOMY_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown economy preset '{name}'. Available: {', '.join(sorted(ECONOMY_PRESETS))}"
        ) from None
