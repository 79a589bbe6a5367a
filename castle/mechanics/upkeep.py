"""
UpkeepResolver - Feeding the workforce.

Every worker eats each tick. Food that cannot be covered costs workers:
one worker per ``workers_lost_per_shortage`` units of shortage, rounded up.
Lost workers are taken out of the job allocation builders first, then
lumberjacks, farmers and miners, so the job sum still matches the workforce
going into the next tick.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from ..core.economy import EconomyConfig

if TYPE_CHECKING:
    from ..state.state import CastleState


@dataclass
class UpkeepResult:
    food_eaten: int
    shortage: int = 0
    workers_lost: int = 0

    @property
    def starved(self) -> bool:
        return self.workers_lost > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "food_eaten": self.food_eaten,
            "shortage": self.shortage,
            "workers_lost": self.workers_lost,
        }


def workers_lost_for(shortage: int, per_worker: int) -> int:
    """Ceiling division: a partial shortfall still costs a whole worker."""
    if shortage <= 0:
        return 0
    return -(-shortage // per_worker)


class UpkeepResolver:
    """Stateless resolver for the upkeep phase."""

    def __init__(self, economy: EconomyConfig):
        self.economy = economy

    def resolve(self, state: CastleState) -> UpkeepResult:
        """Consume food for the workforce and apply starvation losses (in-place)."""
        needed = state.workers * self.economy.food_per_worker
        state.food -= needed

        if state.food >= 0:
            return UpkeepResult(food_eaten=needed)

        shortage = -state.food
        state.food = 0
        lost = min(state.workers, workers_lost_for(shortage, self.economy.workers_lost_per_shortage))
        state.workers -= lost
        if lost > 0:
            state.jobs.shrink(lost)

        return UpkeepResult(food_eaten=needed - shortage, shortage=shortage, workers_lost=lost)
