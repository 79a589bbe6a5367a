"""
ConstructionResolver - Upgrade progress for one tick.

This module handles:
- Builders converting wood into upgrade progress, one unit each
- The once-per-tick completion check
- Level increase and completion bonus
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.economy import EconomyConfig
from ..state.state import UpgradeState

if TYPE_CHECKING:
    from ..state.state import CastleState


@dataclass
class ConstructionResult:
    """
    Result of the construction phase.

    Attributes:
        active: Whether an upgrade was in progress at the start of the phase
        progress_made: Wood turned into progress this tick
        idle_builders: Builders that found no wood (no penalty, no carry-over)
        completed_level: New castle level if the upgrade completed, else None
        bonus: Gold granted on completion
    """
    active: bool
    progress_made: int = 0
    idle_builders: int = 0
    completed_level: Optional[int] = None
    bonus: int = 0

    @property
    def completed(self) -> bool:
        return self.completed_level is not None

    @property
    def stalled(self) -> bool:
        """An upgrade is running but nothing was built this tick."""
        return self.active and self.progress_made == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active": self.active,
            "progress_made": self.progress_made,
            "idle_builders": self.idle_builders,
            "completed_level": self.completed_level,
            "bonus": self.bonus,
        }


class ConstructionResolver:
    """
    Stateless resolver for the construction phase.

    Completion is a hard threshold checked once after all builders have
    worked, never continuously.
    """

    def __init__(self, economy: EconomyConfig):
        self.economy = economy

    def resolve(self, state: CastleState) -> ConstructionResult:
        """
        Advance the active upgrade (in-place). No-op when no upgrade is active.
        """
        if not state.upgrade.active:
            return ConstructionResult(active=False)

        upgrade = state.upgrade
        result = ConstructionResult(active=True)

        for _ in range(state.jobs.builders):
            if state.wood > 0:
                state.wood -= 1
                upgrade.progress += 1
                result.progress_made += 1
            else:
                result.idle_builders += 1

        if upgrade.complete:
            state.castle_level += 1
            state.gold += self.economy.completion_bonus
            state.upgrade = UpgradeState.inactive()
            result.completed_level = state.castle_level
            result.bonus = self.economy.completion_bonus

        return result
