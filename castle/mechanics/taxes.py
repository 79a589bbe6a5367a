"""
TaxResolver - Income from castle level.

Runs strictly after upkeep, so tax gold can never be spent on food bought
earlier in the same tick and never masks a shortage.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..core.economy import EconomyConfig

if TYPE_CHECKING:
    from ..state.state import CastleState


class TaxResolver:
    """Stateless resolver for the taxes phase."""

    def __init__(self, economy: EconomyConfig):
        self.economy = economy

    def resolve(self, state: CastleState) -> int:
        """Credit taxes (in-place) and return the amount collected."""
        income = self.economy.tax_rate * state.castle_level
        state.gold += income
        return income
