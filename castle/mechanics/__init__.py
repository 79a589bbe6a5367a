"""
Mechanics module - Per-tick resolution systems.

This module provides stateless resolvers, one per tick phase:
- ActionResolver: Orders, re-validates and applies queued actions
- ProductionResolver: Job output
- ConstructionResolver: Builders turning wood into upgrade progress
- UpkeepResolver: Feeding workers, starvation losses
- TaxResolver: Income from castle level

All resolvers are stateless - they take a CastleState, mutate it in place
and return a result object describing what happened.
"""

from .actions import ActionResolver, ActionResolutionResult, ActionRejection, order_actions
from .production import ProductionResolver, ProductionResult
from .construction import ConstructionResolver, ConstructionResult
from .upkeep import UpkeepResolver, UpkeepResult, workers_lost_for
from .taxes import TaxResolver

__all__ = [
    "ActionResolver",
    "ActionResolutionResult",
    "ActionRejection",
    "order_actions",
    "ProductionResolver",
    "ProductionResult",
    "ConstructionResolver",
    "ConstructionResult",
    "UpkeepResolver",
    "UpkeepResult",
    "workers_lost_for",
    "TaxResolver",
]
