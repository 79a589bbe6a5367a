"""
State management for the Castle economy simulator.

This module provides:
- JobCounts: Worker allocation per job
- UpgradeState: Castle upgrade progress
- CastleState: The authoritative economy snapshot
"""

from .state import CastleState, JobCounts, UpgradeState

__all__ = [
    "CastleState",
    "JobCounts",
    "UpgradeState",
]
