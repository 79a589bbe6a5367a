"""
CastleState - The authoritative economy snapshot.

CastleState holds:
- Resources (gold, food, wood)
- The workforce and its job allocation
- Upgrade progress and castle level
- The turn counter

It does NOT handle:
- Action validation or application (delegated to ActionResolver)
- Per-tick phases (delegated to the mechanics modules)
- Queueing or logging (owned by CastleEngine and the runtime layer)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.types import JobType, JOB_REMOVAL_ORDER


@dataclass
class JobCounts:
    """Number of workers assigned to each job."""
    miners: int = 0
    farmers: int = 0
    lumberjacks: int = 0
    builders: int = 0

    def get(self, job: JobType) -> int:
        return getattr(self, job.value)

    def set(self, job: JobType, count: int) -> None:
        setattr(self, job.value, count)

    @property
    def total(self) -> int:
        return self.miners + self.farmers + self.lumberjacks + self.builders

    def shrink(self, count: int) -> int:
        """
        Remove up to ``count`` assignments, builders first, miners last.

        Each job loses at most its own current count.

        Returns:
            Number of assignments actually removed
        """
        remaining = count
        for job in JOB_REMOVAL_ORDER:
            if remaining <= 0:
                break
            removed = min(remaining, self.get(job))
            self.set(job, self.get(job) - removed)
            remaining -= removed
        return count - max(remaining, 0)

    def to_dict(self) -> Dict[str, int]:
        return {
            "miners": self.miners,
            "farmers": self.farmers,
            "lumberjacks": self.lumberjacks,
            "builders": self.builders,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> JobCounts:
        return cls(
            miners=data.get("miners", 0),
            farmers=data.get("farmers", 0),
            lumberjacks=data.get("lumberjacks", 0),
            builders=data.get("builders", 0),
        )


@dataclass
class UpgradeState:
    """
    Castle upgrade progress.

    Inactive -> (StartUpgrade accepted) -> Active -> (progress >= wood_required) -> Inactive
    """
    active: bool = False
    target_level: Optional[int] = None
    progress: int = 0
    wood_required: int = 0

    @staticmethod
    def inactive() -> UpgradeState:
        return UpgradeState()

    @staticmethod
    def start(target_level: int, wood_required: int) -> UpgradeState:
        return UpgradeState(active=True, target_level=target_level, progress=0, wood_required=wood_required)

    @property
    def complete(self) -> bool:
        return self.active and self.progress >= self.wood_required

    def to_dict(self) -> Dict[str, Any]:
        if not self.active:
            return {"active": False}
        return {
            "active": True,
            "target_level": self.target_level,
            "progress": self.progress,
            "wood_required": self.wood_required,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> UpgradeState:
        if not data or not data.get("active"):
            return cls.inactive()
        return cls(
            active=True,
            target_level=data["target_level"],
            progress=data.get("progress", 0),
            wood_required=data["wood_required"],
        )


@dataclass
class CastleState:
    """
    The central economy state.

    A single mutable instance is owned by the engine and only changed while a
    tick is being resolved. Everything handed to callers is a clone.

    Attributes:
        turn: Number of resolved ticks
        gold, food, wood: Stockpiles (never negative after a tick)
        workers: Total workforce
        castle_level: Completed upgrades
        jobs: Job allocation; sums to ``workers`` after every tick
        upgrade: The (single) upgrade in progress, if any
    """
    turn: int = 0
    gold: int = 0
    food: int = 0
    wood: int = 0
    workers: int = 0
    castle_level: int = 0
    jobs: JobCounts = field(default_factory=JobCounts)
    upgrade: UpgradeState = field(default_factory=UpgradeState)

    @classmethod
    def default(cls) -> CastleState:
        """
        The fixed starting castle.

        Replays always start from here, so these numbers are part of the turn
        log format and must not change.
        """
        return cls(
            turn=0,
            gold=25,
            food=18,
            wood=0,
            workers=5,
            castle_level=0,
            jobs=JobCounts(miners=2, farmers=2, lumberjacks=1, builders=0),
            upgrade=UpgradeState.inactive(),
        )

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize castle state to dictionary.

        Returns:
            JSON-serializable dictionary of the complete state
        """
        return {
            "turn": self.turn,
            "gold": self.gold,
            "food": self.food,
            "wood": self.wood,
            "workers": self.workers,
            "castle_level": self.castle_level,
            "jobs": self.jobs.to_dict(),
            "upgrade": self.upgrade.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CastleState:
        """
        Deserialize castle state from dictionary.

        Args:
            data: Dictionary from to_dict()

        Returns:
            Reconstructed CastleState
        """
        return cls(
            turn=data["turn"],
            gold=data["gold"],
            food=data["food"],
            wood=data["wood"],
            workers=data["workers"],
            castle_level=data["castle_level"],
            jobs=JobCounts.from_dict(data["jobs"]),
            upgrade=UpgradeState.from_dict(data.get("upgrade")),
        )

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize to JSON (compact unless ``indent`` is given)."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=False)

    @classmethod
    def from_json(cls, json_str: str) -> CastleState:
        if not json_str:
            raise ValueError("Must provide a JSON string")
        return cls.from_dict(json.loads(json_str))

    def clone(self) -> CastleState:
        """
        Create a deep copy of this state.

        Returns:
            Independent copy; mutating it never affects this state
        """
        return CastleState.from_dict(self.to_dict())

    def __str__(self) -> str:
        upgrade = (
            f", upgrade={self.upgrade.progress}/{self.upgrade.wood_required}"
            if self.upgrade.active else ""
        )
        return (
            f"CastleState(turn={self.turn}, gold={self.gold}, food={self.food}, "
            f"wood={self.wood}, workers={self.workers}, level={self.castle_level}{upgrade})"
        )
