"""
Replay a turn log through a fresh engine.

Only the applied-actions records are fed back; the state records are used
to check that every intermediate state is reproduced exactly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from castle import CastleEngine, CastleState
from castle.core.economy import EconomyConfig, DEFAULT_ECONOMY
from infra.logger import get_logger

from .turn_log import read_turn_log, split_records

log = get_logger(__name__)


@dataclass
class ReplayMismatch:
    turn: int
    expected: Dict[str, Any]
    actual: Dict[str, Any]

    def differences(self) -> Dict[str, Any]:
        """Top-level state fields that differ, as {field: (expected, actual)}."""
        keys = set(self.expected) | set(self.actual)
        return {
            key: (self.expected.get(key), self.actual.get(key))
            for key in sorted(keys)
            if self.expected.get(key) != self.actual.get(key)
        }


@dataclass
class ReplayReport:
    """
    Outcome of a replay.

    Attributes:
        ticks: Ticks replayed
        states: Replayed states, one per tick
        mismatch: First state that differed from the log, if any
        rejected: Logged actions the replay rejected (turn, reason); non-empty
            means the log was not produced by this economy
    """
    ticks: int = 0
    states: List[CastleState] = field(default_factory=list)
    mismatch: Optional[ReplayMismatch] = None
    rejected: List[tuple] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.mismatch is None and not self.rejected

    @property
    def final_state(self) -> Optional[CastleState]:
        return self.states[-1] if self.states else None


def replay_records(
    records: List[Dict[str, Any]],
    economy: EconomyConfig = DEFAULT_ECONOMY,
    stop_on_mismatch: bool = True,
) -> ReplayReport:
    """
    Replay turn log records from the default initial state.

    Args:
        records: Parsed turn log (both record kinds, any order)
        economy: Economy the log was produced with
        stop_on_mismatch: Stop at the first state that differs

    Returns:
        ReplayReport

    Raises:
        ValueError: If applied records are not consecutive turns starting at 1,
            or a logged action is malformed
    """
    applied_records, state_records = split_records(records)
    expected_states = {r["turn"]: r for r in state_records}
    applied_records = sorted(applied_records, key=lambda r: r["turn"])

    engine = CastleEngine(economy=economy)
    report = ReplayReport()

    for record in applied_records:
        turn = record["turn"]
        if turn != engine.turn + 1:
            raise ValueError(f"Turn log skips from turn {engine.turn} to {turn}")

        for action_data in record["applied"]:
            admission = engine.enqueue(action_data)
            if not admission.accepted:
                raise ValueError(f"Turn {turn}: logged action is malformed: {admission.reason}")

        result = engine.advance()
        report.ticks += 1
        report.states.append(result.state)
        report.rejected.extend((turn, r.reason) for r in result.rejected)

        expected = expected_states.get(turn)
        if expected is None:
            continue
        actual = result.state_record()
        if actual != expected:
            mismatch = ReplayMismatch(turn=turn, expected=expected["state"], actual=actual["state"])
            log.warning("Replay diverged at turn %d: %s", turn, mismatch.differences())
            if report.mismatch is None:
                report.mismatch = mismatch
            if stop_on_mismatch:
                break

    log.info("Replayed %d ticks (%s)", report.ticks, "ok" if report.ok else "diverged")
    return report


def replay_turn_log(
    path: str | Path,
    economy: EconomyConfig = DEFAULT_ECONOMY,
    stop_on_mismatch: bool = True,
) -> ReplayReport:
    """Read a JSONL turn log and replay it (see replay_records)."""
    return replay_records(read_turn_log(path), economy=economy, stop_on_mismatch=stop_on_mismatch)
