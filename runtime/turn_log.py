"""
JSONL turn log.

Each tick appends two lines: the applied-actions record, then the full-state
record. Replaying the applied records from the default castle reproduces
every state record (see runtime.replay).
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

from castle.resolver import TickResult
from infra.logger import get_logger

log = get_logger(__name__)


class TurnLogWriter:
    """
    Tick listener writing the turn log.

    Opening a writer truncates the file: one file holds one game, starting
    from the default state.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", encoding="utf-8")
        self._lock = threading.Lock()
        log.info("Turn log opened at %s", self.path)

    def __call__(self, result: TickResult) -> None:
        self.write_tick(result)

    def write_tick(self, result: TickResult) -> None:
        self.write_record(result.applied_record())
        self.write_record(result.state_record())

    def write_record(self, record: Dict[str, Any]) -> None:
        line = json.dumps(record, ensure_ascii=False)
        with self._lock:
            if self._file.closed:
                raise RuntimeError(f"Turn log {self.path} is closed")
            self._file.write(line + "\n")
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()

    def __enter__(self) -> TurnLogWriter:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def iter_turn_log(path: str | Path) -> Iterator[Dict[str, Any]]:
    """
    Yield records from a turn log, skipping blank lines.

    Raises:
        ValueError: If a line is not a JSON object with a ``turn``
    """
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({exc.msg})") from exc
            if not isinstance(record, dict) or "turn" not in record:
                raise ValueError(f"{path}:{lineno}: not a turn log record")
            yield record


def read_turn_log(path: str | Path) -> List[Dict[str, Any]]:
    return list(iter_turn_log(path))


def split_records(records: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split turn log records into (applied records, state records)."""
    applied = [r for r in records if "applied" in r]
    states = [r for r in records if "state" in r]
    return applied, states
