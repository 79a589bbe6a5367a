"""
CastleEngine - Main engine interface.

This is the primary API for the Castle economy simulator. It owns the single
authoritative state and the pending action queue, and advances them one tick
at a time through the pure ``resolve_tick`` core.

Usage:
    from castle import CastleEngine, Action

    engine = CastleEngine()
    engine.enqueue(Action.hire(2, requested_by="Accountant"))
    engine.enqueue(Action.assign_jobs(3, 2, 2, 0))
    result = engine.advance()

    print(result.state.workers, [r.reason for r in result.rejected])

Threading:
    ``enqueue``, ``advance`` and ``get_state`` are serialized by one lock, so a
    caller can never observe a state mid-tick and two ticks never overlap.
    Front-ends (HTTP, CLI, auto-tick timer) all go through the same ``advance``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Union

from .core.actions import Action
from .core.economy import EconomyConfig, DEFAULT_ECONOMY
from .core.types import EnqueueResult
from .queue import ActionQueue, QueuedAction
from .resolver import TickResult, find_invariant_violations, resolve_tick
from .state.state import CastleState

log = logging.getLogger(__name__)

TickListener = Callable[[TickResult], None]


class CastleEngine:
    """
    Castle engine - owns state and queue, runs ticks.

    Attributes:
        economy: Economy constants, fixed for the lifetime of the engine
    """

    def __init__(
        self,
        economy: EconomyConfig = DEFAULT_ECONOMY,
        initial_state: Optional[CastleState] = None,
    ):
        """
        Initialize the engine.

        Args:
            economy: Economy constants for the run
            initial_state: Starting state (default: ``CastleState.default()``).
                Replays are only valid from the default.
        """
        self.economy = economy
        self._state = initial_state.clone() if initial_state is not None else CastleState.default()
        self._queue = ActionQueue()
        self._lock = threading.RLock()
        self._listeners: List[TickListener] = []

        log.info("Castle engine initialized: %s", self._state)

    # ------------------------------------------------------------------#
    # Submission interface
    # ------------------------------------------------------------------#
    def enqueue(self, action: Union[Action, Dict[str, Any]]) -> EnqueueResult:
        """
        Admit an action for the next tick.

        Args:
            action: Action or its dict form

        Returns:
            EnqueueResult with ``applies_at_turn`` or the admission error
        """
        with self._lock:
            result = self._queue.admit(action, self._state.turn)
        if not result.accepted:
            log.info("Action refused at admission: %s", result.reason)
        return result

    def advance(self) -> TickResult:
        """
        Advance the castle by one tick.

        Drains the queue, resolves the tick, replaces the state and notifies
        tick listeners (turn log writers and the like).

        Returns:
            TickResult for the resolved tick
        """
        with self._lock:
            actions = self._queue.drain()
            result = resolve_tick(self._state, actions, self.economy)
            self._state = result.state
            result.state = self._state.clone()

            self._log_tick(result)
            for listener in list(self._listeners):
                listener(result)

        return result

    def get_state(self) -> CastleState:
        """Return a copy of the current state."""
        with self._lock:
            return self._state.clone()

    def pending_actions(self) -> List[QueuedAction]:
        """Actions admitted since the last tick, in submission order."""
        with self._lock:
            return self._queue.pending()

    @property
    def turn(self) -> int:
        with self._lock:
            return self._state.turn

    # ------------------------------------------------------------------#
    # Listeners
    # ------------------------------------------------------------------#
    def add_tick_listener(self, listener: TickListener) -> None:
        """Register a callback invoked with every TickResult, inside the tick lock."""
        self._listeners.append(listener)

    def remove_tick_listener(self, listener: TickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    def _log_tick(self, result: TickResult) -> None:
        log.debug("=== TICK %d ===", result.turn)
        for line in result.logs:
            log.debug(line)
        for rejection in result.rejected:
            log.warning("Turn %d: %s rejected: %s", result.turn, rejection.action.type, rejection.reason)
        if result.upkeep.starved:
            log.warning(
                "Turn %d: food shortage of %d cost %d workers",
                result.turn, result.upkeep.shortage, result.upkeep.workers_lost,
            )
        if result.clamped:
            log.error("Turn %d: negative resources clamped %s", result.turn, result.clamped)
        for problem in find_invariant_violations(self._state):
            log.error("Turn %d: invariant violated: %s", result.turn, problem)
        log.info("Turn %d resolved: %s", result.turn, self._state)
