from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from castle import Action, CastleEngine, CastleState, EnqueueResult, TickResult
from castle.core.economy import EconomyConfig, DEFAULT_ECONOMY, get_economy
from infra.logger import get_logger
from infra.settings import Settings

from .events import extract_events
from .scheduler import AutoTicker
from .turn_log import TurnLogWriter

log = get_logger(__name__)

_EVENT_LEVELS = {"INFO": "info", "LOW": "info", "MEDIUM": "warning", "HIGH": "warning", "CRITICAL": "error"}


class CastleSession:
    """
    One running game as seen by the front-ends (HTTP API, CLI).

    Bundles the engine with its turn log and the auto-tick timer. Manual and
    automatic ticks both go through ``CastleEngine.advance``.
    """

    def __init__(
        self,
        economy: EconomyConfig = DEFAULT_ECONOMY,
        turn_log: Optional[Union[str, Path]] = None,
        tick_interval: float = 1.0,
    ):
        self.engine = CastleEngine(economy=economy)
        self.ticker = AutoTicker(self.engine.advance, interval=tick_interval)
        self.last_events: List[Dict[str, Any]] = []
        self._last_state = self.engine.get_state()

        self.turn_log: Optional[TurnLogWriter] = None
        if turn_log is not None:
            self.turn_log = TurnLogWriter(turn_log)
            self.engine.add_tick_listener(self.turn_log)
        self.engine.add_tick_listener(self._on_tick)

        log.info("CastleSession ready (turn log: %s)", turn_log or "disabled")

    @classmethod
    def from_settings(cls, settings: Settings) -> CastleSession:
        return cls(
            economy=get_economy(settings.economy),
            turn_log=settings.turn_log,
            tick_interval=settings.tick_interval,
        )

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    def enqueue(self, action: Union[Action, Dict[str, Any]]) -> EnqueueResult:
        return self.engine.enqueue(action)

    def advance(self) -> TickResult:
        return self.engine.advance()

    def state(self) -> CastleState:
        return self.engine.get_state()

    @property
    def turn(self) -> int:
        return self.engine.turn

    # ------------------------------------------------------------------#
    # Auto-tick
    # ------------------------------------------------------------------#
    def start_autotick(self) -> bool:
        return self.ticker.start()

    def stop_autotick(self) -> bool:
        return self.ticker.stop()

    @property
    def autotick_running(self) -> bool:
        return self.ticker.is_running

    def close(self) -> None:
        """Stop the ticker (letting a running tick finish) and close the turn log."""
        self.ticker.stop()
        if self.turn_log is not None:
            self.engine.remove_tick_listener(self.turn_log)
            self.turn_log.close()

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    def _on_tick(self, result: TickResult) -> None:
        events = extract_events(prev_state=self._last_state, result=result)
        for event in events:
            level = _EVENT_LEVELS.get(event["severity"], "info")
            getattr(log, level)("Turn %d event %s: %s", result.turn, event["type"], event)
        self.last_events = events
        self._last_state = result.state.clone()
