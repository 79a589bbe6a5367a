"""
AutoTicker - periodic ticks on a background thread.

The ticker calls the same ``advance`` used for manual ticks; it has no tick
logic of its own. Ticks run back to back on a single thread, so they never
overlap, and stopping only takes effect between ticks.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from infra.logger import get_logger

log = get_logger(__name__)


class AutoTicker:
    """
    Cancellable repeating task around an ``advance`` callable.

    Args:
        advance: Called once per period (usually ``CastleEngine.advance``)
        interval: Seconds between ticks
    """

    def __init__(self, advance: Callable[[], Any], interval: float = 1.0):
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self._advance = advance
        self.interval = interval
        self.ticks = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop.is_set()

    def start(self) -> bool:
        """
        Start ticking.

        Returns:
            False if the ticker was already running (nothing changes)
        """
        with self._lock:
            if self.is_running:
                log.info("Auto-tick is already running")
                return False
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name="castle-autotick", daemon=True
            )
            self._thread.start()
        log.info("Auto-tick started (every %.3gs)", self.interval)
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Stop ticking; a tick already underway runs to completion first.

        Returns:
            False if the ticker was not running
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return False
            self._stop.set()
            self._thread = None
        if thread is not threading.current_thread():
            thread.join(timeout)
        log.info("Auto-tick stopped after %d ticks", self.ticks)
        return True

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                self._advance()
            except Exception:
                log.exception("Auto-tick failed; stopping the ticker")
                stop.set()
                break
            self.ticks += 1
