import threading
import time

import pytest

from castle import CastleEngine
from runtime.scheduler import AutoTicker


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_autoticker_advances_until_stopped():
    engine = CastleEngine()
    ticker = AutoTicker(engine.advance, interval=0.01)

    assert ticker.start()
    assert ticker.is_running
    assert not ticker.start()

    assert wait_for(lambda: engine.turn >= 3)
    assert ticker.stop()
    assert not ticker.is_running

    stopped_at = engine.turn
    time.sleep(0.05)
    assert engine.turn == stopped_at
    assert ticker.ticks == stopped_at
    assert not ticker.stop()


def test_autoticker_can_restart():
    engine = CastleEngine()
    ticker = AutoTicker(engine.advance, interval=0.01)
    ticker.start()
    assert wait_for(lambda: engine.turn >= 1)
    ticker.stop()
    first = engine.turn

    ticker.start()
    assert wait_for(lambda: engine.turn > first)
    ticker.stop()


def test_stop_waits_for_tick_underway():
    entered = threading.Event()
    release = threading.Event()
    finished = []

    def slow_advance():
        entered.set()
        release.wait(2.0)
        finished.append(True)

    ticker = AutoTicker(slow_advance, interval=0.01)
    ticker.start()
    assert entered.wait(2.0)

    stopper = threading.Thread(target=ticker.stop)
    stopper.start()
    time.sleep(0.05)
    assert finished == []
    release.set()
    stopper.join(2.0)

    assert finished == [True]
    assert not ticker.is_running


def test_autoticker_stops_itself_when_a_tick_fails():
    def broken_advance():
        raise RuntimeError("boom")

    ticker = AutoTicker(broken_advance, interval=0.01)
    ticker.start()
    assert wait_for(lambda: not ticker.is_running)
    assert ticker.ticks == 0


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        AutoTicker(lambda: None, interval=0)
