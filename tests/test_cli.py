import logging

import pytest

from castle import Action, CastleEngine
from castle_cli import CastleShell, format_state, main
from runtime.session import CastleSession
from runtime.turn_log import TurnLogWriter


@pytest.fixture
def shell():
    session = CastleSession()
    try:
        yield CastleShell(session)
    finally:
        session.close()


def test_queue_and_tick(shell):
    assert shell.handle("hire 2") == "OK hire 2 queued (applies at turn 1)"
    assert shell.handle("assign 3 3 1 0") == "OK job assignment queued (applies at turn 1)"
    assert "HIRE 2" in shell.handle("pending")

    output = shell.handle("tick")
    assert output.startswith("Advanced to turn 1")
    assert "applied:  HIRE 2" in output
    state = shell.session.state()
    assert state.workers == 7
    assert state.jobs.miners == 3
    assert shell.handle("pending") == "No actions queued"


def test_rejections_are_reported_on_tick(shell):
    shell.handle("buy 500")
    output = shell.handle("tick")
    assert "rejected: Not enough gold to buy 500 food (need 500, have 25)" in output


def test_bad_input(shell):
    assert "non-negative integer" in shell.handle("hire -1")
    assert shell.handle("assign 1 2") == "Usage: assign <miners> <farmers> <lumberjacks> <builders>"
    assert shell.handle("buy lots") == "All arguments must be integers"
    assert shell.handle("summon dragon").startswith("Unknown command: summon")
    assert shell.handle("autotick sideways") == "Usage: autotick <start|stop|status>"
    assert shell.handle("   ") == ""


def test_autotick_and_quit(shell):
    assert shell.handle("autotick status") == "Auto-tick is disabled"
    assert shell.handle("autotick start") == "Auto-tick started"
    assert shell.handle("autotick status") == "Auto-tick is enabled"
    assert shell.handle("autotick stop") == "Auto-tick stopped"
    assert shell.handle("quit") == "Goodbye!"
    assert shell.done


def test_format_state_shows_upgrade_progress():
    engine = CastleEngine()
    engine.enqueue(Action.start_upgrade())
    text = format_state(engine.advance().state)
    assert "Target level: 1" in text
    assert "Progress:     0/12 (0.0%)" in text


def test_main_replay(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("CASTLE_LOG_FILE", "none")
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    path = tmp_path / "game.jsonl"
    engine = CastleEngine()
    with TurnLogWriter(path) as writer:
        engine.add_tick_listener(writer)
        engine.enqueue(Action.hire(1))
        engine.advance()
        engine.advance()

    assert main(["--replay", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Replayed 2 ticks" in out
    assert "Workers:      6" in out


def test_interval_must_be_positive(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--interval", "0", "--replay", "unused.jsonl"])
    assert excinfo.value.code == 2
    assert "--interval must be positive" in capsys.readouterr().err


def test_log_level_defaults_to_warning_and_follows_flag(tmp_path, monkeypatch):
    monkeypatch.setenv("CASTLE_LOG_FILE", "none")
    monkeypatch.setenv("CASTLE_LOG_LEVEL", "DEBUG")
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    path = tmp_path / "empty.jsonl"
    path.write_text("", encoding="utf-8")

    assert main(["--replay", str(path)]) == 0
    assert root.level == logging.WARNING

    assert main(["--replay", str(path), "--log-level", "debug"]) == 0
    assert root.level == logging.DEBUG
