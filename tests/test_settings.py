from pathlib import Path

import pytest

from infra.paths import LOG_DIR, TURN_LOG_DIR
from infra.settings import load_settings


def test_defaults_from_empty_environment():
    settings = load_settings({})
    assert settings.economy == "engine"
    assert settings.tick_interval == 1.0
    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert settings.log_file == LOG_DIR / "castle.log"
    assert settings.turn_log == TURN_LOG_DIR / "game.jsonl"
    assert settings.api_url == "http://localhost:8000"


def test_environment_overrides():
    settings = load_settings({
        "CASTLE_ECONOMY": "documented",
        "CASTLE_TICK_INTERVAL": "0.25",
        "CASTLE_LOG_LEVEL": "DEBUG",
        "CASTLE_LOG_JSON": "yes",
        "CASTLE_LOG_FILE": "none",
        "CASTLE_TURN_LOG": "/tmp/castle/run.jsonl",
        "CASTLE_API_URL": "http://castle:9000/",
    })
    assert settings.economy == "documented"
    assert settings.tick_interval == 0.25
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True
    assert settings.log_file is None
    assert settings.turn_log == Path("/tmp/castle/run.jsonl")
    assert settings.api_url == "http://castle:9000"


@pytest.mark.parametrize("raw", ["fast", "0", "-1"])
def test_bad_tick_interval(raw):
    with pytest.raises(ValueError, match="CASTLE_TICK_INTERVAL"):
        load_settings({"CASTLE_TICK_INTERVAL": raw})
