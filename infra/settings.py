"""Runtime settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from infra.paths import LOG_DIR, TURN_LOG_DIR

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """
    Process-wide configuration for the castle front-ends.

    Attributes:
        economy: Economy preset name (see castle.core.economy.ECONOMY_PRESETS)
        tick_interval: Seconds between automatic ticks
        log_level: Root logging level
        log_json: Emit JSON log lines
        log_file: Application log file (None disables file logging)
        turn_log: JSONL turn log path (None disables the turn log)
        api_url: Base URL used by the HTTP client
    """
    economy: str = "engine"
    tick_interval: float = 1.0
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[Path] = LOG_DIR / "castle.log"
    turn_log: Optional[Path] = TURN_LOG_DIR / "game.jsonl"
    api_url: str = "http://localhost:8000"


def _optional_path(raw: Optional[str], default: Optional[Path]) -> Optional[Path]:
    if raw is None:
        return default
    if raw.strip().lower() in {"", "none", "off"}:
        return None
    return Path(raw)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from ``CASTLE_*`` environment variables.

    A ``.env`` file in the working directory is loaded first (existing
    variables win). Pass ``environ`` to read from a plain mapping instead.

    Raises:
        ValueError: If CASTLE_TICK_INTERVAL is not a positive number
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    defaults = Settings()
    raw_interval = environ.get("CASTLE_TICK_INTERVAL")
    try:
        tick_interval = float(raw_interval) if raw_interval is not None else defaults.tick_interval
    except ValueError:
        raise ValueError(f"CASTLE_TICK_INTERVAL must be a number, got {raw_interval!r}") from None
    if tick_interval <= 0:
        raise ValueError(f"CASTLE_TICK_INTERVAL must be positive, got {tick_interval}")

    return Settings(
        economy=environ.get("CASTLE_ECONOMY", defaults.economy),
        tick_interval=tick_interval,
        log_level=environ.get("CASTLE_LOG_LEVEL", defaults.log_level),
        log_json=environ.get("CASTLE_LOG_JSON", "").strip().lower() in _TRUE,
        log_file=_optional_path(environ.get("CASTLE_LOG_FILE"), defaults.log_file),
        turn_log=_optional_path(environ.get("CASTLE_TURN_LOG"), defaults.turn_log),
        api_url=environ.get("CASTLE_API_URL", defaults.api_url).rstrip("/"),
    )
