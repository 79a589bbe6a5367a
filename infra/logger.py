from __future__ import annotations

import json as jsonlib
import logging
import sys
from pathlib import Path
from typing import IO, Optional, Union

from infra.paths import LOG_DIR

# Centralized logging setup shared by the API, the CLI and the auto-tick thread.
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s %(name)s:%(lineno)d] %(message)s"

# Chatty client libraries stay at WARNING unless the castle itself is at DEBUG.
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "uvicorn.access")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped properly."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "line": record.lineno,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return jsonlib.dumps(payload, ensure_ascii=False)


def configure_logging(
    level: Union[str, int] = "INFO",
    *,
    json: bool = False,
    logfile: str | Path | None = LOG_DIR / "castle.log",
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure the root logger with a console handler + optional file handler.

    Calling it again replaces the previous handlers (the CLI reconfigures
    after parsing --log-level).

    Args:
        level: Logging level name or int (e.g., "debug", logging.INFO).
        json: Emit JSON lines when True; otherwise a human-friendly format.
        logfile: File path to append logs; set to None to disable file output.
        stream: Console stream (default: stdout).
    """
    formatter: logging.Formatter = JsonLineFormatter() if json else logging.Formatter(DEFAULT_FORMAT)
    if isinstance(level, str):
        level = level.upper()

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(stream or sys.stdout)
    console.setFormatter(formatter)
    handlers.append(console)

    if logfile is not None:
        log_path = Path(logfile)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)

    quiet_level = logging.DEBUG if root.getEffectiveLevel() <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.captureWarnings(True)


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger; configure_logging() should be called once on startup."""
    return logging.getLogger(name)
