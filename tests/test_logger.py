import io
import json
import logging

from infra.logger import JsonLineFormatter, configure_logging, get_logger


def test_json_lines_escape_messages():
    record = logging.makeLogRecord({"name": "castle", "levelname": "INFO", "msg": 'said "%s"', "args": ("hi",)})
    payload = json.loads(JsonLineFormatter().format(record))
    assert payload["msg"] == 'said "hi"'
    assert payload["logger"] == "castle"


def test_configure_logging_replaces_handlers(monkeypatch, tmp_path):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)

    stream = io.StringIO()
    configure_logging("debug", json=True, logfile=tmp_path / "logs" / "castle.log", stream=stream)
    assert len(root.handlers) == 2
    assert root.level == logging.DEBUG

    get_logger("castle.test").info("turn %d", 3)
    assert json.loads(stream.getvalue().splitlines()[-1])["msg"] == "turn 3"
    assert (tmp_path / "logs" / "castle.log").exists()

    for handler in root.handlers:
        handler.close()
