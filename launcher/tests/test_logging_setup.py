import json
import logging

from dayz_launcher.logging_setup import LAUNCHER_LOGGER, setup_logging
from dayz_launcher.settings import Settings


def _flush():
    for h in logging.getLogger(LAUNCHER_LOGGER).handlers:
        h.flush()


def test_file_log_written_as_json(tmp_path):
    setup_logging(Settings(LOG_DIR=tmp_path / "logs", LOG_JSON=True, LOG_LEVEL="INFO"))
    logging.getLogger("dayz.launcher.test").info("hello %s", "world")
    _flush()

    lines = (tmp_path / "logs" / "launcher.log").read_text(encoding="utf-8").splitlines()
    entry = json.loads(lines[-1])
    assert entry["message"] == "hello world"
    assert entry["name"] == "dayz.launcher.test"
    assert entry["level"] == "INFO"


def test_repeated_setup_does_not_duplicate_file_handlers(tmp_path):
    settings = Settings(LOG_DIR=tmp_path, LOG_LEVEL="INFO")
    setup_logging(settings)
    setup_logging(settings)
    assert len(logging.getLogger(LAUNCHER_LOGGER).handlers) == 1

    setup_logging(Settings(LOG_LEVEL="INFO"))
    assert logging.getLogger(LAUNCHER_LOGGER).handlers == []
