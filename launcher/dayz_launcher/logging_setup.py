from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from .settings import Settings

LAUNCHER_LOGGER = "dayz.launcher"
LOG_FILE_NAME = "launcher.log"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers reading the container output."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _formatter(json_lines: bool) -> logging.Formatter:
    if json_lines:
        return _JsonFormatter()
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _file_handler(log_dir: Path, level: str) -> Optional[logging.Handler]:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_dir / LOG_FILE_NAME, maxBytes=5_000_000, backupCount=3,
                                      encoding="utf-8")
    except OSError as e:
        logging.getLogger(LAUNCHER_LOGGER).warning(
            "Could not open %s in %s (%s), logging to console only.", LOG_FILE_NAME, log_dir, e)
        return None
    handler.setLevel(level)
    return handler


def setup_logging(settings: Settings) -> None:
    """Configure the root logger once per process; safe to call again (handlers are replaced)."""
    level = settings.log_level.upper()
    fmt = _formatter(settings.log_json)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(fmt)
    root.addHandler(console_handler)

    launcher_log = logging.getLogger(LAUNCHER_LOGGER)
    for h in list(launcher_log.handlers):
        launcher_log.removeHandler(h)
        h.close()
    if settings.log_dir is not None:
        fh = _file_handler(settings.log_dir, level)
        if fh is not None:
            fh.setFormatter(fmt)
            launcher_log.addHandler(fh)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
