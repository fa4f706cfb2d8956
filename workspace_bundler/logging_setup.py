"""Logging bootstrap for the CLI.

Two sinks:
- a Rich console handler (warnings by default, everything with --verbose)
- an optional JSONL file sink for machine-readable run logs
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from rich.logging import RichHandler

from .console import err_console

LOG_PATH_ENV = "WORKSPACE_BUNDLER_LOG_PATH"
LOG_LEVEL_ENV = "WORKSPACE_BUNDLER_LOG_LEVEL"

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JsonlHandler(logging.Handler):
    """Appends one JSON object per log record to a file."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "workspace-bundler.log", "ver": "1.0.0"},
                "logger": record.name,
                "message": record.getMessage(),
            }
            for key, value in record.__dict__.items():
                if key in _RESERVED_ATTRS:
                    continue
                base.setdefault(key, value)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_logging(verbose: bool = False, log_file: str | None = None, level: str | None = None) -> None:
    """Configure the package logger.

    Args:
        verbose: Show debug output on the console
        log_file: JSONL sink path (default: $WORKSPACE_BUNDLER_LOG_PATH, if set)
        level: File sink level (default: $WORKSPACE_BUNDLER_LOG_LEVEL or INFO)
    """
    logger = logging.getLogger("workspace_bundler")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Remove handlers from a previous init to avoid duplicates
    for handler in list(logger.handlers):
        if isinstance(handler, (JsonlHandler, RichHandler)):
            logger.removeHandler(handler)

    console_handler = RichHandler(console=err_console, show_time=False, show_path=False)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    log_file = log_file or os.environ.get(LOG_PATH_ENV)
    if log_file:
        level = (level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper()
        file_handler = JsonlHandler(log_file)
        file_handler.setLevel(getattr(logging, level, logging.INFO))
        logger.addHandler(file_handler)
