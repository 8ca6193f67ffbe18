"""
App-layer JSONL logging bootstrap.
Initializes a single canonical JSONL sink early in CLI startup, plus an
optional filtered console handler for --verbose runs.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from .ui.log_filter import SyncErrorLogFilter

DEFAULT_PATH = os.environ.get(
    "ADDON_MANAGER_LOG_PATH",
    str(Path.home() / ".addon-manager" / "logs" / "addon-manager.log.jsonl"),
)
DEFAULT_LEVEL = os.environ.get("ADDON_MANAGER_LOG_LEVEL", "INFO").upper()

# Standard LogRecord attributes; anything else on a record is an extra
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
    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        base = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": {"name": "addon-manager.log", "ver": "1.0.0"},
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k in _RESERVED_ATTRS:
                continue
            base.setdefault(k, v)
        return base

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_logging(path: str | None = None, level: str | None = None, verbose: bool = False) -> None:
    path = path or DEFAULT_PATH
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else getattr(logging, level, logging.INFO))
    # Remove handlers installed by a previous call to avoid duplicates
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler) or getattr(h, "_addon_manager_console", False):
            root.removeHandler(h)
    root.addHandler(JsonlHandler(path))

    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        console_handler.addFilter(SyncErrorLogFilter())
        console_handler._addon_manager_console = True  # type: ignore[attr-defined]
        root.addHandler(console_handler)
