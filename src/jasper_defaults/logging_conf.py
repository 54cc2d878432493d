# src/jasper_defaults/logging_conf.py
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Context attributes the pipeline attaches through `extra=`
_CONTEXT_KEYS = ("report_path", "view_path", "stage", "org")


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in _CONTEXT_KEYS:
            if hasattr(record, k):
                payload[k] = getattr(record, k)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Log to stderr so stdout only carries the run's completion message.
    LOG_LEVEL / LOG_FORMAT (plain|json) apply when no explicit values are passed.
    """
    lvl = _LEVELS.get((level or os.getenv("LOG_LEVEL", "info")).strip().lower(), logging.INFO)
    style = (fmt or os.getenv("LOG_FORMAT", "plain")).strip().lower()

    handler = logging.StreamHandler(sys.stderr)
    if style == "json":
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt="[{levelname}] {name}: {message}", style="{"))

    root = logging.getLogger()
    root.setLevel(lvl)
    root.handlers[:] = [handler]

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(os.getenv("LOG_LEVEL_HTTPX", "WARNING").upper())
