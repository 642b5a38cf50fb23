"""Structured JSON logging for the HTTP service and CLI."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone


EXTRA_FIELDS = (
    "request_id",
    "jurisdiction_id",
    "asset_type",
    "binding_path",
    "score",
    "outcome",
    "binding_strength",
    "unclassified",
    "kb_hash_short",
    "duration_ms",
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class StderrHandler(logging.StreamHandler):
    """StreamHandler that always writes to the current sys.stderr."""

    def __init__(self):
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install the JSON handler on the tokenpilot logger."""
    logger = logging.getLogger("tokenpilot")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(isinstance(h, StderrHandler) for h in logger.handlers):
        handler = StderrHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    return logger
