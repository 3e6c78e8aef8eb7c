"""
Structured logging helpers.

Every event is written as one JSON object per line on the ``imaginify`` logger.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

LOGGER_NAME = "imaginify"
HANDLER_NAME = "imaginify-stdout"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the application logger."""
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_event(event: str, level: int = logging.INFO, **fields: Any):
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    payload.update(fields)
    logger.log(level, json.dumps(payload, default=str, ensure_ascii=True))
