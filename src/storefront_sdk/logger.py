from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

REDACTED_KEYS = frozenset(
    {
        "token",
        "access_token",
        "authorization",
        "password",
        "secret",
        "email",
        "phone",
        "address",
    }
)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    level = logging.DEBUG if os.getenv("STOREFRONT_DEBUG") else logging.INFO
    logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def redact(context: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in context.items() if key.lower() not in REDACTED_KEYS}


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **context: Any) -> None:
    if not logger.isEnabledFor(level):
        return
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "event": event,
        **redact(context),
    }
    logger.log(level, json.dumps(payload, default=str))
