"""
Logging setup for the SuperMall backend

Every module keeps its own ``logger = logging.getLogger(__name__)``. This
module only configures the root logger once at startup:

- level names DEBUG, INFO, WARN, ERROR, FATAL (WARN and FATAL are aliases
  for WARNING and CRITICAL)
- one JSON object per line with timestamp, level, logger, message, any
  metadata passed through ``extra={"meta": {...}}`` and a serialized exception

``log_action`` is the shorthand used for user-facing actions (wishlist toggles,
offer redemptions, status changes) so they all land with the same shape.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LEVEL_ALIASES = {
    "WARN": logging.WARNING,
    "FATAL": logging.CRITICAL,
}

ACTION_LOGGER_NAME = "supermall.actions"


def resolve_level(level_name: Optional[str]) -> int:
    """Map a level name to a logging level, unknown names fall back to DEBUG"""
    if not level_name:
        return logging.DEBUG
    name = level_name.upper()
    if name in LEVEL_ALIASES:
        return LEVEL_ALIASES[name]
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": "FATAL" if record.levelno >= logging.CRITICAL else record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        meta = getattr(record, "meta", None)
        if isinstance(meta, dict):
            for key, value in meta.items():
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload["error"] = {
                "name": exc_type.__name__,
                "message": str(exc_value),
                "stack": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(level_name: Optional[str] = None, json_format: bool = True) -> None:
    """Configure the root logger (idempotent, replaces existing handlers)"""
    root = logging.getLogger()
    root.setLevel(resolve_level(level_name))

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    root.addHandler(handler)


def log_action(message: str, **meta: Any) -> None:
    """Log a user or admin action at INFO with structured metadata"""
    logging.getLogger(ACTION_LOGGER_NAME).info(message, extra={"meta": meta})
