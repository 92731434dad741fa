from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

# LogRecord attributes that are not user-supplied extras
_RESERVED = {
    "levelname", "levelno", "name", "msg", "args", "exc_info", "exc_text", "stack_info",
    "lineno", "pathname", "filename", "module", "funcName", "created", "msecs",
    "relativeCreated", "thread", "threadName", "processName", "process", "message",
    "asctime", "taskName",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # pass through extra fields
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            payload[key] = value
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_json_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Send all logs to stderr as one JSON object per line

    Args:
        level: Root log level; defaults to SQUARE_LOG_LEVEL (INFO)
    """
    if level is None:
        from .config import SquareSettings
        level = SquareSettings().LOG_LEVEL
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    # Clear existing handlers to avoid duplicate logs
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
