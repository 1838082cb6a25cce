"""Logging setup shared by the API and the demo script."""

import json
import logging
import sys
from typing import Any, Optional


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "service": self.service_name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = getattr(record, "context", None)
        if context:
            log_data.update(context)

        return json.dumps(log_data, default=str)


def configure_logging(
    service_name: str = "agroconnect",
    log_level: str = "INFO",
    use_json: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        service_name: Name attached to every JSON record
        log_level: Level name such as "INFO" or "DEBUG"
        use_json: Emit JSON lines instead of plain text
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        handler.setFormatter(JsonFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s",
            "%Y-%m-%d %H:%M:%S",
        ))
    root_logger.addHandler(handler)


class ContextAdapter(logging.LoggerAdapter):
    """Attach a fixed context dict to every record."""

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {}).setdefault("context", {}).update(self.extra)
        return msg, kwargs


def get_logger(name: str, context: Optional[dict[str, Any]] = None) -> logging.LoggerAdapter:
    """Get a module logger, optionally carrying extra context fields."""
    return ContextAdapter(logging.getLogger(name), context or {})
