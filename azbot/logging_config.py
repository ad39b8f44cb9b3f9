"""JSON logging configuration for Azbot API."""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

# Service principal secrets travel as query params (proxy) or form fields (token endpoint).
_SECRET_PATTERN = re.compile(r"(clientSecret|client_secret|subscription-key)=([^&\s]+)", re.IGNORECASE)


def redact_secrets(text: str) -> str:
    return _SECRET_PATTERN.sub(r"\1=***", text)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(record.getMessage()),
        }

        if hasattr(record, "context") and record.context:
            log_data["context"] = record.context

        if record.exc_info:
            log_data["exception"] = redact_secrets(self.formatException(record.exc_info))

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure JSON logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(f"azbot.{name}")


class LoggerAdapter(logging.LoggerAdapter):
    """Attaches the (channel, conversation, user) key to every record as `context`."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = kwargs.pop("context", None)
        if context or self.extra:
            combined_context = {**self.extra, **(context or {})}
            kwargs["extra"] = {"context": combined_context}
        return msg, kwargs


def conversation_logger(logger: logging.Logger, channel_id: str, conversation_id: str, user_id: str) -> LoggerAdapter:
    return LoggerAdapter(logger, {"channel": channel_id, "conversation": conversation_id, "user": user_id})
