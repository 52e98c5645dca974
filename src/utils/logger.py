"""Logging setup for the Dear Baby recipe tools.

Two output styles, selected with environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text (colored, one line per record) or json (default: text)

Records go to stderr; with the stdio MCP transport stdout carries protocol frames.
Tool context passed through `extra=` (tool, strategy, recipe_id, status_code) is
included in both styles.
"""

import json
import logging
import os
import sys
from typing import Any


EXTRA_FIELDS = ("tool", "strategy", "recipe_id", "status_code")

# level -> (ANSI color, icon)
LEVEL_STYLES = {
    "DEBUG": ("\033[36m", "🔍"),
    "INFO": ("\033[32m", "ℹ️"),
    "WARNING": ("\033[33m", "⚠️"),
    "ERROR": ("\033[31m", "❌"),
    "CRITICAL": ("\033[35m", "🔥"),
}
RESET = "\033[0m"


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {field: getattr(record, field) for field in EXTRA_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_record_extras(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RichTextFormatter(logging.Formatter):
    """Colored single-line records with a level icon and trailing `[key=value]` context."""

    def format(self, record: logging.LogRecord) -> str:
        color, icon = LEVEL_STYLES.get(record.levelname, (RESET, ""))
        line = (
            f"{color}{icon} {self.formatTime(record, '%Y-%m-%d %H:%M:%S')} "
            f"{record.levelname:<8} {record.name:<20} {record.getMessage()}"
        )

        extras = _record_extras(record)
        if extras:
            line += " [" + " ".join(f"{key}={value}" for key, value in extras.items()) + "]"
        line += RESET

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, attaching a stderr handler on first use.

    Args:
        name: Logger name.

    Returns:
        Logger configured from LOG_LEVEL / LOG_TYPE. Unknown levels fall back to INFO.
    """
    named_logger = logging.getLogger(name)
    if named_logger.handlers:
        return named_logger

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    use_json = os.getenv("LOG_TYPE", "text").lower() == "json"

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if use_json else RichTextFormatter())

    named_logger.setLevel(level)
    named_logger.addHandler(handler)
    return named_logger


logger = get_logger("dearbaby_recipes")

# Quiet per-request chatter from the Gemini SDK and the MCP server internals
logging.getLogger("google.genai").setLevel(logging.WARNING)
logging.getLogger("mcp.server").setLevel(logging.WARNING)
