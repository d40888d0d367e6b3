"""Structured logging configuration for feedback-jira.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the feedback_jira namespace
- Environment variable control (FEEDBACK_JIRA_LOG_LEVEL, FEEDBACK_JIRA_LOG_FORMAT)
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

LOGGER_NAMESPACE = "feedback_jira"
HANDLER_NAME = "feedback_jira.stream"

# Sensitive keys that are redacted in log output.
SENSITIVE_KEYS = {
    "password", "token", "secret", "apikey", "api_key", "api_token",
    "authorization", "credential", "auth", "bearer", "basic_auth",
}


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs logs in JSON format with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (feedback_jira hierarchy)
    - message: Log message (an event name such as ``jira_issue_created``)
    - context: Extras dict merged from LogRecord attributes

    Security: Sensitive keys (token, authorization, etc.) are redacted so
    Jira credentials never reach log output.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single JSON line."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # LogRecord attributes that are not caller extras
        standard_fields = {
            "name", "msg", "args", "created", "filename", "funcName",
            "levelname", "levelno", "lineno", "module", "msecs", "message",
            "pathname", "process", "processName", "relativeCreated",
            "thread", "threadName", "exc_info", "exc_text", "stack_info",
            "taskName",
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in standard_fields and not k.startswith("_")
        }

        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for local debugging.

    Used when FEEDBACK_JIRA_LOG_FORMAT=text.
    """

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structured logging for all feedback_jira loggers.

    Args:
        level: Optional log level override. If not provided, uses
            FEEDBACK_JIRA_LOG_LEVEL environment variable (default: INFO).
        log_format: Optional format override ("json" or "text"). If not
            provided, uses FEEDBACK_JIRA_LOG_FORMAT (default: json).

    Environment Variables:
        FEEDBACK_JIRA_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        FEEDBACK_JIRA_LOG_FORMAT: Output format (json, text). Default: json
    """
    if level is None:
        level = os.getenv("FEEDBACK_JIRA_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format is None:
        log_format = os.getenv("FEEDBACK_JIRA_LOG_FORMAT", "json")

    if log_format.lower() == "text":
        formatter = TextFormatter()
    else:
        formatter = StructuredFormatter()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)

    # Only the package handler is touched; handlers added by others stay as they are
    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)
    handler.setFormatter(formatter)

    logger.propagate = False
