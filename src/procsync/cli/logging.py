"""
Logging - Text and JSON log output for the CLI.

Components log through named standard-library loggers
(``logging.getLogger("SyncOrchestrator")``); this module only decides how the
records are rendered and keeps credentials out of them.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any


REDACTED = "[REDACTED]"

# Attributes every LogRecord carries; anything else came in via ``extra=``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "requests", "anthropic", "httpx", "httpcore")


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per log line.

    Extra fields passed via ``extra=`` are grouped under ``context``.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_location: bool = False,
        static_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_location = include_location
        self.static_fields = static_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {}

        if self.include_timestamp:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            data["timestamp"] = created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{created.microsecond // 1000:03d}Z"
        if self.include_level:
            data["level"] = record.levelname
        if self.include_logger:
            data["logger"] = record.name

        data["message"] = record.getMessage()
        data.update(self.static_fields)

        if self.include_location:
            data["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        context = _context_fields(record)
        if context:
            data["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable log lines, optionally colored by level."""

    LEVEL_COLORS = {
        "DEBUG": "\033[2m",
        "INFO": "\033[36m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_context: bool = False):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)

        if self.include_context:
            context = _context_fields(record)
            if context:
                line += " " + " ".join(f"{key}={value!r}" for key, value in context.items())

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelname)
            if color:
                line = f"{color}{line}{self.RESET}"
        return line


class RedactingFilter(logging.Filter):
    """
    Replace registered secrets in log records with ``[REDACTED]``.

    Never drops a record.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self._secrets: set[str] = set()
        self.register_secrets(*secrets)

    @property
    def registered_count(self) -> int:
        return len(self._secrets)

    def register_secret(self, secret: str | None) -> None:
        # Very short values would redact ordinary words
        if secret and len(secret) >= 4:
            self._secrets.add(secret)

    def register_secrets(self, *secrets: str | None) -> None:
        for secret in secrets:
            self.register_secret(secret)

    def redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def _redact_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.redact(value)
        if isinstance(value, dict):
            return {key: self._redact_value(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self._redact_value(item) for item in value)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        if isinstance(record.msg, str):
            record.msg = self.redact(record.msg)
        if record.args:
            record.args = self._redact_value(record.args)
        return True


def setup_logging(
    level: int = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
    secrets: Iterable[str] = (),
) -> RedactingFilter:
    """
    Configure the root logger.

    Args:
        level: Root log level.
        log_format: "text" or "json".
        log_file: Optional file that receives the same records.
        static_fields: Fields added to every JSON record.
        secrets: Values to redact from every record (tokens, API keys).

    Returns:
        The redacting filter installed on every handler, so callers can
        register secrets learned later.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)

    redacting = RedactingFilter(secrets)

    def make_formatter(use_colors: bool) -> logging.Formatter:
        if log_format == "json":
            return JSONFormatter(static_fields=static_fields)
        return TextFormatter(use_colors=use_colors)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(make_formatter(use_colors=sys.stderr.isatty()))
    console_handler.addFilter(redacting)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(make_formatter(use_colors=False))
        file_handler.addFilter(redacting)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return redacting
