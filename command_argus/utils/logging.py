# command_argus/utils/logging.py
"""Logging setup with optional JSON format and command id correlation.

Provides:
- JSON-formatted log output for structured logging
- Command id via ContextVar, attached to every record logged while a
  command is being handled
- Centralized logger configuration
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

# Id of the command currently being handled, for log correlation
command_id_var: ContextVar[str] = ContextVar("command_id", default="")

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def set_command_id(command_id: str) -> None:
    """Set the command id for the current context.

    Args:
        command_id: Id of the command being handled, empty to clear.
    """
    command_id_var.set(command_id)


def get_command_id() -> str:
    """Get the command id for the current context.

    Returns:
        Current command id, or empty string if not set.
    """
    return command_id_var.get()


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs log records as JSON with timestamp, level, logger name,
    message, and the command_id when one is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        command_id = get_command_id()
        if command_id:
            log_data["command_id"] = command_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


@contextmanager
def command_context(command_id: str) -> Iterator[None]:
    """Attach ``command_id`` to log records for the duration of a block.

    The previous id is restored on exit, so records logged after the
    operation do not carry a stale id.

    Args:
        command_id: Id of the command being handled.
    """
    token = command_id_var.set(command_id)
    try:
        yield
    finally:
        command_id_var.reset(token)


def configure_logging(level: int | str = logging.INFO, json_format: bool = False) -> None:
    """Configure logging for the application.

    Replaces any handlers on the root logger with a single StreamHandler,
    using StructuredFormatter when ``json_format`` is set.

    Args:
        level: Logging level, as int or name (default: INFO).
        json_format: Emit JSON lines instead of plain text.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    for existing in list(logging.root.handlers):
        logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(level)
