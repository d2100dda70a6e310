"""
Log capture handler integrating with Python logging system.

Turns log records into GameLogEntry objects and stores them in a
GameLogStore. The category, details, level and action are read from the
record's ``extra`` fields, falling back to the current log context.

    logger.warning(
        "Failed to parse FEN",
        extra={"category": LogCategory.VALIDATION, "details": {"fen": fen}},
    )

Design Principles:
- Exception-safe: never crash the application due to logging failures
- Non-blocking: memory operations only in emit()
"""

from __future__ import annotations

import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, TYPE_CHECKING

from manvsgod.core.logging.categories import LogCategory
from manvsgod.core.logging.context import (
    get_current_action,
    get_current_level_id,
    get_current_session_id,
)
from manvsgod.core.logging.models import GameLogEntry

if TYPE_CHECKING:
    from manvsgod.core.logging.store import GameLogStore


LEVEL_MAPPING = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def record_to_entry(record: logging.LogRecord, default_session_id: str | None = None) -> GameLogEntry:
    """Build a GameLogEntry from a log record and the current context."""
    level = LEVEL_MAPPING.get(record.levelno, "error")
    timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()

    details: Dict[str, Any] = dict(getattr(record, "details", None) or {})
    details.setdefault("logger", record.name)

    stack = None
    if record.exc_info:
        stack = "".join(traceback.format_exception(*record.exc_info))
    elif record.stack_info:
        stack = record.stack_info

    level_id = getattr(record, "level_id", None)
    if level_id is None:
        level_id = get_current_level_id()

    return GameLogEntry(
        id=str(uuid.uuid4()),
        level=level,
        timestamp=timestamp,
        category=getattr(record, "category", None) or LogCategory.GENERAL,
        message=record.getMessage(),
        details=details,
        stack=stack,
        session_id=get_current_session_id() or default_session_id,
        level_id=level_id,
        action=getattr(record, "action", None) or get_current_action(),
    )


class LogCaptureHandler(logging.Handler):
    """
    Logging handler that captures records into a GameLogStore.
    """

    def __init__(self, log_store: GameLogStore, level: int = logging.INFO):
        super().__init__(level=level)
        self.log_store = log_store

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = record_to_entry(record, default_session_id=self.log_store.session_id)
            self.log_store.add(entry)
        except Exception:
            # Never crash the application due to logging failures
            self.handleError(record)
