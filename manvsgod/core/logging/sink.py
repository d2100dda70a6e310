"""
Error sink that forwards ERROR records to a Google Form.

Each error becomes one form submission whose single field holds a
readable traceback block. Submission failures are logged at WARNING
(below this handler's level, so they never loop back here).

``QueuedFormSink`` is what gets attached to loggers: it snapshots the
entry (log context included) on the calling thread and leaves the HTTP
post to a ``QueueListener`` thread.
"""

from __future__ import annotations

import copy
import json
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

import httpx

from manvsgod.core.logging.handler import record_to_entry
from manvsgod.core.logging.models import GameLogEntry


logger = logging.getLogger(__name__)


def format_traceback_block(entry: GameLogEntry) -> str:
    """Render an entry as the plain-text block stored in the form response."""
    return "\n".join([
        "=== MAN VS GOD ERROR LOG ===",
        f"Timestamp: {entry.timestamp}",
        f"Level: {entry.level.upper()}",
        f"Category: {entry.category}",
        f"Message: {entry.message}",
        f"Session ID: {entry.session_id}",
        f"Level ID: {entry.level_id if entry.level_id is not None else 'N/A'}",
        f"Action: {entry.action or 'N/A'}",
        f"Details: {json.dumps(entry.details, indent=2, default=str)}",
        "Stack Trace:",
        entry.stack or "No stack trace available",
        "=== END ERROR LOG ===",
    ])


class FormErrorSink(logging.Handler):
    """
    Posts ERROR and CRITICAL records to a Google Form endpoint.

    Args:
        form_url: formResponse URL of the form
        field: Form field ID receiving the traceback text
        session_id: Session ID attached when the log context has none
        client: Optional httpx.Client (tests inject a MockTransport client)
    """

    def __init__(
        self,
        form_url: str,
        field: str = "entry.1882440699",
        session_id: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 5.0,
    ):
        super().__init__(level=logging.ERROR)
        self.form_url = form_url
        self.field = field
        self.session_id = session_id
        self._client = client or httpx.Client(timeout=timeout)

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == logger.name:
            return
        try:
            entry = getattr(record, "game_entry", None) or record_to_entry(record, default_session_id=self.session_id)
            self.submit(entry)
        except Exception:
            self.handleError(record)

    def submit(self, entry: GameLogEntry) -> bool:
        """Send one entry; returns False when the form rejected it or was unreachable."""
        try:
            response = self._client.post(
                self.form_url,
                data={self.field: format_traceback_block(entry)},
            )
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"Failed to send error to Google Form: {e}")
            return False

    def close(self) -> None:
        try:
            self._client.close()
        finally:
            super().close()


class QueuedFormSink(QueueHandler):
    """
    Non-blocking front for a FormErrorSink.

    ``emit`` only enqueues; a QueueListener thread performs the post.
    Closing the handler drains the queue, stops the listener and closes
    the sink.
    """

    def __init__(self, sink: FormErrorSink):
        super().__init__(queue.SimpleQueue())
        self.setLevel(logging.ERROR)
        self.sink = sink
        self._listener = QueueListener(self.queue, sink, respect_handler_level=True)
        self._listener.start()

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # Context vars are not visible on the listener thread
        entry = record_to_entry(record, default_session_id=self.sink.session_id)
        record = copy.copy(record)
        record.game_entry = entry
        record.msg = entry.message
        record.args = None
        record.exc_info = None
        record.exc_text = None
        record.stack_info = None
        return record

    def close(self) -> None:
        try:
            if self._listener is not None:
                self._listener.stop()
                self._listener = None
            self.sink.close()
        finally:
            super().close()
