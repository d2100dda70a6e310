"""
In-memory log storage for game telemetry.

Storage Strategy:
- collections.deque (bounded, FIFO)
- Memory limit: 100 entries by default (oldest evicted first)
- One session ID per store, attached to entries without an explicit one
"""

import logging
import threading
from collections import deque
from typing import List, Optional

import ulid

from manvsgod.core.logging.models import GameLogEntry


logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return f"session_{ulid.ULID()}"


class GameLogStore:
    """
    Thread-safe log storage with bounded memory.

    Features:
    - Bounded in-memory storage (automatic FIFO eviction)
    - Thread-safe operations (RLock)
    - Multi-dimensional filtering
    """

    def __init__(self, max_size: int = 100, session_id: Optional[str] = None):
        """
        Args:
            max_size: Maximum logs to keep in memory
            session_id: Session ID for this store (generated when omitted)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.session_id = session_id or new_session_id()

        self._logs: deque = deque(maxlen=max_size)
        self._lock = threading.RLock()

    def add(self, log_entry: GameLogEntry) -> None:
        """Add a log entry to the store (O(1))."""
        with self._lock:
            self._logs.append(log_entry)

    def query(
        self,
        level: Optional[str] = None,
        category: Optional[str] = None,
        session_id: Optional[str] = None,
        level_id: Optional[int] = None,
        limit: int = 100,
    ) -> List[GameLogEntry]:
        """
        Query logs with filters.

        Returns:
            List of log entries matching filters (newest first)
        """
        with self._lock:
            logs = list(self._logs)

        if level:
            logs = [log for log in logs if log.level.lower() == level.lower()]
        if category:
            logs = [log for log in logs if log.category == category]
        if session_id:
            logs = [log for log in logs if log.session_id == session_id]
        if level_id is not None:
            logs = [log for log in logs if log.level_id == level_id]

        # Insertion order is chronological; reverse for newest first
        logs.reverse()
        return logs[:limit]

    def clear(self) -> None:
        """Clear all logs from memory."""
        with self._lock:
            self._logs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)
