"""
Game logging components.

Captures application logs with game context (session, level, action)
into a bounded in-memory store, optionally forwarding errors to a
Google Form.

Components:
- categories: LogCategory / ErrorMessages constants
- context: ContextVars for session/level/action
- store: bounded GameLogStore
- handler: LogCaptureHandler (logging.Handler -> GameLogStore)
- sink: FormErrorSink (ERROR records -> Google Form)
- configure: setup_logging()
- guard: run_with_fallback()
"""

from manvsgod.core.logging.categories import ErrorMessages, LogCategory
from manvsgod.core.logging.context import (
    set_log_context,
    get_current_session_id,
    get_current_level_id,
    get_current_action,
    clear_log_context,
)

__all__ = [
    "ErrorMessages",
    "LogCategory",
    "set_log_context",
    "get_current_session_id",
    "get_current_level_id",
    "get_current_action",
    "clear_log_context",
]
