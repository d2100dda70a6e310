"""
Context management for game logs using Python ContextVars.

Usage:
    # In a request handler
    set_log_context(session_id="session_01H...", level_id=3, action="submit")

    # Anywhere in the application
    get_current_level_id()  # 3

    # At request end
    clear_log_context()
"""

from contextvars import ContextVar
from typing import Optional


_session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)
_level_id_var: ContextVar[Optional[int]] = ContextVar("level_id", default=None)
_action_var: ContextVar[Optional[str]] = ContextVar("action", default=None)


def set_log_context(
    session_id: Optional[str] = None,
    level_id: Optional[int] = None,
    action: Optional[str] = None,
) -> None:
    """
    Set the logging context for the current execution context.

    Args:
        session_id: The player session ID
        level_id: The level being played
        action: The player action being processed
    """
    if session_id is not None:
        _session_id_var.set(session_id)
    if level_id is not None:
        _level_id_var.set(level_id)
    if action is not None:
        _action_var.set(action)


def get_current_session_id() -> Optional[str]:
    return _session_id_var.get()


def get_current_level_id() -> Optional[int]:
    return _level_id_var.get()


def get_current_action() -> Optional[str]:
    return _action_var.get()


def clear_log_context() -> None:
    """Clear the logging context to prevent leakage between requests."""
    _session_id_var.set(None)
    _level_id_var.set(None)
    _action_var.set(None)
