"""Run an operation with start/finish logging and an optional fallback value."""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar, Union


logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Missing:
    def __repr__(self) -> str:
        return "<no fallback>"


NO_FALLBACK = _Missing()


def run_with_fallback(
    operation: Callable[[], T],
    category: str,
    fallback: Union[T, _Missing] = NO_FALLBACK,
    level_id: Optional[int] = None,
    action: Optional[str] = None,
) -> T:
    """
    Run ``operation``; on failure log an error and return ``fallback``.

    Without a fallback the exception is re-raised after logging.
    """
    name = action or "unknown"
    extra = {"category": category, "level_id": level_id, "action": action}
    logger.info(f"Starting operation: {name}", extra=extra)
    try:
        result = operation()
    except Exception as e:
        logger.error(
            f"Operation failed: {e}",
            exc_info=True,
            extra={**extra, "details": {"error": str(e)}},
        )
        if isinstance(fallback, _Missing):
            raise
        logger.warning(
            "Using fallback value for failed operation",
            extra={**extra, "details": {"fallback": repr(fallback)}},
        )
        return fallback
    logger.info(f"Operation completed successfully: {name}", extra=extra)
    return result
