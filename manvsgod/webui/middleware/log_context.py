"""
Log Context Middleware - Tag captured logs with the player's session

Reads ``X-Session-ID`` (and optional ``X-Level-ID``) from the request and
sets the game log context for the duration of the request. Requests without
a session header are tagged with the log store's own session ID.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from manvsgod.core.logging.context import clear_log_context, set_log_context


logger = logging.getLogger(__name__)


class LogContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        session_id = request.headers.get("X-Session-ID") or request.app.state.log_store.session_id

        level_id = None
        raw_level = request.headers.get("X-Level-ID")
        if raw_level:
            try:
                level_id = int(raw_level)
            except ValueError:
                logger.debug(f"Ignoring non-numeric X-Level-ID header: {raw_level!r}")

        set_log_context(
            session_id=session_id,
            level_id=level_id,
            action=f"{request.method} {request.url.path}",
        )
        try:
            response = await call_next(request)
        finally:
            clear_log_context()

        response.headers["X-Session-ID"] = session_id
        return response
