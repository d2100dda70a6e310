"""
API Error Envelope - Unified response format for the game API

Every endpoint answers with the same envelope:

    success: {"ok": true, "data": ..., "timestamp": "...Z"}
    error:   {"ok": false, "error_code": "...", "message": "...", "details": {...}, "timestamp": "...Z"}
"""

import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from manvsgod.core.time import iso_z, utc_now


logger = logging.getLogger(__name__)

ERROR_CODE_MAP = {
    400: "BAD_REQUEST",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


def _format_timestamp() -> str:
    """Format current time as ISO 8601 UTC with Z suffix"""
    return iso_z(utc_now())


class ErrorEnvelope:
    """Builders for the success and error envelopes"""

    @staticmethod
    def format_error(
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Format an error response with consistent structure

        Args:
            error_code: Machine-readable error code (e.g., "VALIDATION_ERROR", "NOT_FOUND")
            message: Human-readable error message
            details: Additional error details (optional)

        Returns:
            Standardized error response dictionary
        """
        return {
            "ok": False,
            "error_code": error_code,
            "message": message,
            "details": details or {},
            "timestamp": _format_timestamp(),
        }

    @staticmethod
    def format_success(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
        response = {
            "ok": True,
            "data": data,
            "timestamp": _format_timestamp(),
        }
        if message:
            response["message"] = message
        return response


class APIError(Exception):
    """
    Base API error rendered through the error envelope

    Example:
        raise APIError(
            error_code="LEVEL_NOT_FOUND",
            message="Level does not exist",
            details={"level_id": 9},
            status_code=404
        )
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorEnvelope.format_error(self.error_code, self.message, self.details),
        )


class NotFoundError(APIError):
    """Resource not found (404)"""
    def __init__(self, resource: str, identifier: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", f"{resource} not found: {identifier}", details, 404)


class ForbiddenError(APIError):
    """Operation not allowed in this environment (403)"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("FORBIDDEN", message, details, 403)


class StoreUnavailableError(APIError):
    """Decision store failed even after fallback (503)"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details, 503)


def register_error_handlers(app: FastAPI) -> None:
    """
    Register global error handlers for consistent error responses

    Debug details are only attached to 500s when ``app.state.config.debug``
    is on and the environment is not production.
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(
            f"API error on {request.method} {request.url.path}: {exc.error_code} {exc.message}"
        )
        return exc.to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        formatted_errors = []
        for error in exc.errors():
            formatted_errors.append({
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            })

        logger.warning(
            f"Validation error on {request.method} {request.url.path}: {formatted_errors}"
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorEnvelope.format_error(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"errors": formatted_errors},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        error_code = ERROR_CODE_MAP.get(exc.status_code, "HTTP_ERROR")

        logger.warning(
            f"HTTP exception on {request.method} {request.url.path}: "
            f"status={exc.status_code}, detail={detail}"
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorEnvelope.format_error(
                error_code=error_code,
                message=str(detail) if detail else "An error occurred",
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}",
            exc_info=exc,
        )

        config = getattr(request.app.state, "config", None)
        is_debug = bool(config and config.debug and not config.is_production)

        if not is_debug:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=ErrorEnvelope.format_error(
                    error_code="INTERNAL_ERROR",
                    message="Internal server error",
                    details={"hint": "An unexpected error occurred."},
                ),
            )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorEnvelope.format_error(
                error_code="INTERNAL_ERROR",
                message=f"{type(exc).__name__}: {exc}",
                details={
                    "hint": "An unexpected error occurred. See debug_info below (DEBUG mode).",
                    "debug_info": {
                        "exception_type": type(exc).__name__,
                        "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                        "request_path": str(request.url.path),
                        "request_method": request.method,
                    },
                },
            ),
        )

    logger.info("Registered unified error handlers")
