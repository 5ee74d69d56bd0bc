"""Global exception handlers for consistent error responses.

Every failure leaves the API in the same envelope::

    {"success": false, "error": "<message>", "code": "<code>", "request_id": "..."}

Design:
- AppError subclasses → appropriate HTTP status (400, 401, 500)
- HTTPException (auth, rate limit) → its own status, headers preserved
- Request validation errors → 400 with field locations
- Unexpected Exception → generic 500 (no stack traces or provider internals)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasks_api.core.errors import AppError, AuthenticationAppError, LLMAppError
from tasks_api.core.logging import get_request_id

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    429: "rate_limited",
}


def error_body(message: str, code: str, details: Any = None) -> dict[str, Any]:
    """Build the failure envelope."""
    body: dict[str, Any] = {
        "success": False,
        "error": message,
        "code": code,
        "request_id": get_request_id(),
    }
    if details:
        body["details"] = details
    return body


def status_for(exc: AppError) -> int:
    if isinstance(exc, AuthenticationAppError):
        return 401
    if isinstance(exc, LLMAppError):
        return 500
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    - ValidationAppError → 400 Bad Request (client fault)
    - AuthenticationAppError → 401 Unauthorized
    - LLMAppError → 500 Internal Server Error (provider fault)
    """
    status_code = status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.message, exc.code, exc.details),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException (auth, rate limit, 404) in the failure envelope."""
    code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map body/query validation failures to 400 with field locations."""
    fields = [
        {"loc": ".".join(str(part) for part in err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    message = "Invalid request"
    if fields:
        message = f"Invalid request: {fields[0]['loc']}: {fields[0]['msg']}"

    logger.info(
        "request_validation_failed",
        extra={"fields": [f["loc"] for f in fields]},
    )

    return JSONResponse(
        status_code=400,
        content=error_body(message, "invalid_request", {"fields": fields}),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net)."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "internal_server_error"),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
