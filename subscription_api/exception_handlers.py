"""
Exception handlers rendering every failure as the uniform error envelope.

Register these on a FastAPI app instance via `register_exception_handlers(app)`.
"""
import logging
import traceback

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.env import is_local_env
from .core.errors import GatewayError, StatusCode

logger = logging.getLogger("subscription_api")

_HTTP_STATUS_CODES = {
    400: StatusCode.VALIDATION_ERROR,
    401: StatusCode.UNAUTHORIZED,
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "TOO_MANY_REQUESTS",
}


def error_body(message: str, code: str) -> dict:
    return {"apiStatus": "error", "message": message, "statusCode": code}


async def gateway_error_handler(request: Request, exc: GatewayError):
    """Domain errors carry their own status and code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    code = _HTTP_STATUS_CODES.get(exc.status_code, StatusCode.INTERNAL_SERVER_ERROR)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(detail, code),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Request body/header validation failures are client errors (400)."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "header"))
        message = f"{field} is required" if first.get("type") == "missing" and field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content=error_body(message, StatusCode.VALIDATION_ERROR))


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""
    error_traceback = traceback.format_exc()
    logger.error(f"Unhandled exception: {exc}\n{error_traceback}", exc_info=True)

    # In production, don't leak internal error details to clients
    if is_local_env():
        message = f"Internal server error: {exc}"
    else:
        message = "Internal server error"

    return JSONResponse(
        status_code=500,
        content=error_body(message, StatusCode.INTERNAL_SERVER_ERROR),
    )


def register_exception_handlers(app):
    """Register all exception handlers on the given FastAPI app."""
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
