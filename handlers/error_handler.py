"""
handlers/error_handler.py
--------------------------
Translates errors into HTTP responses, once, at the boundary.

Every error body has the shape ``{"error": "<message>"}``. Infrastructure
failures are logged with full detail and reported with a generic message.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.errors import InfrastructureError, ServiceError
from utils.logger import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

_LOCATIONS = {"body": "Field", "query": "Query parameter", "path": "Path parameter"}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first pydantic validation error into a one-line message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = tuple(err.get("loc", ()))
    where = _LOCATIONS.get(loc[0], "Field") if loc else "Field"
    field = ".".join(str(part) for part in loc[1:])
    if not field:
        return "Request body is required." if where == "Field" else "Invalid request"
    if err.get("type") == "missing":
        return f"{where} '{field}' is required."
    return f"{where} '{field}' is invalid: {err.get('msg')}"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, InfrastructureError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return _error(exc.status_code, INTERNAL_ERROR_MESSAGE)
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, describe_validation_error(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error(500, INTERNAL_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
