"""Translate exceptions into the API's `{"message", "errors"?}` bodies."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nightguard import config
from nightguard.services.errors import RegisterError

logger = logging.getLogger(__name__)


def _error_body(message, errors=None) -> dict:
    body = {"message": message}
    if errors:
        body["errors"] = errors
    return body


def _field_name(location) -> str:
    # ("body", "venue", "name") -> "venue.name"; the leading source is dropped
    parts = [str(part) for part in location]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts)


async def register_error_handler(request: Request, exc: RegisterError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, getattr(exc, "errors", None))
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(error.get("loc", ())), "message": error.get("msg", "Invalid value")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content=_error_body("Invalid request data", errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if config.DEBUG else "Internal server error"
    return JSONResponse(status_code=500, content=_error_body(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegisterError, register_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
