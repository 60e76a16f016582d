"""Global exception handlers for the entries API.

Every failure is classified into an ErrorKind and rendered as `{"msg": ...}`
with the status from ERROR_STATUS. Unmatched routes are the one exception:
they answer 404 in plain text.
"""
import logging
from typing import Any, Dict, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from pymongo.errors import ConnectionFailure, DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.results import GENERIC_ERROR_MESSAGE, ErrorKind, Failure

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "Route does not exist"
DATABASE_UNAVAILABLE_MESSAGE = "Database service not available."
STORED_DATA_INVALID_MESSAGE = "Stored entry data is invalid"


def error_response(failure: Failure) -> JSONResponse:
    return JSONResponse(status_code=failure.status_code, content={"msg": failure.message})


def _join_validation_messages(errors: Iterable[Dict[str, Any]]) -> str:
    """One `field: message` per error; the leading `body`/`path` segment is dropped."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        field = ".".join(loc)
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    return ", ".join(messages)


def _duplicate_key_message(exc: DuplicateKeyError) -> str:
    key_value = (exc.details or {}).get("keyValue") or {}
    if not key_value:
        return "Duplicate value entered, please choose another value"
    fields = ", ".join(key_value)
    return f"Duplicate value entered for {fields} field, please choose another value"


def classify_exception(exc: Exception) -> Failure:
    """Map a raised exception onto the closed set of error kinds."""
    if isinstance(exc, RequestValidationError):
        return Failure(ErrorKind.VALIDATION, _join_validation_messages(exc.errors()))
    if isinstance(exc, ValidationError):
        # Raised outside request parsing: a stored document no longer fits the model
        return Failure(ErrorKind.UNEXPECTED, STORED_DATA_INVALID_MESSAGE)
    if isinstance(exc, DuplicateKeyError):
        return Failure(ErrorKind.DUPLICATE_KEY, _duplicate_key_message(exc))
    if isinstance(exc, ConnectionFailure):
        return Failure(ErrorKind.DATABASE_UNAVAILABLE, DATABASE_UNAVAILABLE_MESSAGE)
    return Failure(ErrorKind.UNEXPECTED, str(exc) or GENERIC_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # A known path hit with an unsupported method is still an unknown route
        if exc.status_code in (404, 405):
            logger.info(f"No route for {request.method} {request.url.path}")
            return PlainTextResponse(ROUTE_NOT_FOUND_MESSAGE, status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(DuplicateKeyError)
    async def client_error_handler(request: Request, exc: Exception):
        failure = classify_exception(exc)
        logger.warning(f"{failure.kind.value} error on {request.url.path}: {failure.message}")
        return error_response(failure)

    @app.exception_handler(ConnectionFailure)
    async def database_error_handler(request: Request, exc: ConnectionFailure):
        logger.error(f"Database unavailable on {request.url.path}: {exc}")
        return error_response(classify_exception(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return error_response(classify_exception(exc))
