"""
HTTP error translation.

Service code raises `fastapi.HTTPException` for validation (400), not-found
(404) and conflict (409) cases. Everything the store throws at us ends up
here as a 500 with a generic body; the detail only goes to the log.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

STORE_FAILURE_MESSAGE = "Internal server error."


def error_body(message: str) -> dict:
    return {"error": message}


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg") or "Invalid value.")
    return f"{location}: {message}" if location else message


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(_validation_message(exc)),
    )


async def store_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "store_failure method=%s path=%s error=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(STORE_FAILURE_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    # Connection refused/reset, query errors, pool not initialized.
    app.add_exception_handler(asyncpg.PostgresError, store_exception_handler)
    app.add_exception_handler(asyncpg.InterfaceError, store_exception_handler)
    app.add_exception_handler(OSError, store_exception_handler)
    app.add_exception_handler(RuntimeError, store_exception_handler)
