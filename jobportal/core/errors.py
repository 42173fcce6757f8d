from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobportal.core.config import settings

_LOG = logging.getLogger("jobportal.errors")


class ApiError(HTTPException):
    """Base for failures rendered as ``{"success": false, "message": ...}``."""

    status = 400

    def __init__(self, message: str, *, error: str | None = None):
        super().__init__(status_code=self.status, detail=message)
        self.error = error


class ValidationError(ApiError):
    status = 400


class NotFoundError(ApiError):
    status = 404


class ConflictError(ApiError):
    status = 409


class NoopError(ApiError):
    # Update matched the row but changed nothing.
    status = 400


class UnexpectedError(ApiError):
    status = 500


class UpstreamError(ApiError):
    status = 502


def failure_body(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error and not settings.is_production:
        body["error"] = error
    return body


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = str(first.get("msg") or "invalid value")
    return f"Invalid value for {field}: {msg}" if field else f"Invalid request: {msg}"


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            _LOG.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(
            failure_body(str(exc.detail), getattr(exc, "error", None)),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(failure_body(_validation_message(exc)), status_code=400)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        _LOG.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(failure_body("Internal Server Error", str(exc)), status_code=500)
