"""Per-request id, access log and response policy for API vs. uploaded files.

The request id is kept in a context variable so every ``jobportal.*`` log
record emitted while serving a request carries it as ``request_id``.
"""
from __future__ import annotations

import logging
from contextvars import ContextVar
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

from jobportal.core.config import settings

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64
UPLOADS_PREFIX = "/uploads/"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"

_request_id: ContextVar[str] = ContextVar("jobportal_request_id", default="-")
_ACCESS_LOG = logging.getLogger("jobportal.access")


def current_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("jobportal")
    logger.setLevel(settings.LOG_LEVEL.upper())
    if not any(isinstance(f, RequestIdFilter) for handler in logger.handlers for f in handler.filters):
        handler = logging.StreamHandler()
        handler.addFilter(RequestIdFilter())
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def client_request_id(raw: str | None) -> str | None:
    """Return the caller's id when it is a short token safe to echo into logs."""
    value = (raw or "").strip()
    if not value or len(value) > MAX_REQUEST_ID_LENGTH or not value.isascii():
        return None
    if not all(ch.isalnum() or ch in "-_." for ch in value):
        return None
    return value


def response_policy(path: str) -> dict[str, str]:
    if path.startswith(UPLOADS_PREFIX):
        # Images are linked from the admin and public frontends on other origins.
        return {
            "Cache-Control": f"public, max-age={settings.UPLOAD_CACHE_SECONDS}",
            "Cross-Origin-Resource-Policy": "cross-origin",
            "X-Content-Type-Options": "nosniff",
        }
    return {
        "Cache-Control": "no-store",
        "Cross-Origin-Resource-Policy": "same-origin",
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
    }


def install_request_context(app: FastAPI) -> None:
    @app.middleware("http")
    async def _request_context_middleware(request: Request, call_next):
        request_id = client_request_id(request.headers.get(REQUEST_ID_HEADER)) or uuid4().hex
        token = _request_id.set(request_id)
        started_at = perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers.update(response_policy(request.url.path))
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _ACCESS_LOG.info(
                "%s %s -> %s in %.1f ms",
                request.method,
                request.url.path,
                status,
                (perf_counter() - started_at) * 1000.0,
            )
            _request_id.reset(token)
