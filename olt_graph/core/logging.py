from __future__ import annotations

import contextvars
import logging
import sys
import uuid
from urllib.parse import urlsplit, urlunsplit

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADERS = ("X-Request-ID", "X-Trace-ID")

_request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


def get_request_id() -> str:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """Stamp every record with the request id of the coroutine that emitted it."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow builtins)
        record.request_id = get_request_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Route everything through one stdout handler. Idempotent."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | request_id=%(request_id)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    root.addHandler(handler)

    # PIL and httpx are chatty at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def mask_secret(value: str | None) -> str:
    """
    Mask an API token for logs.

    Rules:
    - None / empty / <8 chars -> fully masked
    - Otherwise -> first 2 + last 2 chars, middle masked
    """
    if not value or len(value) < 8:
        return "***"
    return f"{value[:2]}***{value[-2:]}"


def redact_url(url: str) -> str:
    """Drop query string and fragment, which may carry tokens."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the logging context for the lifetime of a request.

    Reuses an incoming ``X-Request-ID`` (or ``X-Trace-ID``) header, otherwise
    generates one, and echoes it back as ``X-Request-ID``.
    """

    async def dispatch(self, request: Request, call_next):
        incoming = next((request.headers[h] for h in REQUEST_ID_HEADERS if request.headers.get(h)), None)
        rid = incoming or uuid.uuid4().hex
        request.state.request_id = rid
        token = _request_id_ctx.set(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            _request_id_ctx.reset(token)
