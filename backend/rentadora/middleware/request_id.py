"""
Rentadora API - Request ID Middleware
======================================

What:  Assigns a correlation id to each request, exposes it to loggers and
       echoes it in the `X-Request-ID` response header.
How:   The id lives in a ContextVar, so concurrent requests on the same event
       loop each see their own value. RequestIDLogFilter copies it onto every
       log record as `request_id`.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Short random id; 8 hex chars are enough to correlate log lines."""
    return uuid.uuid4().hex[:8]


class RequestIDLogFilter(logging.Filter):
    """Adds `record.request_id` ("-" outside a request) for the log format."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Honours a client-supplied X-Request-ID, otherwise generates one.

    The id is also stored on `request.state.request_id` for handlers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
