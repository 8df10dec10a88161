"""
Request correlation and access logging.

Every request gets an id, taken from X-Request-ID when the client sends
a usable one. The id is echoed back, attached to every log record
emitted while the request runs, and closes the request with one access
log line.
"""

import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.logging import get_logger

logger = get_logger("order_api.access")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client ids end up in log lines: printable token characters only
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")


def resolve_request_id(header_value: str | None) -> str:
    """Return the client's request id if it is safe to log, else a new one."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the request context and log the outcome."""

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(self.HEADER_NAME))
        token = request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id

            logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            request_id_var.reset(token)


class CorrelationIdFilter:
    """Logging filter that stamps records with the current request id."""

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True
