from __future__ import annotations

import logging
import time
import uuid
from typing import Dict, Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .error_handler import error_handler

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

SENSITIVE_HEADERS = frozenset(
    {"authorization", "cookie", "set-cookie", "x-api-key", "proxy-authorization"}
)


def redact_headers(headers: Iterable) -> Dict[str, str]:
    """Copy request headers, masking credentials."""
    items = headers.items() if hasattr(headers, "items") else headers
    redacted = {}
    for key, value in items:
        name = key.decode() if isinstance(key, bytes) else str(key)
        if name.lower() in SENSITIVE_HEADERS:
            redacted[name] = "[REDACTED]"
        else:
            redacted[name] = value.decode() if isinstance(value, bytes) else str(value)
    return redacted


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and its outcome.

    Each request gets a correlation ID, taken from the incoming
    ``X-Correlation-ID`` header when present, which is stored on
    ``request.state`` and echoed on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        method = request.method
        path = request.url.path

        logger.info(
            f"[{correlation_id}] Request: {method} {path} | "
            f"Headers: {redact_headers(request.headers)}"
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"[{correlation_id}] {method} {path} failed after {elapsed_ms:.1f}ms: {e}"
            )
            response = error_handler(request, e)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[CORRELATION_HEADER] = correlation_id
        logger.info(
            f"[{correlation_id}] Response: {method} {path} -> "
            f"{response.status_code} in {elapsed_ms:.1f}ms"
        )
        return response
