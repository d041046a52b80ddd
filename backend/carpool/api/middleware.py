"""
Request correlation and timing.
"""

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from carpool.core.logging import get_logger
from carpool.core.metrics import request_latency

logger = get_logger(__name__)

# Accept a caller-supplied id only if it is short and log-safe
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _request_id(request: Request) -> str:
    supplied = request.headers.get("X-Request-ID", "")
    if _REQUEST_ID_PATTERN.match(supplied):
        return supplied
    return uuid.uuid4().hex[:12]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds request_id/method/path into structlog's context for every log
    line written while handling the request, logs one line per request,
    records latency, and echoes X-Request-ID / X-Response-Time.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error("request_failed", error=str(e))
            raise
        finally:
            elapsed = time.perf_counter() - started
            request_latency.labels(method=request.method, status_code=str(status_code)).observe(elapsed)

        duration_ms = round(elapsed * 1000, 2)
        logger.info("request_completed", status_code=status_code, duration_ms=duration_ms)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response
