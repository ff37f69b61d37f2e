"""
Request/response logging middleware.

Assigns each request an ID (a well-formed X-Request-ID header is reused),
binds it to the correlation context so pipeline logs carry it, logs the
request outcome and records HTTP metrics. Health and metrics probes are
logged at debug level.
"""
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.utils.logger import (
    get_logger,
    set_correlation_context,
    clear_correlation_context,
)
from src.utils.metrics import http_request_duration, http_requests

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = frozenset({"/health", "/metrics"})
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(request: Request) -> str:
    """Reuse the caller's request ID when it is well formed, otherwise mint one."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(supplied):
        return supplied
    return str(uuid.uuid4())


def route_label(request: Request) -> str:
    """Route template (e.g. /studio/generate) for metric labels."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class LoggingMiddleware(BaseHTTPMiddleware):
    """Per-request correlation ID, outcome logging and HTTP metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        set_correlation_context(request_id=request_id)

        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
        start_time = time.time()

        log(
            "api.request.start",
            method=request.method,
            path=request.url.path,
            content_length=request.headers.get("content-length"),
            client_ip=request.client.host if request.client else None,
        )

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            log(
                "api.request.complete",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=int((time.time() - start_time) * 1000),
            )
            return response

        except Exception as e:
            logger.error(
                "api.request.error",
                method=request.method,
                path=request.url.path,
                duration_ms=int((time.time() - start_time) * 1000),
                error_type=type(e).__name__,
            )
            raise

        finally:
            route = route_label(request)
            http_requests.labels(
                method=request.method, route=route, status_code=str(status_code)
            ).inc()
            http_request_duration.labels(method=request.method, route=route).observe(
                time.time() - start_time
            )
            clear_correlation_context()
