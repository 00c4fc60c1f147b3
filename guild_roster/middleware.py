# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: request correlation, access log and Prometheus request metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from guild_roster.core.logging import get_logger
from guild_roster.metrics.prometheus import (
    HTTP_ERRORS,
    REQUESTS_IN_FLIGHT,
    REQUEST_COUNT,
    REQUEST_LATENCY,
)

logger = get_logger(__name__)

ROUTE_SEGMENTS = frozenset({
    "api", "v1", "groups", "parties", "members", "unassigned-members",
    "assign-member", "remove-member", "swap-members", "clear-all-parties",
    "roster", "bootstrap", "verify",
})

UNMETERED_PATHS = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})


def endpoint_label(path: str) -> str:
    """Collapse group, party and member ids in ``path`` to ``{param}``."""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    return "/" + "/".join(s if s in ROUTE_SEGMENTS else "{param}" for s in segments)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an X-Request-ID and log it with its account."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        account_id = request.headers.get("X-Account-ID")
        request.state.request_id = request_id
        request.state.account_id = account_id

        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        if request.url.path not in UNMETERED_PATHS:
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method, request.url.path, response.status_code,
                (time.perf_counter() - start) * 1000,
                extra={"request_id": request_id, "account_id": account_id},
            )
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count, time and track in-flight roster API requests."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNMETERED_PATHS:
            return await call_next(request)

        endpoint = endpoint_label(request.url.path)
        REQUESTS_IN_FLIGHT.inc()
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            REQUESTS_IN_FLIGHT.dec()

        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(
            time.perf_counter() - start
        )
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
        return response
