# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP Middleware — request ID propagation and Prometheus metrics.
Separated from main.py for clean architecture.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from booking.metrics.prometheus import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

KNOWN_SEGMENTS: set[str] = {
    "api", "v1", "productions", "assignment", "review", "overtime", "complete",
    "cancel", "notes", "timeline", "summary", "availability", "check", "staff",
    "schedule", "names", "issues", "status", "priority", "notifications",
    "unread-count", "read", "read-all", "announcements", "pin",
    "health", "ready", "metrics",
}

SKIP_PATHS: tuple[str, ...] = (
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate X-Request-ID for distributed tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def normalize_path(path: str) -> str:
    """Collapse ids to {param} so metric label cardinality stays bounded."""
    parts = path.strip("/").split("/")
    if parts == [""]:
        return path
    return "/" + "/".join(p if p in KNOWN_SEGMENTS else "{param}" for p in parts)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Track request count, latency, and error rate via Prometheus."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        if path not in SKIP_PATHS:
            endpoint = normalize_path(path)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status=str(response.status_code),
            ).inc()
            REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(duration)
            if response.status_code >= 400:
                HTTP_ERRORS.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=str(response.status_code),
                ).inc()

        return response
