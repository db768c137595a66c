"""Request id propagation and HTTP request metrics."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.logging import request_id_var
from app.metrics import REQUEST_COUNT, REQUEST_ERRORS, REQUEST_LATENCY

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _route_path(request: Request) -> str:
    # Use the route template so path parameters do not explode label cardinality.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            elapsed = time.perf_counter() - started
            path = _route_path(request)
            labels = {"method": request.method, "path": path, "status": str(status_code)}
            REQUEST_COUNT.labels(**labels).inc()
            REQUEST_LATENCY.labels(**labels).observe(elapsed)
            if status_code >= 500:
                REQUEST_ERRORS.labels(**labels).inc()
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                path,
                status_code,
                elapsed * 1000,
            )
            request_id_var.reset(token)
