from __future__ import annotations

import time
from typing import cast

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from recipe_relay.core.routing import safe_route_label

metrics_router = APIRouter(tags=["monitoring"])

# Labels are route templates or fixed values only; never prompt text or client addresses.

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status_code"),
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("method", "route", "status_code"),
    # Upstream generation routinely takes several seconds, up to the 30s deadline.
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0),
)

recipe_generations_total = Counter(
    "recipe_generations_total",
    "Recipe generation attempts by outcome",
    labelnames=("outcome",),
)

GENERATION_OUTCOMES = (
    "success",
    "timeout",
    "rate_limited",
    "unauthorized",
    "upstream_error",
    "error",
)


def record_generation(outcome: str) -> None:
    if outcome not in GENERATION_OUTCOMES:
        outcome = "error"
    recipe_generations_total.labels(outcome=outcome).inc()


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route_label = safe_route_label(request)
            method = request.method
            code = str(int(status_code))
            duration = time.perf_counter() - started
            http_requests_total.labels(method=method, route=route_label, status_code=code).inc()
            http_request_duration_seconds.labels(
                method=method, route=route_label, status_code=code
            ).observe(duration)


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    # Default registry; one process serves all traffic.
    payload = generate_latest()
    return Response(content=cast(bytes, payload), media_type=CONTENT_TYPE_LATEST)
