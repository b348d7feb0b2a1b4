from __future__ import annotations

import time
from typing import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    labelnames=("endpoint", "method", "status"),
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("endpoint", "method"),
    buckets=(0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0),
)
pipeline_duration_seconds = Histogram(
    "image_pipeline_duration_seconds",
    "End-to-end image pipeline duration in seconds",
    labelnames=("telemetry",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)
pipeline_outcomes_total = Counter(
    "image_pipeline_outcomes_total",
    "Image pipeline runs by outcome (ok or failure kind)",
    labelnames=("outcome",),
)
image_formats_total = Counter(
    "image_formats_total",
    "Sniffed image formats",
    labelnames=("format",),
)
ocr_failures_total = Counter("ocr_failures_total", "OCR runs that produced no text")


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]):
        start = time.perf_counter()
        method = request.method
        try:
            response = await call_next(request)
        except Exception:
            endpoint = _endpoint_label(request)
            http_requests_total.labels(endpoint=endpoint, method=method, status="500").inc()
            http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(time.perf_counter() - start)
            raise
        endpoint = _endpoint_label(request)
        http_requests_total.labels(endpoint=endpoint, method=method, status=str(response.status_code)).inc()
        http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(time.perf_counter() - start)
        return response


def _endpoint_label(request: Request) -> str:
    # Prefer the route template (e.g. /v1/onu/{unique_external_id}/traffic-graph) to bound cardinality
    route = request.scope.get("route")
    path = getattr(route, "path", None) or getattr(route, "path_format", None)
    if isinstance(path, str) and path:
        return path
    return request.url.path


def record_pipeline(outcome: str, seconds: float, *, telemetry: bool) -> None:
    pipeline_outcomes_total.labels(outcome=outcome).inc()
    pipeline_duration_seconds.labels(telemetry=str(telemetry).lower()).observe(seconds)


def record_image_format(image_format: str) -> None:
    image_formats_total.labels(format=image_format).inc()


def inc_ocr_failed() -> None:
    ocr_failures_total.inc()


router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics_endpoint():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
