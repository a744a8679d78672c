"""Prometheus metrics endpoint and metric definitions."""

from fastapi import APIRouter, Response
from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    Info,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)

from imageops.core.config import settings


router = APIRouter(tags=["metrics"])


service_info = Info(
    'service',
    'Service information',
    registry=REGISTRY
)
service_info.info({
    'name': settings.SERVICE_NAME,
    'version': settings.VERSION,
    'environment': settings.ENVIRONMENT,
})


# HTTP Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['service', 'method', 'endpoint', 'status'],
    registry=REGISTRY
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['service', 'method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0),
    registry=REGISTRY
)

http_requests_in_progress = Gauge(
    'http_requests_in_progress',
    'HTTP requests currently in progress',
    ['service', 'method'],
    registry=REGISTRY
)


# Image Operation Metrics
image_operations_total = Counter(
    'image_operations_total',
    'Total image operations',
    ['service', 'operation', 'status'],  # status: completed, rejected, failed
    registry=REGISTRY
)

image_operation_duration_seconds = Histogram(
    'image_operation_duration_seconds',
    'Image operation duration in seconds',
    ['service', 'operation'],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
    registry=REGISTRY
)

image_operation_output_bytes = Histogram(
    'image_operation_output_bytes',
    'Size of operation results in bytes',
    ['service', 'operation'],
    buckets=(1e3, 1e4, 5e4, 1e5, 5e5, 1e6, 5e6, 1e7),
    registry=REGISTRY
)


# Error Tracking Metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['service', 'error_type', 'endpoint'],
    registry=REGISTRY
)


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint.

    Returns:
        Response: Prometheus metrics in text format
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )
