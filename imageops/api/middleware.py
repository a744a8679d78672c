"""
FastAPI middleware for request tracing, logging and metrics.

- RequestLoggingMiddleware: trace IDs plus request/response logging
- PerformanceLoggingMiddleware: warnings for slow requests
- PrometheusMiddleware: HTTP request counters and latency histograms
"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from imageops.core.logging_config import get_logger, set_trace_id, clear_trace_id


logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Attach a trace ID to each request and log its lifecycle.

    The trace ID is taken from X-Trace-ID or X-Correlation-ID when present,
    otherwise generated, and echoed back in both response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = (
            request.headers.get("X-Trace-ID") or
            request.headers.get("X-Correlation-ID") or
            str(uuid.uuid4())
        )
        set_trace_id(trace_id)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_host=request.client.host if request.client else "unknown",
            user_agent=request.headers.get("user-agent", "unknown"),
            content_type=request.headers.get("content-type", ""),
            query_params=dict(request.query_params),
        )

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                content_type=response.headers.get("content-type", ""),
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Trace-ID"] = trace_id
            response.headers["X-Correlation-ID"] = trace_id
            return response

        except Exception as exc:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error_type=type(exc).__name__,
                error_message=str(exc),
                exc_info=True,
            )
            raise

        finally:
            clear_trace_id()


class PerformanceLoggingMiddleware(BaseHTTPMiddleware):
    """Log a warning for requests slower than ``slow_request_threshold_ms``."""

    def __init__(self, app: ASGIApp, slow_request_threshold_ms: float = 1000.0):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        if duration_ms > self.slow_request_threshold_ms:
            logger.warning(
                "slow_request_detected",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 2),
                threshold_ms=self.slow_request_threshold_ms,
                status_code=response.status_code,
            )

        return response


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect HTTP request counts, latency and in-flight requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Import here to avoid circular imports
        from imageops.api.v1.metrics import (
            http_requests_total,
            http_request_duration_seconds,
            http_requests_in_progress,
            errors_total,
        )
        from imageops.core.config import settings

        method = request.method
        path = request.url.path

        if path == "/metrics":
            return await call_next(request)

        http_requests_in_progress.labels(service=settings.SERVICE_NAME, method=method).inc()

        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response

        except Exception as exc:
            errors_total.labels(
                service=settings.SERVICE_NAME,
                error_type=type(exc).__name__,
                endpoint=path
            ).inc()
            raise

        finally:
            duration = time.time() - start_time
            http_requests_in_progress.labels(service=settings.SERVICE_NAME, method=method).dec()
            http_requests_total.labels(
                service=settings.SERVICE_NAME,
                method=method,
                endpoint=path,
                status=status_code
            ).inc()
            http_request_duration_seconds.labels(
                service=settings.SERVICE_NAME,
                method=method,
                endpoint=path
            ).observe(duration)
