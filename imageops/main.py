"""Main FastAPI application for the image operations service."""

from contextlib import asynccontextmanager

import PIL
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from imageops.core.config import settings
from imageops.core.errors import ServiceError
from imageops.core.logging_config import setup_logging, get_logger
from imageops.api.v1 import health, metrics, operations
from imageops.api.middleware import RequestLoggingMiddleware, PerformanceLoggingMiddleware, PrometheusMiddleware
from imageops.api.exception_handlers import (
    service_error_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from imageops.services import available_operations


# Initialize logging system (MUST be done before any logging calls)
setup_logging(debug=settings.is_debug_mode, json_logs=settings.use_json_logs)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and graceful shutdown."""
    logger.info(
        "application_startup",
        service=settings.SERVICE_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        debug_mode=settings.is_debug_mode,
        log_level=settings.LOG_LEVEL,
        engine_version=PIL.__version__,
        operations=available_operations(),
        disabled_operations=settings.DISABLED_OPERATIONS,
        max_upload_size_mb=settings.MAX_UPLOAD_SIZE_MB,
    )

    yield

    logger.info("application_shutdown", graceful=True)


app = FastAPI(
    title=settings.SERVICE_NAME,
    description="HTTP image operations: resize, crop, extract, rotate, zoom, convert, watermark and more",
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Exception handlers for structured error logging
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Middleware stack (first added is executed last)
app.add_middleware(PrometheusMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PerformanceLoggingMiddleware, slow_request_threshold_ms=1000.0)

app.include_router(operations.router)
app.include_router(health.router)
app.include_router(metrics.router)


@app.get("/")
async def root():
    """Service information and the enabled operation catalog.

    Returns:
        dict: Service metadata, engine version and operation names
    """
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "engine": {"name": "pillow", "version": PIL.__version__},
        "operations": available_operations(),
        "documentation": "/docs",
        "health_check": "/api/v1/health",
    }
