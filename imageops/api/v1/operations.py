"""
Image operation endpoints.

One ``POST /{operation}`` route per catalog entry. The router only deals
with HTTP concerns: it reads the body and query string, runs the operation
off the event loop and returns the resulting bytes with their MIME type.
Validation and engine errors are raised as ServiceError and rendered by
the exception handlers.
"""

import time

from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool

from imageops.api.dependencies import get_image_options, read_image_body
from imageops.api.v1.metrics import (
    image_operation_duration_seconds,
    image_operation_output_bytes,
    image_operations_total,
)
from imageops.core.config import settings
from imageops.core.errors import BadInputError, ServiceError
from imageops.core.logging_config import get_logger
from imageops.models import ImageOptions
from imageops.services import OPERATIONS, get_operation


logger = get_logger(__name__)
router = APIRouter(tags=["operations"])


async def run_operation(name: str, buf: bytes, options: ImageOptions) -> Response:
    """Execute an operation and record its outcome."""
    operation = get_operation(name)
    start_time = time.time()

    try:
        image = await run_in_threadpool(operation.run, buf, options)
    except ServiceError as exc:
        status = "rejected" if isinstance(exc, BadInputError) else "failed"
        image_operations_total.labels(
            service=settings.SERVICE_NAME, operation=name, status=status
        ).inc()
        raise

    image_operations_total.labels(
        service=settings.SERVICE_NAME, operation=name, status="completed"
    ).inc()
    image_operation_duration_seconds.labels(
        service=settings.SERVICE_NAME, operation=name
    ).observe(time.time() - start_time)
    image_operation_output_bytes.labels(
        service=settings.SERVICE_NAME, operation=name
    ).observe(len(image.body))

    return Response(content=image.body, media_type=image.mime)


def _make_endpoint(name: str):
    async def endpoint(
        buf: bytes = Depends(read_image_body),
        options: ImageOptions = Depends(get_image_options),
    ) -> Response:
        return await run_operation(name, buf, options)

    endpoint.__name__ = f"{name}_image"
    return endpoint


for _operation in OPERATIONS.values():
    router.add_api_route(
        f"/{_operation.name}",
        _make_endpoint(_operation.name),
        methods=["POST"],
        summary=_operation.summary,
        response_class=Response,
        responses={
            200: {"content": {"image/*": {}, "application/json": {}}},
            400: {"description": "Missing or invalid parameter, or unreadable image"},
            404: {"description": "Operation disabled"},
            413: {"description": "Image too large"},
            500: {"description": "Image engine failure"},
        },
    )
