"""Health and engine status endpoints."""

from datetime import datetime, timezone

import PIL
from PIL import features
from fastapi import APIRouter

from imageops.core.config import settings
from imageops.engine import ImageType, is_supported_output
from imageops.services import available_operations


router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic health check endpoint for load balancers.

    Returns:
        dict: Health status with service info and timestamp
    """
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/engine")
async def engine_status():
    """Report the image engine version and what it can produce.

    Returns:
        dict: Pillow version, output formats and optional codec support
    """
    return {
        "engine": "pillow",
        "version": PIL.__version__,
        "output_formats": [kind.value for kind in ImageType if is_supported_output(kind)],
        "codecs": {
            "webp": features.check("webp"),
            "jpeg": features.check("jpg"),
            "png": features.check("zlib"),
            "freetype": features.check("freetype2"),
        },
        "operations": available_operations(),
    }
