"""FastAPI dependencies turning HTTP requests into operation inputs."""

from typing import List, Optional

from fastapi import Depends, Header, Query, Request
from pydantic import ValidationError

from imageops.core.config import settings
from imageops.core.errors import (
    ErrorCode,
    bad_input_error,
    payload_too_large_error,
)
from imageops.core.logging_config import get_logger
from imageops.models import ImageOptions

logger = get_logger(__name__)


async def verify_content_length(content_length: Optional[int] = Header(None)) -> Optional[int]:
    """Reject oversized uploads before reading the body.

    Raises:
        ServiceError: 413 if the declared size exceeds MAX_UPLOAD_SIZE_MB
    """
    if content_length and content_length > settings.max_upload_bytes:
        raise payload_too_large_error(
            f"Image too large. Maximum allowed: {settings.MAX_UPLOAD_SIZE_MB}MB",
            details={"max_size_mb": settings.MAX_UPLOAD_SIZE_MB, "content_length": content_length},
        )
    return content_length


async def read_image_body(
    request: Request,
    content_length: Optional[int] = Depends(verify_content_length),
) -> bytes:
    """Read the source image from a raw body or a multipart ``file`` field.

    Raises:
        BadInputError: if no image bytes were sent
        ServiceError: 413 if the body turns out larger than allowed
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        buf = await upload.read() if upload is not None and hasattr(upload, "read") else b""
    else:
        buf = await request.body()

    if not buf:
        raise bad_input_error(
            ErrorCode.VAL_EMPTY_BODY,
            "Empty or unreadable image",
        )
    if len(buf) > settings.max_upload_bytes:
        raise payload_too_large_error(
            f"Image too large. Maximum allowed: {settings.MAX_UPLOAD_SIZE_MB}MB",
            details={"max_size_mb": settings.MAX_UPLOAD_SIZE_MB, "size_bytes": len(buf)},
        )

    logger.debug("image_body_read", size_bytes=len(buf), content_type=content_type)
    return buf


def parse_color_param(name: str, value: str) -> List[int]:
    """Parse "R,G,B" into integers.

    Raises:
        BadInputError: if a component is not an integer
    """
    if not value:
        return []
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise bad_input_error(
            ErrorCode.VAL_INVALID_PARAMETER,
            f"Invalid {name} color: {value}",
            details={name: value},
        )


def get_image_options(
    width: int = Query(0, ge=0, description="Width of the output image in pixels"),
    height: int = Query(0, ge=0, description="Height of the output image in pixels"),
    quality: int = Query(0, ge=0, le=100, description="JPEG/WebP quality (1-100)"),
    compression: int = Query(0, ge=0, le=9, description="PNG compression level (0-9)"),
    type_: str = Query("", alias="type", description="Output format: jpeg, png, webp, gif, tiff, bmp"),
    file: str = Query("", description="Source file selector (informational)"),
    url: str = Query("", description="Source URL selector (informational)"),
    force: bool = Query(False, description="Ignore the aspect ratio"),
    embed: bool = Query(False, description="Embed the image in a canvas of the exact size"),
    nocrop: bool = Query(False, description="Disable the crop applied by resize, enlarge and zoom"),
    norotation: bool = Query(False, description="Disable EXIF based auto-rotation"),
    noprofile: bool = Query(False, description="Drop the ICC profile"),
    flip: bool = Query(False),
    flop: bool = Query(False),
    rotate: int = Query(0, description="Rotation angle, a multiple of 90"),
    extend: str = Query("", description="Canvas fill for embed: black, white, background"),
    background: str = Query("", description="Background color as R,G,B"),
    colorspace: str = Query("", description="Output colour space: srgb, bw"),
    gravity: str = Query("", description="Crop anchor: centre, north, south, east, west, smart"),
    top: int = Query(0, ge=0),
    left: int = Query(0, ge=0),
    areawidth: int = Query(0, ge=0),
    areaheight: int = Query(0, ge=0),
    factor: float = Query(0.0, description="Zoom factor"),
    text: str = Query("", description="Watermark text"),
    font: str = Query("", description="Watermark font, e.g. 'sans 12'"),
    color: str = Query("", description="Watermark text color as R,G,B"),
    margin: int = Query(0, ge=0),
    dpi: int = Query(0, ge=0),
    textwidth: int = Query(0, ge=0),
    opacity: float = Query(0.0, ge=0.0, le=1.0),
    noreplicate: bool = Query(False),
) -> ImageOptions:
    """Build ImageOptions from the query string.

    Raises:
        BadInputError: if a colour or value fails model validation
    """
    try:
        return ImageOptions(
            width=width,
            height=height,
            quality=quality,
            compression=compression,
            type=type_,
            file=file,
            url=url,
            force=force,
            embed=embed,
            no_crop=nocrop,
            no_rotation=norotation,
            no_profile=noprofile,
            flip=flip,
            flop=flop,
            rotate=rotate,
            extend=extend,
            background=parse_color_param("background", background),
            colorspace=colorspace,
            gravity=gravity,
            top=top,
            left=left,
            area_width=areawidth,
            area_height=areaheight,
            factor=factor,
            text=text,
            font=font,
            color=parse_color_param("color", color),
            margin=margin,
            dpi=dpi,
            text_width=textwidth,
            opacity=opacity,
            no_replicate=noreplicate,
        )
    except ValidationError as exc:
        first = exc.errors()[0]
        raise bad_input_error(
            ErrorCode.VAL_INVALID_PARAMETER,
            first["msg"],
            details={"field": ".".join(str(loc) for loc in first["loc"])},
        )
