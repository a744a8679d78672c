"""Metadata inspection - the info operation."""

from typing import Optional

from imageops import engine
from imageops.core.errors import ErrorCode, bad_input_error
from imageops.core.logging_config import get_logger
from imageops.models import Image, ImageInfo, ImageOptions
from imageops.services.gateway import describe_engine_failure

logger = get_logger(__name__)

JSON_MIME = "application/json"


def info(buf: bytes, options: Optional[ImageOptions] = None) -> Image:
    """Describe ``buf`` as a JSON document instead of transforming it.

    Options are accepted for signature compatibility with the other
    operations and ignored. Never calls the processing gateway.

    Raises:
        BadInputError: if the engine cannot read the image metadata
    """
    try:
        meta = engine.metadata(buf)
    except Exception as exc:
        message = describe_engine_failure(exc)
        logger.warning("metadata_read_failed", error_type=type(exc).__name__, error=message)
        raise bad_input_error(
            ErrorCode.VAL_UNREADABLE_IMAGE,
            f"Cannot retrieve image metadata: {message}",
        ) from exc

    image_info = ImageInfo(
        width=meta.width,
        height=meta.height,
        type=meta.type,
        space=meta.space,
        has_alpha=meta.alpha,
        has_profile=meta.profile,
        channels=meta.channels,
        orientation=meta.orientation,
    )
    return Image(body=image_info.to_json(), mime=JSON_MIME)
