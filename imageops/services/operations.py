"""
Operation Catalog

Every operation has the same shape, ``(buffer, ImageOptions) -> Image``:

1. validate the parameters the operation needs (BadInputError otherwise,
   before the engine is touched)
2. build EngineOptions with the shared mapper
3. apply the operation's own overrides
4. hand the buffer and options to the processing gateway

Operations hold no state; each call builds its own EngineOptions.
"""
import time
from typing import Callable, Dict, List

from imageops.core.config import settings
from imageops.core.errors import (
    BadInputError,
    ErrorCode,
    ServiceError,
    bad_input_error,
    missing_param_error,
    not_found_error,
)
from imageops.core.logging_config import get_logger
from imageops.engine import ImageType, image_type
from imageops.models import Image, ImageOptions
from imageops.services.gateway import process
from imageops.services.inspector import info
from imageops.services.mapper import parse_color, to_engine_options

logger = get_logger(__name__)

Handler = Callable[[bytes, ImageOptions], Image]


def resize(buf: bytes, o: ImageOptions) -> Image:
    if o.width == 0 and o.height == 0:
        raise missing_param_error("Missing required param: height or width")

    opts = to_engine_options(o)
    opts.embed = True
    if not o.no_crop:
        opts.crop = True
    return process(buf, opts)


def enlarge(buf: bytes, o: ImageOptions) -> Image:
    # Both sides are required, unlike resize
    if o.width == 0 or o.height == 0:
        raise missing_param_error("Missing required params: height, width")

    opts = to_engine_options(o)
    opts.enlarge = True
    if not o.no_crop:
        opts.crop = True
    return process(buf, opts)


def extract(buf: bytes, o: ImageOptions) -> Image:
    if o.area_width == 0 or o.area_height == 0:
        raise missing_param_error("Missing required params: areawidth or areaheight")

    opts = to_engine_options(o)
    opts.top = o.top
    opts.left = o.left
    opts.area_width = o.area_width
    opts.area_height = o.area_height
    return process(buf, opts)


def crop(buf: bytes, o: ImageOptions) -> Image:
    if o.width == 0 and o.height == 0:
        raise missing_param_error("Missing required param: height or width")

    opts = to_engine_options(o)
    opts.crop = True
    return process(buf, opts)


def rotate(buf: bytes, o: ImageOptions) -> Image:
    if o.rotate == 0:
        raise missing_param_error("Missing required param: rotate")

    return process(buf, to_engine_options(o))


def flip(buf: bytes, o: ImageOptions) -> Image:
    opts = to_engine_options(o)
    opts.flip = True
    return process(buf, opts)


def flop(buf: bytes, o: ImageOptions) -> Image:
    opts = to_engine_options(o)
    opts.flop = True
    return process(buf, opts)


def thumbnail(buf: bytes, o: ImageOptions) -> Image:
    if o.width == 0 and o.height == 0:
        raise missing_param_error("Missing required params: width or height")

    return process(buf, to_engine_options(o))


def zoom(buf: bytes, o: ImageOptions) -> Image:
    if o.factor == 0:
        raise missing_param_error("Missing required param: factor")

    opts = to_engine_options(o)

    # An area is only needed when zooming into an offset region.
    # Extract always requires both sides; zoom accepts either one.
    if o.top > 0 or o.left > 0:
        if o.area_width == 0 and o.area_height == 0:
            raise missing_param_error("Missing required params: areawidth, areaheight")

        opts.top = o.top
        opts.left = o.left
        opts.area_width = o.area_width
        opts.area_height = o.area_height
        if not o.no_crop:
            opts.crop = True

    opts.zoom = o.factor
    return process(buf, opts)


def convert(buf: bytes, o: ImageOptions) -> Image:
    if o.type == "":
        raise missing_param_error("Missing required param: type")
    if image_type(o.type) is ImageType.UNKNOWN:
        raise bad_input_error(
            ErrorCode.VAL_INVALID_PARAMETER,
            f"Invalid image type: {o.type}",
            details={"type": o.type},
        )

    return process(buf, to_engine_options(o))


def watermark(buf: bytes, o: ImageOptions) -> Image:
    if o.text == "":
        raise missing_param_error("Missing required param: text")

    opts = to_engine_options(o)
    opts.watermark.dpi = o.dpi
    opts.watermark.text = o.text
    opts.watermark.font = o.font
    opts.watermark.margin = o.margin
    opts.watermark.width = o.text_width
    opts.watermark.opacity = o.opacity
    opts.watermark.no_replicate = o.no_replicate
    opts.watermark.background = parse_color(o.color)
    return process(buf, opts)


class Operation:
    """A named, stateless image transformation.

    Wraps a handler with structured logging so every catalog entry reports
    its outcome the same way. Calling the instance is the same as ``run``.
    """

    def __init__(self, name: str, handler: Handler, summary: str):
        self.name = name
        self.handler = handler
        self.summary = summary

    def __repr__(self) -> str:
        return f"Operation({self.name!r})"

    def run(self, buf: bytes, options: ImageOptions) -> Image:
        """Execute the operation.

        Raises:
            BadInputError: missing or invalid parameters, unreadable input
            ProcessingError: the engine failed
        """
        start_time = time.time()
        logger.debug("operation_started", operation=self.name, input_bytes=len(buf))

        try:
            image = self.handler(buf, options)
        except BadInputError as exc:
            logger.info(
                "operation_rejected",
                operation=self.name,
                code=exc.code.value,
                error=exc.message,
            )
            raise
        except ServiceError as exc:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "operation_failed",
                operation=self.name,
                code=exc.code.value,
                error=exc.message,
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "operation_completed",
            operation=self.name,
            mime=image.mime,
            input_bytes=len(buf),
            output_bytes=len(image.body),
            duration_ms=round(duration_ms, 2),
        )
        return image

    __call__ = run


_CATALOG: List[Operation] = [
    Operation("info", info, "Retrieve image metadata as a JSON document."),
    Operation("resize", resize, "Resize an image by width or height. Image aspect ratio is maintained."),
    Operation("enlarge", enlarge, "Enlarge the image to a given width and height."),
    Operation("extract", extract, "Extract the area given by top, left, areawidth and areaheight."),
    Operation("crop", crop, "Crop the image to a given width or height. Image ratio is maintained."),
    Operation("rotate", rotate, "Rotate the image by a multiple of 90 degrees."),
    Operation("flip", flip, "Flip the image vertically."),
    Operation("flop", flop, "Flop the image horizontally."),
    Operation("thumbnail", thumbnail, "Create a thumbnail bounded by width or height."),
    Operation("zoom", zoom, "Zoom into the image by a factor, optionally into an area."),
    Operation("convert", convert, "Convert an image to another format with quality/compression settings."),
    Operation("watermark", watermark, "Add a custom watermark text to an image."),
]

OPERATIONS: Dict[str, Operation] = {op.name: op for op in _CATALOG}


def available_operations() -> List[str]:
    """Names of the operations currently enabled by configuration."""
    disabled = set(settings.DISABLED_OPERATIONS)
    return [name for name in OPERATIONS if name not in disabled]


def get_operation(name: str) -> Operation:
    """Look up an enabled operation by name.

    Raises:
        ServiceError: 404 if the name is unknown or disabled
    """
    key = name.lower()
    if key not in OPERATIONS or key in settings.DISABLED_OPERATIONS:
        raise not_found_error(
            ErrorCode.OP_NOT_FOUND,
            f"Unknown operation: {name}",
            details={"available": available_operations()},
        )
    return OPERATIONS[key]
