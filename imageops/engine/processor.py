"""Image transformation pipeline.

``resize`` decodes a buffer, applies every transformation requested in an
EngineOptions instance and encodes the result. Steps run in a fixed order:

1. auto-rotate from EXIF orientation (unless disabled)
2. extract area
3. zoom
4. resize to width/height (fit, crop-to-fill, embed or force)
5. rotate, flip, flop
6. watermark
7. colour space conversion
8. encode to the requested (or original) format
"""

import io
from typing import Optional, Tuple

from PIL import Image, ImageOps

from .errors import EngineError
from .metadata import has_alpha
from .options import Color, EngineOptions
from .types import (
    PIL_FORMATS,
    Extend,
    Gravity,
    ImageType,
    Interpretation,
    determine_image_type,
    is_supported_output,
)
from .watermark import draw_watermark

# Largest edge the engine will produce
MAX_DIMENSION = 16384

DEFAULT_QUALITY = 80
DEFAULT_COMPRESSION = 6

_CENTERING = {
    Gravity.CENTRE: (0.5, 0.5),
    Gravity.NORTH: (0.5, 0.0),
    Gravity.SOUTH: (0.5, 1.0),
    Gravity.EAST: (1.0, 0.5),
    Gravity.WEST: (0.0, 0.5),
}

_ROTATIONS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def resize(buf: bytes, options: EngineOptions) -> bytes:
    """Transform ``buf`` according to ``options`` and return the encoded image.

    Raises:
        EngineError: for unsupported input/output formats or invalid geometry.
        Decoder and encoder failures from Pillow propagate unchanged.
    """
    if not buf:
        raise EngineError("Image buffer is empty")

    input_type = determine_image_type(buf)
    if input_type is ImageType.UNKNOWN:
        raise EngineError("Unsupported image format")

    output_type = options.type if options.type is not ImageType.UNKNOWN else input_type
    if not is_supported_output(output_type):
        raise EngineError(f"Unsupported output image format: {output_type.value}")

    with Image.open(io.BytesIO(buf)) as source:
        source.load()
        icc_profile = source.info.get("icc_profile")

        image = source if options.no_auto_rotate else ImageOps.exif_transpose(source)
        image = extract_area(image, options)
        image = zoom(image, options.zoom)
        image = resize_to_target(image, options)
        image = rotate(image, options.rotate)
        if options.flip:
            image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        if options.flop:
            image = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        if options.watermark.text:
            image = draw_watermark(image, options.watermark)
        image = convert_colorspace(image, options.interpretation)

        profile = None if options.no_profile else icc_profile
        return encode(image, output_type, options, profile)


def normalize_angle(angle: int) -> int:
    """Reduce ``angle`` to 0, 90, 180 or 270 (rounding down to a multiple of 90)."""
    angle %= 360
    return angle - angle % 90


def extract_area(image: Image.Image, options: EngineOptions) -> Image.Image:
    if not (options.top or options.left or options.area_width or options.area_height):
        return image

    area_width = options.area_width or options.width
    area_height = options.area_height or options.height
    if area_width <= 0 or area_height <= 0:
        raise EngineError("Extract area width/height params are required")

    box = (options.left, options.top, options.left + area_width, options.top + area_height)
    if options.left < 0 or options.top < 0 or box[2] > image.width or box[3] > image.height:
        raise EngineError(
            f"Extract area {area_width}x{area_height}+{options.left}+{options.top} "
            f"is outside the {image.width}x{image.height} image"
        )
    return image.crop(box)


def zoom(image: Image.Image, factor: float) -> Image.Image:
    """Scale by ``factor`` replicating pixels, the way a zoom lens would."""
    if factor == 0 or factor == 1:
        return image
    if factor < 0:
        raise EngineError(f"Zoom factor must be positive, got {factor}")

    size = (max(1, round(image.width * factor)), max(1, round(image.height * factor)))
    _check_dimensions(size)
    return image.resize(size, Image.Resampling.NEAREST)


def resize_to_target(image: Image.Image, options: EngineOptions) -> Image.Image:
    """Bring the image to the requested width/height.

    With a single dimension the aspect ratio is kept. With both, ``force``
    stretches, ``crop`` fills the box and trims the overflow at ``gravity``,
    ``embed`` fits inside the box and pads with ``extend``, otherwise the
    image is fitted inside the box. Images are never upscaled unless
    ``enlarge`` or ``force`` is set.
    """
    width, height = options.width, options.height
    if width <= 0 and height <= 0:
        return image

    _check_dimensions((width, height))
    upscale = options.enlarge or options.force

    if width > 0 and height > 0:
        if options.force:
            return image.resize((width, height), Image.Resampling.LANCZOS)
        if options.crop:
            return _fill(image, width, height, options.gravity, upscale)
        fitted = _scale(image, min(width / image.width, height / image.height), upscale)
        if options.embed:
            return _embed(fitted, width, height, options.extend, options.background)
        return fitted

    if width > 0:
        return _scale(image, width / image.width, upscale)
    return _scale(image, height / image.height, upscale)


def rotate(image: Image.Image, angle: int) -> Image.Image:
    """Rotate clockwise by a multiple of 90 degrees."""
    transpose = _ROTATIONS.get(normalize_angle(angle))
    return image.transpose(transpose) if transpose is not None else image


def convert_colorspace(image: Image.Image, interpretation: Interpretation) -> Image.Image:
    if interpretation is Interpretation.BW:
        return image.convert("LA") if has_alpha(image) else image.convert("L")
    if image.mode == "CMYK":
        return image.convert("RGB")
    return image


def encode(
    image: Image.Image,
    output_type: ImageType,
    options: EngineOptions,
    icc_profile: Optional[bytes] = None,
) -> bytes:
    """Serialize ``image`` as ``output_type`` honouring quality and compression."""
    params = {}
    quality = options.quality if options.quality > 0 else DEFAULT_QUALITY

    if output_type is ImageType.JPEG:
        if image.mode not in ("RGB", "L", "CMYK"):
            image = _flatten(image, options.background)
        params["quality"] = quality
    elif output_type is ImageType.WEBP:
        params["quality"] = quality
    elif output_type is ImageType.PNG:
        params["compress_level"] = options.compression if 0 < options.compression <= 9 else DEFAULT_COMPRESSION
    elif output_type is ImageType.BMP and image.mode not in ("1", "L", "P", "RGB"):
        image = _flatten(image, options.background)

    if icc_profile and output_type in (ImageType.JPEG, ImageType.PNG, ImageType.WEBP, ImageType.TIFF):
        params["icc_profile"] = icc_profile

    buffer = io.BytesIO()
    image.save(buffer, format=PIL_FORMATS[output_type], **params)
    return buffer.getvalue()


def _check_dimensions(size: Tuple[int, int]) -> None:
    if size[0] > MAX_DIMENSION or size[1] > MAX_DIMENSION:
        raise EngineError(
            f"Output size {size[0]}x{size[1]} exceeds the maximum of {MAX_DIMENSION} pixels per side"
        )


def _scale(image: Image.Image, factor: float, upscale: bool) -> Image.Image:
    if factor > 1 and not upscale:
        factor = 1.0
    size = (max(1, round(image.width * factor)), max(1, round(image.height * factor)))
    if size == image.size:
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def _fill(image: Image.Image, width: int, height: int, gravity: Gravity, upscale: bool) -> Image.Image:
    """Scale to cover the box, then trim whatever overflows it."""
    scaled = _scale(image, max(width / image.width, height / image.height), upscale)
    crop_width, crop_height = min(width, scaled.width), min(height, scaled.height)

    if gravity is Gravity.SMART:
        left, top = _smart_offset(scaled, crop_width, crop_height)
    else:
        cx, cy = _CENTERING[gravity]
        left = round((scaled.width - crop_width) * cx)
        top = round((scaled.height - crop_height) * cy)
    return scaled.crop((left, top, left + crop_width, top + crop_height))


def _smart_offset(image: Image.Image, width: int, height: int, steps: int = 10) -> Tuple[int, int]:
    """Pick the crop window with the most detail (highest entropy)."""
    span_x, span_y = image.width - width, image.height - height
    best, best_entropy = (span_x // 2, span_y // 2), -1.0
    for i in range(steps + 1):
        left, top = round(span_x * i / steps), round(span_y * i / steps)
        entropy = image.crop((left, top, left + width, top + height)).entropy()
        if entropy > best_entropy:
            best, best_entropy = (left, top), entropy
    return best


def _embed(image: Image.Image, width: int, height: int, extend: Extend, background: Optional[Color]) -> Image.Image:
    if image.size == (width, height):
        return image

    if extend is Extend.WHITE:
        color = (255, 255, 255)
    elif extend is Extend.BACKGROUND and background:
        color = background
    else:
        color = (0, 0, 0)

    if has_alpha(image):
        image = image.convert("RGBA")
        canvas = Image.new("RGBA", (width, height), (*color, 255))
    else:
        image = image.convert("RGB")
        canvas = Image.new("RGB", (width, height), color)
    canvas.paste(image, ((width - image.width) // 2, (height - image.height) // 2))
    return canvas


def _flatten(image: Image.Image, background: Optional[Color]) -> Image.Image:
    """Drop transparency by compositing onto a solid background."""
    color = background or (255, 255, 255)
    rgba = image.convert("RGBA")
    canvas = Image.new("RGB", rgba.size, color)
    canvas.paste(rgba, mask=rgba.getchannel("A"))
    return canvas
