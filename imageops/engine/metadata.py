"""Image metadata inspection."""

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .errors import EngineError
from .types import ImageType, determine_image_type

# EXIF tag holding the camera orientation (1-8)
ORIENTATION_TAG = 0x0112

_COLOR_SPACES = {
    "1": "b-w",
    "L": "b-w",
    "LA": "b-w",
    "I": "grey16",
    "I;16": "grey16",
    "I;16B": "grey16",
    "I;16L": "grey16",
    "F": "grey16",
    "P": "srgb",
    "PA": "srgb",
    "RGB": "srgb",
    "RGBA": "srgb",
    "RGBX": "srgb",
    "CMYK": "cmyk",
    "LAB": "lab",
    "YCbCr": "ycbcr",
    "HSV": "hsv",
}


@dataclass
class ImageMetadata:
    width: int
    height: int
    type: str
    space: str
    alpha: bool
    profile: bool
    channels: int
    orientation: int


def has_alpha(image: Image.Image) -> bool:
    """True if the image carries transparency, either as a band or a palette entry."""
    return "A" in image.getbands() or (image.mode == "P" and "transparency" in image.info)


def metadata(buf: bytes) -> ImageMetadata:
    """Read size, format and colour information without decoding pixels.

    Raises:
        EngineError: if the buffer is empty or not a supported image
    """
    if not buf:
        raise EngineError("Image buffer is empty")

    kind = determine_image_type(buf)
    if kind is ImageType.UNKNOWN:
        raise EngineError("Unsupported image format")

    try:
        with Image.open(io.BytesIO(buf)) as image:
            width, height = image.size
            orientation = image.getexif().get(ORIENTATION_TAG, 0)
            return ImageMetadata(
                width=width,
                height=height,
                type=kind.value,
                space=_COLOR_SPACES.get(image.mode, image.mode.lower()),
                alpha=has_alpha(image),
                profile=bool(image.info.get("icc_profile")),
                channels=len(image.getbands()),
                orientation=int(orientation),
            )
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise EngineError(str(exc) or "Cannot decode image") from exc
