"""Image format, gravity, extend and colour space enumerations plus MIME lookups."""

from enum import Enum


class ImageType(str, Enum):
    """Image formats the engine can recognise."""

    UNKNOWN = "unknown"
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    GIF = "gif"
    TIFF = "tiff"
    BMP = "bmp"


class Gravity(str, Enum):
    """Anchor used when cropping to fill a target box."""

    CENTRE = "centre"
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    SMART = "smart"


class Extend(str, Enum):
    """How the canvas around an embedded image is filled."""

    BLACK = "black"
    WHITE = "white"
    BACKGROUND = "background"


class Interpretation(str, Enum):
    """Output colour space."""

    SRGB = "srgb"
    BW = "b-w"


_TYPE_ALIASES = {
    "jpeg": ImageType.JPEG,
    "jpg": ImageType.JPEG,
    "png": ImageType.PNG,
    "webp": ImageType.WEBP,
    "gif": ImageType.GIF,
    "tiff": ImageType.TIFF,
    "tif": ImageType.TIFF,
    "bmp": ImageType.BMP,
}

_MIME_TYPES = {
    ImageType.JPEG: "image/jpeg",
    ImageType.PNG: "image/png",
    ImageType.WEBP: "image/webp",
    ImageType.GIF: "image/gif",
    ImageType.TIFF: "image/tiff",
    ImageType.BMP: "image/bmp",
}

# Pillow format identifiers used for encoding
PIL_FORMATS = {
    ImageType.JPEG: "JPEG",
    ImageType.PNG: "PNG",
    ImageType.WEBP: "WEBP",
    ImageType.GIF: "GIF",
    ImageType.TIFF: "TIFF",
    ImageType.BMP: "BMP",
}


def image_type(name: str) -> ImageType:
    """Resolve a format name such as "jpg" or "WebP" to an ImageType.

    Returns ImageType.UNKNOWN for anything unrecognised.
    """
    return _TYPE_ALIASES.get(name.strip().lower(), ImageType.UNKNOWN)


def determine_image_type(buf: bytes) -> ImageType:
    """Detect the image format from the leading magic bytes."""
    if len(buf) < 12:
        return ImageType.UNKNOWN
    if buf[:3] == b"\xff\xd8\xff":
        return ImageType.JPEG
    if buf[:8] == b"\x89PNG\r\n\x1a\n":
        return ImageType.PNG
    if buf[:4] == b"RIFF" and buf[8:12] == b"WEBP":
        return ImageType.WEBP
    if buf[:6] in (b"GIF87a", b"GIF89a"):
        return ImageType.GIF
    if buf[:4] in (b"II*\x00", b"MM\x00*"):
        return ImageType.TIFF
    if buf[:2] == b"BM":
        return ImageType.BMP
    return ImageType.UNKNOWN


def mime_type_for(kind: ImageType) -> str:
    """MIME type for an image format, "application/octet-stream" when unknown."""
    return _MIME_TYPES.get(kind, "application/octet-stream")


def is_supported_output(kind: ImageType) -> bool:
    return kind in PIL_FORMATS
