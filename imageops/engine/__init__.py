"""Pillow-backed image engine.

The engine is the only part of the service that touches pixels. The rest of
the application consumes it through ``resize`` and ``metadata`` plus the
format lookups below and treats any exception coming out of it as a
processing failure.
"""

from .errors import EngineError
from .metadata import ImageMetadata, metadata
from .options import EngineOptions, Watermark
from .processor import resize
from .types import (
    Extend,
    Gravity,
    ImageType,
    Interpretation,
    determine_image_type,
    image_type,
    is_supported_output,
    mime_type_for,
)

__all__ = [
    "EngineError",
    "EngineOptions",
    "Extend",
    "Gravity",
    "ImageMetadata",
    "ImageType",
    "Interpretation",
    "Watermark",
    "determine_image_type",
    "image_type",
    "is_supported_output",
    "metadata",
    "mime_type_for",
    "resize",
]
