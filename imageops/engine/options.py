"""Parameter structures understood by the image engine."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .types import Extend, Gravity, ImageType, Interpretation

Color = Tuple[int, int, int]


@dataclass
class Watermark:
    """Text watermark drawn over the output image.

    An empty ``text`` disables the watermark. Zero values fall back to the
    engine defaults (font "sans 10", 75 DPI, 25% opacity).
    """
    text: str = ""
    font: str = ""
    margin: int = 0
    dpi: int = 0
    width: int = 0
    opacity: float = 0.0
    no_replicate: bool = False
    background: Optional[Color] = None


@dataclass
class EngineOptions:
    """Everything one ``resize`` call needs to know.

    Built fresh for every request and handed to the engine exactly once.
    """
    width: int = 0
    height: int = 0
    area_width: int = 0
    area_height: int = 0
    top: int = 0
    left: int = 0
    quality: int = 0
    compression: int = 0
    zoom: float = 0.0
    rotate: int = 0
    crop: bool = False
    embed: bool = False
    enlarge: bool = False
    force: bool = False
    flip: bool = False
    flop: bool = False
    no_auto_rotate: bool = False
    no_profile: bool = False
    type: ImageType = ImageType.UNKNOWN
    gravity: Gravity = Gravity.CENTRE
    extend: Extend = Extend.BLACK
    interpretation: Interpretation = Interpretation.SRGB
    background: Optional[Color] = None
    watermark: Watermark = field(default_factory=Watermark)
