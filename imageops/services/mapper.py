"""Translation of request options into engine parameters."""

from typing import List, Optional

from imageops.core.config import settings
from imageops.engine import (
    EngineOptions,
    Extend,
    Gravity,
    ImageType,
    Interpretation,
    image_type,
)
from imageops.engine.options import Color
from imageops.models import ImageOptions

_GRAVITIES = {
    "centre": Gravity.CENTRE,
    "center": Gravity.CENTRE,
    "north": Gravity.NORTH,
    "south": Gravity.SOUTH,
    "east": Gravity.EAST,
    "west": Gravity.WEST,
    "smart": Gravity.SMART,
}

_EXTEND_MODES = {
    "black": Extend.BLACK,
    "white": Extend.WHITE,
    "background": Extend.BACKGROUND,
}

_COLORSPACES = {
    "srgb": Interpretation.SRGB,
    "bw": Interpretation.BW,
    "b-w": Interpretation.BW,
}


def parse_gravity(value: str) -> Gravity:
    return _GRAVITIES.get(value.strip().lower(), Gravity.CENTRE)


def parse_extend(value: str) -> Extend:
    return _EXTEND_MODES.get(value.strip().lower(), Extend.BLACK)


def parse_colorspace(value: str) -> Interpretation:
    return _COLORSPACES.get(value.strip().lower(), Interpretation.SRGB)


def parse_color(components: List[int]) -> Optional[Color]:
    """First three components as an RGB tuple, None when fewer are given."""
    if len(components) < 3:
        return None
    return (components[0], components[1], components[2])


def to_engine_options(options: ImageOptions) -> EngineOptions:
    """Build engine parameters from request options.

    A plain field-for-field copy shared by every operation; unknown enum
    names fall back to the engine defaults, so this never fails.
    Operation-specific flags (crop, enlarge, zoom, extraction area,
    watermark) are left for the operation to set.
    """
    return EngineOptions(
        width=options.width,
        height=options.height,
        quality=options.quality or settings.DEFAULT_QUALITY,
        compression=options.compression or settings.DEFAULT_COMPRESSION,
        type=image_type(options.type) if options.type else ImageType.UNKNOWN,
        rotate=options.rotate,
        flip=options.flip,
        flop=options.flop,
        force=options.force,
        embed=options.embed,
        no_auto_rotate=options.no_rotation,
        no_profile=options.no_profile,
        extend=parse_extend(options.extend),
        background=parse_color(options.background),
        interpretation=parse_colorspace(options.colorspace),
        gravity=parse_gravity(options.gravity),
    )
