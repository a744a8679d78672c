"""Request options model."""

from typing import List

from pydantic import BaseModel, ConfigDict, field_validator


class ImageOptions(BaseModel):
    """Every parameter any operation might read, as one flat record.

    Fields are independent. Each operation reads only its own subset and
    treats zero/empty values as "not requested":

    - resize, enlarge, crop, thumbnail: width, height, no_crop
    - extract: top, left, area_width, area_height
    - zoom: factor, top, left, area_width, area_height, no_crop
    - rotate: rotate
    - convert: type
    - watermark: text, font, color, margin, dpi, text_width, opacity,
      no_replicate

    The remaining fields (quality, compression, force, embed, flip, flop,
    extend, background, colorspace, gravity, no_rotation, no_profile) are
    copied to the engine for every operation.
    """
    model_config = ConfigDict(frozen=True)

    width: int = 0
    height: int = 0
    quality: int = 0
    compression: int = 0
    type: str = ""

    # Source selectors, resolved before an operation runs
    file: str = ""
    url: str = ""

    force: bool = False
    embed: bool = False
    no_crop: bool = False
    no_rotation: bool = False
    no_profile: bool = False
    flip: bool = False
    flop: bool = False
    rotate: int = 0

    extend: str = ""
    background: List[int] = []
    colorspace: str = ""
    gravity: str = ""

    # Extraction rectangle
    top: int = 0
    left: int = 0
    area_width: int = 0
    area_height: int = 0

    factor: float = 0.0

    # Watermark
    text: str = ""
    font: str = ""
    color: List[int] = []
    margin: int = 0
    dpi: int = 0
    text_width: int = 0
    opacity: float = 0.0
    no_replicate: bool = False

    @field_validator('background', 'color')
    @classmethod
    def validate_color(cls, v: List[int]) -> List[int]:
        """Colour components are 8-bit channel values."""
        for component in v:
            if not 0 <= component <= 255:
                raise ValueError(f"Color components must be between 0 and 255, got {component}")
        return v
