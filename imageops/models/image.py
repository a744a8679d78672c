"""Operation results."""

from pydantic import BaseModel, ConfigDict, Field


class Image(BaseModel):
    """A processed image (or metadata document) and its MIME type."""
    model_config = ConfigDict(frozen=True)

    body: bytes = b""
    mime: str = ""


class ImageInfo(BaseModel):
    """Engine-reported image metadata, serialized verbatim by the info operation."""

    width: int
    height: int
    type: str
    space: str
    has_alpha: bool = Field(serialization_alias="hasAlpha")
    has_profile: bool = Field(serialization_alias="hasProfile")
    channels: int
    orientation: int

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()
