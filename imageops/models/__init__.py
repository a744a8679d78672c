"""Request and response models shared by the operation catalog and the API."""
from imageops.models.image import Image, ImageInfo
from imageops.models.options import ImageOptions

__all__ = ["Image", "ImageInfo", "ImageOptions"]
