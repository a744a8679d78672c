"""
Pytest configuration and shared fixtures for the image operations tests.

This module provides:
- Test client fixtures
- Sample images generated with Pillow
- Mocks for the processing gateway
"""

import io
from typing import AsyncGenerator, Tuple
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from PIL import Image as PILImage, ImageDraw

from imageops.main import app
from imageops.models import Image


# ============================================================================
# Image helpers
# ============================================================================

RED = (220, 20, 20)
BLUE = (20, 20, 220)


def make_image(
    fmt: str = "JPEG",
    size: Tuple[int, int] = (200, 100),
    mode: str = "RGB",
    split: str = "vertical",
    exif_orientation: int = 0,
) -> bytes:
    """Encode a two-colour test image.

    ``split="vertical"`` paints the left half red and the right half blue,
    ``split="horizontal"`` paints the top half red and the bottom half blue.
    """
    image = PILImage.new(mode, size, BLUE if mode == "RGB" else (*BLUE, 255))
    draw = ImageDraw.Draw(image)
    width, height = size
    fill = RED if mode == "RGB" else (*RED, 255)
    if split == "vertical":
        draw.rectangle((0, 0, width // 2 - 1, height - 1), fill=fill)
    else:
        draw.rectangle((0, 0, width - 1, height // 2 - 1), fill=fill)

    params = {}
    if exif_orientation:
        exif = PILImage.Exif()
        exif[0x0112] = exif_orientation
        params["exif"] = exif

    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def open_image(buf: bytes) -> PILImage.Image:
    image = PILImage.open(io.BytesIO(buf))
    image.load()
    return image


# ============================================================================
# Test data fixtures
# ============================================================================

@pytest.fixture
def jpeg_bytes() -> bytes:
    """200x100 JPEG, red left half, blue right half."""
    return make_image("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    """200x100 RGBA PNG, red left half, blue right half."""
    return make_image("PNG", mode="RGBA")


@pytest.fixture
def oriented_jpeg_bytes() -> bytes:
    """200x100 JPEG tagged with EXIF orientation 6 (rotate 90 CW to display)."""
    return make_image("JPEG", exif_orientation=6)


# ============================================================================
# Mock fixtures
# ============================================================================

@pytest.fixture
def mock_process():
    """Replace the processing gateway seen by the operation catalog.

    Yields:
        MagicMock: records the EngineOptions each operation built
    """
    with patch("imageops.services.operations.process") as mock:
        mock.return_value = Image(body=b"processed", mime="image/jpeg")
        yield mock


# ============================================================================
# API Client fixtures
# ============================================================================

@pytest.fixture
def client() -> TestClient:
    """Synchronous test client for the FastAPI app."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Asynchronous test client for concurrent request tests."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
