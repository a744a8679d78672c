"""
Image engine tests.

Runs the Pillow-backed pipeline on small generated images and checks
geometry and sampled pixel colours. JPEG is lossy, so colours are compared
by which channel dominates rather than exactly.
"""

import io

import pytest
from PIL import Image, ImageDraw, ImageFont

from imageops.engine import (
    EngineError,
    EngineOptions,
    Extend,
    Gravity,
    ImageType,
    Interpretation,
    determine_image_type,
    image_type,
    is_supported_output,
    metadata,
    mime_type_for,
    resize,
)
from imageops.engine.processor import normalize_angle
from imageops.engine.watermark import parse_font, wrap_text

from tests.conftest import make_image, open_image


def is_red(pixel) -> bool:
    r, g, b = pixel[:3]
    return r > 150 and b < 100


def is_blue(pixel) -> bool:
    r, g, b = pixel[:3]
    return b > 150 and r < 100


# ============================================================================
# Format detection
# ============================================================================

class TestImageTypes:
    """Format names, magic bytes and MIME types."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name,expected", [
        ("jpeg", ImageType.JPEG),
        ("jpg", ImageType.JPEG),
        ("JPG", ImageType.JPEG),
        ("png", ImageType.PNG),
        ("webp", ImageType.WEBP),
        ("tif", ImageType.TIFF),
        ("gif", ImageType.GIF),
        ("bogus", ImageType.UNKNOWN),
        ("", ImageType.UNKNOWN),
    ])
    def test_image_type_names(self, name, expected):
        assert image_type(name) is expected

    @pytest.mark.unit
    @pytest.mark.parametrize("fmt,expected", [
        ("JPEG", ImageType.JPEG),
        ("PNG", ImageType.PNG),
        ("GIF", ImageType.GIF),
        ("TIFF", ImageType.TIFF),
        ("BMP", ImageType.BMP),
        ("WEBP", ImageType.WEBP),
    ])
    def test_magic_bytes(self, fmt, expected):
        assert determine_image_type(make_image(fmt, size=(8, 8))) is expected

    @pytest.mark.unit
    def test_short_or_unknown_buffers(self):
        assert determine_image_type(b"") is ImageType.UNKNOWN
        assert determine_image_type(b"\xff\xd8\xff") is ImageType.UNKNOWN
        assert determine_image_type(b"hello world, not an image") is ImageType.UNKNOWN

    @pytest.mark.unit
    def test_mime_types(self):
        assert mime_type_for(ImageType.JPEG) == "image/jpeg"
        assert mime_type_for(ImageType.WEBP) == "image/webp"
        assert mime_type_for(ImageType.UNKNOWN) == "application/octet-stream"
        assert not is_supported_output(ImageType.UNKNOWN)


# ============================================================================
# Metadata
# ============================================================================

class TestMetadata:

    @pytest.mark.unit
    def test_jpeg_metadata(self, jpeg_bytes):
        meta = metadata(jpeg_bytes)

        assert (meta.width, meta.height) == (200, 100)
        assert meta.type == "jpeg"
        assert meta.space == "srgb"
        assert meta.alpha is False
        assert meta.channels == 3
        assert meta.orientation == 0

    @pytest.mark.unit
    def test_png_with_alpha(self, png_bytes):
        meta = metadata(png_bytes)

        assert meta.type == "png"
        assert meta.alpha is True
        assert meta.channels == 4

    @pytest.mark.unit
    def test_grayscale_space(self):
        buffer = io.BytesIO()
        Image.new("L", (10, 10), 128).save(buffer, format="PNG")
        meta = metadata(buffer.getvalue())
        assert meta.space == "b-w"
        assert meta.channels == 1

    @pytest.mark.unit
    def test_exif_orientation(self, oriented_jpeg_bytes):
        assert metadata(oriented_jpeg_bytes).orientation == 6

    @pytest.mark.unit
    def test_metadata_rejects_bad_input(self):
        with pytest.raises(EngineError, match="empty"):
            metadata(b"")
        with pytest.raises(EngineError, match="Unsupported image format"):
            metadata(b"definitely not an image")


# ============================================================================
# Geometry
# ============================================================================

class TestResize:

    @pytest.mark.unit
    def test_no_options_keeps_image(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions())
        assert open_image(output).size == (200, 100)
        assert determine_image_type(output) is ImageType.JPEG

    @pytest.mark.unit
    def test_single_dimension_keeps_aspect_ratio(self, jpeg_bytes):
        assert open_image(resize(jpeg_bytes, EngineOptions(width=100))).size == (100, 50)
        assert open_image(resize(jpeg_bytes, EngineOptions(height=20))).size == (40, 20)

    @pytest.mark.unit
    def test_fit_inside_box(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(width=100, height=100))
        assert open_image(output).size == (100, 50)

    @pytest.mark.unit
    def test_force_stretches(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(width=100, height=100, force=True))
        assert open_image(output).size == (100, 100)

    @pytest.mark.unit
    def test_no_upscale_without_enlarge(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(width=400))
        assert open_image(output).size == (200, 100)

    @pytest.mark.unit
    def test_enlarge_fills_box(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(width=400, height=400, enlarge=True, crop=True))
        assert open_image(output).size == (400, 400)

    @pytest.mark.unit
    def test_crop_fills_box(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(width=100, height=100, crop=True))
        image = open_image(output)

        assert image.size == (100, 100)
        # Centre crop keeps both halves
        assert is_red(image.getpixel((10, 50)))
        assert is_blue(image.getpixel((90, 50)))

    @pytest.mark.unit
    @pytest.mark.parametrize("gravity,check", [
        (Gravity.WEST, is_red),
        (Gravity.EAST, is_blue),
    ])
    def test_crop_gravity(self, gravity, check, jpeg_bytes):
        options = EngineOptions(width=100, height=100, crop=True, gravity=gravity)
        image = open_image(resize(jpeg_bytes, options))

        assert check(image.getpixel((10, 50)))
        assert check(image.getpixel((90, 50)))

    @pytest.mark.unit
    def test_smart_crop(self, jpeg_bytes):
        options = EngineOptions(width=100, height=100, crop=True, gravity=Gravity.SMART)
        assert open_image(resize(jpeg_bytes, options)).size == (100, 100)

    @pytest.mark.unit
    def test_embed_pads_with_black(self, jpeg_bytes):
        options = EngineOptions(width=100, height=100, embed=True)
        image = open_image(resize(jpeg_bytes, options))

        assert image.size == (100, 100)
        assert max(image.getpixel((50, 5))) < 40

    @pytest.mark.unit
    def test_embed_extend_white(self, jpeg_bytes):
        options = EngineOptions(width=100, height=100, embed=True, extend=Extend.WHITE)
        image = open_image(resize(jpeg_bytes, options))

        assert min(image.getpixel((50, 5))) > 215

    @pytest.mark.unit
    def test_embed_extend_background(self, jpeg_bytes):
        options = EngineOptions(
            width=100, height=100, embed=True,
            extend=Extend.BACKGROUND, background=(0, 200, 0),
        )
        r, g, b = open_image(resize(jpeg_bytes, options)).getpixel((50, 5))

        assert g > 150 and r < 60 and b < 60

    @pytest.mark.unit
    def test_oversized_output_rejected(self, jpeg_bytes):
        with pytest.raises(EngineError, match="exceeds the maximum"):
            resize(jpeg_bytes, EngineOptions(width=20000, force=True))


class TestExtractAndZoom:

    @pytest.mark.unit
    def test_extract_area(self, jpeg_bytes):
        options = EngineOptions(top=10, left=120, area_width=50, area_height=40)
        image = open_image(resize(jpeg_bytes, options))

        assert image.size == (50, 40)
        assert is_blue(image.getpixel((25, 20)))

    @pytest.mark.unit
    def test_extract_outside_image(self, jpeg_bytes):
        options = EngineOptions(top=80, left=0, area_width=50, area_height=50)
        with pytest.raises(EngineError, match="outside"):
            resize(jpeg_bytes, options)

    @pytest.mark.unit
    def test_extract_area_defaults_to_width_height(self, jpeg_bytes):
        options = EngineOptions(top=10, left=10, width=30, height=30)
        assert open_image(resize(jpeg_bytes, options)).size == (30, 30)

    @pytest.mark.unit
    def test_extract_without_size(self, jpeg_bytes):
        with pytest.raises(EngineError, match="required"):
            resize(jpeg_bytes, EngineOptions(top=10))

    @pytest.mark.unit
    def test_zoom(self, jpeg_bytes):
        assert open_image(resize(jpeg_bytes, EngineOptions(zoom=2))).size == (400, 200)

    @pytest.mark.unit
    def test_zoom_into_area(self, jpeg_bytes):
        options = EngineOptions(zoom=2, top=0, left=100, area_width=50, area_height=50)
        image = open_image(resize(jpeg_bytes, options))

        assert image.size == (100, 100)
        assert is_blue(image.getpixel((50, 50)))

    @pytest.mark.unit
    def test_negative_zoom(self, jpeg_bytes):
        with pytest.raises(EngineError, match="positive"):
            resize(jpeg_bytes, EngineOptions(zoom=-1))


# ============================================================================
# Orientation
# ============================================================================

class TestOrientation:

    @pytest.mark.unit
    @pytest.mark.parametrize("angle,expected", [
        (0, 0), (90, 90), (180, 180), (270, 270),
        (45, 0), (135, 90), (360, 0), (450, 90), (-90, 270),
    ])
    def test_normalize_angle(self, angle, expected):
        assert normalize_angle(angle) == expected

    @pytest.mark.unit
    def test_rotate_clockwise(self, jpeg_bytes):
        image = open_image(resize(jpeg_bytes, EngineOptions(rotate=90)))

        assert image.size == (100, 200)
        # The red left half ends up on top
        assert is_red(image.getpixel((50, 20)))
        assert is_blue(image.getpixel((50, 180)))

    @pytest.mark.unit
    def test_rotate_180(self, jpeg_bytes):
        image = open_image(resize(jpeg_bytes, EngineOptions(rotate=180)))

        assert image.size == (200, 100)
        assert is_blue(image.getpixel((20, 50)))

    @pytest.mark.unit
    def test_flip_is_vertical(self):
        buf = make_image(split="horizontal")
        image = open_image(resize(buf, EngineOptions(flip=True)))

        assert is_blue(image.getpixel((100, 10)))
        assert is_red(image.getpixel((100, 90)))

    @pytest.mark.unit
    def test_flop_is_horizontal(self, jpeg_bytes):
        image = open_image(resize(jpeg_bytes, EngineOptions(flop=True)))

        assert is_blue(image.getpixel((20, 50)))
        assert is_red(image.getpixel((180, 50)))

    @pytest.mark.unit
    def test_auto_rotate_from_exif(self, oriented_jpeg_bytes):
        image = open_image(resize(oriented_jpeg_bytes, EngineOptions()))
        assert image.size == (100, 200)

    @pytest.mark.unit
    def test_auto_rotate_disabled(self, oriented_jpeg_bytes):
        image = open_image(resize(oriented_jpeg_bytes, EngineOptions(no_auto_rotate=True)))
        assert image.size == (200, 100)


# ============================================================================
# Output encoding
# ============================================================================

class TestEncoding:

    @pytest.mark.unit
    def test_convert_to_png(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(type=ImageType.PNG))
        assert determine_image_type(output) is ImageType.PNG

    @pytest.mark.unit
    def test_convert_to_webp(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(type=ImageType.WEBP, quality=50))
        assert determine_image_type(output) is ImageType.WEBP

    @pytest.mark.unit
    def test_alpha_flattened_for_jpeg(self, png_bytes):
        output = resize(png_bytes, EngineOptions(type=ImageType.JPEG))
        image = open_image(output)

        assert image.format == "JPEG"
        assert image.mode == "RGB"

    @pytest.mark.unit
    def test_lower_quality_is_smaller(self):
        buf = make_image(size=(400, 400))
        high = resize(buf, EngineOptions(quality=95, rotate=90))
        low = resize(buf, EngineOptions(quality=10, rotate=90))
        assert len(low) < len(high)

    @pytest.mark.unit
    def test_black_and_white(self, jpeg_bytes):
        output = resize(jpeg_bytes, EngineOptions(interpretation=Interpretation.BW))
        assert open_image(output).mode == "L"

    @pytest.mark.unit
    def test_empty_and_unknown_input(self):
        with pytest.raises(EngineError, match="empty"):
            resize(b"", EngineOptions())
        with pytest.raises(EngineError, match="Unsupported image format"):
            resize(b"this is plain text, not pixels", EngineOptions())

    @pytest.mark.unit
    def test_unknown_output_falls_back_to_input_type(self, png_bytes):
        output = resize(png_bytes, EngineOptions(type=ImageType.UNKNOWN))
        assert determine_image_type(output) is ImageType.PNG


# ============================================================================
# Watermark
# ============================================================================

class TestWatermark:

    @pytest.mark.unit
    @pytest.mark.parametrize("spec,expected", [
        ("sans 10", ("sans", 10.0)),
        ("sans bold 12", ("sans bold", 12.0)),
        ("serif", ("serif", 10.0)),
        ("", ("sans", 10.0)),
    ])
    def test_parse_font(self, spec, expected):
        assert parse_font(spec) == expected

    @pytest.mark.unit
    def test_watermark_draws_text(self):
        buf = make_image("PNG", size=(120, 60), split="horizontal")
        options = EngineOptions(type=ImageType.PNG)
        options.watermark.text = "imageops"
        options.watermark.opacity = 1.0

        plain = open_image(resize(buf, EngineOptions(type=ImageType.PNG)))
        marked = open_image(resize(buf, options))

        assert marked.size == plain.size
        assert marked.tobytes() != plain.tobytes()

    @pytest.mark.unit
    def test_single_watermark(self, jpeg_bytes):
        options = EngineOptions()
        options.watermark.text = "once"
        options.watermark.no_replicate = True
        options.watermark.margin = 5
        options.watermark.background = (0, 0, 0)

        assert open_image(resize(jpeg_bytes, options)).size == (200, 100)

    @pytest.mark.unit
    def test_wrap_text(self):
        draw = ImageDraw.Draw(Image.new("RGB", (10, 10)))
        font = ImageFont.load_default(size=10)

        assert wrap_text(draw, "one two three", font, 0) == "one two three"
        assert "\n" in wrap_text(draw, "one two three four five", font, 30)
