"""Text watermark rendering."""

from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont

from .options import Watermark

DEFAULT_FONT = "sans 10"
DEFAULT_DPI = 75
DEFAULT_OPACITY = 0.25
DEFAULT_COLOR = (255, 255, 255)

# Font families mapped to the DejaVu files shipped with most distributions
_FONT_FILES = {
    "sans": "DejaVuSans.ttf",
    "sans-serif": "DejaVuSans.ttf",
    "serif": "DejaVuSerif.ttf",
    "mono": "DejaVuSansMono.ttf",
    "monospace": "DejaVuSansMono.ttf",
}


def parse_font(spec: str) -> Tuple[str, float]:
    """Split a "family [style] size" description such as "sans bold 12"."""
    parts = (spec or DEFAULT_FONT).split()
    size = 10.0
    if len(parts) > 1:
        try:
            size = float(parts[-1])
            parts = parts[:-1]
        except ValueError:
            pass
    family = " ".join(parts).lower() or "sans"
    return family, size


def load_font(spec: str, dpi: int) -> ImageFont.FreeTypeFont:
    """Load the requested font scaled from points to pixels at ``dpi``."""
    family, points = parse_font(spec)
    pixels = max(1, round(points * (dpi or DEFAULT_DPI) / 72))
    filename = _FONT_FILES.get(family.split()[0], family)
    try:
        return ImageFont.truetype(filename, pixels)
    except OSError:
        # Not installed: Pillow's bundled font renders at any size
        return ImageFont.load_default(size=pixels)


def wrap_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> str:
    """Break ``text`` into lines no wider than ``max_width`` pixels."""
    if max_width <= 0:
        return text

    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        line = ""
        for word in paragraph.split(" "):
            candidate = f"{line} {word}" if line else word
            if line and draw.textlength(candidate, font=font) > max_width:
                lines.append(line)
                line = word
            else:
                line = candidate
        lines.append(line)
    return "\n".join(lines)


def draw_watermark(image: Image.Image, watermark: Watermark) -> Image.Image:
    """Return a copy of ``image`` with the watermark text blended on top.

    The text is tiled across the whole image unless ``no_replicate`` is set,
    in which case a single copy is drawn at the top-left margin.
    """
    font = load_font(watermark.font, watermark.dpi)
    opacity = watermark.opacity if watermark.opacity > 0 else DEFAULT_OPACITY
    alpha = round(255 * min(opacity, 1.0))
    color = watermark.background or DEFAULT_COLOR
    margin = max(watermark.margin, 0)

    base = image.convert("RGBA")
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    text = wrap_text(draw, watermark.text, font, watermark.width)
    left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font)
    text_width, text_height = right - left, bottom - top
    fill = (*color, alpha)

    if watermark.no_replicate:
        draw.multiline_text((margin, margin), text, font=font, fill=fill)
    else:
        step_x = text_width + 2 * margin or 1
        step_y = text_height + 2 * margin or 1
        for y in range(margin, base.height, step_y):
            for x in range(margin, base.width, step_x):
                draw.multiline_text((x, y), text, font=font, fill=fill)

    result = Image.alpha_composite(base, overlay)
    if "A" in image.getbands():
        return result
    return result.convert("RGB") if image.mode != "L" else result.convert("L")
