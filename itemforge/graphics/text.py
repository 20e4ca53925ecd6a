"""
Placeholder image for failed generations: translucent red fill with a centered label.
"""
from PIL import Image, ImageDraw, ImageFont

from ..palettes import parse_color


def _load_font(font_size: int):
    try:
        return ImageFont.truetype("arial.ttf", font_size)
    except (OSError, IOError):
        try:
            return ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", font_size)
        except (OSError, IOError):
            return ImageFont.load_default()


def render_placeholder(
    width: int,
    height: int,
    label: str = "CTX Fail",
    *,
    color: str | tuple = "#FF0000B3",
    text_color: tuple[int, int, int, int] = (255, 255, 255, 255),
) -> Image.Image:
    """width x height (physical pixels) RGBA image, clearly marked as an error."""
    width, height = max(1, int(width)), max(1, int(height))
    image = Image.new("RGBA", (width, height), parse_color(color))
    if not label:
        return image
    draw = ImageDraw.Draw(image)
    font = _load_font(max(8, width // 12))
    bbox = draw.textbbox((0, 0), label, font=font)
    text_w = bbox[2] - bbox[0]
    text_h = bbox[3] - bbox[1]
    x = (width - text_w) // 2 - bbox[0]
    y = (height - text_h) // 2 - bbox[1]
    draw.text((x, y), label, font=font, fill=text_color)
    return image
