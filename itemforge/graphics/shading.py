"""
Three-tone shading model. Components decide which cells are edges, tops and bottoms;
the tone for each role comes from here so every item is lit the same way
(light from the upper left unless a component is mirrored).
"""
from enum import Enum

from ..geometry.curves import in_radius, on_rim
from ..geometry.silhouette import Silhouette
from ..palettes import Palette
from .primitives import draw_pixel, fill_block
from .surface import PixelSurface


class Tone(str, Enum):
    BASE = "base"
    HIGHLIGHT = "highlight"
    SHADOW = "shadow"
    OUTLINE = "outline"


def tone_color(palette: Palette, tone: Tone) -> tuple[int, int, int, int]:
    return palette.tone(Tone(tone).value)


def edge_tones(mirrored: bool = False) -> tuple[Tone, Tone]:
    """(left column tone, right column tone). Mirroring swaps the lit side."""
    if mirrored:
        return Tone.SHADOW, Tone.HIGHLIGHT
    return Tone.HIGHLIGHT, Tone.SHADOW


def rim_tone(dx: int, dy: int) -> Tone:
    """Rim of a round form: upper-left half lit, lower-right half shaded."""
    if dy < 0 or (dy == 0 and dx < 0):
        return Tone.HIGHLIGHT
    return Tone.SHADOW


def shade_span(
    surface: PixelSurface,
    x: int,
    y: int,
    width: int,
    palette: Palette,
    *,
    mirrored: bool = False,
    single: Tone = Tone.HIGHLIGHT,
    fill: Tone = Tone.BASE,
) -> None:
    """One row: interior in fill tone, end columns in opposite edge tones; width 1 uses single."""
    if width <= 0:
        return
    if width == 1:
        draw_pixel(surface, x, y, tone_color(palette, single))
        return
    fill_block(surface, x, y, width, 1, tone_color(palette, fill))
    left, right = edge_tones(mirrored)
    draw_pixel(surface, x, y, tone_color(palette, left))
    draw_pixel(surface, x + width - 1, y, tone_color(palette, right))


def shade_row(surface: PixelSurface, x: int, y: int, width: int, palette: Palette, tone: Tone) -> None:
    """Whole row in one tone (top/bottom rows of blocks, bands, grips)."""
    fill_block(surface, x, y, width, 1, tone_color(palette, tone))


def shade_column(
    surface: PixelSurface,
    x: int,
    y: int,
    height: int,
    palette: Palette,
    *,
    top: Tone | None = Tone.HIGHLIGHT,
    bottom: Tone | None = Tone.SHADOW,
) -> None:
    """One column: base with a lit top cell and a shaded bottom cell (when taller than 1)."""
    if height <= 0:
        return
    fill_block(surface, x, y, 1, height, tone_color(palette, Tone.BASE))
    if top is not None:
        draw_pixel(surface, x, y, tone_color(palette, top))
    if bottom is not None and height > 1:
        draw_pixel(surface, x, y + height - 1, tone_color(palette, bottom))


def shade_block(
    surface: PixelSurface,
    x: int,
    y: int,
    w: int,
    h: int,
    palette: Palette,
    *,
    mirrored: bool = False,
    top: Tone | None = Tone.HIGHLIGHT,
    bottom: Tone | None = Tone.SHADOW,
) -> None:
    """Filled rectangle: base interior, lit/shaded side columns, then top and bottom rows."""
    if w <= 0 or h <= 0:
        return
    fill_block(surface, x, y, w, h, tone_color(palette, Tone.BASE))
    if w > 1 and h > 1:
        left, right = edge_tones(mirrored)
        fill_block(surface, x, y, 1, h - 1, tone_color(palette, left))
        fill_block(surface, x + w - 1, y, 1, h - 1, tone_color(palette, right))
    if bottom is not None and h > 1:
        shade_row(surface, x, y + h - 1, w, palette, bottom)
    if top is not None:
        shade_row(surface, x, y, w, palette, top)


def fill_disc(
    surface: PixelSurface,
    cx: int,
    cy: int,
    radius: int,
    palette: Palette,
    *,
    rim: bool = True,
    fill: Tone = Tone.BASE,
) -> Silhouette:
    """Radius fill around (cx, cy); rim cells take rim_tone. Returns the drawn silhouette."""
    radius = max(0, int(radius))
    points: list[tuple[int, int]] = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if not in_radius(dx, dy, radius):
                continue
            tone = rim_tone(dx, dy) if rim and on_rim(dx, dy, radius) else fill
            draw_pixel(surface, cx + dx, cy + dy, tone_color(palette, tone))
            points.append((cx + dx, cy + dy))
    return Silhouette.from_points(points)
