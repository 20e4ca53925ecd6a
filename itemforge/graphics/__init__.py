"""
Graphics: drawing surface, primitives, shading model, placeholder and export.
"""
from .export import save_image, to_data_url, to_png_bytes
from .primitives import draw_line, draw_pixel, fill_block
from .shading import (
    Tone,
    edge_tones,
    fill_disc,
    rim_tone,
    shade_block,
    shade_column,
    shade_row,
    shade_span,
    tone_color,
)
from .surface import PixelSurface, SurfaceUnavailableError, acquire_surface
from .text import render_placeholder

__all__ = [
    "save_image",
    "to_data_url",
    "to_png_bytes",
    "draw_line",
    "draw_pixel",
    "fill_block",
    "Tone",
    "edge_tones",
    "fill_disc",
    "rim_tone",
    "shade_block",
    "shade_column",
    "shade_row",
    "shade_span",
    "tone_color",
    "PixelSurface",
    "SurfaceUnavailableError",
    "acquire_surface",
    "render_placeholder",
]
