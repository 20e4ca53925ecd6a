"""
Rasterization primitives on a PixelSurface: filled blocks, single pixels, Bresenham lines.
All coordinates are logical; anything outside the grid is clipped, never an error.
"""
from .surface import PixelSurface

Color = tuple[int, int, int, int]


def fill_block(surface: PixelSurface, x: int, y: int, w: int, h: int, color: Color) -> None:
    """Write color to [x, x+w) x [y, y+h). Zero or negative extent is a no-op."""
    w, h = int(w), int(h)
    if w <= 0 or h <= 0:
        return
    x, y = int(x), int(y)
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(surface.width, x + w), min(surface.height, y + h)
    if x0 >= x1 or y0 >= y1:
        return
    surface.pixels[y0:y1, x0:x1] = color


def draw_pixel(surface: PixelSurface, x: int, y: int, color: Color) -> None:
    x, y = int(x), int(y)
    if 0 <= x < surface.width and 0 <= y < surface.height:
        surface.pixels[y, x] = color


def draw_line(surface: PixelSurface, x0: int, y0: int, x1: int, y1: int, color: Color) -> int:
    """
    Integer Bresenham line from (x0, y0) to (x1, y1). Stops at the endpoint or as soon as
    a step leaves the grid. Returns the number of steps taken.
    """
    x, y = int(x0), int(y0)
    x1, y1 = int(x1), int(y1)
    dx = abs(x1 - x)
    dy = abs(y1 - y)
    sx = 1 if x < x1 else -1
    sy = 1 if y < y1 else -1
    err = dx - dy
    steps = 0
    while True:
        draw_pixel(surface, x, y, color)
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
        steps += 1
        if not surface.in_bounds(x, y):
            break
    return steps
