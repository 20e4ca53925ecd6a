"""
Drawable surface: a logical-grid RGBA buffer (numpy) that scales up to a Pillow image.
"""
import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


class SurfaceUnavailableError(RuntimeError):
    """The drawing surface could not be created."""


class PixelSurface:
    """(height, width, 4) uint8 RGBA grid, transparent on creation. One per generation call."""

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def to_image(self, scale: int = 1) -> Image.Image:
        """RGBA image with each logical cell expanded to a scale x scale block (nearest neighbour)."""
        image = Image.fromarray(self.pixels, "RGBA")
        if scale > 1:
            image = image.resize((self.width * scale, self.height * scale), Image.NEAREST)
        return image


def acquire_surface(width: int, height: int) -> PixelSurface:
    """Fresh surface for one item. Raises SurfaceUnavailableError instead of numpy/size errors."""
    try:
        w, h = int(width), int(height)
    except (TypeError, ValueError) as e:
        raise SurfaceUnavailableError(f"Invalid surface size {width!r}x{height!r}") from e
    if w <= 0 or h <= 0:
        raise SurfaceUnavailableError(f"Invalid surface size {w}x{h}")
    try:
        return PixelSurface(w, h)
    except MemoryError as e:
        raise SurfaceUnavailableError(f"Could not allocate {w}x{h} surface") from e
