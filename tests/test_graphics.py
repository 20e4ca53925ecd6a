"""
Unit tests for the drawing surface, rasterization primitives, shading and export.
Run from project root: python -m pytest tests/ -v
Or: python -m unittest discover -s tests -p "test_*.py" -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

RED = (255, 0, 0, 255)


def painted(surface):
    """Boolean (height, width) mask of cells with non-zero alpha."""
    return surface.pixels[:, :, 3] > 0


class TestSurface(unittest.TestCase):
    """PixelSurface and acquire_surface."""

    def test_new_surface_is_transparent(self):
        """A fresh surface has no painted cells."""
        from itemforge.graphics import acquire_surface

        surface = acquire_surface(8, 6)
        self.assertEqual(surface.pixels.shape, (6, 8, 4))
        self.assertFalse(painted(surface).any())

    def test_invalid_size_raises_surface_error(self):
        """Bad sizes raise SurfaceUnavailableError."""
        from itemforge.graphics import SurfaceUnavailableError, acquire_surface

        for size in ((0, 64), (64, -1), ("wide", 4)):
            with self.assertRaises(SurfaceUnavailableError):
                acquire_surface(*size)

    def test_to_image_scales_each_cell(self):
        """Each logical cell becomes a scale x scale block."""
        from itemforge.graphics import acquire_surface, draw_pixel

        surface = acquire_surface(4, 4)
        draw_pixel(surface, 1, 2, RED)
        image = surface.to_image(4)
        self.assertEqual(image.size, (16, 16))
        self.assertEqual(image.mode, "RGBA")
        self.assertEqual(image.getpixel((4, 8)), RED)
        self.assertEqual(image.getpixel((7, 11)), RED)
        self.assertEqual(image.getpixel((8, 8))[3], 0)


class TestPrimitives(unittest.TestCase):
    """fill_block, draw_pixel, draw_line clip to the grid instead of failing."""

    def test_fill_block_clips(self):
        """Blocks partly off the grid are clipped."""
        from itemforge.graphics import acquire_surface, fill_block

        surface = acquire_surface(10, 10)
        fill_block(surface, -3, -3, 5, 5, RED)
        mask = painted(surface)
        self.assertEqual(int(mask.sum()), 4)
        self.assertTrue(mask[0, 0] and mask[1, 1])

    def test_fill_block_non_positive_extent_is_noop(self):
        """Empty or off-grid blocks paint nothing."""
        from itemforge.graphics import acquire_surface, fill_block

        surface = acquire_surface(10, 10)
        fill_block(surface, 2, 2, 0, 4, RED)
        fill_block(surface, 2, 2, 4, -1, RED)
        fill_block(surface, 20, 20, 3, 3, RED)
        self.assertFalse(painted(surface).any())

    def test_draw_pixel_out_of_bounds_ignored(self):
        """Off-grid pixels are ignored."""
        from itemforge.graphics import acquire_surface, draw_pixel

        surface = acquire_surface(4, 4)
        draw_pixel(surface, -1, 0, RED)
        draw_pixel(surface, 4, 3, RED)
        draw_pixel(surface, 3, 3, RED)
        self.assertEqual(int(painted(surface).sum()), 1)

    def test_draw_line_diagonal(self):
        """Bresenham diagonal covers both endpoints."""
        from itemforge.graphics import acquire_surface, draw_line

        surface = acquire_surface(8, 8)
        steps = draw_line(surface, 0, 0, 5, 5, RED)
        self.assertEqual(steps, 5)
        for i in range(6):
            self.assertEqual(surface.pixel(i, i), RED)
        self.assertEqual(int(painted(surface).sum()), 6)

    def test_draw_line_stops_leaving_grid(self):
        """A line stops at the grid edge."""
        from itemforge.graphics import acquire_surface, draw_line

        surface = acquire_surface(4, 4)
        steps = draw_line(surface, 1, 1, 40, 1, RED)
        self.assertEqual(steps, 3)
        self.assertEqual(int(painted(surface).sum()), 3)


class TestShading(unittest.TestCase):
    """Three-tone shading: lit upper left unless mirrored."""

    def test_shade_span_edges(self):
        """Lit edge on the left unless mirrored."""
        from itemforge.graphics import Tone, acquire_surface, shade_span, tone_color
        from itemforge.palettes import get_palette

        iron = get_palette("IRON")
        surface = acquire_surface(10, 2)
        shade_span(surface, 2, 0, 4, iron)
        shade_span(surface, 2, 1, 4, iron, mirrored=True)
        self.assertEqual(surface.pixel(2, 0), tone_color(iron, Tone.HIGHLIGHT))
        self.assertEqual(surface.pixel(3, 0), tone_color(iron, Tone.BASE))
        self.assertEqual(surface.pixel(5, 0), tone_color(iron, Tone.SHADOW))
        self.assertEqual(surface.pixel(2, 1), tone_color(iron, Tone.SHADOW))
        self.assertEqual(surface.pixel(5, 1), tone_color(iron, Tone.HIGHLIGHT))

    def test_shade_span_single_pixel(self):
        """A one-cell span uses the single tone."""
        from itemforge.graphics import Tone, acquire_surface, shade_span, tone_color
        from itemforge.palettes import get_palette

        gold = get_palette("GOLD")
        surface = acquire_surface(4, 4)
        shade_span(surface, 1, 1, 1, gold, single=Tone.BASE)
        self.assertEqual(surface.pixel(1, 1), tone_color(gold, Tone.BASE))
        self.assertEqual(int(painted(surface).sum()), 1)

    def test_outline_falls_back_to_shadow(self):
        """Palettes without an outline use their shadow."""
        from itemforge.graphics import Tone, tone_color
        from itemforge.palettes import Palette

        palette = Palette.from_mapping("plain", {"base": "#101010", "highlight": "#202020", "shadow": "#303030"})
        self.assertEqual(tone_color(palette, Tone.OUTLINE), tone_color(palette, Tone.SHADOW))

    def test_shade_block_rows(self):
        """Block rows shade highlight, base, shadow top to bottom."""
        from itemforge.graphics import Tone, acquire_surface, shade_block, tone_color
        from itemforge.palettes import get_palette

        steel = get_palette("STEEL")
        surface = acquire_surface(8, 8)
        shade_block(surface, 1, 1, 4, 3, steel)
        self.assertEqual(surface.pixel(2, 1), tone_color(steel, Tone.HIGHLIGHT))
        self.assertEqual(surface.pixel(2, 3), tone_color(steel, Tone.SHADOW))
        self.assertEqual(surface.pixel(2, 2), tone_color(steel, Tone.BASE))
        self.assertEqual(int(painted(surface).sum()), 12)

    def test_fill_disc_returns_silhouette(self):
        """fill_disc records one row per disc row."""
        from itemforge.graphics import acquire_surface, fill_disc
        from itemforge.palettes import get_palette

        surface = acquire_surface(16, 16)
        sil = fill_disc(surface, 8, 8, 3, get_palette("GEM_RED"))
        self.assertEqual(sil.top, 5)
        self.assertEqual(sil.bottom, 11)
        self.assertEqual(sil.row_at(8).x_start, 5)
        self.assertEqual(sil.row_at(8).width, 7)

    def test_rim_tone(self):
        """Upper-left rim is lit, lower-right is shaded."""
        from itemforge.graphics import Tone, rim_tone

        self.assertEqual(rim_tone(0, -3), Tone.HIGHLIGHT)
        self.assertEqual(rim_tone(-3, 0), Tone.HIGHLIGHT)
        self.assertEqual(rim_tone(3, 0), Tone.SHADOW)
        self.assertEqual(rim_tone(0, 3), Tone.SHADOW)


class TestExport(unittest.TestCase):
    """PNG bytes, data URLs, files and the placeholder image."""

    def test_png_bytes_and_data_url(self):
        """PNG signature and data URL prefix."""
        from itemforge.graphics import acquire_surface, to_data_url, to_png_bytes

        image = acquire_surface(4, 4).to_image(2)
        self.assertTrue(to_png_bytes(image).startswith(b"\x89PNG"))
        self.assertTrue(to_data_url(image).startswith("data:image/png;base64,"))

    def test_save_image_creates_parent(self):
        """save_image creates missing directories."""
        import tempfile

        from PIL import Image

        from itemforge.graphics import acquire_surface, save_image

        with tempfile.TemporaryDirectory() as tmp:
            path = save_image(acquire_surface(4, 4).to_image(), Path(tmp) / "nested" / "icon.png")
            self.assertTrue(path.exists())
            with Image.open(path) as img:
                self.assertEqual(img.size, (4, 4))

    def test_placeholder_is_translucent_red(self):
        """Placeholder fills with 70% opaque red."""
        from itemforge.graphics import render_placeholder

        image = render_placeholder(64, 64, "CTX Fail")
        self.assertEqual(image.size, (64, 64))
        self.assertEqual(image.getpixel((0, 0)), (255, 0, 0, 179))


if __name__ == "__main__":
    unittest.main()
