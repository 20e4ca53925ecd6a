"""
Unit tests for curve/taper functions and silhouette profiles.
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestCurves(unittest.TestCase):
    """Pure width/offset functions."""

    def test_round_half_up(self):
        """Halves round up; everything else rounds to nearest."""
        from itemforge.geometry import round_half_up

        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.49), 2)
        self.assertEqual(round_half_up(-0.4), 0)

    def test_progress_single_row(self):
        """Progress is 0 for a single row and runs 0..1 across a span."""
        from itemforge.geometry import progress

        self.assertEqual(progress(0, 1), 0.0)
        self.assertEqual(progress(4, 5), 1.0)
        self.assertAlmostEqual(progress(1, 5), 0.25)

    def test_power_taper_symmetric(self):
        """Power taper peaks mid-span; the exponent bends the ramp."""
        from itemforge.geometry import power_taper

        self.assertAlmostEqual(power_taper(0.0, 3, 10), 3)
        self.assertAlmostEqual(power_taper(1.0, 3, 10), 3)
        self.assertAlmostEqual(power_taper(0.5, 3, 10), 10)
        self.assertLess(power_taper(0.2, 3, 10, 0.6), power_taper(0.2, 3, 10, 1.7))

    def test_linear_and_power_curve(self):
        """Linear and power curves interpolate between their endpoints."""
        from itemforge.geometry import linear_taper, power_curve

        self.assertAlmostEqual(linear_taper(0.5, 10, 4), 7)
        self.assertAlmostEqual(power_curve(1.0, 10, 4, 0.7), 4)
        self.assertAlmostEqual(power_curve(0.0, 10, 4, 0.7), 10)

    def test_sinusoidal_offset_damped(self):
        """Sine offset peaks mid-span and damping scales it down."""
        from itemforge.geometry import sinusoidal_offset

        self.assertAlmostEqual(sinusoidal_offset(0.5, 2.0), 2.0)
        self.assertAlmostEqual(sinusoidal_offset(0.5, 2.0, damping=1.0), 1.0)
        self.assertAlmostEqual(sinusoidal_offset(0.0, 5.0), 0.0)

    def test_ellipse_factor_and_radius(self):
        """Ellipse factor, radius and rim membership, clamp."""
        from itemforge.geometry import clamp, ellipse_factor, in_radius, on_rim

        self.assertEqual(ellipse_factor(0.0), 1.0)
        self.assertEqual(ellipse_factor(1.5), 0.0)
        self.assertTrue(in_radius(3, 0, 3))
        self.assertFalse(in_radius(3, 1, 3))
        self.assertTrue(on_rim(3, 0, 3))
        self.assertFalse(on_rim(0, 0, 3))
        self.assertEqual(clamp(12, 0, 10), 10)


class TestSilhouette(unittest.TestCase):
    """Row profile lookups used to anchor decorations."""

    def _profile(self):
        from itemforge.geometry import Silhouette

        sil = Silhouette()
        sil.record(10, 4, 6)
        sil.record(11, 3, 8)
        sil.record(14, 5, 2)
        return sil

    def test_exact_and_nearest(self):
        """Exact lookup and nearest-row fallback."""
        sil = self._profile()
        self.assertEqual(sil.row_at(11).width, 8)
        self.assertIsNone(sil.row_at(12))
        self.assertEqual(sil.nearest(12).y, 11)
        self.assertEqual(sil.nearest(13).y, 14)

    def test_nearest_outside_extent(self):
        """Targets outside the recorded extent find nothing."""
        sil = self._profile()
        self.assertIsNone(sil.nearest(2))
        self.assertIsNone(sil.nearest(30))
        self.assertEqual(sil.nearest(30, within_extent=False).y, 14)

    def test_nearest_tie_goes_to_upper_row(self):
        """Equidistant rows resolve to the upper one."""
        from itemforge.geometry import Silhouette

        sil = Silhouette()
        sil.record(10, 0, 2)
        sil.record(12, 0, 4)
        self.assertEqual(sil.nearest(11).y, 10)

    def test_record_replaces_and_clamps(self):
        """Re-recording a row replaces it; negative widths clamp to 0."""
        sil = self._profile()
        sil.record(14, 1, -3)
        self.assertEqual(sil.row_at(14).width, 0)
        self.assertEqual(len(sil), 3)

    def test_negative_row_width_rejected(self):
        """SilhouetteRow refuses negative widths."""
        from itemforge.geometry import SilhouetteRow

        with self.assertRaises(ValueError):
            SilhouetteRow(0, 0, -1)

    def test_rows_sorted_and_extent(self):
        """Rows iterate top to bottom with top/bottom extent."""
        sil = self._profile()
        self.assertEqual([r.y for r in sil.rows], [10, 11, 14])
        self.assertEqual((sil.top, sil.bottom), (10, 14))
        self.assertEqual(sil.widest().y, 11)

    def test_contains_between_merge(self):
        """contains, between and merge on overlapping silhouettes."""
        from itemforge.geometry import Silhouette

        sil = self._profile()
        self.assertTrue(sil.contains(4, 10))
        self.assertFalse(sil.contains(10, 10))
        self.assertEqual([r.y for r in sil.between(11, 14)], [11, 14])

        other = Silhouette()
        other.record(10, 12, 2)
        other.record(20, 0, 1)
        merged = sil.merge(other)
        self.assertEqual(merged.row_at(10).x_start, 4)
        self.assertEqual(merged.row_at(10).x_end, 13)
        self.assertEqual(merged.bottom, 20)
        self.assertEqual(sil.bottom, 14)

    def test_clipped_to_grid(self):
        """Rows outside the grid are dropped and spans trimmed to its columns."""
        from itemforge.geometry import Silhouette

        sil = Silhouette()
        sil.record(-1, 2, 3)
        sil.record(0, -2, 5)
        sil.record(3, 6, 4)
        sil.record(4, 9, 2)
        sil.record(5, 1, 0)
        sil.record(8, 0, 2)
        clipped = sil.clipped(8, 8)
        self.assertEqual([r.y for r in clipped], [0, 3, 5])
        self.assertEqual(clipped.row_at(0).to_dict(), {"y": 0, "x_start": 0, "width": 3})
        self.assertEqual(clipped.row_at(3).to_dict(), {"y": 3, "x_start": 6, "width": 2})
        self.assertEqual(clipped.row_at(5).width, 0)
        self.assertEqual(len(sil), 6)

    def test_from_points(self):
        """Point sets collapse to one span per row."""
        from itemforge.geometry import Silhouette

        sil = Silhouette.from_points([(3, 1), (7, 1), (5, 2)])
        self.assertEqual(sil.row_at(1).to_dict(), {"y": 1, "x_start": 3, "width": 5})
        self.assertEqual(sil.row_at(2).width, 1)
        self.assertEqual(sil.to_list()[0]["y"], 1)


if __name__ == "__main__":
    unittest.main()
