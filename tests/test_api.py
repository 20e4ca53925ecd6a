"""
End-to-end: generate_item across every family, determinism, bounds safety,
the placeholder path and the command-line front end.
"""
import sys
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FAST_CONFIG = {"grid": {"width": 64, "height": 64, "display_scale": 1}}


class TestGenerateItem(unittest.TestCase):
    """Public API behaviour."""

    def test_every_family_generates(self):
        """Every family yields a real item with name, colours and layout."""
        from itemforge import FAMILIES, generate_item

        for family in FAMILIES:
            item = generate_item(family, {"seed": 17})
            self.assertFalse(item.is_placeholder, family)
            self.assertEqual(item.seed, 17)
            self.assertTrue(item.name)
            self.assertIn("colors", item.item_data)
            self.assertIn("layout", item.item_data)
            self.assertEqual(item.pixels.shape, (64, 64, 4))
            self.assertTrue((item.pixels[:, :, 3] > 0).any(), family)

    def test_same_seed_same_result(self):
        """Same family, options and seed give identical items."""
        import numpy as np

        from itemforge import FAMILIES, generate_item

        for family in FAMILIES:
            a = generate_item(family, seed=99)
            b = generate_item(family, seed=99)
            self.assertEqual(a.name, b.name)
            self.assertEqual(a.item_data, b.item_data)
            self.assertTrue(np.array_equal(a.pixels, b.pixels), family)

    def test_unseeded_result_is_reproducible(self):
        """An unseeded item reports a seed that regenerates it."""
        import numpy as np

        from itemforge import generate_potion

        first = generate_potion()
        again = generate_potion(seed=first.seed)
        self.assertTrue(np.array_equal(first.pixels, again.pixels))

    def test_family_in_options_and_camel_case(self):
        """Family may come from options; camelCase keys are accepted."""
        from itemforge import generate_item

        item = generate_item(options={"family": "staff", "subType": "scepter", "seed": 3})
        self.assertEqual(item.type, "staff")
        self.assertEqual(item.item_data["staff_type"], "scepter")

    def test_non_numeric_seed_falls_back(self):
        """A seed that is not an integer warns and is replaced by a fresh one."""
        from itemforge import generate_potion

        with self.assertLogs("itemforge.items.base", level="WARNING"):
            item = generate_potion(seed="abc")
        self.assertFalse(item.is_placeholder)
        self.assertIsInstance(item.seed, int)
        self.assertEqual(generate_potion(seed="42").seed, 42)

    def test_archetype_aliases_are_per_family(self):
        """The base alias table is read-only and each family keeps its own."""
        from itemforge.items import ItemGenerator, PotionGenerator, StaffGenerator

        with self.assertRaises(TypeError):
            ItemGenerator.archetype_aliases["x"] = "y"
        self.assertEqual(StaffGenerator.archetype_aliases["rod"], "scepter")
        self.assertNotIn("rod", PotionGenerator.archetype_aliases)
        self.assertEqual(len(ItemGenerator.archetype_aliases), 0)

    def test_unknown_family(self):
        """Unknown or missing families raise."""
        from itemforge import UnknownFamilyError, generate_item

        with self.assertRaises(UnknownFamilyError):
            generate_item("sword")
        with self.assertRaises(ValueError):
            generate_item(None)

    def test_to_dict(self):
        """to_dict is JSON-serializable and carries a PNG data URL."""
        import json

        from itemforge import generate_hat

        data = generate_hat(seed=8).to_dict(include_image=True)
        self.assertEqual(set(data), {"type", "name", "seed", "item_data", "image_data_url"})
        self.assertTrue(data["image_data_url"].startswith("data:image/png;base64,"))
        json.dumps(data)


class TestBoundsSafety(unittest.TestCase):
    """Random requests never raise and every silhouette stays well-formed."""

    REQUESTS_PER_FAMILY = 1000

    def test_random_requests(self):
        """Many seeds per family never raise and keep geometry inside the grid."""
        from itemforge import FAMILIES, generate_item

        for family in FAMILIES:
            for seed in range(self.REQUESTS_PER_FAMILY):
                item = generate_item(family, seed=seed, config=FAST_CONFIG)
                self.assertFalse(item.is_placeholder)
                for name, sil in item.silhouettes.items():
                    ys = [row.y for row in sil]
                    self.assertEqual(ys, sorted(set(ys)), (family, seed, name))
                    for row in sil:
                        self.assertTrue(0 <= row.y < 64, (family, seed, name, row))
                        self.assertGreaterEqual(row.width, 0, (family, seed, name))
                        if row.width:
                            self.assertTrue(0 <= row.x_start <= row.x_end < 64, (family, seed, name, row))
                for key, value in item.anchors.items():
                    self.assertIsInstance(value, int)
                    if key.endswith(("_x", "_y")):
                        self.assertTrue(0 <= value < 64, (family, seed, key, value))


class TestPlaceholder(unittest.TestCase):
    """Surface failure yields a well-formed placeholder, never an exception."""

    def test_surface_failure_returns_placeholder(self):
        """A failing surface logs an error and returns the red placeholder."""
        from itemforge import generate_axe
        from itemforge.graphics import SurfaceUnavailableError
        from itemforge.items import SURFACE_ERROR

        with mock.patch("itemforge.items.base.acquire_surface", side_effect=SurfaceUnavailableError("no canvas")):
            with self.assertLogs("itemforge.items.base", level="ERROR"):
                item = generate_axe(seed=5)
        self.assertTrue(item.is_placeholder)
        self.assertEqual(item.item_data, {"error": SURFACE_ERROR})
        self.assertEqual(item.seed, 5)
        self.assertEqual(item.image.size, (256, 256))
        self.assertEqual(item.image.getpixel((0, 0)), (255, 0, 0, 179))

    def test_zero_width_grid(self):
        """A zero-width grid produces placeholders for every family."""
        from itemforge import FAMILIES, generate_item

        config = {"grid": {"width": 0, "height": 64, "display_scale": 4}}
        for family in FAMILIES:
            item = generate_item(family, seed=1, config=config)
            self.assertTrue(item.is_placeholder)
            self.assertTrue(item.name.startswith("Error "))


class TestCli(unittest.TestCase):
    """scripts/generate.py writes PNG and JSON files."""

    def _load_cli(self):
        import importlib.util

        spec = importlib.util.spec_from_file_location("generate_cli", ROOT / "scripts" / "generate.py")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_generate_files(self):
        """--count and --json write one PNG and one JSON per seed."""
        import json
        import tempfile

        cli = self._load_cli()
        with tempfile.TemporaryDirectory() as tmp:
            code = cli.main(["axe", "--seed", "3", "--count", "2", "--output", tmp, "--json", "--log-level", "WARNING"])
            self.assertEqual(code, 0)
            for seed in (3, 4):
                self.assertTrue((Path(tmp) / f"item_axe_{seed}.png").exists())
                with open(Path(tmp) / f"item_axe_{seed}.json", encoding="utf-8") as f:
                    data = json.load(f)
                self.assertEqual(data["seed"], seed)
                self.assertEqual(data["type"], "axe")
                self.assertIn("shaft", data["silhouettes"])
                self.assertEqual(data["anchors"]["shaft_top_y"], data["silhouettes"]["shaft"][0]["y"])

    def test_rejects_unknown_family(self):
        """argparse rejects a family outside the registry."""
        cli = self._load_cli()
        with self.assertRaises(SystemExit):
            cli.main(["sword"])


if __name__ == "__main__":
    unittest.main()
