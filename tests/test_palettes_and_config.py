"""
Unit tests for the palette registry, seeded random source, config loading and logging helpers.
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestPaletteRegistry(unittest.TestCase):
    """Frozen registry with case-insensitive lookup and a default on miss."""

    def test_default_registry_contents(self):
        """Default registry holds every material the families use."""
        from itemforge.palettes import DEFAULT_REGISTRY

        for key in ("IRON", "WOOD", "GLASS", "TOXIC_SLIME", "MURKY_BROWN", "ENCHANTED_METAL", "STRAW", "ROPE_BROWN"):
            self.assertIn(key, DEFAULT_REGISTRY)
        self.assertGreaterEqual(len(DEFAULT_REGISTRY), 54)

    def test_lookup_is_case_insensitive(self):
        """Lookups ignore case."""
        from itemforge.palettes import get_palette

        self.assertEqual(get_palette("steel").key, "STEEL")
        self.assertEqual(get_palette("Steel").name, "Steel")

    def test_unknown_key_warns_and_falls_back(self):
        """Unknown keys warn and return IRON."""
        from itemforge.palettes import DEFAULT_REGISTRY

        with self.assertLogs("itemforge.palettes.registry", level="WARNING"):
            palette = DEFAULT_REGISTRY.get("UNOBTAINIUM")
        self.assertEqual(palette.key, "IRON")

    def test_any_string_resolves_to_a_palette(self):
        """Empty, blank, mixed-case and junk names all give a palette; misses fall back to IRON with a warning."""
        import random
        import string

        from itemforge.palettes import DEFAULT_REGISTRY, Palette, get_palette

        rng = random.Random(2024)
        alphabet = string.ascii_letters + string.digits + string.punctuation + " "
        names = ["", " ", "sTeEl", "gem_red", "Iron "]
        names += ["".join(rng.choice(alphabet) for _ in range(rng.randint(1, 12))) for _ in range(100)]
        for name in names:
            known = bool(name) and name.upper() in DEFAULT_REGISTRY
            if known:
                palette = get_palette(name)
                self.assertEqual(palette.key, name.upper())
            else:
                with self.assertLogs("itemforge.palettes.registry", level="WARNING"):
                    palette = get_palette(name)
                self.assertEqual(palette.key, "IRON", repr(name))
            self.assertIsInstance(palette, Palette)

    def test_any_material_generates_an_item(self):
        """Unknown material requests never fail a generation call."""
        import random
        import string

        from itemforge import FAMILIES, generate_item

        rng = random.Random(99)
        junk = ["".join(rng.choice(string.ascii_letters + "_-!") for _ in range(rng.randint(6, 10))) + "?" for _ in range(20)]
        for i, material in enumerate(junk):
            family = FAMILIES[i % len(FAMILIES)]
            with self.assertLogs("itemforge.palettes.registry", level="WARNING"):
                item = generate_item(family, seed=i, material=material)
            self.assertFalse(item.is_placeholder, (family, material))
        for material in ("", "sTeEl"):
            for family in FAMILIES:
                self.assertFalse(generate_item(family, seed=3, material=material).is_placeholder)

    def test_frozen_registry_rejects_registration(self):
        """Registering after freeze raises."""
        from itemforge.palettes import DEFAULT_REGISTRY, PaletteRegistryError

        with self.assertRaises(PaletteRegistryError):
            DEFAULT_REGISTRY.register("NEW", {"base": "#000000", "highlight": "#111111", "shadow": "#222222"})

    def test_duplicate_key_rejected(self):
        """Duplicate keys raise regardless of case."""
        from itemforge.palettes import PaletteRegistry, PaletteRegistryError

        registry = PaletteRegistry(default_key="A")
        registry.register("a", {"base": "#000000", "highlight": "#111111", "shadow": "#222222"})
        with self.assertRaises(PaletteRegistryError):
            registry.register("A", {"base": "#000000", "highlight": "#111111", "shadow": "#222222"})
        registry.freeze()
        self.assertEqual(registry.get("a").base, (0, 0, 0, 255))

    def test_freeze_requires_default(self):
        """freeze() needs the default palette registered."""
        from itemforge.palettes import PaletteRegistry, PaletteRegistryError

        with self.assertRaises(PaletteRegistryError):
            PaletteRegistry(default_key="MISSING").freeze()

    def test_parse_color_and_hex(self):
        """Colour strings and tuples round through RGBA."""
        from itemforge.palettes import parse_color, to_hex

        self.assertEqual(parse_color("#FF000080"), (255, 0, 0, 128))
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))
        self.assertEqual(to_hex((255, 0, 0, 255)), "#FF0000")
        self.assertEqual(to_hex((255, 0, 0, 128)), "#FF000080")

    def test_glass_is_translucent(self):
        """Glass base colour is translucent."""
        from itemforge.palettes import get_palette

        self.assertLess(get_palette("GLASS").base[3], 255)
        self.assertIn("outline", get_palette("GLASS").to_dict())


class TestItemRandom(unittest.TestCase):
    """Seeded draws used by every variation step."""

    def test_same_seed_same_stream(self):
        """Same seed, same draws."""
        from itemforge.random_utils import ItemRandom

        a, b = ItemRandom(7), ItemRandom(7)
        self.assertEqual([a.randint(0, 100) for _ in range(20)], [b.randint(0, 100) for _ in range(20)])

    def test_randint_bounds(self):
        """randint is inclusive over ceil(low)..floor(high)."""
        from itemforge.random_utils import ItemRandom

        rng = ItemRandom(1)
        values = {rng.randint(1.2, 3.8) for _ in range(200)}
        self.assertEqual(values, {2, 3})
        self.assertEqual(rng.randint(5, 5), 5)
        self.assertEqual(rng.randint(5.5, 5.2), 6)

    def test_choice_and_sign(self):
        """choice handles empty input; sign is -1 or 1."""
        from itemforge.random_utils import ItemRandom

        rng = ItemRandom(3)
        self.assertIsNone(rng.choice([]))
        self.assertIn(rng.choice("abc"), "abc")
        self.assertEqual({rng.sign() for _ in range(100)}, {-1, 1})

    def test_uniform_and_weighted_choice(self):
        """uniform stays in [low, high); weighted_choice skips zero weights."""
        from itemforge.random_utils import ItemRandom

        rng = ItemRandom(11)
        for _ in range(100):
            self.assertTrue(0.25 <= rng.uniform(0.25, 0.85) < 0.85)
        self.assertEqual({rng.weighted_choice(["a", "b"], [0, 1]) for _ in range(50)}, {"b"})
        self.assertIsNone(rng.weighted_choice([], []))

    def test_unseeded_gets_recorded_seed(self):
        """Unseeded sources record a replayable seed."""
        from itemforge.random_utils import ItemRandom

        rng = ItemRandom()
        self.assertIsInstance(rng.seed, int)
        replay = ItemRandom(rng.seed)
        self.assertEqual(rng.random(), replay.random())


class TestConfig(unittest.TestCase):
    """YAML config merged over built-in defaults."""

    def test_default_config(self):
        """Bundled config gives a 64x64 grid at scale 4 and the placeholder label."""
        from itemforge.config import load_config, resolve_grid_config

        config = load_config()
        self.assertEqual(resolve_grid_config(config), (64, 64, 4))
        self.assertEqual(config["placeholder"]["label"], "CTX Fail")

    def test_missing_file_returns_defaults(self):
        """A missing config file falls back to built-in defaults."""
        from itemforge.config import load_config

        config = load_config(ROOT / "config" / "does_not_exist.yaml")
        self.assertEqual(config["output"]["filename_prefix"], "item")

    def test_partial_override(self):
        """Partial YAML merges over defaults."""
        import tempfile

        from itemforge.config import load_config, resolve_grid_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "small.yaml"
            path.write_text("grid:\n  display_scale: 2\n", encoding="utf-8")
            config = load_config(path)
        self.assertEqual(resolve_grid_config(config), (64, 64, 2))
        self.assertEqual(config["palettes"]["default"], "IRON")

    def test_output_dir_relative_to_root(self):
        """Relative output dirs resolve against the project root."""
        from itemforge.config import get_output_dir

        self.assertEqual(get_output_dir({"output": {"dir": "out"}}), ROOT / "out")


class TestWorkflowUtils(unittest.TestCase):
    """Structured log lines."""

    def test_log_structured_emits_json(self):
        """log_structured logs one JSON object."""
        import json

        from itemforge.workflow_utils import log_structured

        with self.assertLogs("itemforge.workflow_utils", level="INFO") as cm:
            log_structured("info", event="generated", family="axe", seed=3)
        payload = json.loads(cm.records[0].getMessage())
        self.assertEqual(payload["family"], "axe")
        self.assertEqual(payload["seed"], 3)


if __name__ == "__main__":
    unittest.main()
