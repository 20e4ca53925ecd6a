"""
Family generators: archetype rules, feature exclusions and silhouette anchoring.
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SEEDS = range(60)


class TestAxe(unittest.TestCase):
    """Hand axe, battleaxe and double-bladed axe."""

    def test_hand_axe_steel(self):
        """Hand axe honours sub_type and head material and keeps its shaft range."""
        from itemforge import generate_axe

        item = generate_axe({"subType": "hand_axe", "material": "STEEL", "seed": 1})
        self.assertEqual(item.type, "axe")
        self.assertEqual(item.item_data["head"]["axe_type"], "hand_axe")
        self.assertEqual(item.item_data["head"]["material"], "STEEL")
        self.assertTrue(20 <= item.item_data["shaft"]["length"] <= 27)
        self.assertIn("Steel", item.name)
        self.assertEqual(item.image.size, (256, 256))

    def test_double_blade_never_has_spike(self):
        """Double-bladed axes drop the spike poll."""
        from itemforge import generate_axe

        for seed in SEEDS:
            item = generate_axe(sub_type="double_blade_axe", seed=seed)
            head = item.item_data["head"]
            self.assertFalse(head["has_spike_poll"])
            self.assertEqual(head["spike_length"], 0)
            self.assertEqual(head["blade_side"], "both")
            self.assertNotIn("spike", item.silhouettes)
            self.assertIn("blade_left", item.silhouettes)
            self.assertIn("blade_right", item.silhouettes)

    def test_battleaxe_alias(self):
        """battle_axe resolves to the battleaxe archetype."""
        from itemforge import generate_axe

        item = generate_axe(sub_type="battle_axe", seed=5)
        self.assertEqual(item.item_data["head"]["axe_type"], "single_blade_battleaxe")
        self.assertTrue(34 <= item.item_data["shaft"]["length"] <= 46)

    def test_invalid_archetype_warns_and_still_generates(self):
        """Unknown sub_type warns and falls back to a random archetype."""
        from itemforge import generate_axe

        with self.assertLogs("itemforge.items.base", level="WARNING"):
            item = generate_axe(sub_type="spoon", seed=2)
        self.assertIn(item.item_data["head"]["axe_type"], ("hand_axe", "single_blade_battleaxe", "double_blade_axe"))

    def test_shaft_silhouette_matches_length(self):
        """One shaft silhouette row per unit of shaft length."""
        from itemforge import generate_axe

        item = generate_axe(seed=9)
        shaft = item.silhouettes["shaft"]
        self.assertEqual(len(shaft), item.item_data["shaft"]["length"])
        self.assertEqual(shaft.top, item.anchors["shaft_top_y"])


class TestBoots(unittest.TestCase):
    """Mirrored boot pairs."""

    def test_same_seed_identical_pixels(self):
        """Same seed draws the same pair."""
        import numpy as np

        from itemforge import generate_boots

        a = generate_boots(seed=1234)
        b = generate_boots(seed=1234)
        self.assertTrue(np.array_equal(a.pixels, b.pixels))
        self.assertEqual(a.item_data, b.item_data)
        self.assertEqual(a.name, b.name)

    def test_pair_is_side_by_side(self):
        """Left and right legs mirror each other side by side."""
        from itemforge import generate_boots

        for seed in SEEDS:
            item = generate_boots(seed=seed)
            self.assertLess(item.anchors["left_shaft_center_x"], item.anchors["right_shaft_center_x"])
            left, right = item.silhouettes["left_leg"], item.silhouettes["right_leg"]
            self.assertEqual(len(left), len(right))
            self.assertEqual(left.top, right.top)

    def test_feature_exclusions(self):
        """Strap cuffs need tall boots and exclude buckles and lacing."""
        from itemforge import generate_boots

        for seed in SEEDS:
            ankle = generate_boots(sub_type="ankle_boot", cuff_style="buckled_strap_cuff", seed=seed).item_data
            self.assertEqual(ankle["cuff_style"], "simple_fold")
            strap = generate_boots(sub_type="knee_high", cuff_style="buckled_strap_cuff", seed=seed).item_data
            self.assertFalse(strap["has_buckles"])
            self.assertFalse(strap["has_lacing"])
            knee = generate_boots(sub_type="knee_high", seed=seed).item_data
            self.assertTrue(0 <= knee["num_buckles"] <= 3)


class TestHat(unittest.TestCase):
    """Hats, helmets, helmet features and decorations."""

    def test_knight_helm_visor_at_eye_level(self):
        """Knight helm visor sits at the recorded eye level."""
        from itemforge import generate_hat

        for seed in SEEDS:
            item = generate_hat(sub_type="knight_helm_visor", seed=seed)
            self.assertEqual(item.type, "helmet")
            self.assertIn(item.item_data["visor_type"], ("t_slit", "horizontal_slit"))
            eye_y = item.anchors["eye_level_y"]
            self.assertIsNotNone(item.silhouettes["crown"].row_at(eye_y))
            self.assertEqual(item.item_data["decoration_type"], "none")

    def test_helmet_family_restricts_pool(self):
        """helmet requests only produce helmet archetypes."""
        from itemforge import generate_item

        helmets = ("simple_helmet", "conical_helmet", "knight_helm_visor", "barbute_helm")
        for seed in SEEDS:
            item = generate_item("helmet", seed=seed)
            self.assertEqual(item.type, "helmet")
            self.assertIn(item.item_data["hat_type"], helmets)

    def test_hat_main_type(self):
        """main_type hat never produces a helmet."""
        from itemforge import generate_hat

        for seed in SEEDS:
            item = generate_hat(main_type="hat", seed=seed)
            self.assertEqual(item.type, "hat")

    def test_symbol_clipped_to_crown(self):
        """Symbol cells stay inside the crown silhouette."""
        from itemforge import generate_hat

        for seed in SEEDS:
            item = generate_hat(sub_type="top_hat", decoration_type="symbol", seed=seed)
            decoration = item.silhouettes.get("decoration")
            if decoration is None:
                continue
            crown = item.silhouettes["crown"]
            for row in decoration:
                for x in (row.x_start, row.x_end):
                    self.assertTrue(crown.contains(x, row.y), (seed, x, row.y))


class TestPotion(unittest.TestCase):
    """Flask, label, liquid, stopper."""

    def test_unlabelled_shapes(self):
        """Round flasks, test tubes and pots never get a label."""
        from itemforge import generate_potion

        for shape in ("round_flask", "bulbous_pot", "test_tube"):
            for seed in range(20):
                item = generate_potion(sub_type=shape, seed=seed)
                self.assertNotIn("label", item.silhouettes)
                self.assertFalse(item.item_data["label_drawn"])

    def test_liquid_does_not_cover_label(self):
        """Liquid rows skip the label cells."""
        from itemforge import generate_potion
        from itemforge.palettes import get_palette

        checked = 0
        for seed in range(200):
            item = generate_potion(sub_type="flat_bottom_cylinder", seed=seed)
            label = item.silhouettes.get("label")
            if label is None:
                continue
            checked += 1
            palette = get_palette(item.item_data["label_material"])
            ink = get_palette("BLACK_PAINT")
            allowed = {palette.base, palette.highlight, palette.shadow, ink.base, ink.highlight, ink.shadow}
            for row in label:
                for x in range(row.x_start, row.x_start + row.width):
                    r, g, b, a = (int(c) for c in item.pixels[row.y, x])
                    self.assertIn((r, g, b, a), allowed)
        self.assertGreater(checked, 0)

    def test_stopper_and_base_fit_the_grid(self):
        """Stoppers stay below the top edge and rounded bases above the bottom edge."""
        from itemforge import generate_potion

        for stopper in ("wax_seal", "metal_cap", "cloth_tied_top", "glass_stopper"):
            for shape in ("tall_slender", "test_tube", "round_flask", "bulbous_pot"):
                for seed in range(25):
                    item = generate_potion(sub_type=shape, stopper_type=stopper, seed=seed)
                    self.assertFalse(item.pixels[0, :, 3].any(), (stopper, shape, seed))
                    self.assertFalse(item.pixels[-1, :, 3].any(), (stopper, shape, seed))
                    self.assertGreater(item.silhouettes["stopper"].top, 0)

    def test_named_liquid(self):
        """A named liquid request picks its palette."""
        from itemforge import generate_potion

        item = generate_potion(liquid="Toxic Slime", seed=4)
        self.assertEqual(item.item_data["liquid_color_name"], "Toxic Slime")
        self.assertEqual(item.item_data["colors"]["liquid"]["key"], "TOXIC_SLIME")

    def test_liquid_inside_flask(self):
        """Liquid rows lie on flask rows."""
        from itemforge import generate_potion

        for seed in SEEDS:
            item = generate_potion(seed=seed)
            liquid = item.silhouettes["liquid"]
            flask = item.silhouettes["flask"]
            for row in liquid:
                self.assertIsNotNone(flask.row_at(row.y))


class TestStaff(unittest.TestCase):
    """Wands, scepters and staves with toppers on the shaft."""

    def test_shaft_and_topper_fit_the_grid(self):
        """Long staves shorten to leave room for the topper; the bottom anchor is the last shaft row."""
        from itemforge import generate_staff

        for seed in SEEDS:
            for topper_shape in ("orb_gem", "crystal_shard", "crescent_moon"):
                item = generate_staff(sub_type="staff", topper_shape=topper_shape, seed=seed)
                shaft = item.silhouettes["shaft"]
                self.assertLess(shaft.bottom, 64, (seed, topper_shape))
                self.assertFalse(item.pixels[0, :, 3].any(), (seed, topper_shape))
                self.assertFalse(item.pixels[-1, :, 3].any(), (seed, topper_shape))
                self.assertEqual(item.anchors["shaft_bottom_y"], shaft.bottom)
                self.assertEqual(len(shaft), item.item_data["shaft"]["length"])

    def test_wand_length(self):
        """Wand shafts stay in the wand length range."""
        from itemforge import generate_staff

        for seed in SEEDS:
            data = generate_staff(sub_type="wand", seed=seed).item_data
            self.assertEqual(data["staff_type"], "wand")
            self.assertTrue(23 <= data["shaft"]["length"] <= 38)
            self.assertIn(data["shaft"]["thickness"], (1, 2))

    def test_topper_sits_on_shaft(self):
        """The topper is drawn above the shaft's top row."""
        from itemforge import generate_staff

        for seed in SEEDS:
            item = generate_staff(seed=seed)
            shaft = item.silhouettes["shaft"]
            topper = item.silhouettes["topper"]
            self.assertEqual(item.anchors["topper_attach_y"], shaft.top)
            self.assertLess(topper.bottom, shaft.top)

    def test_grip_follows_shaft(self):
        """Grip rows coincide with shaft rows."""
        from itemforge import generate_staff

        for seed in SEEDS:
            item = generate_staff(sub_type="staff", seed=seed)
            grip = item.silhouettes.get("grip")
            if grip is None:
                continue
            shaft = item.silhouettes["shaft"]
            for row in grip:
                self.assertEqual(row, shaft.row_at(row.y))

    def test_metal_shaft_is_straight(self):
        """Metal shafts are always straight and named after the material."""
        from itemforge import generate_staff

        for seed in SEEDS:
            item = generate_staff(sub_type="staff", material="GOLD", seed=seed)
            self.assertEqual(item.item_data["shaft"]["shape"], "straight")
            self.assertTrue(item.name.startswith("Gold Staff"))

    def test_gem_toppers_carry_gem_material(self):
        """Orb toppers report a gem material and no inset."""
        from itemforge import generate_staff

        for seed in SEEDS:
            data = generate_staff(topper_shape="orb_gem", seed=seed).item_data
            self.assertEqual(data["topper"]["shape"], "orb_gem")
            self.assertIsNotNone(data["topper"]["gem_material"])
            self.assertFalse(data["topper"]["has_inset_gem"])


if __name__ == "__main__":
    unittest.main()
