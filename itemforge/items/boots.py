"""
Boots: a pair drawn from one spec. The left boot is drawn as-is, the right one mirrored
(toe pointing the other way, lit side swapped). Each boot draws its leg shaft first;
cuff, lacing and buckles are placed on the recorded leg silhouette.
"""
import math
from dataclasses import dataclass
from typing import Any, Callable

from ..geometry import Silhouette, linear_taper, progress, round_half_up, sinusoidal_offset
from ..graphics import (
    PixelSurface,
    Tone,
    draw_line,
    draw_pixel,
    fill_block,
    shade_block,
    shade_column,
    shade_row,
    shade_span,
    tone_color,
)
from ..palettes import Palette
from ..random_utils import ItemRandom
from .base import Composition, ItemGenerator, humanize

BOOT_TYPES = ("ankle_boot", "calf_high", "knee_high")
TOE_SHAPES = ("rounded", "square", "pointed")
HEEL_STYLES = ("none", "low_block", "medium_block")
LEG_STYLES = ("straight", "subtle_curve")
CUFF_STYLES = ("none", "simple_fold", "fold_over", "fur_trim", "buckled_strap_cuff")

MAIN_MATERIALS = ["LEATHER", "DARK_LEATHER", "CLOTH", "STEEL", "IRON", "ENCHANTED_METAL", "BONE"]
SOLE_MATERIALS = ["LEATHER", "WOOD", "IRON", "BLACK_PAINT", "DARK_STEEL", "STONE"]
CUFF_MATERIALS = ["LEATHER", "FUR_WHITE", "FUR_BROWN", "CLOTH", "ENCHANTED_SILK", "GOLD", "SILVER"]
BUCKLE_MATERIALS = ["IRON", "STEEL", "BRONZE", "SILVER", "GOLD"]
LACING_MATERIALS = ["LEATHER", "SILK_STRING", "ROPE_BROWN"]
TOE_CAP_MATERIALS = ["STEEL", "IRON", "DARK_LEATHER", "BRONZE"]
HEEL_COUNTER_MATERIALS = ["STEEL", "DARK_LEATHER", "BRONZE", "IRON"]

SINGLE_BOOT_WIDTH = 26
SINGLE_BOOT_HEIGHT = 56
PAIR_SPACING = 4
BUCKLE_WIDTH = 3
BUCKLE_HEIGHT = 2
LACE_SPACING = 3

HEEL_HEIGHTS: dict[str, tuple[int, int]] = {
    "none": (0, 0),
    "low_block": (2, 3),
    "medium_block": (3, 4),
}

# Toe box column height at progress p toward the tip
TOE_PROFILES: dict[str, Callable[[float, int], int]] = {
    "rounded": lambda p, h: max(1, math.floor(h * (1 - p ** 1.5 * 0.60))),
    "pointed": lambda p, h: max(1, math.floor(h * (1 - p ** 1.2 * 0.80))),
    "square": lambda p, h: max(1, math.floor(h * 0.95)),
}

# Leg height range per boot type, given (foot height, max leg height)
LEG_HEIGHTS: dict[str, Callable[[ItemRandom, int, int], int]] = {
    "ankle_boot": lambda rng, fh, mx: rng.randint(math.floor(fh * 0.9), fh + 6),
    "calf_high": lambda rng, fh, mx: rng.randint(math.floor(mx * 0.40), math.floor(mx * 0.65)),
    "knee_high": lambda rng, fh, mx: rng.randint(math.floor(mx * 0.60), mx - 1),
}

FUR_TONES = (Tone.BASE, Tone.HIGHLIGHT, Tone.SHADOW)


@dataclass(frozen=True)
class BootSpec:
    boot_type: str
    toe_shape: str
    heel_style: str
    leg_style: str
    main_palette: Palette
    sole_palette: Palette
    cuff_style: str
    cuff_palette: Palette | None
    buckle_count: int
    buckle_palette: Palette | None
    lacing_palette: Palette | None
    toe_cap_palette: Palette | None
    heel_counter_palette: Palette | None
    foot_length: int
    foot_height: int
    heel_height: int
    leg_height: int
    leg_initial_width: int     # width at the top of the shaft
    leg_top_width: int         # width at the ankle
    heel_visible: int
    toe_visible: int

    @property
    def has_cuff(self) -> bool:
        return self.cuff_style != "none" and self.cuff_palette is not None

    @property
    def sole_height(self) -> int:
        return max(1, self.foot_height // 7) + 1

    @property
    def foot_upper_height(self) -> int:
        return self.foot_height - self.sole_height


@dataclass(frozen=True)
class BootsParams:
    boot: BootSpec
    top_y: int
    left_x: int
    right_x: int


def _overhangs(rng: ItemRandom, foot_length: int, leg_width: int) -> tuple[int, int]:
    """(heel, toe) columns visible behind and in front of the shaft."""
    heel = max(2, math.floor(foot_length * rng.uniform(0.15, 0.25)))
    toe = foot_length - leg_width - heel
    toe = max(math.floor(foot_length * 0.50), toe)
    overflow = leg_width + heel + toe - foot_length
    if overflow > 0:
        floor_toe = math.floor(foot_length * 0.45)
        if toe - overflow >= floor_toe:
            toe -= overflow
        else:
            heel = max(2, heel - (overflow - (toe - floor_toe)))
            toe = floor_toe
    return heel, toe


# --- Cuff styles ---

def _draw_band_cuff(surface: PixelSurface, palette: Palette, x: int, y: int, w: int, h: int, rng: ItemRandom) -> None:
    for ch in range(h):
        tone = Tone.BASE
        if ch == 0 and h > 1:
            tone = Tone.HIGHLIGHT
        elif ch == h - 1 and h > 1:
            tone = Tone.SHADOW
        shade_row(surface, x, y + ch, w, palette, tone)


def _draw_fold_over_cuff(surface: PixelSurface, palette: Palette, x: int, y: int, w: int, h: int, rng: ItemRandom) -> None:
    fold = h // 2
    for ch in range(h):
        tone = Tone.SHADOW if ch < fold else Tone.BASE
        if ch == fold - 1:
            tone = Tone.HIGHLIGHT
        shade_row(surface, x, y + ch, w, palette, tone)


def _draw_fur_cuff(surface: PixelSurface, palette: Palette, x: int, y: int, w: int, h: int, rng: ItemRandom) -> None:
    for ch in range(h):
        for fx in range(w):
            if rng.chance(0.75):
                tone = rng.choice(FUR_TONES)
                draw_pixel(surface, x + fx, y + ch + rng.randint(-1, 0), tone_color(palette, tone))


CUFF_DRAWERS: dict[str, Callable[[PixelSurface, Palette, int, int, int, int, ItemRandom], None]] = {
    "simple_fold": _draw_band_cuff,
    "buckled_strap_cuff": _draw_band_cuff,
    "fold_over": _draw_fold_over_cuff,
    "fur_trim": _draw_fur_cuff,
}

# Extra cuff width over the top of the shaft
CUFF_OVERHANG: dict[str, int] = {"simple_fold": 0, "fur_trim": 2}


class BootsGenerator(ItemGenerator):
    family = "boots"
    archetypes = BOOT_TYPES
    archetype_aliases = {"ankle": "ankle_boot", "calf": "calf_high", "knee": "knee_high"}

    def build_params(self, options: dict[str, Any], rng: ItemRandom) -> BootsParams:
        boot_type = self.resolve_archetype(options.get("sub_type"), rng)
        toe_shape = self.pick(options, "toe_shape", TOE_SHAPES, rng)
        heel_style = self.pick(options, "heel_style", HEEL_STYLES, rng)
        leg_style = self.pick(options, "leg_style", LEG_STYLES, rng)

        main_key, main_palette = self.resolve_palette(options.get("material"), MAIN_MATERIALS, rng)
        _, sole_palette = self.resolve_palette(options.get("sole_material"), SOLE_MATERIALS, rng)

        if options.get("cuff_style") is not None:
            cuff_style = self.pick(options, "cuff_style", CUFF_STYLES, rng)
        else:
            cuff_style = rng.choice(CUFF_STYLES) if rng.chance(0.6) else "none"
        if boot_type == "ankle_boot" and cuff_style == "buckled_strap_cuff":
            cuff_style = "simple_fold"
        cuff_palette = None
        if cuff_style != "none":
            choices = [m for m in CUFF_MATERIALS if m != main_key] or CUFF_MATERIALS
            cuff_palette = self.resolve_palette(options.get("cuff_material"), choices, rng)[1]

        buckle_count = 0
        buckle_palette = None
        if rng.chance(0.55) and cuff_style != "buckled_strap_cuff":
            buckle_count = rng.randint(1, 3 if boot_type == "knee_high" else 2)
            buckle_palette = self.resolve_palette(options.get("buckle_material"), BUCKLE_MATERIALS, rng)[1]

        lacing_palette = None
        if rng.chance(0.4) and boot_type != "knee_high":
            lacing_palette = self.resolve_palette(options.get("lacing_material"), LACING_MATERIALS, rng)[1]

        toe_cap_palette = self.resolve_palette(None, TOE_CAP_MATERIALS, rng)[1] if rng.chance(0.3) else None
        heel_counter_palette = self.resolve_palette(None, HEEL_COUNTER_MATERIALS, rng)[1] if rng.chance(0.3) else None

        foot_length = rng.randint(math.floor(SINGLE_BOOT_WIDTH * 0.80), SINGLE_BOOT_WIDTH - 4)
        heel_height = rng.randint(*HEEL_HEIGHTS[heel_style])
        foot_height = rng.randint(6, 9) + math.floor(heel_height * 0.5)
        leg_initial_width = math.floor(foot_length * rng.uniform(0.35, 0.45))
        leg_initial_width = max(5, min(leg_initial_width, SINGLE_BOOT_WIDTH - 10))
        heel_visible, toe_visible = _overhangs(rng, foot_length, leg_initial_width)

        max_leg_height = SINGLE_BOOT_HEIGHT - foot_height - 1
        leg_height = LEG_HEIGHTS[boot_type](rng, foot_height, max_leg_height)
        leg_height = max(5, min(leg_height, max_leg_height))
        leg_top_width = max(4, math.floor(leg_initial_width * rng.uniform(0.90, 1.10)))

        boot = BootSpec(
            boot_type=boot_type,
            toe_shape=toe_shape,
            heel_style=heel_style,
            leg_style=leg_style,
            main_palette=main_palette,
            sole_palette=sole_palette,
            cuff_style=cuff_style,
            cuff_palette=cuff_palette,
            buckle_count=buckle_count,
            buckle_palette=buckle_palette,
            lacing_palette=lacing_palette,
            toe_cap_palette=toe_cap_palette,
            heel_counter_palette=heel_counter_palette,
            foot_length=foot_length,
            foot_height=foot_height,
            heel_height=heel_height,
            leg_height=leg_height,
            leg_initial_width=leg_initial_width,
            leg_top_width=leg_top_width,
            heel_visible=heel_visible,
            toe_visible=toe_visible,
        )
        padding_x = (self.width - (SINGLE_BOOT_WIDTH * 2 + PAIR_SPACING)) // 2
        return BootsParams(
            boot=boot,
            top_y=max(2, (self.height - (leg_height + foot_height)) // 2),
            left_x=padding_x,
            right_x=padding_x + SINGLE_BOOT_WIDTH + PAIR_SPACING,
        )

    # --- Composer: per boot, leg -> foot -> sole/heel -> cuff -> lacing -> buckles ---

    def compose(self, surface: PixelSurface, params: BootsParams, rng: ItemRandom) -> Composition:
        comp = Composition()
        for side, area_x, mirrored in (("left", params.left_x, False), ("right", params.right_x, True)):
            leg, foot, center_x = self._draw_boot(surface, params.boot, area_x, params.top_y, mirrored, rng)
            comp.silhouettes[f"{side}_leg"] = leg
            comp.silhouettes[f"{side}_foot"] = foot
            comp.anchors[f"{side}_shaft_center_x"] = center_x
        comp.anchors["top_y"] = params.top_y
        comp.anchors["ankle_y"] = params.top_y + params.boot.leg_height
        return comp

    def _draw_boot(
        self,
        surface: PixelSurface,
        boot: BootSpec,
        area_x: int,
        top_y: int,
        mirrored: bool,
        rng: ItemRandom,
    ) -> tuple[Silhouette, Silhouette, int]:
        area_center = area_x + SINGLE_BOOT_WIDTH // 2
        shift = math.floor(SINGLE_BOOT_WIDTH * 0.20)
        center_x = area_center - shift if mirrored else area_center + shift
        ankle_y = top_y + boot.leg_height

        leg = self._draw_leg(surface, boot, center_x, top_y, mirrored)
        foot = self._draw_foot(surface, boot, center_x, ankle_y, mirrored)
        if boot.has_cuff:
            self._draw_cuff(surface, boot, leg, top_y, rng)
        if boot.lacing_palette is not None:
            self._draw_lacing(surface, boot, leg, top_y, ankle_y)
        if boot.buckle_palette is not None and boot.buckle_count > 0:
            self._draw_buckles(surface, boot, leg, top_y, ankle_y, mirrored)
        return leg, foot, center_x

    def _draw_leg(self, surface: PixelSurface, boot: BootSpec, center_x: int, top_y: int, mirrored: bool) -> Silhouette:
        sil = Silhouette()
        curved = boot.leg_style == "subtle_curve" and boot.leg_height > 8
        for i in range(boot.leg_height):
            y = top_y + i
            p = progress(i, boot.leg_height)
            offset = 0
            if curved:
                offset = math.floor(sinusoidal_offset(p, -1.0 if mirrored else 1.0, 0.8, damping=0.5))
            width = max(2, round_half_up(linear_taper(p, boot.leg_initial_width, boot.leg_top_width)))
            x = center_x - width // 2 + offset
            shade_span(surface, x, y, width, boot.main_palette, mirrored=mirrored)
            sil.record(y, x, width)
        return sil

    def _draw_foot(self, surface: PixelSurface, boot: BootSpec, center_x: int, ankle_y: int, mirrored: bool) -> Silhouette:
        points: list[tuple[int, int]] = []
        upper_h = boot.foot_upper_height
        init_w = boot.leg_initial_width
        main = boot.main_palette

        for i in range(upper_h):
            y = ankle_y + i
            width = max(init_w - 1, round_half_up(init_w * (1 - progress(i, upper_h) * 0.05)))
            x = center_x - width // 2
            shade_row(surface, x, y, width, main, Tone.HIGHLIGHT if i == 0 and width > 1 else Tone.BASE)
            points += [(x, y), (x + width - 1, y)]

        instep_left = center_x - init_w // 2
        instep_right = instep_left + init_w - 1

        heel_palette = boot.heel_counter_palette or main
        heel_start_y = ankle_y + math.floor(upper_h * 0.05)
        heel_full_h = upper_h - math.floor(upper_h * 0.05)
        for i in range(boot.heel_visible):
            x = instep_left - 1 - i if mirrored else instep_right + 1 + i
            h = heel_full_h
            if i > boot.heel_visible * 0.2:
                fade = (i - boot.heel_visible * 0.2) / (boot.heel_visible * 0.8 or 1)
                h = max(1, heel_full_h - math.floor(heel_full_h * 0.50 * fade))
            y = heel_start_y + heel_full_h - h
            shade_column(surface, x, y, h, heel_palette, bottom=None)
            points += [(x, y), (x, y + h - 1)]

        toe_palette = boot.toe_cap_palette or main
        toe_profile = TOE_PROFILES[boot.toe_shape]
        for i in range(boot.toe_visible):
            x = instep_right + 1 + i if mirrored else instep_left - 1 - i
            p = 1.0 if boot.toe_visible <= 1 else i / (boot.toe_visible - 1)
            h = toe_profile(p, upper_h)
            y = ankle_y + upper_h - h
            shade_column(surface, x, y, h, toe_palette, bottom=None)
            points += [(x, y), (x, y + h - 1)]

        points += self._draw_sole(surface, boot, ankle_y + upper_h, instep_left, instep_right, mirrored)
        return Silhouette.from_points(points)

    def _draw_sole(
        self,
        surface: PixelSurface,
        boot: BootSpec,
        sole_y: int,
        instep_left: int,
        instep_right: int,
        mirrored: bool,
    ) -> list[tuple[int, int]]:
        sole = boot.sole_palette
        sole_h = boot.sole_height
        toe_tip = instep_right + boot.toe_visible if mirrored else instep_left - boot.toe_visible
        heel_tip = instep_left - boot.heel_visible if mirrored else instep_right + boot.heel_visible
        sole_min = min(toe_tip, heel_tip, instep_left)
        sole_max = max(toe_tip, heel_tip, instep_right)
        sole_x = sole_min
        sole_len = sole_max - sole_min + 1
        points: list[tuple[int, int]] = []

        if boot.heel_style != "none" and boot.heel_height > 0:
            block_w = max(2, math.floor(boot.leg_initial_width * 0.65))
            heel_top = sole_y + sole_h - boot.heel_height
            block_x = heel_tip if mirrored else heel_tip - block_w + 1
            block_x = max(sole_min, min(block_x, sole_max - block_w + 1))
            shade_block(surface, block_x, heel_top, block_w, boot.heel_height, sole, mirrored=mirrored, top=None)
            points += [(block_x, heel_top), (block_x + block_w - 1, heel_top + boot.heel_height - 1)]
            if mirrored:
                sole_x = block_x + block_w
                sole_len = max(0, sole_max - sole_x + 1)
            else:
                sole_len = max(0, block_x - sole_x)

        if sole_len > 0:
            shade_block(surface, sole_x, sole_y, sole_len, sole_h, sole, mirrored=mirrored, top=None)
            points += [(sole_x, sole_y), (sole_x + sole_len - 1, sole_y + sole_h - 1)]
        return points

    def _draw_cuff(self, surface: PixelSurface, boot: BootSpec, leg: Silhouette, top_y: int, rng: ItemRandom) -> None:
        top_row = leg.row_at(top_y)
        if top_row is None:
            return
        fur = boot.cuff_style == "fur_trim"
        height = max(2, math.floor(boot.leg_height * (0.20 if fur else 0.15))) + (1 if fur else 0)
        overhang = CUFF_OVERHANG.get(boot.cuff_style, 1)
        width = top_row.width + overhang
        x = top_row.x_start - overhang // 2
        CUFF_DRAWERS[boot.cuff_style](surface, boot.cuff_palette, x, top_y, width, height, rng)

    def _draw_lacing(self, surface: PixelSurface, boot: BootSpec, leg: Silhouette, top_y: int, ankle_y: int) -> None:
        color = tone_color(boot.lacing_palette, Tone.BASE)
        start_y = top_y + math.floor(boot.leg_height * (0.25 if boot.has_cuff else 0.1))
        end_y = ankle_y - math.floor(boot.foot_upper_height * 0.1)
        segments = max(3, (end_y - start_y) // LACE_SPACING)
        for i in range(segments - 1):
            y = start_y + i * LACE_SPACING
            next_y = y + LACE_SPACING
            if next_y >= end_y:
                break
            row = leg.nearest(y)
            if row is None:
                continue
            eyelet = max(1, math.floor(row.width * 0.20))
            x_left = row.x_start + eyelet
            x_right = row.x_end - eyelet
            if x_left < x_right - 1:
                draw_line(surface, x_left, y, x_right, next_y, color)
                draw_line(surface, x_right, y, x_left, next_y, color)

    def _draw_buckles(
        self,
        surface: PixelSurface,
        boot: BootSpec,
        leg: Silhouette,
        top_y: int,
        ankle_y: int,
        mirrored: bool,
    ) -> None:
        palette = boot.buckle_palette
        count = boot.buckle_count
        for i in range(count):
            ratio = 0.45 if count == 1 else 0.20 + i * 0.55 / (count - 1)
            center_y = top_y + math.floor(boot.leg_height * ratio)
            lowest = top_y + (math.floor(boot.leg_height * 0.22) + 3 if boot.has_cuff else 3) + BUCKLE_HEIGHT
            center_y = min(max(lowest, center_y), ankle_y - BUCKLE_HEIGHT - 4)
            row = leg.nearest(center_y)
            if row is None:
                continue
            shade_row(surface, row.x_start, center_y, row.width, palette, Tone.SHADOW)
            buckle_x = row.x_start - BUCKLE_WIDTH + 1 if mirrored else row.x_end
            buckle_y = center_y - BUCKLE_HEIGHT // 2
            fill_block(surface, buckle_x, buckle_y, BUCKLE_WIDTH, BUCKLE_HEIGHT, tone_color(palette, Tone.BASE))
            edge_x = buckle_x + (BUCKLE_WIDTH - 1 if mirrored else 0)
            fill_block(surface, edge_x, buckle_y, 1, BUCKLE_HEIGHT, tone_color(palette, Tone.HIGHLIGHT))

    # --- Description ---

    def item_name(self, params: BootsParams) -> str:
        boot = params.boot
        name = f"{boot.main_palette.name} {boot.toe_shape} {boot.boot_type.replace('_', ' ', 1)}"
        if boot.heel_style != "none":
            name += f" ({humanize(boot.heel_style)} heel)"
        if boot.has_cuff:
            name += f" with {boot.cuff_palette.name} Cuff"
        if boot.buckle_count:
            name += f" with {boot.buckle_count} Buckle{'s' if boot.buckle_count > 1 else ''}"
        if boot.lacing_palette is not None:
            name += " (Laced)"
        if boot.toe_cap_palette is not None:
            name += f" with {boot.toe_cap_palette.name.lower()} Toe Cap"
        if boot.heel_counter_palette is not None:
            name += f" and {boot.heel_counter_palette.name.lower()} Heel Counter"
        return name

    def describe(self, params: BootsParams, composition: Composition) -> dict[str, Any]:
        boot = params.boot

        def key(palette: Palette | None) -> str | None:
            return palette.key if palette is not None else None

        def colors(palette: Palette | None) -> dict[str, Any] | None:
            return palette.to_dict() if palette is not None else None

        return {
            "style": boot.boot_type,
            "toe_shape": boot.toe_shape,
            "heel_style": boot.heel_style,
            "leg_style": boot.leg_style,
            "main_material": boot.main_palette.key,
            "sole_material": boot.sole_palette.key,
            "has_cuff": boot.has_cuff,
            "cuff_style": boot.cuff_style,
            "cuff_material": key(boot.cuff_palette),
            "has_buckles": boot.buckle_count > 0,
            "num_buckles": boot.buckle_count,
            "buckle_material": key(boot.buckle_palette),
            "has_lacing": boot.lacing_palette is not None,
            "lacing_material": key(boot.lacing_palette),
            "has_toe_cap": boot.toe_cap_palette is not None,
            "toe_cap_material": key(boot.toe_cap_palette),
            "has_heel_counter": boot.heel_counter_palette is not None,
            "heel_counter_material": key(boot.heel_counter_palette),
            "dimensions": {
                "foot_length": boot.foot_length,
                "foot_height": boot.foot_height,
                "sole_height": boot.sole_height,
                "heel_height": boot.heel_height,
                "leg_height": boot.leg_height,
                "leg_initial_width": boot.leg_initial_width,
                "leg_top_width": boot.leg_top_width,
                "heel_visible": boot.heel_visible,
                "toe_visible": boot.toe_visible,
            },
            "layout": dict(composition.anchors),
            "colors": {
                "main": colors(boot.main_palette),
                "sole": colors(boot.sole_palette),
                "cuff": colors(boot.cuff_palette),
                "buckle": colors(boot.buckle_palette),
                "lacing": colors(boot.lacing_palette),
                "toe_cap": colors(boot.toe_cap_palette),
                "heel_counter": colors(boot.heel_counter_palette),
            },
        }
