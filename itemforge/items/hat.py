"""
Hats and helmets: crown first, then brim, helmet features (visor, cheek guards) and
decorations. Everything after the crown is placed on the recorded crown silhouette.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Callable

from ..geometry import (
    Silhouette,
    SilhouetteRow,
    ellipse_factor,
    in_radius,
    linear_taper,
    power_curve,
    progress,
    round_half_up,
)
from ..graphics import (
    PixelSurface,
    Tone,
    draw_pixel,
    fill_block,
    shade_row,
    shade_span,
    tone_color,
)
from ..palettes import Palette
from ..random_utils import ItemRandom
from .base import Composition, ItemGenerator, humanize

logger = logging.getLogger(__name__)

HAT_ONLY_TYPES = ("wizard_hat", "top_hat", "beanie", "wide_brim_fedora", "cap", "straw_hat")
HELMET_TYPES = ("simple_helmet", "conical_helmet", "knight_helm_visor", "barbute_helm")
HAT_TYPES = HAT_ONLY_TYPES + HELMET_TYPES
MAIN_TYPES = ("hat", "helmet")

CROWN_SHAPES = ("cylindrical", "flat_top_wide", "conical", "domed", "soft_beanie")
BRIM_SHAPES = ("flat_circular", "downward_curved", "upward_curved", "front_cap_bill", "none")
ROUND_BRIMS = ("flat_circular", "downward_curved", "upward_curved")
VISOR_TYPES = ("t_slit", "horizontal_slit")
DECORATION_TYPES = ("none", "band", "feather", "symbol")
SYMBOL_SHAPES = ("circle_badge", "simple_star")

CLOTH_MATERIALS = ("RED_PAINT", "BLUE_PAINT", "GREEN_PAINT", "BLACK_PAINT", "WHITE_PAINT", "PURPLE_PAINT", "LEATHER", "PAPER")
METAL_MATERIALS = ("IRON", "STEEL", "BRONZE", "DARK_STEEL", "GOLD", "SILVER")
DECORATION_MATERIALS = ["LEATHER", "GOLD", "SILVER", "RED_PAINT", "BLUE_PAINT", "BLACK_PAINT", "ENCHANTED", "BONE"]
FEATHER_MATERIALS = ["WHITE_PAINT", "RED_PAINT", "BLUE_PAINT", "BLACK_PAINT", "GEM_GREEN", "GEM_YELLOW", "PURPLE_PAINT"]
BUCKLE_MATERIALS = ["SILVER", "GOLD", "BRONZE"]

PADDING = 4


@dataclass(frozen=True)
class HatBlueprint:
    """Archetype-level shape choices before palettes are resolved."""
    crown_shape: str
    crown_height: int
    base_width: int
    top_width: int
    brim_shape: str
    brim_extension: int
    materials: tuple[str, ...]


@dataclass(frozen=True)
class CrownSpec:
    shape: str
    height: int
    base_width: int
    top_width: int
    palette: Palette
    bend_direction: int = 1         # conical tips only
    bend_frequency: float = 0.0
    tip_bend: float = 0.0

    @property
    def bends(self) -> bool:
        return self.shape == "conical" and self.top_width == 1 and self.bend_frequency > 0


@dataclass(frozen=True)
class BrimSpec:
    shape: str
    extension: int
    thickness: int
    palette: Palette


@dataclass(frozen=True)
class HelmetFeatures:
    visor_type: str = "none"        # none | t_slit | horizontal_slit
    cheek_guard_type: str = "none"  # none | standard_cheeks | extended_cheeks
    palette: Palette | None = None

    @property
    def active(self) -> bool:
        return self.visor_type != "none" or self.cheek_guard_type != "none"


@dataclass(frozen=True)
class DecorationSpec:
    type: str = "none"
    palette: Palette | None = None
    symbol_shape: str | None = None
    feather_length: int = 0
    buckle_palette: Palette | None = None


@dataclass(frozen=True)
class HatParams:
    hat_type: str
    main_type: str
    crown: CrownSpec
    brim: BrimSpec
    features: HelmetFeatures
    decoration: DecorationSpec
    center_x: int
    crown_base_y: int


# --- Archetypes ---

def _wizard_hat(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.5, gh * 0.8)
    base = rng.randint(gw * 0.3, gw * 0.5)
    brim = rng.choice(("flat_circular", "downward_curved", "none"))
    extension = rng.randint(math.floor(base * 0.3), math.floor(base * 0.8)) if brim != "none" else 0
    return HatBlueprint("conical", height, base, 1, brim, extension, CLOTH_MATERIALS + ("ENCHANTED", "OBSIDIAN"))


def _top_hat(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.35, gh * 0.55)
    base = rng.randint(gw * 0.3, gw * 0.45)
    top = base - rng.randint(0, 2)
    extension = rng.randint(math.floor(base * 0.2), math.floor(base * 0.4))
    return HatBlueprint("cylindrical", height, base, top, "flat_circular", extension, ("BLACK_PAINT", "DARK_STEEL", "LEATHER"))


def _beanie(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.25, gh * 0.4)
    base = rng.randint(gw * 0.35, gw * 0.5)
    return HatBlueprint("soft_beanie", height, base, math.floor(base * 0.7), "none", 0, CLOTH_MATERIALS)


def _fedora(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.2, gh * 0.3)
    base = rng.randint(gw * 0.3, gw * 0.45)
    brim = rng.choice(ROUND_BRIMS)
    extension = rng.randint(math.floor(base * 0.5), math.floor(base * 1.2))
    return HatBlueprint("domed", height, base, base, brim, extension, ("LEATHER", "BLACK_PAINT", "PAPER", "WOOD"))


def _cap(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.18, gh * 0.28)
    base = rng.randint(gw * 0.3, gw * 0.4)
    extension = rng.randint(math.floor(base * 0.3), math.floor(base * 0.6))
    return HatBlueprint("domed", height, base, base, "front_cap_bill", extension, CLOTH_MATERIALS)


def _straw_hat(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.15, gh * 0.25)
    base = rng.randint(gw * 0.25, gw * 0.35)
    top = base + rng.randint(2, 5)
    extension = rng.randint(math.floor(base * 0.8), math.floor(base * 1.5))
    return HatBlueprint("flat_top_wide", height, base, top, "flat_circular", extension, ("STRAW",))


def _domed_helmet(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.3, gh * 0.5)
    base = rng.randint(gw * 0.4, gw * 0.6)
    return HatBlueprint("domed", height, base, base, "none", 0, METAL_MATERIALS)


def _conical_helmet(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.35, gh * 0.55)
    base = rng.randint(gw * 0.4, gw * 0.55)
    top = max(2, math.floor(base * rng.uniform(0.2, 0.4)))
    return HatBlueprint("conical", height, base, top, "none", 0, METAL_MATERIALS)


def _knight_helm(rng: ItemRandom, gw: int, gh: int) -> HatBlueprint:
    height = rng.randint(gh * 0.35, gh * 0.55)
    base = rng.randint(gw * 0.4, gw * 0.55)
    return HatBlueprint("conical", height, base, max(3, math.floor(base * 0.5)), "none", 0, METAL_MATERIALS)


HAT_BLUEPRINTS: dict[str, Callable[[ItemRandom, int, int], HatBlueprint]] = {
    "wizard_hat": _wizard_hat,
    "top_hat": _top_hat,
    "beanie": _beanie,
    "wide_brim_fedora": _fedora,
    "cap": _cap,
    "straw_hat": _straw_hat,
    "simple_helmet": _domed_helmet,
    "barbute_helm": _domed_helmet,
    "conical_helmet": _conical_helmet,
    "knight_helm_visor": _knight_helm,
}


# --- Crowns: drawn top row to base row, each returns its silhouette ---

def _tapered_width(crown: CrownSpec, p: float) -> int:
    if crown.shape == "flat_top_wide":
        return max(1, round_half_up(power_curve(p, crown.base_width, crown.top_width, 0.7)))
    return max(1, round_half_up(linear_taper(p, crown.base_width, crown.top_width)))


def _draw_tapered_crown(surface: PixelSurface, crown: CrownSpec, cx: int, top_y: int, height: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    for i in range(height):
        width = _tapered_width(crown, progress(i, height))
        x = cx - width // 2
        shade_span(surface, x, top_y + i, width, crown.palette)
        sil.record(top_y + i, x, width)
    # flat top
    top_x = cx - crown.top_width // 2
    shade_row(surface, top_x, top_y, crown.top_width, crown.palette, Tone.HIGHLIGHT)
    sil.record(top_y, top_x, crown.top_width)
    return sil


def _draw_conical_crown(surface: PixelSurface, crown: CrownSpec, cx: int, top_y: int, height: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    bends = crown.bends and height > 15
    for i in range(height):
        y = top_y + i
        p = progress(i, height)
        width = max(1, round_half_up(power_curve(p, crown.top_width, crown.base_width, 0.85)))
        bend = 0
        if bends:
            bend = round_half_up(math.sin(p * math.pi * crown.bend_frequency) * crown.base_width * 0.08 * crown.bend_direction)
            if p < 0.3:
                bend += round_half_up(math.sin(p / 0.3 * math.pi) * crown.base_width * crown.tip_bend * crown.bend_direction)
            if 0.1 < p < 0.9 and width > 2:
                width = max(1, width + (1 if rng.uniform(-1, 1) > 0 else -min(1, math.floor(width * 0.05))))
        x = cx - width // 2 + bend
        shade_span(surface, x, y, width, crown.palette, mirrored=bend < 0)
        sil.record(y, x, width)
    if crown.top_width > 1:
        top_x = cx - crown.top_width // 2
        shade_row(surface, top_x, top_y, crown.top_width, crown.palette, Tone.HIGHLIGHT)
        sil.record(top_y, top_x, crown.top_width)
    return sil


def _draw_domed_crown(surface: PixelSurface, crown: CrownSpec, cx: int, top_y: int, height: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    base = crown.base_width
    beanie = crown.shape == "soft_beanie"
    for i in range(height):
        y = top_y + i
        vp = i / (height - 1 or 1)
        width = math.floor(base * ellipse_factor((i - height) / height))
        if beanie:
            width += math.floor(math.sin(vp * math.pi * 0.8) * base * 0.1)
            if i < height * 0.3:
                width -= math.floor(base * 0.05 * (1 - i / (height * 0.3)))
            if i > height * 0.6:
                width -= math.floor(math.sin((vp - 0.6) * math.pi) * base * 0.08)
        width = max(1, width)
        x = cx - width // 2
        shade_span(surface, x, y, width, crown.palette)
        if i < height * 0.3 and width > 2:
            glint = math.floor(width * 0.3)
            shade_row(surface, cx - glint // 2, y, glint, crown.palette, Tone.HIGHLIGHT)
        sil.record(y, x, width)
    return sil


CROWN_DRAWERS: dict[str, Callable[[PixelSurface, CrownSpec, int, int, int, ItemRandom], Silhouette]] = {
    "cylindrical": _draw_tapered_crown,
    "flat_top_wide": _draw_tapered_crown,
    "conical": _draw_conical_crown,
    "domed": _draw_domed_crown,
    "soft_beanie": _draw_domed_crown,
}


# --- Brims ---

# Vertical offset of a round brim at normalized distance n from the crown
BRIM_CURVES: dict[str, Callable[[float, int], int]] = {
    "flat_circular": lambda n, ext: 0,
    "downward_curved": lambda n, ext: math.floor(n ** 1.5 * ext * 0.15),
    "upward_curved": lambda n, ext: -math.floor(n ** 1.5 * ext * 0.15),
}


def _draw_round_brim(surface: PixelSurface, brim: BrimSpec, cx: int, base_y: int, crown_width: int) -> Silhouette:
    points: list[tuple[int, int]] = []
    outer = (crown_width + brim.extension * 2) // 2
    inner = crown_width // 2
    curve = BRIM_CURVES[brim.shape]
    for t in range(brim.thickness):
        layer_tone = Tone.BASE
        if brim.thickness > 1:
            if t == 0:
                layer_tone = Tone.HIGHLIGHT
            elif t == brim.thickness - 1:
                layer_tone = Tone.SHADOW
        for x_rel in range(-outer, outer + 1):
            reach = abs(x_rel)
            if not inner <= reach < outer:
                continue
            n = (reach - inner) / (outer - inner or 1)
            y = base_y + t + curve(n, brim.extension)
            tone = layer_tone
            if reach >= outer - 1:
                if x_rel > inner:
                    tone = Tone.SHADOW
                elif x_rel < -inner:
                    tone = Tone.HIGHLIGHT
            draw_pixel(surface, cx + x_rel, y, tone_color(brim.palette, tone))
            points.append((cx + x_rel, y))
    if inner > 0:
        # seam under the crown
        shade_row(surface, cx - inner, base_y, inner * 2, brim.palette, Tone.SHADOW)
        points += [(cx - inner, base_y), (cx + inner - 1, base_y)]
    return Silhouette.from_points(points)


def _draw_cap_bill(surface: PixelSurface, brim: BrimSpec, cx: int, base_y: int, crown_width: int) -> Silhouette:
    sil = Silhouette()
    length = brim.extension + math.floor(crown_width * 0.2)
    bill_width = crown_width + 2
    for i in range(length):
        p = i / (length - 1 or 1)
        width = math.floor(bill_width * (1 - p * 0.2))
        x = cx - width // 2
        y = base_y + i + math.floor(math.sin(p * math.pi / 2) * 2.5)
        tone = Tone.BASE
        if i == 0:
            tone = Tone.HIGHLIGHT
        elif i == length - 1:
            tone = Tone.SHADOW
        shade_row(surface, x, y, width, brim.palette, tone)
        sil.record(y, x, width)
    return sil


BRIM_DRAWERS: dict[str, Callable[[PixelSurface, BrimSpec, int, int, int], Silhouette]] = {
    "flat_circular": _draw_round_brim,
    "downward_curved": _draw_round_brim,
    "upward_curved": _draw_round_brim,
    "front_cap_bill": _draw_cap_bill,
    "none": lambda *args: Silhouette(),
}


# --- Decorations: clipped to or anchored on the crown silhouette ---

def _draw_circle_badge(surface: PixelSurface, crown_sil: Silhouette, palette: Palette, cx: int, cy: int, size: int) -> list[tuple[int, int]]:
    points = []
    radius = size // 2
    color = tone_color(palette, Tone.BASE)
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if in_radius(dx, dy, radius) and crown_sil.contains(cx + dx, cy + dy):
                draw_pixel(surface, cx + dx, cy + dy, color)
                points.append((cx + dx, cy + dy))
    return points


def _draw_simple_star(surface: PixelSurface, crown_sil: Silhouette, palette: Palette, cx: int, cy: int, size: int) -> list[tuple[int, int]]:
    points = []
    arm = size // 2
    thickness = max(1, arm // 2)
    color = tone_color(palette, Tone.BASE)
    left = cx - thickness // 2
    for i in range(-arm, arm + 1):
        row = crown_sil.row_at(cy + i)
        if row is not None and left >= row.x_start and cx + math.ceil(thickness / 2) <= row.x_start + row.width:
            fill_block(surface, left, cy + i, thickness, 1, color)
            points += [(left, cy + i), (left + thickness - 1, cy + i)]
    bar_y = cy - thickness // 2
    for k in range(thickness):
        row = crown_sil.row_at(bar_y + k)
        if row is None:
            continue
        for i in range(-arm, arm + 1):
            if row.contains(cx + i):
                draw_pixel(surface, cx + i, bar_y + k, color)
                points.append((cx + i, bar_y + k))
    return points


SYMBOL_DRAWERS: dict[str, Callable[[PixelSurface, Silhouette, Palette, int, int, int], list[tuple[int, int]]]] = {
    "circle_badge": _draw_circle_badge,
    "simple_star": _draw_simple_star,
}


def _feather_width(p: float, max_width: int) -> int:
    if p < 0.15:
        return max(1, round_half_up(max_width * 0.2 * (p / 0.15)))
    if p < 0.5:
        return max(1, round_half_up(max_width * (0.2 + (p - 0.15) / 0.35 * 0.8)))
    if p > 0.8:
        return max(1, round_half_up(max_width * ((1 - p) / 0.2)))
    return max_width


class HatGenerator(ItemGenerator):
    family = "hat"
    archetypes = HAT_TYPES
    archetype_aliases = {"wizard": "wizard_hat", "fedora": "wide_brim_fedora", "knight_helm": "knight_helm_visor", "barbute": "barbute_helm"}

    def build_params(self, options: dict[str, Any], rng: ItemRandom) -> HatParams:
        main_type = str(options.get("main_type") or "").lower()
        if main_type and main_type not in MAIN_TYPES:
            logger.warning("Unknown hat main_type %r. Choosing from all hats and helmets.", options.get("main_type"))
            main_type = ""
        pool = {"hat": HAT_ONLY_TYPES, "helmet": HELMET_TYPES}.get(main_type, HAT_TYPES)
        hat_type = self.resolve_archetype(options.get("sub_type"), rng, pool)
        main_type = main_type or ("helmet" if hat_type in HELMET_TYPES else "hat")

        blueprint = HAT_BLUEPRINTS[hat_type](rng, self.width, self.height)
        main_key, main_palette = self.resolve_palette(options.get("material"), blueprint.materials, rng)
        brim_palette = self.palette(options["brim_material"]) if options.get("brim_material") else main_palette

        crown = CrownSpec(blueprint.crown_shape, blueprint.crown_height, blueprint.base_width, blueprint.top_width, main_palette)
        if crown.shape == "conical":
            crown = replace(
                crown,
                bend_direction=rng.sign(),
                bend_frequency=rng.uniform(1.2, 2.5),
                tip_bend=rng.uniform(0.05, 0.15),
            )

        brim_shape = blueprint.brim_shape
        requested_brim = options.get("brim_shape")
        if requested_brim is not None and brim_shape in ROUND_BRIMS:
            brim_shape = self.pick(options, "brim_shape", ROUND_BRIMS, rng)
        thickness = rng.randint(1, 3) if brim_shape != "none" and blueprint.brim_extension > 0 else 0
        brim = BrimSpec(brim_shape, blueprint.brim_extension, thickness, brim_palette)

        features = self._helmet_features(hat_type, main_palette, options, rng)
        decoration = self._decoration(hat_type, main_key, blueprint.crown_height, options, rng)

        visual_height = blueprint.crown_height
        if brim.shape == "front_cap_bill":
            visual_height += 2
        elif brim.shape != "none":
            visual_height += 5
        if decoration.type == "feather":
            visual_height += decoration.feather_length * 0.2
        hat_top = max(PADDING, math.floor((self.height - visual_height) / 2))

        return HatParams(
            hat_type=hat_type,
            main_type=main_type,
            crown=crown,
            brim=brim,
            features=features,
            decoration=decoration,
            center_x=self.width // 2,
            crown_base_y=hat_top + blueprint.crown_height,
        )

    def _helmet_features(self, hat_type: str, palette: Palette, options: dict[str, Any], rng: ItemRandom) -> HelmetFeatures:
        if hat_type == "barbute_helm":
            return HelmetFeatures("none", "extended_cheeks", palette)
        if hat_type == "knight_helm_visor":
            visor = self.pick(options, "visor_type", VISOR_TYPES, rng)
            cheeks = "standard_cheeks" if rng.chance(0.5) else "none"
            return HelmetFeatures(visor, cheeks, palette)
        return HelmetFeatures()

    def _decoration(self, hat_type: str, main_key: str, crown_height: int, options: dict[str, Any], rng: ItemRandom) -> DecorationSpec:
        if hat_type in HELMET_TYPES:
            return DecorationSpec()
        if options.get("decoration_type") is not None:
            kind = self.pick(options, "decoration_type", DECORATION_TYPES, rng)
        else:
            kind = rng.choice(DECORATION_TYPES) if rng.chance(0.6) else "none"
        if kind == "none":
            return DecorationSpec()
        choices = [m for m in DECORATION_MATERIALS if m != main_key]
        palette = self.resolve_palette(options.get("decoration_material"), choices, rng)[1]
        if kind == "symbol":
            return DecorationSpec(kind, palette, symbol_shape=rng.choice(SYMBOL_SHAPES))
        if kind == "feather":
            length = rng.randint(math.floor(crown_height * 0.6), crown_height + 5)
            return DecorationSpec(kind, self.resolve_palette(None, FEATHER_MATERIALS, rng)[1], feather_length=length)
        buckle = self.resolve_palette(None, BUCKLE_MATERIALS, rng)[1] if rng.chance(0.4) else None
        return DecorationSpec(kind, palette, buckle_palette=buckle)

    def item_type(self, params: HatParams) -> str:
        return params.main_type

    # --- Composer: crown -> brim -> helmet features -> decoration ---

    def compose(self, surface: PixelSurface, params: HatParams, rng: ItemRandom) -> Composition:
        comp = Composition()
        crown = params.crown
        cx = params.center_x
        base_y = params.crown_base_y
        top_y = max(PADDING, base_y - crown.height)
        height = base_y - top_y

        crown_sil = CROWN_DRAWERS[crown.shape](surface, crown, cx, top_y, height, rng) if height > 0 else Silhouette()
        comp.silhouettes["crown"] = crown_sil
        comp.anchors.update(center_x=cx, crown_top_y=top_y, crown_base_y=base_y, crown_height=height)

        brim = params.brim
        if brim.shape != "none" and brim.extension > 0:
            seam = crown_sil.row_at(base_y - 1)
            crown_width = seam.width if seam is not None else crown.base_width
            comp.silhouettes["brim"] = BRIM_DRAWERS[brim.shape](surface, brim, cx, base_y, crown_width)

        if params.features.active and crown_sil:
            self._draw_helmet_features(surface, params.features, crown_sil, cx, top_y, height, comp)

        if params.decoration.type != "none" and crown_sil:
            decoration_sil = self._draw_decoration(surface, params, crown_sil, base_y, height, rng)
            if decoration_sil:
                comp.silhouettes["decoration"] = decoration_sil
        return comp

    def _draw_helmet_features(
        self,
        surface: PixelSurface,
        features: HelmetFeatures,
        crown_sil: Silhouette,
        cx: int,
        top_y: int,
        height: int,
        comp: Composition,
    ) -> None:
        palette = features.palette
        if features.visor_type != "none":
            eye_y = top_y + math.floor(height * 0.40)
            comp.anchors["eye_level_y"] = eye_y
            row = crown_sil.nearest(eye_y)
            if row is not None:
                visor = self._draw_visor(surface, features.visor_type, palette, crown_sil, row, cx, eye_y, top_y + height)
                if visor:
                    comp.silhouettes["visor"] = visor

        if features.cheek_guard_type != "none":
            extended = features.cheek_guard_type == "extended_cheeks"
            guard_h = math.floor(height * (0.60 if extended else 0.45))
            start_y = top_y + math.floor(height * 0.25)
            base_w = math.floor((crown_sil.rows[0].width or cx) * 0.28)
            right_limit = self.width - PADDING
            for side, name in ((-1, "cheek_left"), (1, "cheek_right")):
                sil = Silhouette()
                for i in range(guard_h):
                    y = start_y + i
                    if y >= top_y + height - 1:
                        continue
                    row = crown_sil.row_at(y)
                    if row is None:
                        continue
                    p = i / (guard_h - 1 or 1)
                    width = max(2, math.floor(base_w * (1 - p * (0.2 if extended else 0.5))))
                    if side < 0:
                        x = row.x_start - width + math.floor(width * 0.15)
                    else:
                        x = row.x_start + row.width - math.floor(width * 0.15)
                    x = max(PADDING, min(x, right_limit - width))
                    width = min(width, right_limit - x)
                    if width <= 0:
                        continue
                    shade_span(surface, x, y, width, palette, mirrored=side > 0)
                    sil.record(y, x, width)
                comp.silhouettes[name] = sil

    def _draw_visor(
        self,
        surface: PixelSurface,
        visor_type: str,
        palette: Palette,
        crown_sil: Silhouette,
        row: SilhouetteRow,
        cx: int,
        eye_y: int,
        crown_bottom: int,
    ) -> Silhouette:
        sil = Silhouette()
        color = tone_color(palette, Tone.OUTLINE)
        row_end = row.x_start + row.width
        if visor_type == "t_slit":
            slit_w = max(3, math.floor(row.width * 0.45))
            slit_x = cx - slit_w // 2
            if slit_x >= row.x_start and slit_x + slit_w <= row_end:
                fill_block(surface, slit_x, eye_y, slit_w, 1, color)
                sil.record(eye_y, slit_x, slit_w)
            drop = max(3, math.floor((crown_bottom - crown_sil.top) * 0.30))
            drop_y = eye_y + 1
            if row.contains(cx) and drop_y + drop < crown_bottom:
                for k in range(drop):
                    if crown_sil.contains(cx, drop_y + k):
                        draw_pixel(surface, cx, drop_y + k, color)
                        sil.record(drop_y + k, cx, 1)
        else:
            slit_w = max(4, math.floor(row.width * 0.70))
            slit_x = cx - slit_w // 2
            if slit_x >= row.x_start and slit_x + slit_w <= row_end:
                fill_block(surface, slit_x, eye_y, slit_w, 2, color)
                sil.record(eye_y, slit_x, slit_w)
                sil.record(eye_y + 1, slit_x, slit_w)
        return sil

    def _draw_decoration(
        self,
        surface: PixelSurface,
        params: HatParams,
        crown_sil: Silhouette,
        base_y: int,
        height: int,
        rng: ItemRandom,
    ) -> Silhouette:
        decoration = params.decoration
        cx = params.center_x
        if decoration.type == "band":
            return self._draw_band(surface, decoration, crown_sil, base_y, height, rng)
        if decoration.type == "feather":
            return self._draw_feather(surface, decoration, crown_sil, cx, base_y, height, rng)
        size = max(4, math.floor(params.crown.base_width * 0.3))
        points = SYMBOL_DRAWERS[decoration.symbol_shape](surface, crown_sil, decoration.palette, cx, base_y - height // 2, size)
        return Silhouette.from_points(points)

    def _draw_band(
        self,
        surface: PixelSurface,
        decoration: DecorationSpec,
        crown_sil: Silhouette,
        base_y: int,
        height: int,
        rng: ItemRandom,
    ) -> Silhouette:
        sil = Silhouette()
        band_h = rng.randint(2, 4)
        band_y = max(base_y - height + 1, base_y - band_h - math.floor(height * 0.15))
        right_limit = self.width - PADDING
        for k in range(band_h):
            y = band_y + k
            row = crown_sil.nearest(y)
            if row is None:
                continue
            width = max(1, row.width + rng.randint(-1, 1))
            x = row.x_start - (width - row.width) // 2
            x = max(PADDING, min(x, right_limit - width))
            width = min(width, right_limit - x)
            if width <= 0:
                continue
            tone = Tone.HIGHLIGHT if k == 0 else Tone.SHADOW if k == band_h - 1 else Tone.BASE
            shade_row(surface, x, y, width, decoration.palette, tone)
            sil.record(y, x, width)

        row = crown_sil.nearest(band_y + band_h - 1)
        if decoration.buckle_palette is not None and row is not None and row.width > 4:
            buckle_x = row.x_start + math.floor(row.width * 0.1)
            fill_block(surface, buckle_x, band_y, band_h, band_h, tone_color(decoration.buckle_palette, Tone.BASE))
        return sil

    def _draw_feather(
        self,
        surface: PixelSurface,
        decoration: DecorationSpec,
        crown_sil: Silhouette,
        cx: int,
        base_y: int,
        height: int,
        rng: ItemRandom,
    ) -> Silhouette:
        points: list[tuple[int, int]] = []
        side = rng.sign()
        attach = crown_sil.nearest(base_y - height + math.floor((height - 1) * 0.7))
        half = attach.width // 2 if attach is not None else 1
        root_x = cx + side * (half - 1) + side * rng.randint(0, 1)
        root_y = base_y - math.floor(height * 0.65) + rng.randint(-2, 2)
        length = decoration.feather_length
        max_width = max(2, math.floor(length / 3.5))
        lean = rng.uniform(math.pi / 2.8, math.pi / 2.1)
        palette = decoration.palette
        for i in range(length):
            p = i / (length - 1 or 1)
            angle = lean - p ** 1.5 * math.pi / 5
            x = root_x + side * round_half_up(math.cos(angle) * i * 0.7)
            y = root_y - round_half_up(math.sin(angle) * i * 0.7)
            width = _feather_width(p, max_width)
            left = x - width // 2
            shade_row(surface, left, y, width, palette, Tone.SHADOW if p < 0.3 else Tone.BASE)
            if p > 0.6 and width > 1:
                draw_pixel(surface, x + side * (width // 2), y, tone_color(palette, Tone.HIGHLIGHT))
            points += [(left, y), (left + width - 1, y)]
        return Silhouette.from_points(points)

    # --- Description ---

    def item_name(self, params: HatParams) -> str:
        name = f"{params.crown.palette.name} {humanize(params.hat_type).title()}"
        features = params.features
        if features.visor_type != "none":
            name += f" with {features.visor_type.replace('_', ' ', 1)}"
        if features.cheek_guard_type != "none":
            name += f" ({features.cheek_guard_type.replace('_', ' ', 1)})"
        decoration = params.decoration
        if decoration.type != "none" and decoration.palette is not None:
            name += f" with {decoration.palette.name} {decoration.type}"
            if decoration.symbol_shape:
                name += f" ({decoration.symbol_shape.replace('_', ' ', 1)})"
        return name

    def describe(self, params: HatParams, composition: Composition) -> dict[str, Any]:
        crown, brim, features, decoration = params.crown, params.brim, params.features, params.decoration
        return {
            "hat_type": params.hat_type,
            "sub_type": params.hat_type,
            "main_type": params.main_type,
            "crown_shape": crown.shape,
            "brim_shape": brim.shape,
            "main_material": crown.palette.key,
            "brim_material": brim.palette.key,
            "visor_type": features.visor_type,
            "cheek_guard_type": features.cheek_guard_type,
            "helmet_feature_material": features.palette.key if features.palette else None,
            "decoration_type": decoration.type,
            "decoration_material": decoration.palette.key if decoration.palette else None,
            "symbol_shape": decoration.symbol_shape,
            "band_buckle_material": decoration.buckle_palette.key if decoration.buckle_palette else None,
            "dimensions": {
                "crown_height": crown.height,
                "actual_crown_height": composition.anchors.get("crown_height", 0),
                "crown_base_width": crown.base_width,
                "crown_top_width": crown.top_width,
                "brim_width_extension": brim.extension,
                "brim_thickness": brim.thickness,
                "feather_length": decoration.feather_length,
            },
            "layout": dict(composition.anchors),
            "colors": {
                "main": crown.palette.to_dict(),
                "brim": brim.palette.to_dict(),
                "decoration": decoration.palette.to_dict() if decoration.palette else None,
                "helmet_features": features.palette.to_dict() if features.palette else None,
            },
        }
