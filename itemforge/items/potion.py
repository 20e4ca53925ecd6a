"""
Potions: glass flask (outer and interior silhouettes), optional paper label, liquid
filled row by row through the interior and clipped around the label, then the stopper.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Callable

from ..geometry import Silhouette, ellipse_factor, in_radius
from ..graphics import (
    PixelSurface,
    Tone,
    draw_pixel,
    fill_block,
    shade_block,
    shade_row,
    shade_span,
    tone_color,
)
from ..palettes import Palette
from ..random_utils import ItemRandom
from .base import Composition, ItemGenerator, humanize

logger = logging.getLogger(__name__)

FLASK_SHAPES = ("round_flask", "flat_bottom_cylinder", "conical_flask", "bulbous_pot", "tall_slender", "test_tube")
STOPPER_TYPES = ("cork", "glass_stopper", "wax_seal", "metal_cap", "gem_stopper", "cloth_tied_top")
ROUNDED_BASES = ("rounded", "bulb_bottom", "test_tube_rounded")
UNLABELLED_SHAPES = ("round_flask", "test_tube", "bulbous_pot")

GLASS_MATERIAL = "GLASS"
LABEL_MATERIALS = ["PAPER", "PARCHMENT", "LEATHER"]
LABEL_INK_MATERIAL = "BLACK_PAINT"
TIE_MATERIALS = ["LEATHER", "SILVER", "GOLD"]
GEM_MATERIALS = ["GEM_RED", "GEM_BLUE", "GEM_PURPLE", "GEM_WHITE", "GEM_YELLOW"]

STOPPER_MATERIALS: dict[str, list[str]] = {
    "cork": ["WOOD"],
    "glass_stopper": [GLASS_MATERIAL],
    "wax_seal": ["GEM_RED", "BLACK_PAINT", "DARK_STEEL", "BLUE_PAINT", "PURPLE_PAINT"],
    "metal_cap": ["IRON", "BRONZE", "SILVER", "DARK_STEEL", "GOLD"],
    "gem_stopper": ["GOLD", "SILVER", "OBSIDIAN", "DARK_STEEL"],
    "cloth_tied_top": ["LEATHER", "WHITE_PAINT", "RED_PAINT", "BLUE_PAINT", "GREEN_PAINT"],
}

# slug -> (display name, palette key)
LIQUIDS: dict[str, tuple[str, str]] = {
    "healing_red": ("Healing Red", "GEM_RED"),
    "mana_blue": ("Mana Blue", "GEM_BLUE"),
    "stamina_green": ("Stamina Green", "GEM_GREEN"),
    "mystic_purple": ("Mystic Purple", "GEM_PURPLE"),
    "sun_yellow": ("Sun Yellow", "GEM_YELLOW"),
    "shadow_black": ("Shadow Black", "OBSIDIAN"),
    "pure_white": ("Pure White", "GEM_WHITE"),
    "toxic_slime": ("Toxic Slime", "TOXIC_SLIME"),
    "fiery_orange": ("Fiery Orange", "GEM_ORANGE"),
    "ethereal_teal": ("Ethereal Teal", "GEM_CYAN"),
    "murky_brown": ("Murky Brown", "MURKY_BROWN"),
}

PADDING = 4

# Wax seal radii grow past the neck opening by these ranges
WAX_SPREAD_X = (2, 5)
WAX_SPREAD_Y = (1, 4)


@dataclass(frozen=True)
class FlaskSpec:
    shape: str
    body_width: int
    body_height: int
    neck_width: int
    neck_height: int
    base_style: str                 # flat | rounded | bulb_bottom | test_tube_rounded
    palette: Palette

    @property
    def neck_inner_width(self) -> int:
        return max(1, self.neck_width - 2)

    @property
    def base_curve_height(self) -> int:
        if self.base_style not in ROUNDED_BASES:
            return 0
        if self.shape == "test_tube":
            return self.body_width // 2 + 1
        return min(5, math.floor(self.body_height * 0.2))

    @property
    def base_drop(self) -> int:
        """Rows the rounded base adds below the body."""
        return max(0, self.base_curve_height - 1)


@dataclass(frozen=True)
class LiquidSpec:
    name: str
    palette: Palette
    fill_level: float
    has_bubbles: bool
    second_name: str | None = None
    second_palette: Palette | None = None

    @property
    def mix_style(self) -> str:
        return "layered" if self.second_palette is not None else "single"


@dataclass(frozen=True)
class StopperSpec:
    type: str
    palette: Palette
    height: int
    gem_palette: Palette | None = None
    tie_palette: Palette | None = None


@dataclass(frozen=True)
class PotionParams:
    flask: FlaskSpec
    liquid: LiquidSpec
    stopper: StopperSpec
    label_palette: Palette | None
    ink_palette: Palette
    center_x: int
    flask_bottom_y: int


# --- Flask dimensions: (body width, body height, neck width, neck height, base style) ---

def _tall_slender(rng: ItemRandom, gh: int) -> tuple[int, int, int, int, str]:
    bw = rng.randint(10, 16)
    bh = rng.randint(gh * 0.55, gh * 0.75)
    nw = max(3, math.floor(bw * rng.uniform(0.5, 0.8)))
    return bw, bh, nw, rng.randint(math.floor(bh * 0.12), math.floor(bh * 0.22)), "flat"


def _round_flask(rng: ItemRandom, gh: int) -> tuple[int, int, int, int, str]:
    bw = rng.randint(18, 30)
    bh = math.floor(bw * rng.uniform(0.85, 1.15))
    nw = max(4, math.floor(bw * rng.uniform(0.25, 0.4)))
    return bw, bh, nw, rng.randint(math.floor(bh * 0.18), math.floor(bh * 0.3)), "rounded"


def _conical_flask(rng: ItemRandom, gh: int) -> tuple[int, int, int, int, str]:
    bw = rng.randint(20, 32)
    bh = rng.randint(gh * 0.45, gh * 0.65)
    nw = max(4, math.floor(bw * rng.uniform(0.2, 0.3)))
    return bw, bh, nw, rng.randint(math.floor(bh * 0.22), math.floor(bh * 0.32)), "flat"


def _test_tube(rng: ItemRandom, gh: int) -> tuple[int, int, int, int, str]:
    bw = rng.randint(8, 14)
    bh = rng.randint(gh * 0.6, gh * 0.8)
    return bw, bh, bw, rng.randint(2, 4), "test_tube_rounded"


def _pot_or_cylinder(bulbous: bool) -> Callable[[ItemRandom, int], tuple[int, int, int, int, str]]:
    def dimensions(rng: ItemRandom, gh: int) -> tuple[int, int, int, int, str]:
        bw = rng.randint(16, 26)
        bh = rng.randint(gh * 0.35, gh * 0.6)
        nw = max(4, math.floor(bw * rng.uniform(0.3, 0.55)))
        nh = rng.randint(math.floor(bh * 0.25), math.floor(bh * 0.45))
        return bw, bh, nw, nh, "bulb_bottom" if bulbous else "flat"
    return dimensions


FLASK_DIMENSIONS: dict[str, Callable[[ItemRandom, int], tuple[int, int, int, int, str]]] = {
    "tall_slender": _tall_slender,
    "round_flask": _round_flask,
    "conical_flask": _conical_flask,
    "test_tube": _test_tube,
    "flat_bottom_cylinder": _pot_or_cylinder(False),
    "bulbous_pot": _pot_or_cylinder(True),
}


# --- Body profiles: row width at y_rel rows above the flask bottom ---

def _round_body(flask: FlaskSpec, y_rel: int) -> int:
    half = flask.body_height / 2
    t = (y_rel - half) / half
    return max(flask.neck_width, math.floor(flask.body_width * math.sqrt(max(0.0, 1 - t * t * 0.95))))


def _conical_body(flask: FlaskSpec, y_rel: int) -> int:
    p = y_rel / (flask.body_height - 1 or 1)
    return max(flask.neck_width, math.floor(flask.neck_width + (flask.body_width - flask.neck_width) * (1 - p)))


def _bulbous_body(flask: FlaskSpec, y_rel: int) -> int:
    if y_rel < flask.body_height * 0.4:
        return flask.body_width
    t = (y_rel - flask.body_height * 0.4) / (flask.body_height * 0.6 or 1)
    return max(flask.neck_width, math.floor(flask.neck_width + (flask.body_width - flask.neck_width) * (1 - t * t)))


BODY_PROFILES: dict[str, Callable[[FlaskSpec, int], int]] = {
    "round_flask": _round_body,
    "conical_flask": _conical_body,
    "bulbous_pot": _bulbous_body,
}


def _base_curve_width(flask: FlaskSpec, base_width: int, p: float) -> int:
    if flask.shape == "test_tube":
        return max(1, math.floor(base_width * math.cos(p * math.pi / 2)))
    return max(1, math.floor(base_width * (1 - p * p * 0.7)))


# --- Stoppers: drawn at the neck top, each returns its silhouette ---

def _draw_cork(surface: PixelSurface, stopper: StopperSpec, flask: FlaskSpec, cx: int, neck_top: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    inner = flask.neck_inner_width
    width = max(1, inner + rng.randint(0, 1))
    visible = math.floor(stopper.height * 0.6)
    top = neck_top - visible
    for k in range(stopper.height):
        row_w = width if k < visible else inner
        x = cx - row_w // 2
        tone = Tone.BASE
        if k == 0:
            tone = Tone.HIGHLIGHT
        elif 1 < k < stopper.height - 1 and k % 2 == 0:
            tone = Tone.SHADOW
        shade_row(surface, x, top + k, row_w, stopper.palette, tone)
        sil.record(top + k, x, row_w)
    return sil


def _draw_handled_stopper(surface: PixelSurface, stopper: StopperSpec, flask: FlaskSpec, cx: int, neck_top: int, rng: ItemRandom) -> Silhouette:
    points: list[tuple[int, int]] = []
    inner = flask.neck_inner_width
    gem = stopper.type == "gem_stopper" and stopper.gem_palette is not None
    handle_h = math.floor(stopper.height * (0.4 if stopper.type == "gem_stopper" else 0.65))
    plug_h = stopper.height - handle_h
    handle_w = max(2, inner + rng.randint(3, 6))
    plug_w = max(1, inner)
    palette = stopper.palette

    if plug_h > 0:
        fill_block(surface, cx - plug_w // 2, neck_top, plug_w, plug_h, tone_color(palette, Tone.BASE))
        points += [(cx - plug_w // 2, neck_top), (cx - plug_w // 2 + plug_w - 1, neck_top + plug_h - 1)]
    if handle_h <= 0:
        return Silhouette.from_points(points)

    top = neck_top - handle_h
    x = cx - handle_w // 2
    points += [(x, top), (x + handle_w - 1, top)]
    if gem:
        collar_h = handle_h // 2
        fill_block(surface, x, top, handle_w, collar_h, tone_color(palette, Tone.BASE))
        size = min(handle_w - 2, handle_h - collar_h - 1)
        if size > 0:
            radius = size // 2
            gem_color = tone_color(stopper.gem_palette, Tone.BASE)
            for dy in range(-radius, radius + 1):
                for dx in range(-radius, radius + 1):
                    if in_radius(dx, dy, radius):
                        draw_pixel(surface, cx + dx, top + collar_h + dy, gem_color)
                        points.append((cx + dx, top + collar_h + dy))
            draw_pixel(surface, cx, top + collar_h - radius + 1, tone_color(stopper.gem_palette, Tone.HIGHLIGHT))
    else:
        fill_block(surface, x, top, handle_w, handle_h, tone_color(palette, Tone.BASE))
        shade_row(surface, x, top, handle_w, palette, Tone.HIGHLIGHT)
        if handle_h > 1:
            shade_row(surface, x, top + handle_h - 1, handle_w, palette, Tone.SHADOW)
        points.append((x, top + handle_h - 1))
    return Silhouette.from_points(points)


def _draw_wax_seal(surface: PixelSurface, stopper: StopperSpec, flask: FlaskSpec, cx: int, neck_top: int, rng: ItemRandom) -> Silhouette:
    points: list[tuple[int, int]] = []
    inner = flask.neck_inner_width
    rx = inner // 2 + rng.randint(*WAX_SPREAD_X)
    ry = inner // 2 + rng.randint(*WAX_SPREAD_Y)
    cy = neck_top - math.floor(ry * 0.2)
    thickness = max(2, math.floor(ry * 0.5))
    half = thickness // 2
    for layer in range(-half, half + 1):
        shrink = 1 - abs(layer) / (thickness / 2) * 0.3
        layer_rx, layer_ry = rx * shrink, ry * shrink
        tone = Tone.BASE
        if layer < -thickness * 0.1:
            tone = Tone.HIGHLIGHT
        elif layer > thickness * 0.1:
            tone = Tone.SHADOW
        color = tone_color(stopper.palette, tone)
        reach = math.floor(layer_rx)
        for dx in range(-reach, reach + 1):
            extent = math.floor(layer_ry * ellipse_factor(dx / (layer_rx or 1)))
            for dy in range(-extent, extent + 1):
                if rng.random() > 0.15:
                    draw_pixel(surface, cx + dx, cy + dy + layer, color)
                    points.append((cx + dx, cy + dy + layer))
    if rng.chance(0.65):
        stamp = max(1, math.floor(min(rx, ry) * 0.4))
        fill_block(surface, cx - stamp // 2, cy - stamp // 2, stamp, stamp, tone_color(stopper.palette, Tone.SHADOW))
    return Silhouette.from_points(points)


def _draw_metal_cap(surface: PixelSurface, stopper: StopperSpec, flask: FlaskSpec, cx: int, neck_top: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    height = max(2, math.floor(flask.neck_height * 0.6) + 1)
    width = max(2, flask.neck_inner_width + 2)
    x = cx - width // 2
    top = neck_top - height
    shade_block(surface, x, top, width, height, stopper.palette)
    for k in range(height):
        sil.record(top + k, x, width)
    return sil


def _draw_cloth_top(surface: PixelSurface, stopper: StopperSpec, flask: FlaskSpec, cx: int, neck_top: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    inner = flask.neck_inner_width
    cloth_h = max(3, flask.neck_height + 2)
    visible = math.floor(cloth_h * 0.6)
    top = neck_top - visible
    width = max(2, inner + 4)
    for k in range(visible):
        row_w = max(1, math.floor(width * (1 - (k / (cloth_h * 0.6 - 1 or 1)) ** 1.5) * rng.uniform(0.8, 1.1)))
        x = cx - row_w // 2
        shade_row(surface, x, top + k, row_w, stopper.palette, Tone.HIGHLIGHT if k < 2 else Tone.BASE)
        sil.record(top + k, x, row_w)
    if stopper.tie_palette is not None:
        tie_y = neck_top - rng.randint(0, 1)
        tie_x = cx - inner // 2 - 1
        fill_block(surface, tie_x, tie_y, inner + 2, 2, tone_color(stopper.tie_palette, Tone.BASE))
        fill_block(surface, tie_x, tie_y, 1, 2, tone_color(stopper.tie_palette, Tone.HIGHLIGHT))
        for k in range(2):
            row = sil.row_at(tie_y + k)
            if row is None or row.width < inner + 2:
                sil.record(tie_y + k, tie_x, inner + 2)
    return sil


STOPPER_DRAWERS: dict[str, Callable[[PixelSurface, StopperSpec, FlaskSpec, int, int, ItemRandom], Silhouette]] = {
    "cork": _draw_cork,
    "glass_stopper": _draw_handled_stopper,
    "gem_stopper": _draw_handled_stopper,
    "wax_seal": _draw_wax_seal,
    "metal_cap": _draw_metal_cap,
    "cloth_tied_top": _draw_cloth_top,
}


def stopper_reach(stopper: StopperSpec, flask: FlaskSpec) -> int:
    """Rows a stopper can rise above the neck top."""
    if stopper.type == "wax_seal":
        ry = flask.neck_inner_width // 2 + WAX_SPREAD_Y[1]
        return math.floor(ry * 0.2) + ry + max(2, math.floor(ry * 0.5)) // 2
    if stopper.type == "metal_cap":
        return max(2, math.floor(flask.neck_height * 0.6) + 1)
    if stopper.type == "cloth_tied_top":
        return math.floor(max(3, flask.neck_height + 2) * 0.6)
    if stopper.type == "gem_stopper":
        return math.floor(stopper.height * 0.4)
    if stopper.type == "glass_stopper":
        return math.floor(stopper.height * 0.65)
    return math.floor(stopper.height * 0.6)


def _liquid_key(requested: Any) -> str:
    return str(requested).strip().lower().replace(" ", "_").replace("-", "_")


class PotionGenerator(ItemGenerator):
    family = "potion"
    archetypes = FLASK_SHAPES
    archetype_aliases = {"cylinder": "flat_bottom_cylinder", "conical": "conical_flask", "round": "round_flask", "pot": "bulbous_pot"}

    def build_params(self, options: dict[str, Any], rng: ItemRandom) -> PotionParams:
        shape = self.resolve_archetype(options.get("sub_type"), rng)
        glass = self.palette(GLASS_MATERIAL)
        bw, bh, nw, nh, base_style = FLASK_DIMENSIONS[shape](rng, self.height)
        flask = FlaskSpec(shape, bw, bh, nw, nh, base_style, glass)

        liquid = self._liquid(options, rng)

        if options.get("stopper_type") is not None:
            stopper_type = self.pick(options, "stopper_type", STOPPER_TYPES, rng)
        else:
            # test tubes take a cork one time in three
            weights = [2.5 if shape == "test_tube" and t == "cork" else 1.0 for t in STOPPER_TYPES]
            stopper_type = rng.weighted_choice(STOPPER_TYPES, weights)
        stopper_palette = self.resolve_palette(options.get("material"), STOPPER_MATERIALS[stopper_type], rng)[1]
        stopper = StopperSpec(
            type=stopper_type,
            palette=stopper_palette,
            height=rng.randint(5, 9),
            gem_palette=self.resolve_palette(None, GEM_MATERIALS, rng)[1] if stopper_type == "gem_stopper" else None,
            tie_palette=self.resolve_palette(None, TIE_MATERIALS, rng)[1] if stopper_type == "cloth_tied_top" else None,
        )

        label_palette = None
        if rng.chance(0.45) and shape not in UNLABELLED_SHAPES:
            label_palette = self.resolve_palette(options.get("label_material"), LABEL_MATERIALS, rng)[1]

        reach = stopper_reach(stopper, flask)
        excess = bh + nh + reach + flask.base_drop - (self.height - PADDING * 2)
        if excess > 0:
            flask = replace(flask, body_height=max(1, bh - excess))
        # stopper top to rounded base tip, centred between the paddings
        total = flask.body_height + nh + reach
        bottom = PADDING + math.floor((self.height - PADDING * 2 - total - flask.base_drop) / 2) + total

        return PotionParams(
            flask=flask,
            liquid=liquid,
            stopper=stopper,
            label_palette=label_palette,
            ink_palette=self.palette(LABEL_INK_MATERIAL),
            center_x=self.width // 2,
            flask_bottom_y=bottom,
        )

    def _liquid(self, options: dict[str, Any], rng: ItemRandom) -> LiquidSpec:
        slugs = list(LIQUIDS)
        requested = options.get("liquid")
        slug = _liquid_key(requested) if requested is not None else None
        if slug not in LIQUIDS:
            choice = rng.choice(slugs)
            if requested is not None:
                logger.warning("Unknown liquid %r. Choosing randomly: %s", requested, choice)
            slug = choice
        name, key = LIQUIDS[slug]
        second_name = second_palette = None
        if rng.chance(0.25):
            second = rng.choice([s for s in slugs if s != slug])
            second_name, second_key = LIQUIDS[second]
            second_palette = self.palette(second_key)
        return LiquidSpec(
            name=name,
            palette=self.palette(key),
            fill_level=rng.uniform(0.4, 0.9),
            has_bubbles=rng.chance(0.3),
            second_name=second_name,
            second_palette=second_palette,
        )

    # --- Composer: flask -> label -> liquid -> stopper ---

    def compose(self, surface: PixelSurface, params: PotionParams, rng: ItemRandom) -> Composition:
        comp = Composition()
        flask = params.flask
        cx = params.center_x
        bottom = params.flask_bottom_y
        neck_base_y = bottom - flask.body_height
        neck_top_y = neck_base_y - flask.neck_height

        outer, interior, body_base_y = self._draw_flask(surface, flask, cx, bottom)
        comp.silhouettes["flask"] = outer
        comp.silhouettes["flask_interior"] = interior
        comp.anchors.update(
            center_x=cx,
            flask_bottom_y=bottom,
            body_base_y=body_base_y,
            neck_base_y=neck_base_y,
            neck_top_y=neck_top_y,
        )

        label = Silhouette()
        if params.label_palette is not None:
            label = self._draw_label(surface, params, interior, cx, neck_base_y, bottom, rng)
            if label:
                comp.silhouettes["label"] = label
                comp.anchors["label_y"] = label.top

        liquid, liquid_top_y = self._draw_liquid(surface, params.liquid, interior, label, neck_top_y, body_base_y, rng)
        comp.silhouettes["liquid"] = liquid
        comp.anchors["liquid_top_y"] = liquid_top_y

        stopper = params.stopper
        comp.silhouettes["stopper"] = STOPPER_DRAWERS[stopper.type](surface, stopper, flask, cx, neck_top_y, rng)
        return comp

    def _draw_flask(self, surface: PixelSurface, flask: FlaskSpec, cx: int, bottom: int) -> tuple[Silhouette, Silhouette, int]:
        outer = Silhouette()
        interior = Silhouette()
        profile = BODY_PROFILES.get(flask.shape, lambda f, y_rel: f.body_width)
        for y_rel in range(flask.body_height):
            y = bottom - 1 - y_rel
            width = max(1, profile(flask, y_rel))
            x = cx - width // 2
            shade_span(surface, x, y, width, flask.palette)
            outer.record(y, x, width)
            interior.record(y, x + 1, width - 2)

        neck_base_y = bottom - flask.body_height
        neck_x = cx - flask.neck_width // 2
        for y_rel in range(flask.neck_height):
            y = neck_base_y - 1 - y_rel
            shade_span(surface, neck_x, y, flask.neck_width, flask.palette)
            outer.record(y, neck_x, flask.neck_width)
            interior.record(y, neck_x + 1, flask.neck_width - 2)

        body_base_y = bottom
        if flask.base_style in ROUNDED_BASES:
            curve_h = flask.base_curve_height
            bottom_row = interior.row_at(bottom - 1)
            if flask.shape == "test_tube":
                base_width = flask.body_width
            else:
                base_width = bottom_row.width if bottom_row is not None else flask.neck_width
            curve = Silhouette()
            for k in range(curve_h):
                y = bottom - 1 + k
                width = _base_curve_width(flask, base_width, k / (curve_h - 1 or 1))
                x = cx - width // 2
                if k == curve_h - 1 or width <= 2:
                    shade_row(surface, x, y, width, flask.palette, Tone.SHADOW)
                else:
                    shade_span(surface, x, y, width, flask.palette)
                curve.record(y, x, width)
                if interior.row_at(y) is not None or width > 2:
                    interior.record(y, x + 1, width - 2)
            outer = outer.merge(curve)
            body_base_y += curve_h - 1
        return outer, interior, body_base_y

    def _draw_label(
        self,
        surface: PixelSurface,
        params: PotionParams,
        interior: Silhouette,
        cx: int,
        neck_base_y: int,
        bottom: int,
        rng: ItemRandom,
    ) -> Silhouette:
        sil = Silhouette()
        body_rows = interior.between(neck_base_y, bottom - 1).rows
        if len(body_rows) < 5:
            return sil
        # widest row in the middle half of the body
        best = Silhouette(body_rows[math.floor(len(body_rows) * 0.25):math.floor(len(body_rows) * 0.75)]).widest()
        if best is None or best.width < 5:
            return sil

        body_h = params.flask.body_height
        label_h = max(4, min(12, math.floor(body_h * rng.uniform(0.2, 0.35))))
        label_y = best.y - label_h // 2 + math.floor((rng.random() - 0.5) * body_h * 0.1)
        label_y = max(neck_base_y + 1, min(label_y, bottom - label_h - 1))
        if label_y + label_h >= bottom - 1:
            return sil
        # narrowest interior row the label spans
        spanned = [row.width for row in interior.between(label_y, label_y + label_h - 1)]
        room = min([best.width] + spanned)
        label_w = math.floor(room * rng.uniform(0.6, 0.9))
        if label_w < 3 or label_h < 3:
            return sil

        palette = params.label_palette
        label_x = cx - label_w // 2
        fill_block(surface, label_x, label_y, label_w, label_h, tone_color(palette, Tone.BASE))
        shadow = tone_color(palette, Tone.SHADOW)
        fill_block(surface, label_x, label_y, label_w, 1, shadow)
        fill_block(surface, label_x, label_y + label_h - 1, label_w, 1, shadow)
        fill_block(surface, label_x, label_y + 1, 1, label_h - 2, shadow)
        fill_block(surface, label_x + label_w - 1, label_y + 1, 1, label_h - 2, shadow)
        if label_w > 4 and label_h > 3:
            ink = tone_color(params.ink_palette, Tone.SHADOW)
            for line_y in range(label_y + 1, label_y + label_h - 1, 2):
                indent = rng.randint(0, 1)
                fill_block(surface, label_x + 1 + indent, line_y, label_w - 2 - indent, 1, ink)
        for k in range(label_h):
            sil.record(label_y + k, label_x, label_w)
        return sil

    def _draw_liquid(
        self,
        surface: PixelSurface,
        liquid: LiquidSpec,
        interior: Silhouette,
        label: Silhouette,
        neck_top_y: int,
        body_base_y: int,
        rng: ItemRandom,
    ) -> tuple[Silhouette, int]:
        sil = Silhouette()
        max_y = body_base_y - 1
        column = max(0, max_y - neck_top_y)
        top_y = max_y - math.floor(column * liquid.fill_level)
        layered = liquid.second_palette is not None
        interface_y = max_y - math.floor(column * liquid.fill_level * 0.5)

        for row in interior.between(top_y, max_y):
            if row.width <= 0:
                continue
            y = row.y
            palette = liquid.second_palette if layered and y < interface_y else liquid.palette
            tones = [Tone.BASE] * row.width
            if not layered:
                if y == top_y and row.width > 1 and liquid.fill_level < 0.98:
                    tones = [Tone.HIGHLIGHT] * row.width
                elif row.width > 2 and top_y < y < max_y - 1:
                    tones[0], tones[-1] = Tone.HIGHLIGHT, Tone.SHADOW
            elif row.width > 1 and top_y < interface_y and y in (top_y, interface_y):
                # meniscus on the top layer, interface line on the bottom one
                tones = [Tone.HIGHLIGHT] * row.width
            if liquid.has_bubbles and rng.chance(0.15) and row.width > 2 and top_y + 2 < y < max_y - 2:
                tones[1 + rng.randint(0, row.width - 3)] = Tone.HIGHLIGHT

            for offset, tone in enumerate(tones):
                x = row.x_start + offset
                if not label.contains(x, y):
                    draw_pixel(surface, x, y, tone_color(palette, tone))
            sil.record(y, row.x_start, row.width)
        return sil, top_y

    # --- Description ---

    def item_name(self, params: PotionParams) -> str:
        liquid = params.liquid
        name = liquid.name
        if liquid.second_name:
            name += f" & {liquid.second_name}"
        name += f" Potion in a {params.flask.shape.replace('_', ' ', 1)}"
        name += f" with {humanize(params.stopper.type)}"
        if params.label_palette is not None:
            name += " (Labelled)"
        return name

    def describe(self, params: PotionParams, composition: Composition) -> dict[str, Any]:
        flask, liquid, stopper = params.flask, params.liquid, params.stopper

        def colors(palette: Palette | None) -> dict[str, Any] | None:
            return palette.to_dict() if palette is not None else None

        return {
            "flask_shape": flask.shape,
            "base_style": flask.base_style,
            "glass_material": flask.palette.key,
            "liquid_color_name": liquid.name,
            "liquid_color_name2": liquid.second_name,
            "liquid_mix_style": liquid.mix_style if liquid.second_palette is not None else None,
            "liquid_fill_level": liquid.fill_level,
            "has_bubbles": liquid.has_bubbles,
            "stopper_type": stopper.type,
            "stopper_material": stopper.palette.key,
            "stopper_gem_material": stopper.gem_palette.key if stopper.gem_palette else None,
            "has_label": params.label_palette is not None,
            "label_drawn": "label" in composition.silhouettes,
            "label_material": params.label_palette.key if params.label_palette else None,
            "dimensions": {
                "body_width": flask.body_width,
                "body_height": flask.body_height,
                "neck_width": flask.neck_width,
                "neck_height": flask.neck_height,
                "stopper_height": stopper.height,
            },
            "layout": dict(composition.anchors),
            "colors": {
                "glass": colors(flask.palette),
                "liquid": colors(liquid.palette),
                "liquid2": colors(liquid.second_palette),
                "stopper": colors(stopper.palette),
                "stopper_gem": colors(stopper.gem_palette),
                "tie": colors(stopper.tie_palette),
                "label": colors(params.label_palette),
            },
        }
