"""
Staves, scepters and wands: the shaft is drawn row by row (with curve or gnarl offsets),
then decorations and the grip are laid over the recorded shaft silhouette, and the
topper is anchored at the centre of the shaft's top row.
"""
import math
from dataclasses import dataclass
from typing import Any, Callable

from ..geometry import Silhouette, SilhouetteRow, clamp, round_half_up
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

STAFF_TYPES = ("wand", "scepter", "staff")
SHAFT_SHAPES = ("straight", "slightly_curved", "gnarled")
SHAFT_DECORATIONS = ("none", "runes", "bands", "spiral_wrap")
TOPPER_SHAPES = ("orb_gem", "crystal_shard", "crescent_moon", "metal_finial", "twisted_wood")
GEM_TOPPERS = ("orb_gem", "crystal_shard")
INLAY_TOPPERS = ("metal_finial", "crescent_moon", "twisted_wood")

SHAFT_MATERIALS = [
    "WOOD", "BONE", "DARK_STEEL", "OBSIDIAN", "SILVER", "GOLD",
    "ENCHANTED", "GEM_RED", "GEM_BLUE", "PURPLE_PAINT", "IVORY", "GREEN_LEAF",
]
ORGANIC_MATERIALS = ("WOOD", "BONE", "IVORY", "GREEN_LEAF")
GEM_MATERIALS = ["GEM_RED", "GEM_BLUE", "GEM_GREEN", "GEM_PURPLE", "GEM_YELLOW", "GEM_CYAN", "GEM_WHITE", "ENCHANTED", "OBSIDIAN"]
TOPPER_MATERIALS = ["GOLD", "SILVER", "BRONZE", "STEEL", "DARK_STEEL", "OBSIDIAN", "BONE", "IVORY", "GREEN_LEAF"]
INSET_GEM_MATERIALS = ["GEM_RED", "GEM_BLUE", "GEM_GREEN", "GEM_PURPLE", "GEM_YELLOW"]

PADDING = 4

# Lateral wiggle amplitude per shaft shape
WIGGLE: dict[str, float] = {"straight": 0.0, "slightly_curved": 1.0, "gnarled": 1.5}

TOPPER_SIZES: dict[str, tuple[int, int]] = {
    "wand": (4, 8),
    "scepter": (8, 14),
    "staff": (6, 12),
}

THICKNESS: dict[str, tuple[int, int]] = {
    "wand": (1, 2),
    "scepter": (2, 3),
    "staff": (2, 4),
}


@dataclass(frozen=True)
class StaffShaftSpec:
    material: str
    palette: Palette
    length: int
    thickness: int
    shape: str                      # straight | slightly_curved | gnarled
    curve_frequency: float
    decoration: str                 # none | runes | bands | spiral_wrap
    decoration_palette: Palette | None = None
    grip_length: int = 0
    grip_palette: Palette | None = None

    @property
    def has_grip(self) -> bool:
        return self.grip_palette is not None and self.grip_length > 0


@dataclass(frozen=True)
class TopperSpec:
    shape: str
    size: int
    palette: Palette
    material: str
    gem_palette: Palette | None = None
    inset_gem_palette: Palette | None = None
    crescent_thickness: int = 2
    twists: int = 2

    @property
    def has_inset_gem(self) -> bool:
        return self.inset_gem_palette is not None

    @property
    def estimated_height(self) -> int:
        if self.shape == "orb_gem":
            return 2 * max(3, math.floor(self.size * 0.8)) + 2
        if self.shape in ("crystal_shard", "twisted_wood"):
            return max(6, self.size + 2) + 2
        if self.shape == "crescent_moon":
            return max(5, math.floor(self.size * 0.8)) + 3
        return self.size + 4


@dataclass(frozen=True)
class StaffParams:
    staff_type: str
    shaft: StaffShaftSpec
    topper: TopperSpec
    center_x: int
    shaft_top_y: int


def _shaft_shape(staff_type: str, material: str, rng: ItemRandom) -> str:
    if staff_type == "staff" and material in ORGANIC_MATERIALS:
        return rng.choice(SHAFT_SHAPES)
    if staff_type == "wand" and material in ORGANIC_MATERIALS:
        return rng.choice(SHAFT_SHAPES[:2])
    if staff_type == "scepter" and material in ("WOOD", "IVORY", "GREEN_LEAF"):
        return rng.choice(SHAFT_SHAPES[:2])
    return "straight"


# --- Shaft decorations: one call per shaft row, drawn over the silhouette ---

def _decorate_bands(surface: PixelSurface, palette: Palette, row: SilhouetteRow, i: int, length: int, rng: ItemRandom) -> None:
    if i % rng.randint(8, 15) < 2 and 5 < i < length - 5:
        shade_span(surface, row.x_start - 1, row.y, row.width + 2, palette)


def _decorate_runes(surface: PixelSurface, palette: Palette, row: SilhouetteRow, i: int, length: int, rng: ItemRandom) -> None:
    if i % rng.randint(7, 12) == 0 and row.width > 1 and 5 < i < length - 5:
        x = row.x_start + row.width // 2 - 1 + rng.randint(-1, 0)
        fill_block(surface, x, row.y, 1, rng.randint(2, 3), tone_color(palette, Tone.HIGHLIGHT))
        if rng.chance(0.6):
            draw_pixel(surface, x + rng.sign(), row.y + 1, tone_color(palette, Tone.BASE))


def _decorate_spiral(surface: PixelSurface, palette: Palette, row: SilhouetteRow, i: int, length: int, rng: ItemRandom) -> None:
    if row.width <= 0:
        return
    x = min(row.x_start + math.floor((i * 0.5) % row.width), row.x_end)
    draw_pixel(surface, x, row.y, tone_color(palette, Tone.HIGHLIGHT if i % 2 == 0 else Tone.BASE))


SHAFT_DECORATORS: dict[str, Callable[[PixelSurface, Palette, SilhouetteRow, int, int, ItemRandom], None]] = {
    "bands": _decorate_bands,
    "runes": _decorate_runes,
    "spiral_wrap": _decorate_spiral,
}


# --- Toppers: drawn upward from the attach point, each returns its silhouette ---

def _draw_orb(surface: PixelSurface, topper: TopperSpec, ax: int, ay: int, rng: ItemRandom) -> Silhouette:
    points = []
    palette = topper.gem_palette or topper.palette
    radius = max(3, math.floor(topper.size * 0.8))
    cy = ay - radius - 1
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            distance = dx * dx + dy * dy
            if distance > radius * radius:
                continue
            spread = distance / (radius * radius)
            tone = Tone.BASE
            if spread > 0.6:
                tone = Tone.HIGHLIGHT if dx + dy < 0 else Tone.SHADOW
            elif spread < 0.15 and radius > 2:
                tone = Tone.HIGHLIGHT
            draw_pixel(surface, ax + dx, cy + dy, tone_color(palette, tone))
            points.append((ax + dx, cy + dy))
    return Silhouette.from_points(points)


def _draw_crystal(surface: PixelSurface, topper: TopperSpec, ax: int, ay: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    palette = topper.gem_palette or topper.palette
    height = max(5, topper.size + 1)
    width = max(3, math.floor(topper.size * 0.7))
    top = ay - height
    upper = math.ceil(height / 2)
    lower = height // 2
    for i in range(upper):
        row_w = max(1, math.ceil(width * (i / (upper - 1 or 1))))
        x = ax - row_w // 2
        shade_row(surface, x, top + i, row_w, palette, Tone.HIGHLIGHT if i < 2 else Tone.BASE)
        sil.record(top + i, x, row_w)
    for i in range(lower):
        row_w = max(1, math.ceil(width * (1 - i / (lower - 1 or 1))))
        x = ax - row_w // 2
        y = top + upper + i
        shade_row(surface, x, y, row_w, palette, Tone.SHADOW if i > lower - 3 else Tone.BASE)
        sil.record(y, x, row_w)
    if width > 2:
        fill_block(surface, ax - 1, top + height // 2 - 1, 2, 2, tone_color(palette, Tone.HIGHLIGHT))
    return sil


def _draw_crescent(surface: PixelSurface, topper: TopperSpec, ax: int, ay: int, rng: ItemRandom) -> Silhouette:
    points = []
    palette = topper.palette
    outer = max(4, math.floor(topper.size * 0.8))
    thickness = topper.crescent_thickness
    inner = max(1, outer - thickness)
    conn_h = max(1, math.floor(thickness * 0.6))
    conn_w = max(1, math.floor(thickness * 0.8))
    conn_top = ay - conn_h
    conn_x = ax - conn_w // 2
    fill_block(surface, conn_x, conn_top, conn_w, conn_h, tone_color(palette, Tone.BASE))
    shade_row(surface, conn_x, conn_top, conn_w, palette, Tone.HIGHLIGHT)
    points += [(conn_x, conn_top), (conn_x + conn_w - 1, ay - 1)]

    # lower half of a ring, resting on the connector
    cy = conn_top - outer
    for dy in range(0, outer + 1):
        for dx in range(-outer, outer + 1):
            distance = dx * dx + dy * dy
            if not inner * inner < distance <= outer * outer:
                continue
            tone = Tone.BASE
            if distance > (outer - 1) * (outer - 1) * 0.9:
                tone = Tone.HIGHLIGHT
            elif distance < (inner + 1) * (inner + 1) * 1.1:
                tone = Tone.SHADOW
            draw_pixel(surface, ax + dx, cy + dy, tone_color(palette, tone))
            points.append((ax + dx, cy + dy))

    if topper.inset_gem_palette is not None and thickness > 1:
        size = max(1, thickness - 1)
        gx = ax - size // 2
        gy = conn_top - size // 2 - 1
        fill_block(surface, gx, gy, size, size, tone_color(topper.inset_gem_palette, Tone.BASE))
        draw_pixel(surface, gx, gy, tone_color(topper.inset_gem_palette, Tone.HIGHLIGHT))
    return Silhouette.from_points(points)


def _finial_width(p: float, base: int) -> int:
    if p < 0.2:
        return max(1, math.ceil(base * (1 + p * 0.5)))
    if p < 0.7:
        return max(1, math.ceil(base * (1.1 - (p - 0.2) * 1.8)))
    return max(1, math.ceil(base * 0.3 + (p - 0.7) * 0.7 * base * 0.3))


def _draw_finial(surface: PixelSurface, topper: TopperSpec, ax: int, ay: int, rng: ItemRandom) -> Silhouette:
    sil = Silhouette()
    height = max(5, topper.size + 2)
    base = max(2, math.floor(topper.size * 0.5))
    top = ay - height
    for i in range(height):
        width = _finial_width(i / (height - 1 or 1), base)
        x = ax - width // 2
        shade_span(surface, x, top + i, width, topper.palette, single=Tone.BASE)
        sil.record(top + i, x, width)
    if topper.inset_gem_palette is not None:
        size = max(2, math.floor(base * 0.6))
        gx = ax - size // 2
        gy = top + math.floor(height * 0.25)
        gem = topper.inset_gem_palette
        fill_block(surface, gx, gy, size, size, tone_color(gem, Tone.BASE))
        draw_pixel(surface, gx, gy, tone_color(gem, Tone.HIGHLIGHT))
        draw_pixel(surface, gx + size - 1, gy + size - 1, tone_color(gem, Tone.SHADOW))
    return sil


def _draw_twisted_wood(surface: PixelSurface, topper: TopperSpec, ax: int, ay: int, rng: ItemRandom) -> Silhouette:
    points = []
    palette = topper.palette
    height = max(6, topper.size + 3)
    base = max(2, math.floor(topper.size * 0.5))
    top = ay - height
    twists = topper.twists
    for i in range(height):
        p = i / (height - 1 or 1)
        overall = max(1, base - math.floor(p * base * 0.75))
        strand = max(1, overall // twists)
        left = ax - overall // 2
        right = ax + overall // 2 - strand + (1 if twists > 1 else 0)
        for t in range(twists):
            angle = p * math.pi * 3 + t * 2 * math.pi / twists
            sway = math.sin(angle) * overall * 0.25 * (1 - p)
            x = left + math.floor(overall / twists * t) + round_half_up(sway)
            x = max(left, min(x, right))
            shade_row(surface, x, top + i, strand, palette, Tone.BASE if t % 2 == 0 else Tone.SHADOW)
            if rng.chance(0.3):
                draw_pixel(surface, x, top + i, tone_color(palette, Tone.HIGHLIGHT))
            points += [(x, top + i), (x + strand - 1, top + i)]
    return Silhouette.from_points(points)


TOPPER_DRAWERS: dict[str, Callable[[PixelSurface, TopperSpec, int, int, ItemRandom], Silhouette]] = {
    "orb_gem": _draw_orb,
    "crystal_shard": _draw_crystal,
    "crescent_moon": _draw_crescent,
    "metal_finial": _draw_finial,
    "twisted_wood": _draw_twisted_wood,
}


class StaffGenerator(ItemGenerator):
    family = "staff"
    archetypes = STAFF_TYPES
    archetype_aliases = {"stave": "staff", "rod": "scepter"}

    def build_params(self, options: dict[str, Any], rng: ItemRandom) -> StaffParams:
        staff_type = self.resolve_archetype(options.get("sub_type"), rng)
        material, palette = self.resolve_palette(options.get("material"), SHAFT_MATERIALS, rng)
        gh = self.height

        decoration = "none"
        grip = False
        if staff_type == "wand":
            length = rng.randint(gh * 0.35, gh * 0.6)
            shape = _shaft_shape(staff_type, material, rng)
            if material in ORGANIC_MATERIALS and rng.chance(0.4):
                decoration = rng.choice(SHAFT_DECORATIONS[1:])
        elif staff_type == "scepter":
            length = rng.randint(gh * 0.6, gh * 0.8)
            shape = _shaft_shape(staff_type, material, rng)
            if rng.chance(0.6):
                decoration = rng.choice(SHAFT_DECORATIONS)
            grip = rng.chance(0.5)
        else:
            length = rng.randint(gh * 0.8, gh - PADDING * 2)
            shape = _shaft_shape(staff_type, material, rng)
            if rng.chance(0.7):
                decoration = rng.choice(SHAFT_DECORATIONS)
            grip = rng.chance(0.7)
        thickness = rng.randint(*THICKNESS[staff_type])
        if options.get("shaft_shape") is not None:
            shape = self.pick(options, "shaft_shape", SHAFT_SHAPES, rng)
        curve_frequency = rng.uniform(3, 5) if shape == "gnarled" else rng.uniform(2, 4)

        # shaft and topper share the grid between the paddings
        topper = self._topper(staff_type, material, options, rng)
        length = max(1, min(length, gh - PADDING * 2 - topper.estimated_height))

        decoration_palette = None
        if decoration != "none":
            choices = ["GOLD", "SILVER", "ENCHANTED", "OBSIDIAN" if material == "WOOD" else "WOOD", "LEATHER", "BRONZE"]
            decoration_palette = self.resolve_palette(None, choices, rng)[1]
        grip_length = 0
        grip_palette = None
        if grip:
            grip_length = math.floor(length * rng.uniform(0.2, 0.4))
            choices = ["LEATHER", "DARK_STEEL", "IRON", "BONE" if material == "WOOD" else "WOOD"]
            grip_palette = self.resolve_palette(options.get("grip_material"), choices, rng)[1]

        shaft = StaffShaftSpec(
            material=material,
            palette=palette,
            length=length,
            thickness=thickness,
            shape=shape,
            curve_frequency=curve_frequency,
            decoration=decoration,
            decoration_palette=decoration_palette,
            grip_length=grip_length,
            grip_palette=grip_palette,
        )

        total = length + topper.estimated_height
        top_y = max(PADDING, math.floor((gh - total) / 2))
        return StaffParams(
            staff_type=staff_type,
            shaft=shaft,
            topper=topper,
            center_x=self.width // 2,
            shaft_top_y=top_y + topper.estimated_height,
        )

    def _topper(self, staff_type: str, shaft_material: str, options: dict[str, Any], rng: ItemRandom) -> TopperSpec:
        shape = self.pick(options, "topper_shape", TOPPER_SHAPES, rng)
        size = rng.randint(*TOPPER_SIZES[staff_type])
        if shape in GEM_TOPPERS:
            key, gem = self.resolve_palette(options.get("gem_material"), GEM_MATERIALS, rng)
            return TopperSpec(shape, size, gem, key, gem_palette=gem)

        if shape == "twisted_wood" and rng.chance(0.8):
            key = "WOOD"
        else:
            key = rng.choice(TOPPER_MATERIALS)
        if shape == "twisted_wood" and shaft_material == "GREEN_LEAF" and rng.chance(0.7):
            key = "GREEN_LEAF"
        key, palette = self.resolve_palette(options.get("topper_material") or key, TOPPER_MATERIALS, rng)
        inset = None
        if shape in INLAY_TOPPERS and rng.chance(0.5):
            inset = self.resolve_palette(None, INSET_GEM_MATERIALS, rng)[1]
        return TopperSpec(
            shape,
            size,
            palette,
            key,
            inset_gem_palette=inset,
            crescent_thickness=rng.randint(2, 3),
            twists=rng.randint(2, 3),
        )

    # --- Composer: shaft -> decorations -> grip -> topper ---

    def compose(self, surface: PixelSurface, params: StaffParams, rng: ItemRandom) -> Composition:
        comp = Composition()
        shaft = params.shaft
        shaft_sil = self._draw_shaft(surface, shaft, params.center_x, params.shaft_top_y, rng)
        comp.silhouettes["shaft"] = shaft_sil

        if shaft.decoration_palette is not None:
            decorate = SHAFT_DECORATORS[shaft.decoration]
            for i, row in enumerate(shaft_sil):
                decorate(surface, shaft.decoration_palette, row, i, shaft.length, rng)

        if shaft.has_grip:
            grip = self._draw_grip(surface, shaft, shaft_sil, params.shaft_top_y)
            if grip:
                comp.silhouettes["grip"] = grip

        top_row = shaft_sil.row_at(shaft_sil.top) if shaft_sil else None
        attach_x = top_row.center_x if top_row is not None else params.center_x
        attach_y = top_row.y if top_row is not None else params.shaft_top_y
        comp.silhouettes["topper"] = TOPPER_DRAWERS[params.topper.shape](surface, params.topper, attach_x, attach_y, rng)
        comp.anchors.update(
            center_x=params.center_x,
            shaft_top_y=params.shaft_top_y,
            shaft_bottom_y=shaft_sil.bottom if shaft_sil else params.shaft_top_y,
            topper_attach_x=attach_x,
            topper_attach_y=attach_y,
        )
        return comp

    def _draw_shaft(self, surface: PixelSurface, shaft: StaffShaftSpec, cx: int, top_y: int, rng: ItemRandom) -> Silhouette:
        sil = Silhouette()
        base_x = cx - shaft.thickness // 2
        wiggle = WIGGLE[shaft.shape]
        grain = tone_color(shaft.palette, Tone.SHADOW)
        for i in range(shaft.length):
            y = top_y + i
            if not 0 <= y < self.height:
                continue
            width = shaft.thickness
            x = base_x
            if wiggle:
                offset = round_half_up(math.sin(i / shaft.length * math.pi * shaft.curve_frequency) * wiggle)
                x = base_x + offset
                if shaft.shape == "gnarled" and i % rng.randint(4, 8) == 0:
                    width = max(1, shaft.thickness + rng.randint(-1, 1))
                    x = cx - width // 2 + offset
            x = int(clamp(x, 0, self.width - width))
            shade_span(surface, x, y, width, shaft.palette)
            if shaft.material == "WOOD" and i % rng.randint(5, 8) == 0:
                draw_pixel(surface, x + rng.randint(0, width - 1), y, grain)
            sil.record(y, x, width)
        return sil

    def _draw_grip(self, surface: PixelSurface, shaft: StaffShaftSpec, shaft_sil: Silhouette, top_y: int) -> Silhouette:
        sil = Silhouette()
        length = min(shaft.grip_length, shaft.length)
        start = top_y + math.floor((shaft.length - length) * 0.7)
        for k in range(length):
            row = shaft_sil.row_at(start + k)
            if row is None:
                continue
            if k % 3 == 0 and row.width > 1:
                shade_row(surface, row.x_start, row.y, row.width, shaft.grip_palette, Tone.SHADOW)
            else:
                shade_span(surface, row.x_start, row.y, row.width, shaft.grip_palette, single=Tone.BASE)
            sil.record(row.y, row.x_start, row.width)
        return sil

    # --- Description ---

    def item_name(self, params: StaffParams) -> str:
        shaft, topper = params.shaft, params.topper
        name = f"{shaft.palette.name} {params.staff_type.title()}"
        if shaft.decoration != "none":
            name += f" ({shaft.decoration.replace('_', ' ', 1)})"
        name += f" with {topper.palette.name} {humanize(topper.shape)}"
        if topper.has_inset_gem:
            name += " (Inlaid)"
        return name

    def describe(self, params: StaffParams, composition: Composition) -> dict[str, Any]:
        shaft, topper = params.shaft, params.topper

        def colors(palette: Palette | None) -> dict[str, Any] | None:
            return palette.to_dict() if palette is not None else None

        return {
            "staff_type": params.staff_type,
            "sub_type": params.staff_type,
            "shaft": {
                "material": shaft.material,
                "length": shaft.length,
                "thickness": shaft.thickness,
                "shape": shaft.shape,
                "curve_frequency": shaft.curve_frequency,
                "decoration": shaft.decoration,
                "decoration_material": shaft.decoration_palette.key if shaft.decoration_palette else None,
                "has_grip": shaft.has_grip,
                "grip_length": shaft.grip_length,
                "grip_material": shaft.grip_palette.key if shaft.grip_palette else None,
            },
            "topper": {
                "shape": topper.shape,
                "material": topper.material,
                "gem_material": topper.gem_palette.key if topper.gem_palette else None,
                "size": topper.size,
                "has_inset_gem": topper.has_inset_gem,
                "inset_gem_material": topper.inset_gem_palette.key if topper.inset_gem_palette else None,
            },
            "dimensions": {
                "shaft_length": shaft.length,
                "shaft_thickness": shaft.thickness,
                "topper_size": topper.size,
                "topper_height": topper.estimated_height,
            },
            "layout": dict(composition.anchors),
            "colors": {
                "shaft": colors(shaft.palette),
                "decoration": colors(shaft.decoration_palette),
                "grip": colors(shaft.grip_palette),
                "topper": colors(topper.palette),
                "gem": colors(topper.gem_palette),
                "inset_gem": colors(topper.inset_gem_palette),
            },
        }
