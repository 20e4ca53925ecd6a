"""
Axes: shaft (grip, rings, pommel) first, then the head anchored at the shaft top:
one or two tapered blades, an optional spike poll and the socket block.
"""
import math
from dataclasses import dataclass, replace
from typing import Any, Callable

from ..geometry import Silhouette, power_taper, progress, round_half_up
from ..graphics import (
    PixelSurface,
    Tone,
    draw_pixel,
    fill_disc,
    shade_block,
    shade_column,
    shade_row,
    shade_span,
    tone_color,
)
from ..palettes import Palette
from ..random_utils import ItemRandom
from .base import Composition, ItemGenerator, humanize

AXE_TYPES = ("hand_axe", "single_blade_battleaxe", "double_blade_axe")
SHAFT_STYLES = ("plain", "wrapped_grip", "ringed_shaft")
POMMEL_SHAPES = ("round", "square", "disc", "finial", "pointed_pommel", "flared_pommel")
BLADE_SHAPES = ("expanding_straight", "bearded", "flared", "pointed_taper")
EDGE_PROFILES = ("straight_edge", "convex_edge", "concave_edge")

HEAD_MATERIALS = ["STEEL", "IRON", "DARK_STEEL"]
HAFT_MATERIALS = ["WOOD", "DARK_STEEL"]
GRIP_MATERIALS = ["LEATHER", "DARK_STEEL", "IRON"]
RING_MATERIALS = ["IRON", "STEEL", "BRONZE", "GOLD"]
POMMEL_MATERIALS = ["IRON", "STEEL", "BRONZE", "GOLD"]

MIN_SHAFT_LENGTH = 20
MIN_BLADE_CONNECTION_WIDTH = 3
MIN_BLADE_LENGTH = 8
MIN_BLADE_HEIGHT = 10
PADDING_Y = 4

# Taper exponent of the blade outline: < 1 flares, > 1 points
BLADE_TAPER: dict[str, float] = {
    "expanding_straight": 1.0,
    "bearded": 1.0,
    "flared": 0.6,
    "pointed_taper": 1.7,
}

# Cutting edge bulge as (fraction of blade length, direction)
EDGE_CURVE: dict[str, tuple[float, int]] = {
    "straight_edge": (0.0, 0),
    "convex_edge": (0.15, 1),
    "concave_edge": (0.20, -1),
}


@dataclass(frozen=True)
class PommelSpec:
    shape: str
    palette: Palette
    width: int
    height: int
    flare: int = 0


@dataclass(frozen=True)
class ShaftSpec:
    length: int
    thickness: int
    palette: Palette
    style: str                              # plain | wrapped_grip | ringed_shaft
    grip_palette: Palette | None = None
    ring_palette: Palette | None = None
    ring_heights: tuple[int, ...] = ()
    pommel: PommelSpec | None = None


@dataclass(frozen=True)
class HeadSpec:
    axe_type: str
    blade_shape: str
    edge_profile: str
    edge_intensity: float
    length: int                             # reach of the cutting edge from the shaft
    height: int
    connection_width: int
    palette: Palette
    side: int                               # -1 left | 1 right (single-blade types)
    has_spike_poll: bool = False
    spike_length: int = 0
    socket_width_ratio: float = 0.0


@dataclass(frozen=True)
class AxeParams:
    shaft: ShaftSpec
    head: HeadSpec
    shaft_top_x: int
    shaft_top_y: int


# --- Archetype dimensions: (shaft length, blade length, blade height, spike length or 0) ---

def _hand_axe_dimensions(rng: ItemRandom, max_shaft: int, grid_width: int) -> tuple[int, int, int, int]:
    shaft = rng.randint(MIN_SHAFT_LENGTH, math.floor(max_shaft * 0.60))
    blade = rng.randint(math.floor(grid_width * 0.18), math.floor(grid_width * 0.25))
    height = rng.randint(math.floor(blade * 0.7), math.floor(blade * 1.2))
    spike = rng.randint(math.floor(blade * 0.30), math.floor(blade * 0.60)) if rng.chance(0.4) else 0
    return shaft, blade, height, spike


def _battleaxe_dimensions(rng: ItemRandom, max_shaft: int, grid_width: int) -> tuple[int, int, int, int]:
    shaft = rng.randint(math.floor(max_shaft * 0.75), max_shaft)
    blade = rng.randint(math.floor(grid_width * 0.25), math.floor(grid_width * 0.4))
    height = rng.randint(math.floor(blade * 0.6), math.floor(blade * 1.10))
    spike = rng.randint(math.floor(blade * 0.4), math.floor(blade * 0.8)) if rng.chance(0.6) else 0
    return shaft, blade, height, spike


def _double_axe_dimensions(rng: ItemRandom, max_shaft: int, grid_width: int) -> tuple[int, int, int, int]:
    shaft = rng.randint(math.floor(max_shaft * 0.70), max_shaft - 2)
    blade = rng.randint(math.floor(grid_width * 0.22), math.floor(grid_width * 0.35))
    height = rng.randint(math.floor(blade * 0.75), math.floor(blade * 1.20))
    return shaft, blade, height, 0


AXE_DIMENSIONS: dict[str, Callable[[ItemRandom, int, int], tuple[int, int, int, int]]] = {
    "hand_axe": _hand_axe_dimensions,
    "single_blade_battleaxe": _battleaxe_dimensions,
    "double_blade_axe": _double_axe_dimensions,
}


def _pommel_spec(shape: str, palette: Palette, thickness: int, rng: ItemRandom) -> PommelSpec:
    if shape == "pointed_pommel":
        height = rng.randint(3, 5)
        width = max(thickness, rng.randint(thickness, thickness + 1))
        return PommelSpec(shape, palette, width, height)
    if shape == "flared_pommel":
        height = rng.randint(2, 3)
        flare = rng.randint(1, 2)
        return PommelSpec(shape, palette, thickness + flare * 2, height, flare)
    if shape in ("round", "disc"):
        size = max(MIN_BLADE_CONNECTION_WIDTH, thickness + rng.randint(1, 3))
        return PommelSpec(shape, palette, size, size)
    width = max(MIN_BLADE_CONNECTION_WIDTH, thickness + rng.randint(0, 2))
    height = max(1, math.floor(width * rng.uniform(0.5, 1.0)))
    return PommelSpec(shape, palette, width, height)


# --- Shaft styles ---

def _draw_wrapped_grip(surface: PixelSurface, shaft: ShaftSpec, x: int, top_x: int, top_y: int) -> None:
    if shaft.grip_palette is None:
        return
    start = math.floor(shaft.length * 0.5)
    for i in range(shaft.length - start):
        y = top_y + start + i
        if i % 3 == 0:
            shade_row(surface, x, y, shaft.thickness, shaft.grip_palette, Tone.SHADOW)
        else:
            shade_span(surface, x, y, shaft.thickness, shaft.grip_palette)


def _draw_rings(surface: PixelSurface, shaft: ShaftSpec, x: int, top_x: int, top_y: int) -> None:
    if shaft.ring_palette is None:
        return
    width = shaft.thickness + 2
    ring_x = top_x - width // 2
    for r, ring_height in enumerate(shaft.ring_heights):
        ring_y = top_y + math.floor(shaft.length * (0.25 if r == 0 else 0.75)) - 1
        for k in range(ring_height):
            shade_row(surface, ring_x, ring_y + k, width, shaft.ring_palette, Tone.HIGHLIGHT if k == 0 else Tone.SHADOW)


SHAFT_STYLE_DRAWERS: dict[str, Callable[[PixelSurface, ShaftSpec, int, int, int], None]] = {
    "plain": lambda *args: None,
    "wrapped_grip": _draw_wrapped_grip,
    "ringed_shaft": _draw_rings,
}


# --- Pommels: each returns the drawn silhouette ---

def _draw_pointed_pommel(surface: PixelSurface, pommel: PommelSpec, cx: int, y: int) -> Silhouette:
    sil = Silhouette()
    for i in range(pommel.height):
        width = max(1, math.ceil(pommel.width - (pommel.width - 1) * progress(i, pommel.height)))
        x = cx - width // 2
        shade_span(surface, x, y + i, width, pommel.palette)
        sil.record(y + i, x, width)
    return sil


def _draw_flared_pommel(surface: PixelSurface, pommel: PommelSpec, cx: int, y: int) -> Silhouette:
    sil = Silhouette()
    for i in range(pommel.height):
        last = i == pommel.height - 1
        width = pommel.width if last else pommel.width - pommel.flare
        x = cx - width // 2
        tone = Tone.HIGHLIGHT if i == 0 and pommel.height > 1 else Tone.SHADOW
        shade_row(surface, x, y + i, width, pommel.palette, tone)
        sil.record(y + i, x, width)
    return sil


def _draw_round_pommel(surface: PixelSurface, pommel: PommelSpec, cx: int, y: int) -> Silhouette:
    radius = pommel.width // 2
    left = cx - pommel.width // 2
    return fill_disc(surface, left + radius, y + radius, radius, pommel.palette)


def _draw_block_pommel(surface: PixelSurface, pommel: PommelSpec, cx: int, y: int) -> Silhouette:
    x = cx - pommel.width // 2
    shade_block(surface, x, y, pommel.width, pommel.height, pommel.palette)
    sil = Silhouette()
    for dy in range(pommel.height):
        sil.record(y + dy, x, pommel.width)
    return sil


POMMEL_DRAWERS: dict[str, Callable[[PixelSurface, PommelSpec, int, int], Silhouette]] = {
    "pointed_pommel": _draw_pointed_pommel,
    "flared_pommel": _draw_flared_pommel,
    "round": _draw_round_pommel,
    "disc": _draw_round_pommel,
    "square": _draw_block_pommel,
    "finial": _draw_block_pommel,
}


def blade_reach(head: HeadSpec, vertical_progress: float) -> int:
    """Horizontal length of the blade row at a given vertical progress (0 top, 1 bottom)."""
    distance = abs(vertical_progress - 0.5) * 2
    reach = power_taper(vertical_progress, head.connection_width, head.length, BLADE_TAPER.get(head.blade_shape, 1.0))
    factor, direction = EDGE_CURVE.get(head.edge_profile, (0.0, 0))
    if direction:
        reach += direction * math.floor(head.length * factor * (1.0 - distance) * head.edge_intensity)
    reach = max(head.connection_width, math.floor(reach))
    if head.blade_shape == "bearded" and vertical_progress > 0.5:
        beard_progress = (vertical_progress - 0.5) / 0.5
        bonus = math.floor(head.length * 0.30 * math.sin(beard_progress * math.pi * 0.9))
        reach = min(head.length * 1.25, reach + bonus)
        reach = max(head.connection_width, math.floor(reach))
    return max(MIN_BLADE_CONNECTION_WIDTH, int(reach))


def _blade_tone(x_on: int, segment: int, y: int, min_y: int, max_y: int, height: int) -> Tone:
    if x_on >= segment - 1:
        return Tone.HIGHLIGHT
    if y == min_y and x_on < segment * 0.85:
        return Tone.HIGHLIGHT
    if y == max_y and height > 1 and x_on < segment * 0.85:
        return Tone.SHADOW
    if x_on < max(MIN_BLADE_CONNECTION_WIDTH, math.floor(segment * 0.2)):
        return Tone.SHADOW
    return Tone.BASE


class AxeGenerator(ItemGenerator):
    family = "axe"
    archetypes = AXE_TYPES
    archetype_aliases = {
        "battle_axe": "single_blade_battleaxe",
        "battleaxe": "single_blade_battleaxe",
        "double_axe": "double_blade_axe",
    }

    @property
    def max_shaft_length(self) -> int:
        return self.height - PADDING_Y * 2 - 10

    def build_params(self, options: dict[str, Any], rng: ItemRandom) -> AxeParams:
        axe_type = self.resolve_archetype(options.get("sub_type"), rng)
        head_key, head_palette = self.resolve_palette(options.get("material"), HEAD_MATERIALS, rng)
        haft_key, haft_palette = self.resolve_palette(options.get("haft_material"), HAFT_MATERIALS, rng)

        thickness = rng.randint(2, 3)
        style = self.pick(options, "shaft_style", SHAFT_STYLES, rng)
        grip_palette = None
        ring_palette = None
        ring_heights: tuple[int, ...] = ()
        if style == "wrapped_grip":
            grip_palette = self.resolve_palette(options.get("grip_material"), GRIP_MATERIALS, rng)[1]
        elif style == "ringed_shaft":
            ring_palette = self.resolve_palette(None, RING_MATERIALS, rng)[1]
            ring_heights = tuple(rng.randint(1, 2) for _ in range(rng.randint(1, 2)))

        pommel = None
        if rng.chance(0.75):
            shape = self.pick(options, "pommel_shape", POMMEL_SHAPES, rng)
            pommel_palette = self.resolve_palette(None, POMMEL_MATERIALS + [haft_key], rng)[1]
            pommel = _pommel_spec(shape, pommel_palette, thickness, rng)

        blade_shape = self.pick(options, "blade_shape", BLADE_SHAPES, rng)
        edge_profile = self.pick(options, "cutting_edge_profile", EDGE_PROFILES, rng)
        edge_intensity = rng.uniform(0.25, 0.85)
        socket_width_ratio = rng.uniform(0.10, 0.25)

        shaft_length, blade_length, blade_height, spike_length = AXE_DIMENSIONS[axe_type](
            rng, self.max_shaft_length, self.width
        )
        blade_length = max(MIN_BLADE_LENGTH, blade_length)
        blade_height = max(MIN_BLADE_HEIGHT, blade_height)

        head = HeadSpec(
            axe_type=axe_type,
            blade_shape=blade_shape,
            edge_profile=edge_profile,
            edge_intensity=edge_intensity,
            length=blade_length,
            height=blade_height,
            connection_width=rng.randint(MIN_BLADE_CONNECTION_WIDTH, MIN_BLADE_CONNECTION_WIDTH + 1),
            palette=head_palette,
            side=rng.sign(),
            has_spike_poll=spike_length > 0,
            spike_length=spike_length,
            socket_width_ratio=socket_width_ratio,
        )
        if axe_type == "double_blade_axe":
            head = replace(head, has_spike_poll=False, spike_length=0)

        shaft = ShaftSpec(
            length=shaft_length,
            thickness=thickness,
            palette=haft_palette,
            style=style,
            grip_palette=grip_palette,
            ring_palette=ring_palette,
            ring_heights=ring_heights,
            pommel=pommel,
        )

        total_visual_height = shaft_length + blade_height * 0.15
        top_visual_y = self.height // 2 - math.floor(total_visual_height / 2)
        return AxeParams(
            shaft=shaft,
            head=head,
            shaft_top_x=self.width // 2,
            shaft_top_y=top_visual_y + math.floor(blade_height * 0.05),
        )

    # --- Composer: shaft -> pommel -> blades -> spike -> socket ---

    def compose(self, surface: PixelSurface, params: AxeParams, rng: ItemRandom) -> Composition:
        comp = Composition()
        shaft, head = params.shaft, params.head
        top_x, top_y = params.shaft_top_x, params.shaft_top_y

        comp.silhouettes["shaft"] = self._draw_shaft(surface, shaft, top_x, top_y, rng)
        bottom_y = top_y + shaft.length
        comp.anchors.update(shaft_top_x=top_x, shaft_top_y=top_y, shaft_bottom_y=bottom_y)
        if shaft.pommel is not None:
            comp.silhouettes["pommel"] = POMMEL_DRAWERS[shaft.pommel.shape](surface, shaft.pommel, top_x, bottom_y)

        socket_y = top_y + math.floor(head.height * 0.1)
        comp.anchors["socket_center_y"] = socket_y
        if head.axe_type == "double_blade_axe":
            for side, key in ((-1, "blade_left"), (1, "blade_right")):
                blade = replace(head, side=side, has_spike_poll=False, spike_length=0)
                comp.silhouettes[key] = self._draw_blade(surface, blade, top_x, socket_y, shaft.thickness)
        else:
            comp.silhouettes["blade"] = self._draw_blade(surface, head, top_x, socket_y, shaft.thickness)
            if head.has_spike_poll and head.spike_length > 0:
                comp.silhouettes["spike"] = self._draw_spike(surface, head, top_x, socket_y, shaft.thickness)

        comp.silhouettes["socket"] = self._draw_socket(surface, head, top_x, socket_y, shaft.thickness)
        return comp

    def _draw_shaft(self, surface: PixelSurface, shaft: ShaftSpec, top_x: int, top_y: int, rng: ItemRandom) -> Silhouette:
        x = top_x - shaft.thickness // 2
        sil = Silhouette()
        grain = shaft.palette.key == "WOOD"
        for i in range(shaft.length):
            y = top_y + i
            shade_span(surface, x, y, shaft.thickness, shaft.palette)
            if grain and i % rng.randint(4, 7) == 0:
                grain_x = x + rng.randint(0, shaft.thickness - 1)
                draw_pixel(surface, grain_x, y, tone_color(shaft.palette, Tone.SHADOW))
            sil.record(y, x, shaft.thickness)
        SHAFT_STYLE_DRAWERS[shaft.style](surface, shaft, x, top_x, top_y)
        return sil

    def _draw_blade(self, surface: PixelSurface, head: HeadSpec, cx: int, socket_y: int, thickness: int) -> Silhouette:
        sil = Silhouette()
        min_y = socket_y - head.height // 2
        max_y = socket_y + math.ceil(head.height / 2) - 1
        for y in range(min_y, max_y + 1):
            vertical_progress = 0.5 if head.height <= 1 else (y - min_y) / (head.height - 1)
            segment = blade_reach(head, vertical_progress)
            xs = []
            for x_on in range(segment):
                offset = (head.length - segment) + x_on
                x = cx + head.side * (thickness // 2 + offset)
                tone = _blade_tone(x_on, segment, y, min_y, max_y, head.height)
                draw_pixel(surface, x, y, tone_color(head.palette, tone))
                xs.append(x)
            sil.record(y, min(xs), segment)
        return sil

    def _draw_spike(self, surface: PixelSurface, head: HeadSpec, cx: int, socket_y: int, thickness: int) -> Silhouette:
        poll_side = -head.side
        edge_x = cx + poll_side * (thickness // 2)
        poll_height = max(1, math.floor(thickness * 1.2))
        points = []
        for i in range(head.spike_length):
            x = edge_x - 1 - i if poll_side == -1 else edge_x + 1 + i
            taper = progress(i, head.spike_length)
            height = max(1, round_half_up(poll_height * (1 - taper * 0.5)))
            y = socket_y - height // 2
            shade_column(surface, x, y, height, head.palette)
            points.extend((x, y + k) for k in range(height))
        return Silhouette.from_points(points)

    def _draw_socket(self, surface: PixelSurface, head: HeadSpec, cx: int, socket_y: int, thickness: int) -> Silhouette:
        height = max(3, math.floor(thickness * 1.7 + head.height * 0.1))
        width = thickness + 3
        x = cx - width // 2
        y = socket_y - height // 2
        shade_block(surface, x, y, width, height, head.palette, top=Tone.BASE)
        sil = Silhouette()
        for dy in range(height):
            sil.record(y + dy, x, width)
        return sil

    # --- Description ---

    def item_name(self, params: AxeParams) -> str:
        head, shaft = params.head, params.shaft
        name = f"{head.palette.name} {head.blade_shape.replace('_', ' ', 1)}"
        if head.edge_profile != "straight_edge":
            name += f" ({head.edge_profile.split('_')[0]} edge)"
        name += f" {humanize(head.axe_type)}"
        if shaft.style != "plain":
            name += f" with {humanize(shaft.style)}"
        if shaft.pommel is not None:
            name += f" and {humanize(shaft.pommel.shape)} pommel"
        if head.has_spike_poll and head.spike_length > 0:
            name += " with Spike Poll"
        return name + f" (Shaft: {shaft.palette.name})"

    def describe(self, params: AxeParams, composition: Composition) -> dict[str, Any]:
        head, shaft = params.head, params.shaft
        pommel = shaft.pommel
        colors = {
            "head": head.palette.to_dict(),
            "shaft": shaft.palette.to_dict(),
            "grip": shaft.grip_palette.to_dict() if shaft.grip_palette else None,
            "rings": shaft.ring_palette.to_dict() if shaft.ring_palette else None,
            "pommel": pommel.palette.to_dict() if pommel else None,
        }
        return {
            "visual_theme": f"{head.palette.name} {humanize(head.axe_type)}",
            "shaft": {
                "material": shaft.palette.key,
                "style": shaft.style,
                "length": shaft.length,
                "thickness": shaft.thickness,
                "grip_material": shaft.grip_palette.key if shaft.grip_palette else None,
                "ring_material": shaft.ring_palette.key if shaft.ring_palette else None,
                "ring_count": len(shaft.ring_heights),
                "pommel_shape": pommel.shape if pommel else None,
                "pommel_material": pommel.palette.key if pommel else None,
            },
            "head": {
                "material": head.palette.key,
                "axe_type": head.axe_type,
                "blade_shape": head.blade_shape,
                "cutting_edge_profile": head.edge_profile,
                "edge_curve_intensity": round(head.edge_intensity, 4),
                "blade_length": head.length,
                "blade_height": head.height,
                "blade_side": "both" if head.axe_type == "double_blade_axe" else ("left" if head.side < 0 else "right"),
                "connection_width": head.connection_width,
                "socket_width_ratio": round(head.socket_width_ratio, 4),
                "has_spike_poll": head.has_spike_poll,
                "spike_length": head.spike_length,
            },
            "layout": dict(composition.anchors),
            "colors": colors,
        }
