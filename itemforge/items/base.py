"""
Abstract item family generator. One subclass per family; generate() runs the fixed pipeline:
options -> seeded random -> surface -> variation params -> composer -> assembled item.
"""
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from ..config import load_config, resolve_grid_config
from ..geometry import Silhouette
from ..graphics import PixelSurface, SurfaceUnavailableError, acquire_surface
from ..palettes import DEFAULT_REGISTRY, Palette, PaletteRegistry
from ..random_utils import ItemRandom, new_seed
from .assembler import GeneratedItem, assemble_item, placeholder_item

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_options(options: dict[str, Any] | None) -> dict[str, Any]:
    """Request keys in snake_case ('subType' -> 'sub_type'); None values dropped; seed coerced to int."""
    out: dict[str, Any] = {}
    for key, value in (options or {}).items():
        if value is None:
            continue
        out[_CAMEL_BOUNDARY.sub("_", str(key)).lower()] = value
    if "seed" in out:
        try:
            out["seed"] = int(out["seed"])
        except (TypeError, ValueError):
            seed = new_seed()
            logger.warning("Invalid seed %r. Using fresh seed: %s", out["seed"], seed)
            out["seed"] = seed
    return out


def humanize(tag: str) -> str:
    """'single_blade_battleaxe' -> 'single blade battleaxe'."""
    return tag.replace("_", " ")


@dataclass
class Composition:
    """What the composer hands forward: per-component silhouettes and anchor coordinates."""
    silhouettes: dict[str, Silhouette] = field(default_factory=dict)
    anchors: dict[str, int] = field(default_factory=dict)


class ItemGenerator(ABC):
    """
    Base for item families. Subclasses declare their archetypes and implement
    build_params (variation generator), compose (component composer), describe and item_name.
    """

    family: str = ""
    archetypes: tuple[str, ...] = ()
    archetype_aliases: Mapping[str, str] = MappingProxyType({})

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        registry: PaletteRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.registry = registry or DEFAULT_REGISTRY
        self.width, self.height, self.scale = resolve_grid_config(self.config)

    def generate(self, options: dict[str, Any] | None = None, **overrides: Any) -> GeneratedItem:
        opts = normalize_options({**(options or {}), **overrides})
        rng = ItemRandom(opts.get("seed"))
        try:
            surface = acquire_surface(self.width, self.height)
        except SurfaceUnavailableError as e:
            logger.error("Failed to get drawing surface for %s: %s", self.family, e)
            placeholder = self.config.get("placeholder", {})
            return placeholder_item(
                self.family,
                rng.seed,
                width=max(1, self.width) * max(1, self.scale),
                height=max(1, self.height) * max(1, self.scale),
                label=placeholder.get("label", "CTX Fail"),
                color=placeholder.get("color", "#FF0000B3"),
            )
        params = self.build_params(opts, rng)
        composition = self.compose(surface, params, rng)
        composition.silhouettes = {
            name: sil.clipped(self.width, self.height) for name, sil in composition.silhouettes.items()
        }
        return assemble_item(
            self.item_type(params),
            self.item_name(params),
            rng.seed,
            self.describe(params, composition),
            surface,
            scale=self.scale,
            silhouettes=composition.silhouettes,
            anchors=composition.anchors,
        )

    @abstractmethod
    def build_params(self, options: dict[str, Any], rng: ItemRandom) -> Any:
        """Resolve archetype, palettes, dimensions and feature flags into immutable specs."""
        ...

    @abstractmethod
    def compose(self, surface: PixelSurface, params: Any, rng: ItemRandom) -> Composition:
        """Draw the components in dependency order."""
        ...

    @abstractmethod
    def describe(self, params: Any, composition: Composition) -> dict[str, Any]:
        """item_data: every resolved material, archetype, dimension and flag."""
        ...

    @abstractmethod
    def item_name(self, params: Any) -> str:
        ...

    def item_type(self, params: Any) -> str:
        return self.family

    # --- Variation helpers ---

    def resolve_archetype(
        self,
        requested: str | None,
        rng: ItemRandom,
        pool: Sequence[str] | None = None,
    ) -> str:
        """Requested archetype (or alias) if valid, else random from pool with a warning."""
        pool = tuple(pool or self.archetypes)
        if requested:
            key = str(requested).lower()
            key = self.archetype_aliases.get(key, key)
            if key in self.archetypes:
                return key
        choice = rng.choice(pool)
        if requested:
            logger.warning("Unknown %s type %r. Defaulting to random type: %s", self.family, requested, choice)
        return choice

    def pick(
        self,
        options: dict[str, Any],
        name: str,
        choices: Sequence[str],
        rng: ItemRandom,
    ) -> str:
        """Enum override from options if valid, else a random choice (warning on invalid override)."""
        requested = options.get(name)
        if requested is not None:
            key = str(requested).lower()
            if key in choices:
                return key
            logger.warning("Invalid %s %s %r. Choosing randomly.", self.family, name, requested)
        return rng.choice(choices)

    def resolve_palette(
        self,
        requested: str | None,
        choices: Sequence[str],
        rng: ItemRandom,
    ) -> tuple[str, Palette]:
        """(registry key, palette) from an explicit request or a random allow-list entry."""
        key = requested or rng.choice(choices)
        palette = self.registry.get(key)
        return palette.key, palette

    def palette(self, key: str) -> Palette:
        return self.registry.get(key)
