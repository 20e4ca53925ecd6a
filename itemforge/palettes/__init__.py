"""
Material palettes: data table and the frozen registry built from it.
"""
from .data import MATERIAL_PALETTES
from .registry import (
    DEFAULT_REGISTRY,
    Palette,
    PaletteRegistry,
    PaletteRegistryError,
    build_registry,
    get_palette,
    parse_color,
    to_hex,
)

__all__ = [
    "MATERIAL_PALETTES",
    "DEFAULT_REGISTRY",
    "Palette",
    "PaletteRegistry",
    "PaletteRegistryError",
    "build_registry",
    "get_palette",
    "parse_color",
    "to_hex",
]
