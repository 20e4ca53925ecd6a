"""
Palette registry: immutable Palette values looked up by case-insensitive key.
Entries are registered once at startup, then the registry is frozen; generation only reads it.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from PIL import ImageColor

from .data import MATERIAL_PALETTES

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

DEFAULT_PALETTE_KEY = "IRON"


class PaletteRegistryError(ValueError):
    """Duplicate key, or registration after the registry was frozen."""


def parse_color(value: str | tuple) -> RGBA:
    """'#RRGGBB', '#RRGGBBAA', any CSS color name, or an RGB(A) tuple -> RGBA tuple."""
    if isinstance(value, tuple):
        if len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]), 255)
        return tuple(int(c) for c in value[:4])  # type: ignore[return-value]
    return ImageColor.getcolor(value, "RGBA")  # type: ignore[return-value]


def to_hex(color: RGBA) -> str:
    r, g, b, a = color
    if a == 255:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"#{r:02X}{g:02X}{b:02X}{a:02X}"


@dataclass(frozen=True)
class Palette:
    """Four tones of one material. Outline is optional in the source data and falls back to shadow."""
    key: str
    name: str
    base: RGBA
    highlight: RGBA
    shadow: RGBA
    outline: RGBA | None = None

    @classmethod
    def from_mapping(cls, key: str, entry: Mapping[str, Any]) -> "Palette":
        outline = entry.get("outline")
        return cls(
            key=key.upper(),
            name=str(entry.get("name") or key.replace("_", " ").title()),
            base=parse_color(entry["base"]),
            highlight=parse_color(entry["highlight"]),
            shadow=parse_color(entry["shadow"]),
            outline=parse_color(outline) if outline else None,
        )

    def tone(self, role: str) -> RGBA:
        """Color for a tone name: base | highlight | shadow | outline."""
        if role == "outline":
            return self.outline or self.shadow
        return getattr(self, role)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "base": to_hex(self.base),
            "highlight": to_hex(self.highlight),
            "shadow": to_hex(self.shadow),
            "outline": to_hex(self.outline) if self.outline else None,
        }


class PaletteRegistry:
    """Key -> Palette. register() until freeze(); get() never fails."""

    def __init__(self, default_key: str = DEFAULT_PALETTE_KEY) -> None:
        self._palettes: dict[str, Palette] = {}
        self._frozen = False
        self.default_key = default_key.upper()

    def register(self, key: str, palette: Palette | Mapping[str, Any]) -> Palette:
        if self._frozen:
            raise PaletteRegistryError(f"Registry is frozen; cannot register {key!r}")
        upper = key.upper()
        if upper in self._palettes:
            raise PaletteRegistryError(f"Palette {upper!r} already registered")
        if not isinstance(palette, Palette):
            palette = Palette.from_mapping(upper, palette)
        self._palettes[upper] = palette
        return palette

    def freeze(self) -> "PaletteRegistry":
        if self.default_key not in self._palettes:
            raise PaletteRegistryError(f"Default palette {self.default_key!r} is not registered")
        self._frozen = True
        return self

    def get(self, key: str | None) -> Palette:
        """Case-insensitive lookup; unknown or empty keys warn and return the default palette."""
        if key:
            palette = self._palettes.get(str(key).upper())
            if palette is not None:
                return palette
            logger.warning("Palette %r not found. Using %s as default.", key, self.default_key)
        else:
            logger.warning("Palette name is empty. Using %s as default.", self.default_key)
        return self._palettes[self.default_key]

    def keys(self) -> list[str]:
        return list(self._palettes)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.upper() in self._palettes

    def __iter__(self) -> Iterator[Palette]:
        return iter(self._palettes.values())

    def __len__(self) -> int:
        return len(self._palettes)


def build_registry(
    table: Mapping[str, Mapping[str, Any]] = MATERIAL_PALETTES,
    default_key: str = DEFAULT_PALETTE_KEY,
) -> PaletteRegistry:
    """Register every table entry and freeze."""
    registry = PaletteRegistry(default_key=default_key)
    for key, entry in table.items():
        registry.register(key, entry)
    return registry.freeze()


DEFAULT_REGISTRY = build_registry()


def get_palette(key: str | None) -> Palette:
    """Palette service over the default registry."""
    return DEFAULT_REGISTRY.get(key)
