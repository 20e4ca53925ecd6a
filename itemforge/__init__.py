# Procedural pixel-art item icons: our shapes, palettes and shading only, no image assets

from .api import (
    FAMILIES,
    UnknownFamilyError,
    generate_axe,
    generate_boots,
    generate_hat,
    generate_item,
    generate_potion,
    generate_staff,
    get_generator,
)
from .config import load_config
from .items import GeneratedItem

__version__ = "0.1.0"

__all__ = [
    "FAMILIES",
    "UnknownFamilyError",
    "generate_axe",
    "generate_boots",
    "generate_hat",
    "generate_item",
    "generate_potion",
    "generate_staff",
    "get_generator",
    "load_config",
    "GeneratedItem",
]
