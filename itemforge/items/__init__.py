"""
Item families: one generator per family on a shared pipeline, plus the result assembler.
"""
from .assembler import SURFACE_ERROR, GeneratedItem, assemble_item, placeholder_item
from .axe import AxeGenerator
from .base import Composition, ItemGenerator, normalize_options
from .boots import BootsGenerator
from .hat import HatGenerator
from .potion import PotionGenerator
from .staff import StaffGenerator

__all__ = [
    "SURFACE_ERROR",
    "GeneratedItem",
    "assemble_item",
    "placeholder_item",
    "AxeGenerator",
    "Composition",
    "ItemGenerator",
    "normalize_options",
    "BootsGenerator",
    "HatGenerator",
    "PotionGenerator",
    "StaffGenerator",
]
