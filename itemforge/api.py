"""
Entry point for callers: family name + options -> GeneratedItem.
"""
import logging
from typing import Any

from .items import (
    AxeGenerator,
    BootsGenerator,
    GeneratedItem,
    HatGenerator,
    ItemGenerator,
    PotionGenerator,
    StaffGenerator,
)
from .palettes import PaletteRegistry

logger = logging.getLogger(__name__)

GENERATORS: dict[str, type[ItemGenerator]] = {
    "axe": AxeGenerator,
    "boots": BootsGenerator,
    "hat": HatGenerator,
    "helmet": HatGenerator,
    "potion": PotionGenerator,
    "staff": StaffGenerator,
}

FAMILIES = tuple(GENERATORS)


class UnknownFamilyError(ValueError):
    """Requested family has no generator."""


def get_generator(
    family: str,
    config: dict[str, Any] | None = None,
    registry: PaletteRegistry | None = None,
) -> ItemGenerator:
    key = str(family or "").strip().lower()
    if key not in GENERATORS:
        raise UnknownFamilyError(f"Unknown item family {family!r}; expected one of {', '.join(FAMILIES)}")
    return GENERATORS[key](config=config, registry=registry)


def generate_item(
    family: str | None = None,
    options: dict[str, Any] | None = None,
    *,
    config: dict[str, Any] | None = None,
    registry: PaletteRegistry | None = None,
    **kw: Any,
) -> GeneratedItem:
    """
    Generate one item. Options may be snake_case or camelCase; keyword arguments
    override them. A family may also be given inside options ({"family": "potion"}).
    "helmet" is the hat family restricted to helmets.
    """
    opts = {**(options or {}), **kw}
    family = family or opts.pop("family", None)
    opts.pop("family", None)
    generator = get_generator(family, config=config, registry=registry)
    if str(family).strip().lower() == "helmet":
        opts.setdefault("main_type", "helmet")
    logger.debug("Generating %s with options %s", family, opts)
    return generator.generate(opts)


def generate_axe(options: dict[str, Any] | None = None, **kw: Any) -> GeneratedItem:
    return generate_item("axe", options, **kw)


def generate_boots(options: dict[str, Any] | None = None, **kw: Any) -> GeneratedItem:
    return generate_item("boots", options, **kw)


def generate_hat(options: dict[str, Any] | None = None, **kw: Any) -> GeneratedItem:
    return generate_item("hat", options, **kw)


def generate_potion(options: dict[str, Any] | None = None, **kw: Any) -> GeneratedItem:
    return generate_item("potion", options, **kw)


def generate_staff(options: dict[str, Any] | None = None, **kw: Any) -> GeneratedItem:
    return generate_item("staff", options, **kw)
