"""
Item assembler: rendered surface + structured description + seed -> GeneratedItem.
"""
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from PIL import Image

from ..geometry import Silhouette
from ..graphics import PixelSurface, render_placeholder, to_data_url

SURFACE_ERROR = "Drawing surface unavailable"


@dataclass(frozen=True, eq=False)
class GeneratedItem:
    """Final result of one generation call."""
    type: str
    name: str
    seed: int
    item_data: dict[str, Any]
    image: Image.Image
    pixels: np.ndarray | None = None         # logical grid, (height, width, 4) RGBA
    silhouettes: dict[str, Silhouette] = field(default_factory=dict)
    anchors: dict[str, int] = field(default_factory=dict)

    @property
    def is_placeholder(self) -> bool:
        return "error" in self.item_data

    def to_dict(self, include_image: bool = False, include_geometry: bool = False) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.type,
            "name": self.name,
            "seed": self.seed,
            "item_data": self.item_data,
        }
        if include_image:
            out["image_data_url"] = to_data_url(self.image)
        if include_geometry:
            out["anchors"] = dict(self.anchors)
            out["silhouettes"] = {name: sil.to_list() for name, sil in self.silhouettes.items()}
        return out


def assemble_item(
    item_type: str,
    name: str,
    seed: int,
    item_data: dict[str, Any],
    surface: PixelSurface,
    *,
    scale: int,
    silhouettes: dict[str, Silhouette] | None = None,
    anchors: dict[str, int] | None = None,
) -> GeneratedItem:
    return GeneratedItem(
        type=item_type,
        name=name,
        seed=seed,
        item_data=item_data,
        image=surface.to_image(scale),
        pixels=surface.pixels.copy(),
        silhouettes=dict(silhouettes or {}),
        anchors=dict(anchors or {}),
    )


def placeholder_item(
    family: str,
    seed: int,
    *,
    width: int,
    height: int,
    label: str = "CTX Fail",
    color: str = "#FF0000B3",
) -> GeneratedItem:
    """Well-formed result with an error marker and a clearly marked placeholder image."""
    return GeneratedItem(
        type=family,
        name=f"Error {family.title()}",
        seed=seed,
        item_data={"error": SURFACE_ERROR},
        image=render_placeholder(width, height, label, color=color),
    )
