"""
Geometry: curve/taper functions and silhouette profiles.
"""
from .curves import (
    clamp,
    ellipse_factor,
    in_radius,
    linear_taper,
    on_rim,
    power_curve,
    power_taper,
    progress,
    round_half_up,
    sinusoidal_offset,
)
from .silhouette import Silhouette, SilhouetteRow

__all__ = [
    "clamp",
    "ellipse_factor",
    "in_radius",
    "linear_taper",
    "on_rim",
    "power_curve",
    "power_taper",
    "progress",
    "round_half_up",
    "sinusoidal_offset",
    "Silhouette",
    "SilhouetteRow",
]
