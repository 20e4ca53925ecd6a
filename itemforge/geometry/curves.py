"""
Curve and taper functions: width or offset at a normalized progress p in [0, 1].
Pure functions; any randomness arrives through the arguments.
"""
import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side (pixel math expects 2.5 -> 3)."""
    return math.floor(value + 0.5)


def progress(index: int, count: int) -> float:
    """index / (count - 1), or 0 for single-row components."""
    if count <= 1:
        return 0.0
    return index / (count - 1)


def linear_taper(p: float, start: float, end: float) -> float:
    """start at p=0, end at p=1."""
    return start + (end - start) * p


def power_taper(p: float, start: float, end: float, exponent: float = 1.0) -> float:
    """
    Symmetric taper: start at both ends, end at p=0.5.
    exponent < 1 stays near start longer toward the ends; exponent > 1 reaches end sooner.
    """
    distance = abs(1.0 - 2.0 * p)
    return start + (end - start) * (1.0 - distance ** exponent)


def power_curve(p: float, start: float, end: float, exponent: float = 1.0) -> float:
    """Monotonic taper from start to end along p ** exponent (crowns, toes)."""
    return start + (end - start) * (max(0.0, p) ** exponent)


def sinusoidal_offset(p: float, amplitude: float, frequency: float = 1.0, damping: float = 0.0) -> float:
    """amplitude * sin(p * pi * frequency), damped by (1 - damping * p) toward p=1."""
    return amplitude * math.sin(p * math.pi * frequency) * (1.0 - damping * p)


def ellipse_factor(t: float) -> float:
    """Half-width factor of a unit ellipse at normalized distance t from its center (0 -> 1, 1 -> 0)."""
    return math.sqrt(max(0.0, 1.0 - t * t))


def in_radius(dx: int, dy: int, radius: float) -> bool:
    return dx * dx + dy * dy <= radius * radius


def on_rim(dx: int, dy: int, radius: float) -> bool:
    """Outer ring of a radius fill."""
    return dx * dx + dy * dy > (radius - 1) * (radius - 1)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
