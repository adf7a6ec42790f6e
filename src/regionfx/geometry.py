"""Geometry and easing primitives shared by every effect generator.

All pixel conversions go through round_half_up so that x.5 values land
on the same pixel ffmpeg-side tooling expects (half rounds toward +inf,
not to even).
"""

import math


def clamp(value: float, lo: float, hi: float) -> float:
    """Bound value to [lo, hi]. NaN maps to the midpoint of the range."""
    if math.isnan(value):
        return (lo + hi) / 2
    return min(hi, max(lo, value))


def smoothstep(t: float) -> float:
    """Cubic ease t²(3 − 2t) with t clamped to [0, 1]."""
    c = max(0.0, min(1.0, t))
    return c * c * (3 - 2 * c)


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def to_pixels(fraction: float, size: int) -> int:
    """Convert a normalized (0-1) coordinate to a pixel offset."""
    return round_half_up(fraction * size)


def percent_to_pixels(percent: float, size: int) -> int:
    """Convert a percentage (0-100) of size to pixels."""
    return round_half_up((percent / 100) * size)


def to_normalized(pixels: float, size: int) -> float:
    """Convert a pixel offset back to a normalized (0-1) coordinate."""
    return pixels / size


def even_floor(n: int) -> int:
    """Largest even integer <= n. Encoders reject odd frame dimensions."""
    return n if n % 2 == 0 else n - 1
