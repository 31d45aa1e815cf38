"""Runtime helpers for Spook AI."""

from .geometry import (
    ZERO,
    Rect,
    Vec2,
    circle_overlaps_rect,
    clamp_magnitude,
    heading_degrees,
    heading_to_vector,
    length_squared,
    magnitude,
    normalize_angle_degrees,
    normalized,
    ray_circle_entry,
    segment_entry_fraction,
)

__all__ = [
    "ZERO",
    "Rect",
    "Vec2",
    "circle_overlaps_rect",
    "clamp_magnitude",
    "heading_degrees",
    "heading_to_vector",
    "length_squared",
    "magnitude",
    "normalize_angle_degrees",
    "normalized",
    "ray_circle_entry",
    "segment_entry_fraction",
]
