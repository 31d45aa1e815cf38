"""Generic 2D geometry helpers for y-up world spaces."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyglet.math import Vec2

ZERO = Vec2(0.0, 0.0)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle anchored at its minimum corner."""

    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height

    @property
    def center(self) -> Vec2:
        return Vec2(self.min_x + self.width / 2.0, self.min_y + self.height / 2.0)

    def contains(self, point: Vec2) -> bool:
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y


def heading_to_vector(angle_degrees: float) -> Vec2:
    radians = math.radians(angle_degrees)
    return Vec2(math.cos(radians), math.sin(radians))


def heading_degrees(vector: Vec2) -> float:
    return math.degrees(math.atan2(vector.y, vector.x)) % 360.0


def length_squared(vector: Vec2) -> float:
    return vector.dot(vector)


def magnitude(vector: Vec2) -> float:
    return math.sqrt(length_squared(vector))


def normalized(vector: Vec2) -> Vec2:
    length = magnitude(vector)
    if length == 0.0:
        return ZERO
    return Vec2(vector.x / length, vector.y / length)


def clamp_magnitude(vector: Vec2, max_length: float = 1.0) -> Vec2:
    """Scale ``vector`` down to ``max_length`` when it is longer, keeping direction."""
    length = magnitude(vector)
    if length <= max_length:
        return vector
    return Vec2(vector.x / length * max_length, vector.y / length * max_length)


def normalize_angle_degrees(angle: float) -> float:
    return ((angle + 180.0) % 360.0) - 180.0


def segment_entry_fraction(origin: Vec2, end: Vec2, rect: Rect) -> float | None:
    """Return the fraction along ``origin -> end`` where the segment enters ``rect``.

    Liang-Barsky clipping. Returns ``0.0`` when ``origin`` is already inside,
    ``None`` when the segment misses the rectangle.
    """
    x0, y0 = origin.x, origin.y
    dx = end.x - x0
    dy = end.y - y0

    p = (-dx, dx, -dy, dy)
    q = (x0 - rect.min_x, rect.max_x - x0, y0 - rect.min_y, rect.max_y - y0)

    u1 = 0.0
    u2 = 1.0

    for pi, qi in zip(p, q):
        if pi == 0:
            if qi < 0:
                return None
            continue

        t = qi / pi
        if pi < 0:
            if t > u2:
                return None
            u1 = max(u1, t)
        else:
            if t < u1:
                return None
            u2 = min(u2, t)

    return u1


def circle_overlaps_rect(center: Vec2, radius: float, rect: Rect) -> bool:
    nearest_x = max(rect.min_x, min(center.x, rect.max_x))
    nearest_y = max(rect.min_y, min(center.y, rect.max_y))
    dx = center.x - nearest_x
    dy = center.y - nearest_y
    return dx * dx + dy * dy < radius * radius


def ray_circle_entry(origin: Vec2, direction: Vec2, center: Vec2, radius: float) -> float | None:
    """Distance along the unit ``direction`` where the ray enters the circle, or ``None`` on a miss."""
    offset = origin - center
    b = offset.dot(direction)
    c = offset.dot(offset) - radius * radius
    if c > 0.0 and b > 0.0:
        return None
    discriminant = b * b - c
    if discriminant < 0.0:
        return None
    return max(0.0, -b - math.sqrt(discriminant))
