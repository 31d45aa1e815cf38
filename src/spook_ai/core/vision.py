"""Cone-of-vision visibility checks and the ray-sweep observation sensor."""

from __future__ import annotations

import math
from typing import Collection, Iterable, Mapping

from spook_ai.config import (
    OBSTACLE_TAGS,
    TARGET_TYPE_CODES,
    TARGET_TYPE_NONE,
    VISION_ANGLE_DEGREES,
    VISION_RADIUS,
    VisionSensorConfig,
)
from spook_ai.core.observation import NO_HIT
from spook_ai.core.ports import BodyPort, Hit, SpatialQueryPort
from spook_ai.runtime import ZERO, Vec2, heading_to_vector, magnitude, normalize_angle_degrees, normalized


class ConeOfVision:
    """A view cone of ``angle_degrees`` width and ``radius`` reach, blocked by obstructions."""

    def __init__(
        self,
        spatial: SpatialQueryPort,
        angle_degrees: float = VISION_ANGLE_DEGREES,
        radius: float = VISION_RADIUS,
        obstacle_filter: Collection[str] = OBSTACLE_TAGS,
    ):
        self.spatial = spatial
        self.angle_degrees = float(angle_degrees)
        self.radius = float(radius)
        self.obstacle_filter = obstacle_filter

    def can_see(self, origin: Vec2, facing_degrees: float, target: Vec2) -> bool:
        to_target = target - origin
        distance = magnitude(to_target)
        if distance > self.radius:
            return False
        if distance == 0.0:
            return True

        target_angle = math.degrees(math.atan2(to_target.y, to_target.x))
        relative = normalize_angle_degrees(target_angle - facing_degrees)
        if abs(relative) > self.angle_degrees / 2.0:
            return False

        hit = self.spatial.raycast(origin, normalized(to_target), distance, self.obstacle_filter)
        return hit is None or hit.distance >= distance


def target_type_code(hit: Hit | None) -> float:
    if hit is None:
        return TARGET_TYPE_NONE
    return TARGET_TYPE_CODES.get(hit.tag, TARGET_TYPE_NONE)


def _clamp_unit(value: float) -> float:
    return min(1.0, max(-1.0, value))


class ConeOfVisionSensor:
    """Writes a fixed-size observation block from a sweep of rays across the view cone.

    Per ray, in sweep order: hit distance / radius (1.0 on a miss), then the
    target type code and the hit body's scaled velocity when those are enabled.
    The block ends with ``max_targets`` visible-target slots of
    ``(distance / radius, world angle / 180)``; empty slots read ``(1.0, 0.0)``.
    """

    def __init__(
        self,
        spatial: SpatialQueryPort,
        config: VisionSensorConfig | None = None,
        bodies: Mapping[str, BodyPort] | None = None,
    ):
        self.spatial = spatial
        self.config = config or VisionSensorConfig()
        self.bodies = bodies if bodies is not None else {}
        self.cone = ConeOfVision(spatial, self.config.angle_degrees, self.config.radius)
        self.size = self.config.size

    def ray_directions(self, facing_degrees: float) -> list[Vec2]:
        step = self.config.angle_degrees / self.config.ray_count if self.config.ray_count else 0.0
        start = facing_degrees - self.config.angle_degrees / 2.0
        return [heading_to_vector(start + step * index) for index in range(self.config.ray_count)]

    def visible_targets(self, origin: Vec2, facing_degrees: float, candidates: Iterable[Vec2]) -> list[Vec2]:
        visible = [target for target in candidates if self.cone.can_see(origin, facing_degrees, target)]
        return visible[: self.config.max_targets]

    def write(self, origin: Vec2, facing_degrees: float, targets: Iterable[Vec2] = ()) -> list[float]:
        values: list[float] = []
        for direction in self.ray_directions(facing_degrees):
            hit = self.spatial.raycast(origin, direction, self.config.radius, self.config.detect_filter)
            values.extend(self._encode_ray(hit))

        visible = self.visible_targets(origin, facing_degrees, targets)
        for index in range(self.config.max_targets):
            if index < len(visible):
                values.extend(self._encode_target(origin, visible[index]))
            else:
                values.extend([1.0, 0.0])

        if __debug__:
            assert len(values) == self.size
        return values

    def _encode_ray(self, hit: Hit | None) -> list[float]:
        values = [NO_HIT if hit is None else float(hit.distance) / self.config.radius]
        if self.config.include_target_type:
            values.append(target_type_code(hit))
        if self.config.include_target_velocity:
            velocity = self._hit_velocity(hit)
            scale = self.config.velocity_scale
            values.extend([_clamp_unit(velocity.x / scale), _clamp_unit(velocity.y / scale)])
        return values

    def _hit_velocity(self, hit: Hit | None) -> Vec2:
        if hit is None or hit.body_id is None:
            return ZERO
        body = self.bodies.get(hit.body_id)
        return ZERO if body is None else body.velocity()

    def _encode_target(self, origin: Vec2, target: Vec2) -> list[float]:
        to_target = target - origin
        distance = min(1.0, max(0.0, magnitude(to_target) / self.config.radius))
        if magnitude(to_target) == 0.0:
            return [distance, 0.0]
        angle = math.degrees(math.atan2(to_target.y, to_target.x))
        return [distance, angle / 180.0]
