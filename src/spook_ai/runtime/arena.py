"""In-memory reference host: a walled box arena with tile obstacles and kinematic bodies."""

from __future__ import annotations

import random
from typing import Callable, Collection, TypeVar

from spook_ai.config import (
    ARENA_HEIGHT,
    ARENA_TILE_SIZE,
    ARENA_WIDTH,
    BODY_RADIUS,
    MAX_OBSTACLE_SECTIONS,
    MIN_OBSTACLE_SECTIONS,
    NUM_OBSTACLE_SHAPES,
    OBSTACLE_START_ATTEMPTS,
    TAG_OBSTACLE,
    TAG_WALL,
)
from spook_ai.core.ports import Hit
from spook_ai.runtime.geometry import (
    ZERO,
    Rect,
    Vec2,
    circle_overlaps_rect,
    length_squared,
    normalized,
    ray_circle_entry,
    segment_entry_fraction,
)

T = TypeVar("T")


def _grow_connected_random_walk_shape(
    start: T,
    min_sections: int,
    max_sections: int,
    neighbor_candidates_fn: Callable[[T], list[T]],
    is_candidate_valid_fn: Callable[[T, list[T]], bool],
    rng: random.Random,
) -> list[T]:
    target_sections = rng.randint(int(min_sections), int(max_sections))
    shape = [start]
    current = start

    for _ in range(target_sections - 1):
        candidates = list(neighbor_candidates_fn(current))
        rng.shuffle(candidates)
        for candidate in candidates:
            if is_candidate_valid_fn(candidate, shape):
                shape.append(candidate)
                current = candidate
                break
        else:
            break
    return shape


def spawn_connected_random_walk_shapes(
    shape_count: int,
    min_sections: int,
    max_sections: int,
    sample_start_fn: Callable[[], T | None],
    neighbor_candidates_fn: Callable[[T], list[T]],
    is_candidate_valid_fn: Callable[[T, list[T]], bool],
    rng: random.Random | None = None,
) -> list[list[T]]:
    rng = rng or random.Random()
    shapes: list[list[T]] = []
    for _ in range(int(shape_count)):
        start = sample_start_fn()
        if start is None:
            continue
        shape = _grow_connected_random_walk_shape(
            start=start,
            min_sections=min_sections,
            max_sections=max_sections,
            neighbor_candidates_fn=neighbor_candidates_fn,
            is_candidate_valid_fn=is_candidate_valid_fn,
            rng=rng,
        )
        if shape:
            shapes.append(shape)
    return shapes


class BoxArena:
    """Spatial query and layout generator over a walled rectangle of square tiles.

    World coordinates have the origin at the arena centre. Obstacle tiles are
    tagged ``obstacle``; the outer boundary reports ``wall`` hits. Bodies added
    with :meth:`add_body` show up in raycasts under their own tag, except a
    body whose circle contains the ray origin; overlap queries ignore them.
    """

    def __init__(
        self,
        width: float = ARENA_WIDTH,
        height: float = ARENA_HEIGHT,
        tile_size: float = ARENA_TILE_SIZE,
        num_obstacles: int = NUM_OBSTACLE_SHAPES,
        rng: random.Random | None = None,
    ):
        self.width = float(width)
        self.height = float(height)
        self.tile_size = float(tile_size)
        self.num_obstacles = int(num_obstacles)
        self.rng = rng or random.Random()
        self.obstacles: list[Rect] = []
        self.bodies: dict[str, KinematicBody] = {}
        self.body_tags: dict[str, str] = {}
        self.regenerations = 0

    def bounds(self) -> Rect:
        return Rect(-self.width / 2.0, -self.height / 2.0, self.width, self.height)

    def regenerate(self) -> None:
        self.obstacles = []
        shapes = spawn_connected_random_walk_shapes(
            shape_count=self.num_obstacles,
            min_sections=MIN_OBSTACLE_SECTIONS,
            max_sections=MAX_OBSTACLE_SECTIONS,
            sample_start_fn=self._sample_valid_obstacle_start,
            neighbor_candidates_fn=self._neighbor_obstacle_candidates,
            is_candidate_valid_fn=self._is_valid_obstacle_tile,
            rng=self.rng,
        )
        for shape in shapes:
            self.obstacles.extend(shape)
        self.regenerations += 1

    def add_obstacle(self, rect: Rect) -> None:
        self.obstacles.append(rect)

    def add_body(self, body_id: str, body: KinematicBody, tag: str) -> None:
        self.bodies[body_id] = body
        self.body_tags[body_id] = tag

    def _tile_at(self, column: int, row: int) -> Rect:
        bounds = self.bounds()
        return Rect(
            bounds.min_x + column * self.tile_size,
            bounds.min_y + row * self.tile_size,
            self.tile_size,
            self.tile_size,
        )

    def _sample_valid_obstacle_start(self) -> Rect | None:
        columns = int(self.width // self.tile_size)
        rows = int(self.height // self.tile_size)
        for _ in range(OBSTACLE_START_ATTEMPTS):
            tile = self._tile_at(self.rng.randrange(columns), self.rng.randrange(rows))
            if self._is_valid_obstacle_tile(tile, []):
                return tile
        return None

    def _is_valid_obstacle_tile(self, tile: Rect, pending_tiles: list[Rect]) -> bool:
        bounds = self.bounds()
        if tile.min_x < bounds.min_x or tile.max_x > bounds.max_x:
            return False
        if tile.min_y < bounds.min_y or tile.max_y > bounds.max_y:
            return False
        return tile not in self.obstacles and tile not in pending_tiles

    def _neighbor_obstacle_candidates(self, tile: Rect) -> list[Rect]:
        size = self.tile_size
        return [
            Rect(tile.min_x - size, tile.min_y, size, size),
            Rect(tile.min_x + size, tile.min_y, size, size),
            Rect(tile.min_x, tile.min_y - size, size, size),
            Rect(tile.min_x, tile.min_y + size, size, size),
        ]

    def raycast(
        self,
        origin: Vec2,
        direction: Vec2,
        max_distance: float,
        filter: Collection[str] | None = None,
    ) -> Hit | None:
        direction = normalized(direction)
        if length_squared(direction) == 0.0 or max_distance <= 0:
            return None

        nearest: Hit | None = None
        if filter is None or TAG_OBSTACLE in filter:
            end = origin + direction * max_distance
            for obstacle in self.obstacles:
                fraction = segment_entry_fraction(origin, end, obstacle)
                if fraction is None:
                    continue
                distance = fraction * max_distance
                if nearest is None or distance < nearest.distance:
                    nearest = Hit(distance, TAG_OBSTACLE)

        if filter is None or TAG_WALL in filter:
            wall_distance = self._distance_to_wall(origin, direction)
            if wall_distance is not None and wall_distance <= max_distance:
                if nearest is None or wall_distance < nearest.distance:
                    nearest = Hit(wall_distance, TAG_WALL)

        for body_id, body in self.bodies.items():
            tag = self.body_tags[body_id]
            if filter is not None and tag not in filter:
                continue
            center = body.position()
            if origin.distance(center) <= body.radius:
                continue
            distance = ray_circle_entry(origin, direction, center, body.radius)
            if distance is None or distance > max_distance:
                continue
            if nearest is None or distance < nearest.distance:
                nearest = Hit(distance, tag, body_id)
        return nearest

    def _distance_to_wall(self, origin: Vec2, direction: Vec2) -> float | None:
        bounds = self.bounds()
        if not bounds.contains(origin):
            return 0.0
        candidates = []
        if direction.x > 0:
            candidates.append((bounds.max_x - origin.x) / direction.x)
        elif direction.x < 0:
            candidates.append((bounds.min_x - origin.x) / direction.x)
        if direction.y > 0:
            candidates.append((bounds.max_y - origin.y) / direction.y)
        elif direction.y < 0:
            candidates.append((bounds.min_y - origin.y) / direction.y)
        return min(candidates) if candidates else None

    def overlap_circle(self, center: Vec2, radius: float, filter: Collection[str] | None = None) -> bool:
        if filter is None or TAG_WALL in filter:
            bounds = self.bounds()
            if (
                center.x - radius < bounds.min_x
                or center.x + radius > bounds.max_x
                or center.y - radius < bounds.min_y
                or center.y + radius > bounds.max_y
            ):
                return True
        if filter is None or TAG_OBSTACLE in filter:
            return any(circle_overlaps_rect(center, radius, obstacle) for obstacle in self.obstacles)
        return False


class SimpleHealth:
    """Single-hit health pool."""

    def __init__(self, max_health: int = 1):
        self.max_health = int(max_health)
        self.health = self.max_health
        self.is_alive = True

    def take_hit(self, damage: int = 1) -> bool:
        if not self.is_alive:
            return False
        self.health = max(0, self.health - int(damage))
        if self.health <= 0:
            self.is_alive = False
            return True
        return False

    def revive(self) -> None:
        self.health = self.max_health
        self.is_alive = True


class KinematicBody:
    """Body that moves at ``movement * max_speed`` and stops when the next position is blocked."""

    def __init__(self, arena: BoxArena, position: Vec2 = ZERO, max_speed: float = 1.0, radius: float = BODY_RADIUS):
        self.arena = arena
        self._position = position
        self._velocity = ZERO
        self.movement = ZERO
        self.max_speed = float(max_speed)
        self.radius = float(radius)

    def position(self) -> Vec2:
        return self._position

    def velocity(self) -> Vec2:
        return self._velocity

    def set_movement(self, movement: Vec2) -> None:
        self.movement = movement

    def place(self, position: Vec2) -> None:
        self._position = position
        self._velocity = ZERO
        self.movement = ZERO

    def step(self, dt: float) -> bool:
        """Integrate one tick; returns False when the move was blocked."""
        velocity = self.movement * self.max_speed
        next_position = self._position + velocity * dt
        if self.arena.overlap_circle(next_position, self.radius):
            self._velocity = ZERO
            return False
        self._position = next_position
        self._velocity = velocity
        return True
