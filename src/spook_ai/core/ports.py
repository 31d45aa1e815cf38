"""Collaborator interfaces the host supplies to the agent core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Protocol

from spook_ai.runtime import Rect, Vec2


@dataclass(frozen=True)
class Hit:
    distance: float
    tag: str
    body_id: str | None = None


class SpatialQueryPort(Protocol):
    """Ray and overlap queries against the host's obstruction geometry."""

    def raycast(
        self,
        origin: Vec2,
        direction: Vec2,
        max_distance: float,
        filter: Collection[str] | None = None,
    ) -> Hit | None: ...

    def overlap_circle(self, center: Vec2, radius: float, filter: Collection[str] | None = None) -> bool: ...


class BodyPort(Protocol):
    """A movable body driven by per-tick movement vectors."""

    def position(self) -> Vec2: ...

    def velocity(self) -> Vec2: ...

    def set_movement(self, movement: Vec2) -> None: ...

    def place(self, position: Vec2) -> None: ...


class HealthPort(Protocol):
    def revive(self) -> None: ...


class LayoutGeneratorPort(Protocol):
    def regenerate(self) -> None: ...

    def bounds(self) -> Rect: ...


class EpisodeListener(Protocol):
    """Lifecycle notifications the training area sends to the host."""

    def on_captured(self, agent_id: str) -> None: ...

    def on_survived(self, agent_id: str) -> None: ...

    def on_episode_started(self, index: int) -> None: ...

    def on_episode_ended(self, index: int, outcome: str, length: float) -> None: ...
