"""Threat perception: visibility and distance to a discrete threat level with decaying memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from spook_ai.config import ThreatConfig
from spook_ai.runtime import ZERO, Vec2


class ThreatLevel(float, Enum):
    SAFE = 0.0
    ALERT = 0.5
    THREATENED = 1.0
    DANGER = 2.0


@dataclass
class AgentState:
    """Per-agent perception state, written only by its ThreatPerception."""

    position: Vec2 = field(default_factory=lambda: ZERO)
    velocity: Vec2 = field(default_factory=lambda: ZERO)
    threat_level: ThreatLevel = ThreatLevel.SAFE
    opponent_visible: bool = False
    opponent_distance: float | None = None
    last_known_opponent_position: Vec2 | None = None
    last_seen_timestamp: float | None = None

    @property
    def has_seen_opponent(self) -> bool:
        return self.last_known_opponent_position is not None


class ThreatPerception:
    """Turns opponent sightings into a threat level and a time-decayed memory.

    Levels resolve in priority order: Danger and Threatened need the opponent
    in sight within ``danger_distance`` / ``threat_distance``; Alert holds while
    the opponent is out of sight but was seen less than ``memory_duration``
    ago; anything else is Safe. Memory expires silently with elapsed time.
    """

    def __init__(self, config: ThreatConfig | None = None):
        self.config = config or ThreatConfig()
        self.state = AgentState()

    def reset(self) -> None:
        """Forget the opponent; called at the start of every episode."""
        self.state = AgentState(position=self.state.position, velocity=self.state.velocity)

    def observe_body(self, position: Vec2, velocity: Vec2) -> None:
        self.state.position = position
        self.state.velocity = velocity

    def update(self, opponent_visible: bool, opponent_position: Vec2 | None, now: float) -> ThreatLevel:
        state = self.state
        visible = bool(opponent_visible) and opponent_position is not None
        state.opponent_visible = visible
        if visible:
            state.last_known_opponent_position = opponent_position
            state.last_seen_timestamp = now

        if opponent_position is None:
            state.opponent_distance = None
        else:
            state.opponent_distance = state.position.distance(opponent_position)

        state.threat_level = self._resolve_level(visible, state.opponent_distance, now)
        return state.threat_level

    def _resolve_level(self, visible: bool, distance: float | None, now: float) -> ThreatLevel:
        if visible and distance is not None:
            if distance <= self.config.danger_distance:
                return ThreatLevel.DANGER
            if distance <= self.config.threat_distance:
                return ThreatLevel.THREATENED
        if not visible and self.is_remembering(now):
            return ThreatLevel.ALERT
        return ThreatLevel.SAFE

    def is_remembering(self, now: float) -> bool:
        elapsed = self.time_since_last_seen(now)
        return elapsed is not None and elapsed < self.config.memory_duration

    def time_since_last_seen(self, now: float) -> float | None:
        if not self.state.has_seen_opponent or self.state.last_seen_timestamp is None:
            return None
        return now - self.state.last_seen_timestamp
