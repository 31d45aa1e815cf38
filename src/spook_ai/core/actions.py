"""Action decoding and per-step reward shaping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from spook_ai.config import (
    REWARD_COMPONENT_KEY_ORDER,
    SPEED_MODE_DANGER,
    SPEED_MODE_NORMAL,
    SPEED_MODE_THREATENED,
    MovementConfig,
    RewardConfig,
    ThreatConfig,
)
from spook_ai.core.threat import AgentState
from spook_ai.runtime import Vec2, clamp_magnitude, magnitude

REWARD_COMPONENT_KEY_SET = set(REWARD_COMPONENT_KEY_ORDER)


@dataclass(frozen=True)
class Action:
    move_x: float
    move_y: float
    speed_mode: int = SPEED_MODE_NORMAL

    @classmethod
    def from_buffers(cls, continuous: Sequence[float], discrete: Sequence[int] = ()) -> "Action":
        speed_mode = int(discrete[0]) if len(discrete) > 0 else SPEED_MODE_NORMAL
        return cls(float(continuous[0]), float(continuous[1]), speed_mode)


@dataclass(frozen=True)
class MovementCommand:
    vector: Vec2
    speed_mode: int
    multiplier: float

    @property
    def magnitude(self) -> float:
        return magnitude(self.vector)


def speed_multiplier(speed_mode: int, config: MovementConfig) -> float:
    if speed_mode == SPEED_MODE_THREATENED:
        return config.threatened_multiplier
    if speed_mode == SPEED_MODE_DANGER:
        return config.danger_multiplier
    return config.normal_multiplier


def resolve_speed_mode(speed_mode: int) -> int:
    if speed_mode in (SPEED_MODE_NORMAL, SPEED_MODE_THREATENED, SPEED_MODE_DANGER):
        return int(speed_mode)
    return SPEED_MODE_NORMAL


def interpret_action(action: Action, config: MovementConfig | None = None) -> MovementCommand:
    """Clamp the move vector to unit length and scale it by the speed mode multiplier."""
    config = config or MovementConfig()
    speed_mode = resolve_speed_mode(action.speed_mode)
    multiplier = speed_multiplier(speed_mode, config)
    direction = clamp_magnitude(Vec2(float(action.move_x), float(action.move_y)), 1.0)
    return MovementCommand(direction * multiplier, speed_mode, multiplier)


def compute_reward_components(
    state: AgentState,
    *,
    speed: float,
    intended_speed: float,
    threat_config: ThreatConfig,
    reward_config: RewardConfig,
) -> dict[str, float]:
    components = {key: 0.0 for key in REWARD_COMPONENT_KEY_ORDER}
    components["survival"] = reward_config.survival_bonus

    if state.opponent_visible and state.opponent_distance is not None:
        distance = state.opponent_distance
        if distance <= threat_config.danger_distance:
            components["distance"] = reward_config.close_penalty
        elif distance < threat_config.threat_distance:
            components["distance"] = reward_config.good_distance_bonus
        else:
            components["distance"] = reward_config.safe_distance_bonus

    if speed > reward_config.moving_speed_threshold:
        components["movement"] = reward_config.move_bonus
    else:
        components["movement"] = reward_config.stationary_penalty

    if intended_speed > reward_config.stuck_intent_threshold and speed < reward_config.stuck_speed_threshold:
        components["stuck"] = reward_config.stuck_penalty

    if __debug__:
        assert set(components.keys()) == REWARD_COMPONENT_KEY_SET
    return components
