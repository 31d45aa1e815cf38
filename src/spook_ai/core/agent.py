"""Evader agent adapter: observation, action and reward contract for one body."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from spook_ai.config import (
    POLICY_INPUT_SIZE,
    MovementConfig,
    ObservationConfig,
    RewardConfig,
    ThreatConfig,
)
from spook_ai.core.actions import Action, MovementCommand, compute_reward_components, interpret_action
from spook_ai.core.actor import Actor
from spook_ai.core.observation import ObservationAssembler
from spook_ai.core.ports import BodyPort, HealthPort, SpatialQueryPort
from spook_ai.core.threat import AgentState, ThreatLevel, ThreatPerception
from spook_ai.core.vision import ConeOfVisionSensor
from spook_ai.errors import MissingCollaboratorError
from spook_ai.runtime import Vec2, heading_degrees, length_squared, magnitude

LOGGER = logging.getLogger("spook_ai.agent")


class EvaderAgent(Actor):
    """Lets an external policy drive one evader body.

    Each decision step the host calls :meth:`collect_observations` and then
    :meth:`on_action_received` with the policy's action. Terminal outcomes
    arrive through :meth:`on_captured` and :meth:`on_survived`.
    """

    def __init__(
        self,
        agent_id: str,
        body: BodyPort | None,
        spatial: SpatialQueryPort | None,
        *,
        health: HealthPort | None = None,
        threat_config: ThreatConfig | None = None,
        observation_config: ObservationConfig | None = None,
        movement_config: MovementConfig | None = None,
        reward_config: RewardConfig | None = None,
        declared_input_size: int | None = POLICY_INPUT_SIZE,
        bodies: Mapping[str, BodyPort] | None = None,
    ):
        super().__init__(agent_id, body, health)
        if spatial is None:
            LOGGER.error("%s: missing spatial query collaborator", agent_id)
            raise MissingCollaboratorError(f"Agent '{agent_id}' requires a spatial query port")
        self.spatial = spatial
        self.threat_config = threat_config or ThreatConfig()
        self.movement_config = movement_config or MovementConfig()
        self.reward_config = reward_config or RewardConfig()
        self.perception = ThreatPerception(self.threat_config)
        self.assembler = ObservationAssembler(
            observation_config or ObservationConfig(),
            self.threat_config,
            declared_input_size=declared_input_size,
        )
        self.vision_sensor: ConeOfVisionSensor | None = None
        if self.assembler.config.include_vision:
            self.vision_sensor = ConeOfVisionSensor(spatial, self.assembler.config.vision, bodies)
        self.facing_degrees = 0.0

        self.cumulative_reward = 0.0
        self.last_reward_breakdown: dict[str, float] = {}
        self.last_command: MovementCommand | None = None
        self.episode_active = False
        self.completed_episodes = 0
        self.last_episode_reward = 0.0

    @property
    def state(self) -> AgentState:
        return self.perception.state

    @property
    def threat_level(self) -> ThreatLevel:
        return self.perception.state.threat_level

    @property
    def observation_size(self) -> int:
        return self.assembler.size

    def begin_episode(self) -> None:
        self.perception.reset()
        self.cumulative_reward = 0.0
        self.last_reward_breakdown = {}
        self.last_command = None
        self.episode_active = True

    def collect_observations(
        self,
        opponent_visible: bool,
        opponent_position: Vec2 | None,
        now: float,
        targets: Iterable[Vec2] = (),
    ) -> list[float]:
        """Refresh perception and build the observation vector.

        ``targets`` are candidate positions for the cone-of-vision block; only
        those inside the cone and unobstructed fill its target slots.
        """
        velocity = self.body.velocity()
        if length_squared(velocity) > 0.0:
            self.facing_degrees = heading_degrees(velocity)
        self.perception.observe_body(self.body.position(), velocity)
        self.perception.update(opponent_visible, opponent_position, now)
        probes = self.assembler.cast_probes(self.spatial, self.state.position)
        vision = None
        if self.vision_sensor is not None:
            vision = self.vision_sensor.write(self.state.position, self.facing_degrees, targets)
        return self.assembler.assemble(self.state, probes, now, vision)

    def on_action_received(self, action: Action) -> dict[str, float]:
        """Apply the action's movement, then score the step."""
        command = interpret_action(action, self.movement_config)
        self.body.set_movement(command.vector)
        self.last_command = command
        return self.apply_step_rewards()

    def apply_step_rewards(self) -> dict[str, float]:
        intended_speed = self.last_command.magnitude if self.last_command is not None else 0.0
        components = compute_reward_components(
            self.state,
            speed=magnitude(self.body.velocity()),
            intended_speed=intended_speed,
            threat_config=self.threat_config,
            reward_config=self.reward_config,
        )
        self.add_reward(sum(components.values()))
        self.last_reward_breakdown = components
        return components

    def add_reward(self, value: float) -> None:
        self.cumulative_reward += float(value)

    def on_captured(self) -> None:
        self.add_reward(self.reward_config.capture_penalty)
        self.end_episode("captured")

    def on_survived(self) -> None:
        self.add_reward(self.reward_config.survival_reward)
        self.end_episode("survived")

    def end_episode(self, reason: str = "interrupted") -> None:
        if not self.episode_active:
            return
        self.episode_active = False
        self.completed_episodes += 1
        self.last_episode_reward = self.cumulative_reward
        LOGGER.debug(
            "%s episode ended (%s) reward=%.3f",
            self.actor_id,
            reason,
            self.last_episode_reward,
        )
