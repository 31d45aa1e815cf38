"""Headless training-area runner on the reference arena."""

from __future__ import annotations

if __package__ in {None, ""}:
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging
import random

from spook_ai.config import (
    CAPTURE_RADIUS,
    DECISION_INTERVAL_TICKS,
    EVADER_MAX_SPEED,
    FIXED_DELTA_SECONDS,
    FLAGS,
    NUM_AGENTS,
    PURSUER_MAX_SPEED,
    PURSUER_MOVE_FALLBACK_OFFSETS,
    RUN_EPISODES,
    RUN_MAX_EPISODE_LENGTH_SECONDS,
    RUN_SEED,
    TAG_ENEMY,
    TAG_PLAYER,
    TRAINER_CONFIG_PATH,
    ObservationConfig,
    TrainingAreaConfig,
)
from spook_ai.core import Actor, ConeOfVision, EvaderAgent, TrainingArea
from spook_ai.logging_utils import configure_logging, log_key_values, log_run_context
from spook_ai.runtime import ZERO, heading_degrees, heading_to_vector, length_squared
from spook_ai.runtime.arena import BoxArena, KinematicBody, SimpleHealth
from spook_ai.train import (
    HeuristicPolicy,
    RunningObservationNormalizer,
    StubInferencePolicy,
    behavior_summary,
    load_trainer_config,
)

LOGGER = logging.getLogger("spook_ai.run")
POLICY_NAMES = ("heuristic", "stub")


class ScriptedPursuer:
    """Steers the protagonist toward the nearest active agent, sidestepping blocked headings."""

    def __init__(self, actor: Actor, body: KinematicBody, arena: BoxArena):
        self.actor = actor
        self.body = body
        self.arena = arena

    def steer(self, agents: list[EvaderAgent], dt: float) -> None:
        if not agents:
            self.body.set_movement(ZERO)
            return
        position = self.actor.position
        target = min(agents, key=lambda agent: position.distance(agent.position))
        to_target = target.position - position
        if length_squared(to_target) == 0.0:
            self.body.set_movement(ZERO)
            return

        desired_angle = heading_degrees(to_target)
        for offset in PURSUER_MOVE_FALLBACK_OFFSETS:
            direction = heading_to_vector(desired_angle + offset)
            next_position = position + direction * (self.body.max_speed * dt)
            if not self.arena.overlap_circle(next_position, self.body.radius):
                self.body.set_movement(direction)
                return
        self.body.set_movement(ZERO)


def build_policy(policy_name: str, rng: random.Random):
    if policy_name == "heuristic":
        return HeuristicPolicy(rng)
    if policy_name == "stub":
        return StubInferencePolicy()
    raise ValueError(f"Unknown policy '{policy_name}'. Use one of {POLICY_NAMES}.")


class HeadlessSession:
    """Drives a TrainingArea with a scripted pursuer and a stand-in policy, one fixed tick at a time."""

    def __init__(
        self,
        num_agents: int = NUM_AGENTS,
        policy_name: str = "heuristic",
        seed: int | None = RUN_SEED,
        normalize_observations: bool = FLAGS.normalize_observations,
        max_episode_length: float = RUN_MAX_EPISODE_LENGTH_SECONDS,
        include_vision: bool = FLAGS.vision_observations,
    ):
        self.rng = random.Random(seed)
        self.arena = BoxArena(rng=self.rng)
        self.pursuer_body = KinematicBody(self.arena, max_speed=PURSUER_MAX_SPEED)
        self.protagonist = Actor("player", self.pursuer_body, SimpleHealth())
        self.arena.add_body(self.protagonist.actor_id, self.pursuer_body, TAG_PLAYER)
        self.observation_config = ObservationConfig(include_vision=include_vision)
        self.agent_bodies: dict[str, KinematicBody] = {}
        agents = []
        for index in range(int(num_agents)):
            agent_id = f"spook_{index + 1}"
            body = KinematicBody(self.arena, max_speed=EVADER_MAX_SPEED)
            self.agent_bodies[agent_id] = body
            self.arena.add_body(agent_id, body, TAG_ENEMY)
            agents.append(
                EvaderAgent(
                    agent_id,
                    body,
                    self.arena,
                    health=SimpleHealth(),
                    observation_config=self.observation_config,
                    declared_input_size=self.observation_config.size,
                    bodies=self.arena.bodies,
                )
            )

        self.area = TrainingArea(
            self.arena,
            agents,
            self.protagonist,
            config=TrainingAreaConfig(max_episode_length=max_episode_length),
            layout=self.arena,
            rng=self.rng,
        )
        self.vision = ConeOfVision(self.arena)
        self.pursuer = ScriptedPursuer(self.protagonist, self.pursuer_body, self.arena)
        self.policy = build_policy(policy_name, self.rng)
        self.normalizer = (
            RunningObservationNormalizer(self.observation_config.size) if normalize_observations else None
        )
        self.tick_count = 0

    def step(self, dt: float = FIXED_DELTA_SECONDS) -> None:
        self.area.tick(dt)
        self.tick_count += 1
        if not self.area.is_running:
            return

        if self.tick_count % DECISION_INTERVAL_TICKS == 0:
            self._decide()

        active_agents = self.area.active_agents()
        self.pursuer.steer(active_agents, dt)
        self.pursuer_body.step(dt)
        for agent in active_agents:
            self.agent_bodies[agent.actor_id].step(dt)

        self._resolve_captures()

    def _decide(self) -> None:
        target = self.protagonist.position
        for agent in self.area.active_agents():
            visible = self.vision.can_see(agent.position, agent.facing_degrees, target)
            observation = agent.collect_observations(visible, target, self.area.now, targets=[target])
            if self.normalizer is not None:
                observation = self.normalizer(observation)
            action = self.policy.act(agent.state, observation)
            agent.on_action_received(action)

    def _resolve_captures(self) -> None:
        episode_index = self.area.current_episode_index
        pursuer_position = self.protagonist.position
        for agent in self.area.active_agents():
            if agent.position.distance(pursuer_position) <= CAPTURE_RADIUS and agent.health.take_hit():
                self.area.on_agent_captured(agent)
            if self.area.current_episode_index != episode_index:
                break


def run_training_area(episodes: int = RUN_EPISODES, policy_name: str = "heuristic") -> TrainingArea:
    configure_logging(FLAGS.log_level)
    trainer_config = load_trainer_config()
    session = HeadlessSession(policy_name=policy_name)
    log_run_context(
        "run-area",
        {
            "trainer_config": TRAINER_CONFIG_PATH,
            **behavior_summary(trainer_config),
            "episodes": episodes,
            "agents": len(session.area.agents),
            "policy": policy_name,
            "normalize": session.normalizer is not None,
            "vision": session.observation_config.include_vision,
            "observation_size": session.observation_config.size,
        },
    )

    session.area.start()
    while session.area.completed_episodes < episodes:
        session.step()

    log_key_values(
        LOGGER.name,
        {
            "Episodes": session.area.completed_episodes,
            "AvgLength": session.area.average_episode_length,
            "SpawnFallbacks": session.area.spawn_fallbacks,
            "Ticks": session.tick_count,
        },
        prefix="Summary",
    )
    return session.area


if __name__ == "__main__":
    run_training_area()
