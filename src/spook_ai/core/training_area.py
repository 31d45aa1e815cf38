"""Episode orchestration: spawn sampling, lifecycle and training statistics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Iterable, Sequence

from spook_ai.config import TrainingAreaConfig
from spook_ai.core.actor import Actor
from spook_ai.core.agent import EvaderAgent
from spook_ai.core.ports import EpisodeListener, LayoutGeneratorPort, SpatialQueryPort
from spook_ai.errors import MissingCollaboratorError
from spook_ai.logging_utils import log_key_values
from spook_ai.runtime import Rect, Vec2

LOGGER = logging.getLogger("spook_ai.area")


class EpisodeOutcome(str, Enum):
    TIMED_OUT = "timed_out"
    ALL_CAPTURED = "all_captured"
    CAPTURE_TRIGGERED_RESET = "capture_triggered_reset"


class EpisodePhase(Enum):
    STARTING = "starting"
    AWAITING_LAYOUT = "awaiting_layout"
    RUNNING = "running"
    ENDING = "ending"


@dataclass
class Episode:
    index: int
    start_time: float
    elapsed: float = 0.0
    captured: int = 0
    outcome: EpisodeOutcome | None = None


class TrainingArea:
    """Runs evader training episodes back to back.

    Each episode starts by optionally regenerating the layout (placement then
    waits one tick for it to settle), places the protagonist and every agent
    on mutually distant obstruction-free spawn points, and runs until it times
    out or captures end it. Ending records the episode length and immediately
    starts the next episode.

    Captures reported with :meth:`on_agent_captured` are resolved right away,
    so a capture reported during a tick takes precedence over that tick's
    timeout check.
    """

    def __init__(
        self,
        spatial: SpatialQueryPort | None,
        agents: Sequence[EvaderAgent],
        protagonist: Actor | None = None,
        *,
        config: TrainingAreaConfig | None = None,
        layout: LayoutGeneratorPort | None = None,
        spawn_pool: Iterable[Vec2] = (),
        listeners: Iterable[EpisodeListener] = (),
        rng: random.Random | None = None,
    ):
        if spatial is None:
            LOGGER.error("Training area is missing its spatial query collaborator")
            raise MissingCollaboratorError("TrainingArea requires a spatial query port")
        self.spatial = spatial
        self.agents = list(agents)
        self.agents_by_id = {agent.actor_id: agent for agent in self.agents}
        self.protagonist = protagonist
        self.config = config or TrainingAreaConfig()
        self.layout = layout
        self.spawn_pool = list(spawn_pool)
        self.listeners = list(listeners)
        self.rng = rng or random.Random()

        self.now = 0.0
        self.is_training = True
        self.phase = EpisodePhase.STARTING
        self.episode: Episode | None = None
        self.current_episode_index = 0
        self.episode_lengths: list[float] = []
        self.average_episode_length = 0.0
        self.start_positions: dict[str, Vec2] = {}
        self.spawn_fallbacks = 0

    # ------------------------------------------------------------------
    # Read-only metrics
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.phase is EpisodePhase.RUNNING

    @property
    def current_episode_time(self) -> float:
        return 0.0 if self.episode is None else self.episode.elapsed

    @property
    def agents_caught_this_episode(self) -> int:
        return 0 if self.episode is None else self.episode.captured

    @property
    def completed_episodes(self) -> int:
        return len(self.episode_lengths)

    def active_agents(self) -> list[EvaderAgent]:
        return [agent for agent in self.agents if agent.is_active]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self.episode is None:
            self.start_new_episode()

    def start_new_episode(self) -> None:
        self.phase = EpisodePhase.STARTING
        self.current_episode_index += 1
        self.episode = Episode(index=self.current_episode_index, start_time=self.now)

        if self.config.regenerate_layout_on_reset and self.layout is not None:
            self.layout.regenerate()
            self.phase = EpisodePhase.AWAITING_LAYOUT
        else:
            self.reset_all_characters()
            self.phase = EpisodePhase.RUNNING

        LOGGER.info("Starting episode %d", self.current_episode_index)
        for listener in self.listeners:
            listener.on_episode_started(self.current_episode_index)

    def tick(self, dt: float) -> None:
        """Advance the area clock by ``dt`` seconds."""
        if not self.is_training:
            return
        if self.episode is None:
            self.start_new_episode()

        self.now += float(dt)
        if self.phase is EpisodePhase.AWAITING_LAYOUT:
            self.reset_all_characters()
            self.episode.start_time = self.now
            self.phase = EpisodePhase.RUNNING
            return
        if self.phase is not EpisodePhase.RUNNING:
            return

        self.episode.elapsed = self.now - self.episode.start_time
        if self.episode.elapsed >= self.config.max_episode_length:
            self._on_episode_timeout()

    def set_training_mode(self, is_training: bool) -> None:
        self.is_training = bool(is_training)

    def on_agent_captured(self, agent: EvaderAgent | str) -> None:
        if isinstance(agent, str):
            agent_id = agent
            agent = self.agents_by_id.get(agent_id)
            if agent is None:
                LOGGER.warning("Ignoring capture of unknown agent %r", agent_id)
                return
        if self.phase is not EpisodePhase.RUNNING or not agent.is_active:
            LOGGER.debug("Ignoring capture of %s (phase=%s)", agent.actor_id, self.phase.value)
            return

        self.episode.captured += 1
        LOGGER.info("Agent caught! Total this episode: %d", self.episode.captured)
        agent.on_captured()
        for listener in self.listeners:
            listener.on_captured(agent.actor_id)

        if self.config.reset_all_on_capture:
            self._end_episode(EpisodeOutcome.CAPTURE_TRIGGERED_RESET)
            return

        agent.deactivate()
        if self.episode.captured >= len(self.agents):
            self._end_episode(EpisodeOutcome.ALL_CAPTURED)

    def _on_episode_timeout(self) -> None:
        LOGGER.info("Episode timeout - agents survived!")
        for agent in self.active_agents():
            agent.on_survived()
            for listener in self.listeners:
                listener.on_survived(agent.actor_id)
        self._end_episode(EpisodeOutcome.TIMED_OUT)

    def _end_episode(self, outcome: EpisodeOutcome) -> None:
        self.phase = EpisodePhase.ENDING
        episode = self.episode
        length = self.now - episode.start_time
        episode.elapsed = length
        episode.outcome = outcome
        self.record_episode_length(length)

        for agent in self.agents:
            agent.end_episode()

        log_key_values(
            LOGGER.name,
            {
                "Episode": episode.index,
                "Length": length,
                "Caught": f"{episode.captured}/{len(self.agents)}",
                "Outcome": outcome,
                "AvgLength": self.average_episode_length,
            },
        )
        for listener in self.listeners:
            listener.on_episode_ended(episode.index, outcome.value, length)

        self.start_new_episode()

    def record_episode_length(self, length: float) -> float:
        self.episode_lengths.append(float(length))
        self.average_episode_length = sum(self.episode_lengths) / len(self.episode_lengths)
        return self.average_episode_length

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def reset_all_characters(self) -> None:
        used: list[Vec2] = []

        if self.protagonist is not None:
            spawn = self.sample_spawn(used)
            self.protagonist.place(spawn)
            used.append(spawn)
            self.protagonist.reset_state()

        for agent in self.agents:
            spawn = self.sample_spawn(used)
            agent.place(spawn)
            used.append(spawn)
            self.start_positions[agent.actor_id] = spawn
            agent.reset_state()
            agent.begin_episode()

    def sample_spawn(self, used: Sequence[Vec2]) -> Vec2:
        """Pick a spawn point far enough from ``used`` and clear of obstructions.

        Pool points are tried first in random order without replacement, then
        uniform samples from the search bounds. After ``max_attempts`` the
        last candidate is returned anyway.
        """
        spawn_config = self.config.spawn
        bounds = self.search_bounds()
        candidate: Vec2 | None = None
        attempts = 0

        available = list(self.spawn_pool)
        while attempts < spawn_config.max_attempts and available:
            candidate = available.pop(self.rng.randrange(len(available)))
            if self.is_valid_spawn_point(candidate, used):
                return candidate
            attempts += 1

        while attempts < spawn_config.max_attempts:
            candidate = Vec2(
                self.rng.uniform(bounds.min_x, bounds.max_x),
                self.rng.uniform(bounds.min_y, bounds.max_y),
            )
            if self.is_valid_spawn_point(candidate, used):
                return candidate
            attempts += 1

        self.spawn_fallbacks += 1
        LOGGER.warning("Could not find valid spawn point after %d attempts, using fallback", attempts)
        return candidate if candidate is not None else bounds.center

    def is_valid_spawn_point(self, point: Vec2, used: Sequence[Vec2]) -> bool:
        spawn_config = self.config.spawn
        for used_point in used:
            if point.distance(used_point) < spawn_config.min_spawn_distance:
                return False
        return not self.spatial.overlap_circle(point, spawn_config.clearance_radius, spawn_config.obstacle_filter)

    def search_bounds(self) -> Rect:
        if self.layout is not None:
            return self.layout.bounds()
        size = self.config.spawn.default_region_size
        return Rect(-size / 2.0, -size / 2.0, size, size)
