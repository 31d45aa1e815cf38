"""Policies that stand in for a trained model: a flee heuristic and a seeded inference stub."""

from __future__ import annotations

import logging
import random
from typing import Sequence

import torch

from spook_ai.config import (
    NUM_CONTINUOUS_ACTIONS,
    SPEED_MODE_DANGER,
    SPEED_MODE_NORMAL,
    SPEED_MODE_THREATENED,
    STUB_DETERMINISTIC,
    STUB_MODEL_PATH,
    STUB_SEED,
)
from spook_ai.core import Action, AgentState, ThreatLevel
from spook_ai.runtime import length_squared, normalized

LOGGER = logging.getLogger("spook_ai.policy")


class HeuristicPolicy:
    """Flee straight away from a visible opponent; wander randomly otherwise."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def act(self, state: AgentState, observation: Sequence[float] | None = None) -> Action:
        opponent = state.last_known_opponent_position
        if state.opponent_visible and opponent is not None:
            away = state.position - opponent
            if length_squared(away) > 0.0:
                flee = normalized(away)
                return Action(flee.x, flee.y, self._speed_mode_for(state.threat_level))

        return Action(self.rng.uniform(-1.0, 1.0), self.rng.uniform(-1.0, 1.0), SPEED_MODE_NORMAL)

    @staticmethod
    def _speed_mode_for(threat_level: ThreatLevel) -> int:
        if threat_level >= ThreatLevel.DANGER:
            return SPEED_MODE_DANGER
        if threat_level >= ThreatLevel.THREATENED:
            return SPEED_MODE_THREATENED
        return SPEED_MODE_NORMAL


class StubInferencePolicy:
    """Placeholder for model inference that returns random moves in [-1, 1].

    No model is loaded; ``model_path`` is only recorded. When ``deterministic``
    is set the moves come from a seeded generator and repeat across runs.
    """

    def __init__(
        self,
        model_path: str = STUB_MODEL_PATH,
        deterministic: bool = STUB_DETERMINISTIC,
        seed: int = STUB_SEED,
    ):
        self.model_path = model_path
        self.deterministic = bool(deterministic)
        self.generator = torch.Generator().manual_seed(int(seed)) if self.deterministic else None
        LOGGER.warning(
            "Stub inference in use; no model is loaded from %s",
            model_path,
        )

    def act(self, state: AgentState | None = None, observation: Sequence[float] | None = None) -> Action:
        sample = torch.rand(NUM_CONTINUOUS_ACTIONS, generator=self.generator) * 2.0 - 1.0
        action = Action.from_buffers(sample.tolist(), [SPEED_MODE_NORMAL])
        LOGGER.debug("Generated actions [%.2f, %.2f]", action.move_x, action.move_y)
        return action

    def update_model(self, model_path: str) -> None:
        self.model_path = model_path
        LOGGER.info("Model path updated to %s (not loaded)", model_path)
