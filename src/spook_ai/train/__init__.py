"""Policies, observation normalization and trainer configuration."""

from .normalizer import RunningObservationNormalizer
from .policy import HeuristicPolicy, StubInferencePolicy
from .trainer_config import behavior_summary, load_trainer_config

__all__ = [
    "HeuristicPolicy",
    "RunningObservationNormalizer",
    "StubInferencePolicy",
    "behavior_summary",
    "load_trainer_config",
]
