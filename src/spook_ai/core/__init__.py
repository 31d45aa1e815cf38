"""Agent-environment simulation core."""

from .actions import Action, MovementCommand, compute_reward_components, interpret_action, speed_multiplier
from .actor import Actor
from .agent import EvaderAgent
from .observation import ObservationAssembler, ProbeResult, observation_size, probe_directions
from .ports import BodyPort, EpisodeListener, HealthPort, Hit, LayoutGeneratorPort, SpatialQueryPort
from .threat import AgentState, ThreatLevel, ThreatPerception
from .training_area import Episode, EpisodeOutcome, EpisodePhase, TrainingArea
from .vision import ConeOfVision, ConeOfVisionSensor, target_type_code

__all__ = [
    "Action",
    "Actor",
    "AgentState",
    "BodyPort",
    "ConeOfVision",
    "ConeOfVisionSensor",
    "Episode",
    "EpisodeListener",
    "EpisodeOutcome",
    "EpisodePhase",
    "EvaderAgent",
    "HealthPort",
    "Hit",
    "LayoutGeneratorPort",
    "MovementCommand",
    "ObservationAssembler",
    "ProbeResult",
    "SpatialQueryPort",
    "ThreatLevel",
    "ThreatPerception",
    "TrainingArea",
    "compute_reward_components",
    "interpret_action",
    "observation_size",
    "probe_directions",
    "speed_multiplier",
    "target_type_code",
]
