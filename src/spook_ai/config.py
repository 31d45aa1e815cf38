"""Central configuration for Spook AI."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path

from spook_ai.utils import env_flag, validate_minimum, validate_positive, validate_threat_distances


PACKAGE_ROOT = Path(__file__).resolve().parent


@dataclass(frozen=True)
class RuntimeFlags:
    log_level: str
    normalize_observations: bool
    vision_observations: bool


FLAGS = RuntimeFlags(
    log_level=os.getenv("SPOOK_LOG_LEVEL", "INFO"),
    normalize_observations=env_flag("SPOOK_NORMALIZE_OBSERVATIONS", False),
    vision_observations=env_flag("SPOOK_VISION_OBSERVATIONS", False),
)

# Threat perception
THREAT_DISTANCE = 10.0
DANGER_DISTANCE = 3.0
MEMORY_DURATION_SECONDS = 5.0

# Observation layout
INCLUDE_POSITION_OBSERVATIONS = True
INCLUDE_THREAT_OBSERVATIONS = True
WALL_DETECTION_RAYS = 8
WALL_DETECTION_DISTANCE = 5.0
TAG_OBSTACLE = "obstacle"
TAG_WALL = "wall"
OBSTACLE_TAGS = frozenset({TAG_OBSTACLE, TAG_WALL})
TAG_PLAYER = "player"
TAG_ENEMY = "enemy"
POSITION_FEATURE_NAMES = ["position_x", "position_y", "velocity_x", "velocity_y"]
THREAT_FEATURE_NAMES = [
    "threat_level",
    "opponent_visible",
    "last_known_relative_x",
    "last_known_relative_y",
    "time_since_last_seen",
    "opponent_distance",
    "last_known_direction_x",
    "last_known_direction_y",
]
# Declared input width of the SpookAI behavior: 4 position/velocity + 8 threat + 8 probes.
POLICY_INPUT_SIZE = 20

# Input/output spaces
NUM_CONTINUOUS_ACTIONS = 2
SPEED_MODE_NORMAL = 0
SPEED_MODE_THREATENED = 1
SPEED_MODE_DANGER = 2

# Movement tuning
NORMAL_SPEED_MULTIPLIER = 1.0
THREATENED_SPEED_MULTIPLIER = 1.5
DANGER_SPEED_MULTIPLIER = 2.0

# Reward shaping
REWARD_SURVIVAL_STEP = 0.001
REWARD_GOOD_DISTANCE = 0.01
REWARD_SAFE_DISTANCE = 0.005
PENALTY_TOO_CLOSE = -0.02
REWARD_MOVING = 0.002
PENALTY_STATIONARY = -0.001
PENALTY_STUCK = -0.01
MOVING_SPEED_THRESHOLD = 0.1
STUCK_INTENT_THRESHOLD = 0.5
STUCK_SPEED_THRESHOLD = 0.1
PENALTY_CAPTURED = -10.0
REWARD_SURVIVED = 5.0
REWARD_COMPONENT_KEY_ORDER = ("survival", "distance", "movement", "stuck")

# Training area
MAX_EPISODE_LENGTH_SECONDS = 180.0
REGENERATE_LAYOUT_ON_RESET = True
RESET_ALL_ON_CAPTURE = False
MIN_SPAWN_DISTANCE = 5.0
SPAWN_MAX_ATTEMPTS = 100
SPAWN_CLEARANCE_RADIUS = 0.5
DEFAULT_SPAWN_REGION_SIZE = 50.0

# Vision
VISION_ANGLE_DEGREES = 120.0
VISION_RADIUS = 12.0
INCLUDE_VISION_OBSERVATIONS = False
VISION_RAYS = 16
VISION_INCLUDE_TARGET_TYPE = True
VISION_INCLUDE_TARGET_VELOCITY = True
VISION_MAX_TARGETS = 5
VISION_VELOCITY_SCALE = 10.0
VISION_DETECT_TAGS = frozenset({TAG_PLAYER, TAG_ENEMY, TAG_OBSTACLE, TAG_WALL})
TARGET_TYPE_CODES = {TAG_PLAYER: 1.0, TAG_ENEMY: 0.5, TAG_OBSTACLE: 0.0, TAG_WALL: 0.0}
TARGET_TYPE_NONE = -1.0

# Inference stub
STUB_MODEL_PATH = "models/spook_ai.onnx"
STUB_DETERMINISTIC = True
STUB_SEED = 42
OBS_NORM_EPS = 1e-8

# Trainer hyperparameters (opaque to the core)
BEHAVIOR_NAME = "SpookAI"
TRAINER_CONFIG_PATH = PACKAGE_ROOT / "trainer_config.yaml"

# Reference arena and headless runner
ARENA_WIDTH = 40.0
ARENA_HEIGHT = 40.0
ARENA_TILE_SIZE = 2.0
NUM_OBSTACLE_SHAPES = 10
MIN_OBSTACLE_SECTIONS = 2
MAX_OBSTACLE_SECTIONS = 5
OBSTACLE_START_ATTEMPTS = 100
BODY_RADIUS = 0.4
EVADER_MAX_SPEED = 3.0
PURSUER_MAX_SPEED = 4.5
PURSUER_MOVE_FALLBACK_OFFSETS = (0.0, 45.0, -45.0, 90.0, -90.0)
CAPTURE_RADIUS = 1.0
NUM_AGENTS = 3
FIXED_DELTA_SECONDS = 0.02
DECISION_INTERVAL_TICKS = 5
RUN_EPISODES = 5
RUN_MAX_EPISODE_LENGTH_SECONDS = 60.0
RUN_SEED: int | None = None


@dataclass(frozen=True)
class ThreatConfig:
    threat_distance: float = THREAT_DISTANCE
    danger_distance: float = DANGER_DISTANCE
    memory_duration: float = MEMORY_DURATION_SECONDS

    def __post_init__(self) -> None:
        validate_threat_distances(
            threat_distance=self.threat_distance,
            danger_distance=self.danger_distance,
            memory_duration=self.memory_duration,
        )


@dataclass(frozen=True)
class VisionSensorConfig:
    ray_count: int = VISION_RAYS
    angle_degrees: float = VISION_ANGLE_DEGREES
    radius: float = VISION_RADIUS
    include_target_type: bool = VISION_INCLUDE_TARGET_TYPE
    include_target_velocity: bool = VISION_INCLUDE_TARGET_VELOCITY
    max_targets: int = VISION_MAX_TARGETS
    velocity_scale: float = VISION_VELOCITY_SCALE
    detect_filter: frozenset[str] = VISION_DETECT_TAGS

    def __post_init__(self) -> None:
        validate_minimum("ray_count", self.ray_count, 0)
        validate_minimum("max_targets", self.max_targets, 0)
        validate_positive("angle_degrees", self.angle_degrees)
        validate_positive("radius", self.radius)
        validate_positive("velocity_scale", self.velocity_scale)

    @property
    def values_per_ray(self) -> int:
        values = 1
        if self.include_target_type:
            values += 1
        if self.include_target_velocity:
            values += 2
        return values

    @property
    def size(self) -> int:
        return self.ray_count * self.values_per_ray + 2 * self.max_targets


@dataclass(frozen=True)
class ObservationConfig:
    include_position: bool = INCLUDE_POSITION_OBSERVATIONS
    include_threat: bool = INCLUDE_THREAT_OBSERVATIONS
    probe_count: int = WALL_DETECTION_RAYS
    probe_distance: float = WALL_DETECTION_DISTANCE
    obstacle_filter: frozenset[str] = OBSTACLE_TAGS
    include_vision: bool = INCLUDE_VISION_OBSERVATIONS
    vision: VisionSensorConfig = field(default_factory=VisionSensorConfig)

    def __post_init__(self) -> None:
        validate_minimum("probe_count", self.probe_count, 0)
        validate_positive("probe_distance", self.probe_distance)

    @property
    def size(self) -> int:
        size = self.probe_count
        if self.include_position:
            size += len(POSITION_FEATURE_NAMES)
        if self.include_threat:
            size += len(THREAT_FEATURE_NAMES)
        if self.include_vision:
            size += self.vision.size
        return size


@dataclass(frozen=True)
class MovementConfig:
    normal_multiplier: float = NORMAL_SPEED_MULTIPLIER
    threatened_multiplier: float = THREATENED_SPEED_MULTIPLIER
    danger_multiplier: float = DANGER_SPEED_MULTIPLIER


@dataclass(frozen=True)
class RewardConfig:
    survival_bonus: float = REWARD_SURVIVAL_STEP
    good_distance_bonus: float = REWARD_GOOD_DISTANCE
    safe_distance_bonus: float = REWARD_SAFE_DISTANCE
    close_penalty: float = PENALTY_TOO_CLOSE
    move_bonus: float = REWARD_MOVING
    stationary_penalty: float = PENALTY_STATIONARY
    stuck_penalty: float = PENALTY_STUCK
    moving_speed_threshold: float = MOVING_SPEED_THRESHOLD
    stuck_intent_threshold: float = STUCK_INTENT_THRESHOLD
    stuck_speed_threshold: float = STUCK_SPEED_THRESHOLD
    capture_penalty: float = PENALTY_CAPTURED
    survival_reward: float = REWARD_SURVIVED


@dataclass(frozen=True)
class SpawnConfig:
    min_spawn_distance: float = MIN_SPAWN_DISTANCE
    max_attempts: int = SPAWN_MAX_ATTEMPTS
    clearance_radius: float = SPAWN_CLEARANCE_RADIUS
    default_region_size: float = DEFAULT_SPAWN_REGION_SIZE
    obstacle_filter: frozenset[str] = OBSTACLE_TAGS

    def __post_init__(self) -> None:
        validate_minimum("max_attempts", self.max_attempts, 1)
        validate_minimum("min_spawn_distance", self.min_spawn_distance, 0)
        validate_positive("default_region_size", self.default_region_size)


@dataclass(frozen=True)
class TrainingAreaConfig:
    max_episode_length: float = MAX_EPISODE_LENGTH_SECONDS
    regenerate_layout_on_reset: bool = REGENERATE_LAYOUT_ON_RESET
    reset_all_on_capture: bool = RESET_ALL_ON_CAPTURE
    spawn: SpawnConfig = field(default_factory=SpawnConfig)

    def __post_init__(self) -> None:
        validate_positive("max_episode_length", self.max_episode_length)
