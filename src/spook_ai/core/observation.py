"""Fixed-layout observation vectors for the evader policy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from spook_ai.config import ObservationConfig, ThreatConfig
from spook_ai.core.ports import SpatialQueryPort
from spook_ai.core.threat import AgentState
from spook_ai.runtime import ZERO, Vec2, heading_to_vector, normalized
from spook_ai.utils import validate_observation_size

DISTANCE_UNKNOWN = 1.0
NO_HIT = 1.0


@dataclass(frozen=True)
class ProbeResult:
    direction: Vec2
    hit_distance: float | None = None


def observation_size(config: ObservationConfig) -> int:
    return config.size


def probe_directions(count: int) -> tuple[Vec2, ...]:
    """Unit vectors evenly spaced around the circle, the first pointing along +x."""
    if count <= 0:
        return tuple()
    step = 360.0 / count
    return tuple(heading_to_vector(index * step) for index in range(count))


class ObservationAssembler:
    """Builds the per-decision observation vector in a fixed order.

    Layout: ``[position.xy, velocity.xy]`` (optional), the threat block
    (optional, see ``THREAT_FEATURE_NAMES``), one normalized obstacle distance
    per probe direction, then the cone-of-vision block (optional).
    """

    def __init__(
        self,
        config: ObservationConfig | None = None,
        threat_config: ThreatConfig | None = None,
        declared_input_size: int | None = None,
    ):
        self.config = config or ObservationConfig()
        self.threat_config = threat_config or ThreatConfig()
        self.size = observation_size(self.config)
        if declared_input_size is not None:
            validate_observation_size(declared_size=declared_input_size, computed_size=self.size)
        self.directions = probe_directions(self.config.probe_count)

    def cast_probes(self, spatial: SpatialQueryPort, origin: Vec2) -> list[ProbeResult]:
        results = []
        for direction in self.directions:
            hit = spatial.raycast(origin, direction, self.config.probe_distance, self.config.obstacle_filter)
            results.append(ProbeResult(direction, None if hit is None else hit.distance))
        return results

    def assemble(
        self,
        state: AgentState,
        probes: Sequence[ProbeResult],
        now: float,
        vision: Sequence[float] | None = None,
    ) -> list[float]:
        if len(probes) != len(self.directions):
            raise ValueError(f"Expected {len(self.directions)} probe results, got {len(probes)}")
        if self.config.include_vision:
            expected = self.config.vision.size
            if vision is None or len(vision) != expected:
                got = "none" if vision is None else len(vision)
                raise ValueError(f"Expected a vision block of {expected} values, got {got}")

        observation: list[float] = []
        if self.config.include_position:
            observation.extend(
                [
                    float(state.position.x),
                    float(state.position.y),
                    float(state.velocity.x),
                    float(state.velocity.y),
                ]
            )
        if self.config.include_threat:
            observation.extend(self._threat_features(state, now))
        observation.extend(self._probe_distance(probe) for probe in probes)
        if self.config.include_vision:
            observation.extend(float(value) for value in vision)

        if __debug__:
            assert len(observation) == self.size
        return observation

    def _threat_features(self, state: AgentState, now: float) -> list[float]:
        if state.last_known_opponent_position is None:
            relative = ZERO
        else:
            relative = state.last_known_opponent_position - state.position
        direction = normalized(relative)

        if state.opponent_visible:
            time_since_seen = 0.0
        elif state.last_seen_timestamp is None:
            time_since_seen = 1.0
        else:
            elapsed = (now - state.last_seen_timestamp) / self.threat_config.memory_duration
            time_since_seen = min(1.0, max(0.0, elapsed))

        if state.opponent_distance is None:
            distance = DISTANCE_UNKNOWN
        else:
            distance = state.opponent_distance / self.threat_config.threat_distance

        return [
            float(state.threat_level),
            1.0 if state.opponent_visible else 0.0,
            float(relative.x),
            float(relative.y),
            time_since_seen,
            float(distance),
            float(direction.x),
            float(direction.y),
        ]

    def _probe_distance(self, probe: ProbeResult) -> float:
        if probe.hit_distance is None:
            return NO_HIT
        return float(probe.hit_distance) / self.config.probe_distance
