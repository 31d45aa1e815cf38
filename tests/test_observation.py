import math

import pytest
from pyglet.math import Vec2

from fakes import FakeSpatial
from spook_ai.config import POLICY_INPUT_SIZE, ObservationConfig, ThreatConfig
from spook_ai.core import AgentState, ObservationAssembler, ProbeResult, ThreatLevel, observation_size, probe_directions
from spook_ai.errors import ConfigurationError


def test_default_layout_matches_policy_input_size():
    assert observation_size(ObservationConfig()) == POLICY_INPUT_SIZE == 20


@pytest.mark.parametrize(
    "include_position, include_threat, probes, expected",
    [
        (True, True, 8, 20),
        (False, True, 8, 16),
        (True, False, 8, 12),
        (False, False, 0, 0),
        (True, True, 4, 16),
    ],
)
def test_size_depends_only_on_config(include_position, include_threat, probes, expected):
    config = ObservationConfig(include_position=include_position, include_threat=include_threat, probe_count=probes)

    assert observation_size(config) == expected


def test_declared_size_mismatch_fails_at_setup():
    with pytest.raises(ConfigurationError):
        ObservationAssembler(ObservationConfig(probe_count=4), declared_input_size=20)


def test_probe_directions_are_even_unit_vectors():
    directions = probe_directions(8)

    assert len(directions) == 8
    assert directions[0].x == pytest.approx(1.0)
    assert directions[2].y == pytest.approx(1.0)
    assert all(math.hypot(d.x, d.y) == pytest.approx(1.0) for d in directions)


def test_never_seen_opponent_uses_sentinels():
    assembler = ObservationAssembler(declared_input_size=POLICY_INPUT_SIZE)
    state = AgentState(position=Vec2(1.0, 2.0), velocity=Vec2(0.5, -0.5))
    probes = [ProbeResult(direction) for direction in assembler.directions]

    observation = assembler.assemble(state, probes, now=3.0)

    assert len(observation) == 20
    assert observation[:4] == [1.0, 2.0, 0.5, -0.5]
    threat = observation[4:12]
    assert threat == [0.0, 0.0, 0.0, 0.0, 1.0, 1.0, 0.0, 0.0]
    assert observation[12:] == [1.0] * 8


def test_visible_opponent_threat_block():
    assembler = ObservationAssembler(threat_config=ThreatConfig(threat_distance=10.0, danger_distance=3.0))
    state = AgentState(
        position=Vec2(0.0, 0.0),
        threat_level=ThreatLevel.THREATENED,
        opponent_visible=True,
        opponent_distance=5.0,
        last_known_opponent_position=Vec2(3.0, 4.0),
        last_seen_timestamp=2.0,
    )
    probes = [ProbeResult(direction) for direction in assembler.directions]

    threat = assembler.assemble(state, probes, now=2.0)[4:12]

    assert threat[0] == 1.0
    assert threat[1] == 1.0
    assert threat[2:4] == [3.0, 4.0]
    assert threat[4] == 0.0
    assert threat[5] == pytest.approx(0.5)
    assert threat[6] == pytest.approx(0.6)
    assert threat[7] == pytest.approx(0.8)


def test_remembered_opponent_time_since_seen_is_normalized_and_clamped():
    assembler = ObservationAssembler(threat_config=ThreatConfig(memory_duration=5.0))
    state = AgentState(last_known_opponent_position=Vec2(1.0, 0.0), last_seen_timestamp=0.0)
    probes = [ProbeResult(direction) for direction in assembler.directions]

    assert assembler.assemble(state, probes, now=2.5)[8] == pytest.approx(0.5)
    assert assembler.assemble(state, probes, now=50.0)[8] == 1.0


def test_probe_hits_are_normalized_by_probe_distance(origin):
    assembler = ObservationAssembler(ObservationConfig(probe_distance=5.0))
    spatial = FakeSpatial(hit_distance=2.0)

    probes = assembler.cast_probes(spatial, origin)
    observation = assembler.assemble(AgentState(), probes, now=0.0)

    assert len(spatial.raycasts) == 8
    assert all(call[2] == 5.0 for call in spatial.raycasts)
    assert observation[12:] == pytest.approx([0.4] * 8)


def test_wrong_probe_count_is_rejected():
    assembler = ObservationAssembler()

    with pytest.raises(ValueError):
        assembler.assemble(AgentState(), [], now=0.0)


def test_negative_probe_count_is_rejected():
    with pytest.raises(ConfigurationError):
        ObservationConfig(probe_count=-1)
