import pytest
from pyglet.math import Vec2

from fakes import FakeBody, FakeHealth, FakeSpatial
from spook_ai.config import ObservationConfig, ThreatConfig
from spook_ai.core import Action, Actor, EvaderAgent, ThreatLevel
from spook_ai.errors import ConfigurationError, MissingCollaboratorError


def make_agent(body=None, spatial=None, **kwargs):
    agent = EvaderAgent(
        "spook_1",
        body or FakeBody(),
        spatial or FakeSpatial(),
        health=FakeHealth(),
        threat_config=ThreatConfig(threat_distance=10.0, danger_distance=3.0, memory_duration=5.0),
        **kwargs,
    )
    agent.begin_episode()
    return agent


def test_danger_scenario_end_to_end():
    body = FakeBody(position=Vec2(0.0, 0.0), velocity=Vec2(1.0, 0.0))
    agent = make_agent(body)

    observation = agent.collect_observations(True, Vec2(2.0, 0.0), now=0.0)
    components = agent.on_action_received(Action(-1.0, 0.0, 2))

    assert agent.threat_level is ThreatLevel.DANGER
    assert observation[4] == 2.0
    assert components["distance"] == pytest.approx(-0.02)
    assert body.movement == Vec2(-2.0, 0.0)
    assert agent.cumulative_reward == pytest.approx(sum(components.values()))


def test_observation_vector_has_policy_width():
    agent = make_agent()

    assert len(agent.collect_observations(False, None, now=0.0)) == agent.observation_size == 20


def test_missing_body_is_fatal():
    with pytest.raises(MissingCollaboratorError):
        EvaderAgent("spook_1", None, FakeSpatial())
    with pytest.raises(MissingCollaboratorError):
        Actor("player", None)


def test_missing_spatial_query_is_fatal(caplog):
    with caplog.at_level("ERROR", logger="spook_ai.agent"):
        with pytest.raises(MissingCollaboratorError):
            EvaderAgent("spook_1", FakeBody(), None)

    assert "missing spatial query" in caplog.text


def test_mismatched_declared_size_is_rejected():
    with pytest.raises(ConfigurationError):
        make_agent(observation_config=ObservationConfig(probe_count=3))


def test_capture_applies_penalty_and_ends_episode():
    agent = make_agent()
    agent.add_reward(0.5)

    agent.on_captured()

    assert agent.cumulative_reward == pytest.approx(-9.5)
    assert agent.episode_active is False
    assert agent.completed_episodes == 1
    assert agent.last_episode_reward == pytest.approx(-9.5)


def test_survival_applies_bonus_and_ends_episode():
    agent = make_agent()

    agent.on_survived()
    agent.end_episode()

    assert agent.cumulative_reward == pytest.approx(5.0)
    assert agent.completed_episodes == 1


def test_begin_episode_clears_reward_and_memory():
    agent = make_agent()
    agent.collect_observations(True, Vec2(4.0, 0.0), now=0.0)
    agent.on_captured()

    agent.begin_episode()
    agent.collect_observations(False, None, now=1.0)

    assert agent.cumulative_reward == 0.0
    assert agent.state.last_known_opponent_position is None
    assert agent.threat_level is ThreatLevel.SAFE


def test_stuck_penalty_when_blocked():
    body = FakeBody(velocity=Vec2(0.0, 0.0))
    agent = make_agent(body)
    agent.collect_observations(False, None, now=0.0)

    components = agent.on_action_received(Action(1.0, 0.0))

    assert components["stuck"] == pytest.approx(-0.01)
    assert components["movement"] == pytest.approx(-0.001)


def test_reset_state_revives_and_reactivates():
    health = FakeHealth()
    body = FakeBody()
    actor = Actor("player", body, health)
    body.set_movement(Vec2(1.0, 0.0))

    actor.deactivate()
    assert actor.is_active is False
    actor.reset_state()

    assert actor.is_active is True
    assert health.revives == 1
    assert body.movement == Vec2(0.0, 0.0)
