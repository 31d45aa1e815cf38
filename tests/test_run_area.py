import pytest

from spook_ai.config import POLICY_INPUT_SIZE
from spook_ai.run_area import HeadlessSession, build_policy


def run_episodes(session, episodes, max_ticks=5000):
    session.area.start()
    for _ in range(max_ticks):
        if session.area.completed_episodes >= episodes:
            break
        session.step()
    return session.area


def test_headless_session_completes_episodes():
    session = HeadlessSession(num_agents=2, seed=11, normalize_observations=True, max_episode_length=1.0)

    area = run_episodes(session, episodes=2)

    assert area.completed_episodes >= 2
    assert 0.0 < area.average_episode_length <= 1.0 + 0.02 + 1e-6
    assert session.arena.regenerations >= 2
    assert session.normalizer.count > 0
    assert session.normalizer.size == POLICY_INPUT_SIZE


def test_agents_act_on_decision_ticks():
    session = HeadlessSession(num_agents=1, seed=3, max_episode_length=5.0)
    session.area.start()

    for _ in range(6):
        session.step()

    agent = session.area.agents[0]
    assert agent.last_command is not None
    assert set(agent.last_reward_breakdown) == {"survival", "distance", "movement", "stuck"}


def test_unknown_policy_name_is_rejected(rng):
    with pytest.raises(ValueError):
        build_policy("oracle", rng)


def test_pursuer_contact_spends_health_and_reports_capture():
    session = HeadlessSession(num_agents=2, seed=5, max_episode_length=5.0)
    session.area.start()
    session.step()
    agent = session.area.agents[0]
    agent.place(session.protagonist.position)

    session._resolve_captures()

    assert agent.health.is_alive is False
    assert agent.is_active is False
    assert session.area.agents_caught_this_episode == 1


def test_session_with_vision_block():
    session = HeadlessSession(num_agents=1, seed=8, normalize_observations=True, include_vision=True)

    session.area.start()
    for _ in range(10):
        session.step()

    assert session.observation_config.size == POLICY_INPUT_SIZE + 74
    assert session.normalizer.size == session.observation_config.size
    assert session.normalizer.count > 0
