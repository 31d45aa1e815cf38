import random

import pytest
from pyglet.math import Vec2

from spook_ai.core import AgentState, ThreatLevel
from spook_ai.errors import ConfigurationError
from spook_ai.train import (
    HeuristicPolicy,
    RunningObservationNormalizer,
    StubInferencePolicy,
    behavior_summary,
    load_trainer_config,
)


def test_heuristic_flees_from_visible_opponent():
    state = AgentState(
        position=Vec2(0.0, 0.0),
        threat_level=ThreatLevel.DANGER,
        opponent_visible=True,
        opponent_distance=2.0,
        last_known_opponent_position=Vec2(2.0, 0.0),
    )

    action = HeuristicPolicy(random.Random(0)).act(state)

    assert action.move_x == pytest.approx(-1.0)
    assert action.move_y == pytest.approx(0.0)
    assert action.speed_mode == 2


def test_heuristic_wanders_when_nothing_is_visible():
    action = HeuristicPolicy(random.Random(0)).act(AgentState())

    assert -1.0 <= action.move_x <= 1.0
    assert -1.0 <= action.move_y <= 1.0
    assert action.speed_mode == 0


def test_stub_policy_is_deterministic_and_bounded(caplog):
    with caplog.at_level("WARNING", logger="spook_ai.policy"):
        first = StubInferencePolicy(seed=42)
    second = StubInferencePolicy(seed=42)

    first_actions = [first.act() for _ in range(5)]
    second_actions = [second.act() for _ in range(5)]

    assert first_actions == second_actions
    assert all(-1.0 <= a.move_x <= 1.0 and -1.0 <= a.move_y <= 1.0 for a in first_actions)
    assert "Stub inference in use" in caplog.text


def test_stub_policy_records_model_path():
    policy = StubInferencePolicy(model_path="models/a.onnx")

    policy.update_model("models/b.onnx")

    assert policy.model_path == "models/b.onnx"


def test_normalizer_tracks_running_statistics():
    normalizer = RunningObservationNormalizer(2)

    normalizer([1.0, 10.0])
    normalizer([3.0, 10.0])
    normalized = normalizer.normalize([2.0, 10.0])

    assert normalizer.count == 2
    assert normalizer.mean.tolist() == pytest.approx([2.0, 10.0])
    assert normalized == pytest.approx([0.0, 0.0])


def test_normalizer_rejects_wrong_size():
    with pytest.raises(ValueError):
        RunningObservationNormalizer(3).update([1.0, 2.0])


def test_trainer_config_defines_behavior():
    document = load_trainer_config()

    summary = behavior_summary(document)

    assert summary["trainer"] == "ppo"
    assert summary["max_steps"] > 0


def test_trainer_config_without_behavior_is_rejected(tmp_path):
    path = tmp_path / "trainer.yaml"
    path.write_text("behaviors:\n  Other:\n    trainer_type: ppo\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_trainer_config(path)


def test_trainer_config_must_be_a_mapping(tmp_path):
    path = tmp_path / "trainer.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_trainer_config(path)
