import pytest
from pyglet.math import Vec2

from spook_ai.config import ThreatConfig
from spook_ai.core import ThreatLevel, ThreatPerception
from spook_ai.errors import ConfigurationError


def make_perception():
    perception = ThreatPerception(ThreatConfig(threat_distance=10.0, danger_distance=3.0, memory_duration=5.0))
    perception.observe_body(Vec2(0.0, 0.0), Vec2(0.0, 0.0))
    return perception


@pytest.mark.parametrize(
    "distance, expected",
    [
        (2.0, ThreatLevel.DANGER),
        (3.0, ThreatLevel.DANGER),
        (3.5, ThreatLevel.THREATENED),
        (10.0, ThreatLevel.THREATENED),
        (12.0, ThreatLevel.SAFE),
    ],
)
def test_visible_opponent_bands(distance, expected):
    perception = make_perception()

    level = perception.update(True, Vec2(distance, 0.0), now=1.0)

    assert level is expected
    assert perception.state.opponent_distance == pytest.approx(distance)


def test_memory_gives_alert_then_decays_to_safe():
    perception = make_perception()
    perception.update(True, Vec2(5.0, 0.0), now=0.0)

    assert perception.update(False, None, now=2.0) is ThreatLevel.ALERT
    assert perception.state.last_known_opponent_position == Vec2(5.0, 0.0)
    assert perception.update(False, None, now=4.99) is ThreatLevel.ALERT
    assert perception.update(False, None, now=5.0) is ThreatLevel.SAFE
    assert perception.update(False, None, now=60.0) is ThreatLevel.SAFE


def test_never_seen_is_safe():
    perception = make_perception()

    assert perception.update(False, Vec2(1.0, 0.0), now=0.0) is ThreatLevel.SAFE
    assert perception.state.has_seen_opponent is False
    assert perception.time_since_last_seen(0.0) is None


def test_visible_without_position_counts_as_not_visible():
    perception = make_perception()

    assert perception.update(True, None, now=0.0) is ThreatLevel.SAFE
    assert perception.state.opponent_visible is False
    assert perception.state.opponent_distance is None


def test_reset_forgets_opponent_but_keeps_body_kinematics():
    perception = make_perception()
    perception.observe_body(Vec2(1.0, 2.0), Vec2(0.5, 0.0))
    perception.update(True, Vec2(3.0, 2.0), now=0.0)

    perception.reset()

    assert perception.state.threat_level is ThreatLevel.SAFE
    assert perception.state.last_known_opponent_position is None
    assert perception.state.position == Vec2(1.0, 2.0)
    assert perception.update(False, None, now=0.5) is ThreatLevel.SAFE


def test_threat_level_values_are_ordered():
    assert float(ThreatLevel.SAFE) < float(ThreatLevel.ALERT) < float(ThreatLevel.THREATENED) < float(ThreatLevel.DANGER)


@pytest.mark.parametrize("danger, threat", [(3.0, 3.0), (5.0, 3.0), (0.0, 3.0)])
def test_invalid_distances_are_rejected(danger, threat):
    with pytest.raises(ConfigurationError):
        ThreatConfig(threat_distance=threat, danger_distance=danger)
