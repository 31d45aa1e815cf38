import random

import pytest
from pyglet.math import Vec2

from fakes import FakeSpatial


@pytest.fixture
def spatial():
    return FakeSpatial()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def origin():
    return Vec2(0.0, 0.0)
