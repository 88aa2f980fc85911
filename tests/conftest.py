import random

import pytest

from slime_trails.agent import Agent
from slime_trails.config import SimulationConfig
from slime_trails.field import TrailField


class FakeTime:
    """Time source that replays a fixed list of timestamps."""

    def __init__(self, *timestamps):
        self.timestamps = list(timestamps)

    def __call__(self):
        return self.timestamps.pop(0)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def field():
    return TrailField(400, 300)


@pytest.fixture
def small_config():
    return SimulationConfig(width=400, height=300, agent_count=1)


@pytest.fixture
def make_agent(field, rng):
    def factory(x=200.0, y=150.0, heading=0.0, **kwargs):
        return Agent(field, x, y, heading=heading, rng=rng, **kwargs)

    return factory
