import random

import pytest

from slime_trails.clock import SimulationClock
from slime_trails.config import SimulationConfig
from slime_trails.geometry import distance_between
from slime_trails.simulation import Simulation

from conftest import FakeTime


def make_simulation(agent_count=1, timestamps=(0.0,), seed=7, **kwargs):
    config = SimulationConfig(width=400, height=300, agent_count=agent_count, **kwargs)
    clock = SimulationClock(FakeTime(*timestamps))
    return Simulation(config, clock=clock, rng=random.Random(seed))


def in_bounds(sim, agent):
    return (
        0 <= agent.x <= sim.field.width - agent.size
        and 0 <= agent.y <= sim.field.height - agent.size
    )


def test_population_is_spawned_inside_the_field():
    sim = make_simulation(agent_count=200)
    assert len(sim.agents) == 200
    assert all(in_bounds(sim, a) for a in sim.agents)
    assert all(0 <= a.heading < 360 for a in sim.agents)
    assert all(a.last_position == a.position for a in sim.agents)


def test_agents_share_field_and_pointer():
    sim = make_simulation(agent_count=3)
    assert all(a.field is sim.field for a in sim.agents)
    assert all(a.pointer is sim.pointer for a in sim.agents)


def test_first_tick_does_not_move_agents():
    sim = make_simulation(agent_count=50)
    before = [a.position for a in sim.agents]
    sim.tick()
    assert [a.position for a in sim.agents] == before
    assert sim.tick_count == 1


def test_tick_moves_by_elapsed_time():
    sim = make_simulation(timestamps=(0.0, 0.5))
    sim.agents = [sim.create_agent(200, 150, heading=0)]
    agent = sim.agents[0]

    sim.tick()
    start = agent.position
    sim.tick()

    assert sim.clock.delta_time == pytest.approx(0.5)
    assert distance_between(*start, *agent.position) == pytest.approx(50)


def test_step_decays_field_once(monkeypatch):
    sim = make_simulation(agent_count=5, decay_rate=0.2)
    calls = []
    monkeypatch.setattr(sim.field, "decay", lambda rate: calls.append(rate))

    sim.step(0.1)
    sim.step(0.1)

    assert calls == [0.2, 0.2]


def test_follows_center_signal_end_to_end():
    sim = make_simulation(max_speed=50)
    agent = sim.create_agent(200, 150, heading=0)
    sim.agents = [agent]
    sim.field.deposit((206, 150), (206, 150), (255, 255, 255, 255), 1)

    sim.step(1.0)

    assert agent.position == pytest.approx((250, 150))
    assert agent.heading == 0
    assert sim.field.sample(225, 150).alpha > 0
    assert sim.field.sample(250, 150).alpha > 0
    assert sim.field.sample(225, 170).alpha == 0


def test_agents_stay_inside_and_under_speed_cap():
    sim = make_simulation(agent_count=60, seed=3)
    for _ in range(150):
        sim.step(0.05)
        for agent in sim.agents:
            assert in_bounds(sim, agent)
            assert agent.speed <= agent.max_speed
            assert 0 <= agent.heading < 360


def test_pointer_pulls_agents_at_boosted_speed():
    sim = make_simulation(agent_count=10)
    sim.pointer.move_to(200, 150)
    sim.pointer.press()
    sim.step(0.01)
    assert all(a.speed == a.max_speed * 4 for a in sim.agents)

    sim.pointer.release()
    sim.step(0.01)
    assert all(a.speed == a.max_speed for a in sim.agents)


def test_trails_fade_without_agents():
    sim = make_simulation(decay_rate=0.5)
    sim.field.deposit((100, 100), (50, 50), (255, 255, 255, 255), 2)
    sim.agents = []
    totals = []
    for _ in range(60):
        sim.step(0.1)
        totals.append(sim.field.total_signal())
    assert totals == sorted(totals, reverse=True)
    assert totals[-1] < 1e-6


def test_run_with_fixed_delta_and_callback():
    sim = make_simulation(agent_count=4)
    seen = []
    sim.run(5, delta_time=0.02, callback=lambda s: seen.append(s.tick_count))
    assert seen == [1, 2, 3, 4, 5]


def test_resize_clamps_agents_into_new_bounds():
    sim = make_simulation(agent_count=100)
    sim.run(3, delta_time=0.05)

    sim.resize(150, 100)

    assert (sim.field.width, sim.field.height) == (150, 100)
    assert (sim.config.width, sim.config.height) == (150, 100)
    assert len(sim.agents) == 100
    for agent in sim.agents:
        assert in_bounds(sim, agent)
        assert agent.last_position == agent.position
    assert sim.field.total_signal() == 0


def test_resize_to_degenerate_size_is_ignored():
    sim = make_simulation(agent_count=2)
    sim.resize(0, 0)
    assert (sim.field.width, sim.field.height) == (400, 300)
