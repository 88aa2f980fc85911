"""The simulation loop: one field, a fixed population of agents, a clock.

A tick runs every agent's sense/decide/move/deposit pipeline in a fixed
order, then fades the whole field once. Agents later in the order see the
deposits of agents earlier in the same tick.
"""

import logging
import random
from dataclasses import replace

from slime_trails.agent import Agent, PointerState
from slime_trails.clock import SimulationClock
from slime_trails.field import TrailField
from slime_trails.geometry import random_int_in_range

logger = logging.getLogger(__name__)


class Simulation:
    def __init__(self, config, pointer=None, clock=None, rng=None):
        self.config = config
        self.rng = rng or random.Random()
        self.pointer = pointer if pointer is not None else PointerState()
        self.clock = clock or SimulationClock()
        self.field = TrailField(config.width, config.height)
        self.agents = [self.spawn_agent() for _ in range(config.agent_count)]
        self.tick_count = 0

        logger.info(
            "Simulation created: %d agents on a %dx%d field",
            len(self.agents),
            self.field.width,
            self.field.height,
        )

    def create_agent(self, x, y, heading=None):
        cfg = self.config
        return Agent(
            self.field,
            x,
            y,
            heading=heading,
            pointer=self.pointer,
            rng=self.rng,
            size=cfg.agent_size,
            max_speed=cfg.max_speed,
            sensor_offsets=cfg.sensor_offsets,
            sensor_distance=cfg.effective_sensor_distance,
            attraction_factor=cfg.attraction_factor,
            color=cfg.color,
            steering_channel=cfg.steering_channel,
            reflection=cfg.reflection,
        )

    def spawn_agent(self):
        """Create an agent at a random whole-pixel position with a random heading."""
        x = random_int_in_range(0, self.field.width, self.rng)
        y = random_int_in_range(0, self.field.height, self.rng)
        agent = self.create_agent(x, y)
        agent.contain()
        agent.last_position = agent.position
        return agent

    def step(self, delta_time):
        """Advance every agent by `delta_time` seconds, then decay the field."""
        for agent in self.agents:
            agent.step(delta_time)
        self.field.decay(self.config.decay_rate)
        self.tick_count += 1

    def tick(self):
        """Run one frame using the wall-clock time since the previous frame."""
        self.step(self.clock.update())

    def run(self, ticks, delta_time=None, callback=None):
        """Run several ticks, optionally with a fixed delta time.

        `callback(simulation)` is called after every tick.
        """
        for _ in range(ticks):
            if delta_time is None:
                self.tick()
            else:
                self.step(delta_time)
            if callback is not None:
                callback(self)

    def resize(self, width, height):
        """Reinitialize the field for new extents and pull agents back inside."""
        width, height = int(width), int(height)
        if width <= self.config.agent_size or height <= self.config.agent_size:
            logger.warning("Ignoring resize to %dx%d", width, height)
            return

        self.config = replace(self.config, width=width, height=height)
        self.field.resize(width, height)
        for agent in self.agents:
            agent.contain()
            agent.last_position = agent.position
