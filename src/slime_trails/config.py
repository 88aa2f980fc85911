"""Startup configuration.

The interactive front end is configured from a query-style string such as
``cells=1000&res=win2``: ``cells`` is the number of agents and ``res`` the
target pixel width of the field. `parse_query` turns that string plus the
window size into a validated `SimulationConfig`.
"""

import math
from dataclasses import dataclass
from urllib.parse import parse_qs

from slime_trails.agent import (
    DEFAULT_ATTRACTION_FACTOR,
    DEFAULT_COLOR,
    DEFAULT_MAX_SPEED,
    DEFAULT_SENSOR_OFFSETS,
    DEFAULT_SIZE,
    ReflectionMode,
)
from slime_trails.field import SteeringChannel

# --- Resolution ---
MIN_RESOLUTION = 400
MAX_RESOLUTION = 1920
DEFAULT_RESOLUTION = 400
WINDOW_DIVISOR = 1.5  # "win2" preset

# --- Population ---
MAX_AGENTS = 3000
DEFAULT_AGENTS = 1000

# --- Trail ---
DEFAULT_DECAY_RATE = 0.04


class ConfigurationError(ValueError):
    """Raised when the simulation is asked to start with unusable settings."""


@dataclass(frozen=True)
class SimulationConfig:
    width: int
    height: int
    agent_count: int = DEFAULT_AGENTS
    decay_rate: float = DEFAULT_DECAY_RATE
    agent_size: int = DEFAULT_SIZE
    max_speed: float = DEFAULT_MAX_SPEED
    sensor_offsets: tuple = DEFAULT_SENSOR_OFFSETS
    sensor_distance: float = None
    attraction_factor: float = DEFAULT_ATTRACTION_FACTOR
    color: tuple = DEFAULT_COLOR
    steering_channel: SteeringChannel = SteeringChannel.ALPHA
    reflection: ReflectionMode = ReflectionMode.LEGACY

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(
                f"field size must be positive, got {self.width}x{self.height}"
            )
        if self.agent_count < 1:
            raise ConfigurationError(
                f"agent_count must be >= 1, got {self.agent_count}"
            )
        if not 0 < self.decay_rate <= 1:
            raise ConfigurationError(
                f"decay_rate must be in (0, 1], got {self.decay_rate}"
            )
        if self.agent_size <= 0:
            raise ConfigurationError("agent_size must be positive")
        if self.agent_size >= min(self.width, self.height):
            raise ConfigurationError("agent_size must be smaller than the field")
        if self.max_speed <= 0:
            raise ConfigurationError("max_speed must be positive")
        if len(self.sensor_offsets) != 3:
            raise ConfigurationError(
                "sensor_offsets needs exactly three angles (left, center, right)"
            )
        if self.sensor_distance is not None and self.sensor_distance <= 0:
            raise ConfigurationError("sensor_distance must be positive")
        if self.attraction_factor <= 0:
            raise ConfigurationError("attraction_factor must be positive")
        if len(self.color) not in (3, 4):
            raise ConfigurationError("color needs 3 or 4 channels")

    @property
    def effective_sensor_distance(self):
        if self.sensor_distance is not None:
            return self.sensor_distance
        return self.agent_size * 6


def resolve_resolution(preset, window_width):
    """Map a ``res`` value to a pixel width clamped to the supported range.

    ``win`` is the window width, ``win2`` the window width / 1.5, a number is
    taken as an explicit width, anything else falls back to 400.
    """
    if preset == "win":
        width = window_width
    elif preset == "win2":
        width = window_width / WINDOW_DIVISOR
    else:
        try:
            width = float(preset)
        except (TypeError, ValueError):
            width = DEFAULT_RESOLUTION
        if not math.isfinite(width):
            width = DEFAULT_RESOLUTION

    return int(min(max(width, MIN_RESOLUTION), MAX_RESOLUTION))


def field_height(width, window_width, window_height):
    """Height that keeps the window's aspect ratio at the given width."""
    if window_width <= 0 or window_height <= 0:
        raise ConfigurationError(
            f"window size must be positive, got {window_width}x{window_height}"
        )
    return max(int(window_height / window_width * width), 1)


def parse_agent_count(value):
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"agent count must be an integer, got {value!r}"
        ) from None
    if count < 1:
        raise ConfigurationError(f"agent count must be >= 1, got {count}")
    return min(count, MAX_AGENTS)


def parse_query(query, window_width, window_height, **overrides):
    """Build a `SimulationConfig` from a ``cells=N&res=R`` string."""
    params = parse_qs(query.lstrip("?"), keep_blank_values=True)

    if "cells" not in params:
        raise ConfigurationError(f"missing 'cells' in {query!r}")
    agent_count = parse_agent_count(params["cells"][0])

    preset = params.get("res", [None])[0]
    width = resolve_resolution(preset, window_width)
    height = field_height(width, window_width, window_height)

    return SimulationConfig(
        width=width, height=height, agent_count=agent_count, **overrides
    )
