"""Physarum-style trail following agents on a decaying 2D field."""

from slime_trails.agent import Agent, PointerState, ReflectionMode, steer
from slime_trails.clock import SimulationClock
from slime_trails.config import ConfigurationError, SimulationConfig, parse_query
from slime_trails.field import SensorReading, SteeringChannel, TrailField
from slime_trails.simulation import Simulation

__all__ = [
    "Agent",
    "ConfigurationError",
    "PointerState",
    "ReflectionMode",
    "SensorReading",
    "Simulation",
    "SimulationClock",
    "SimulationConfig",
    "SteeringChannel",
    "TrailField",
    "parse_query",
    "steer",
]

__version__ = "0.1.0"
