"""Trail-following agents.

Each tick an agent runs a fixed pipeline:

    sense   -> sample the field at three sensors fanned around its heading
    decide  -> steer towards the strongest sensor (see `steer`)
    move    -> cap speed, bounce off the field edges, follow the pointer
               while it is held down, then integrate position
    deposit -> draw its path since the last tick into the field
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum

from slime_trails.field import COORDINATE_FAULTS, SteeringChannel
from slime_trails.geometry import (
    angle_between,
    normalize_angle,
    polar_to_cartesian,
    random_int_in_range,
)

logger = logging.getLogger(__name__)

# --- Agent defaults ---
DEFAULT_SIZE = 1
DEFAULT_MAX_SPEED = 100.0  # pixels per second
DEFAULT_SENSOR_OFFSETS = (-45.0, 0.0, 45.0)
DEFAULT_ATTRACTION_FACTOR = 1.0
DEFAULT_COLOR = (255, 255, 255, 255)

# --- Pointer override ---
POINTER_SPEED_MULTIPLIER = 4
POINTER_JITTER = 45


class ReflectionMode(Enum):
    """How the heading changes when an agent hits a field edge.

    LEGACY mirrors the heading as 180 - heading on every edge. AXIS only
    does that on the left and right edges and negates the heading on the
    top and bottom edges, which is a true mirror for each wall.
    """

    LEGACY = "legacy"
    AXIS = "axis"


@dataclass
class PointerState:
    """Pointer position in field coordinates plus whether a button is held."""

    down: bool = False
    x: float = 0.0
    y: float = 0.0

    def press(self):
        self.down = True

    def release(self):
        self.down = False

    def move_to(self, x, y):
        self.x = x
        self.y = y


def steer(left, center, right, sensor_offsets, attraction_factor, rng=None):
    """Return the heading change for one set of sensor strengths.

    Rules are tried in order, first match wins:
      - left at least center and stronger than right: turn to the left sensor
      - right at least center and stronger than left: turn to the right sensor
      - both flanks at least center: random turn between the two sensors,
        damped by the attraction factor
      - center strictly strongest: keep going straight
    """
    left_offset, _, right_offset = sensor_offsets

    if left >= center and right < left:
        return left_offset * attraction_factor
    if right >= center and left < right:
        return right_offset * attraction_factor
    if left >= center and right >= center:
        return random_int_in_range(left_offset, right_offset, rng) / attraction_factor
    return 0.0


class Agent:
    def __init__(
        self,
        field,
        x,
        y,
        heading=None,
        pointer=None,
        rng=None,
        size=DEFAULT_SIZE,
        max_speed=DEFAULT_MAX_SPEED,
        sensor_offsets=DEFAULT_SENSOR_OFFSETS,
        sensor_distance=None,
        attraction_factor=DEFAULT_ATTRACTION_FACTOR,
        color=DEFAULT_COLOR,
        steering_channel=SteeringChannel.ALPHA,
        reflection=ReflectionMode.LEGACY,
    ):
        self.field = field
        self.pointer = pointer if pointer is not None else PointerState()
        self.rng = rng or random.Random()

        self.x = float(x)
        self.y = float(y)
        self.last_position = (self.x, self.y)
        self.heading = normalize_angle(
            heading if heading is not None else self.rng.uniform(0, 360)
        )

        self.size = size
        self.color = color
        self.max_speed = max_speed
        self.speed = max_speed

        self.sensor_offsets = tuple(sensor_offsets)
        self.sensor_distance = (
            sensor_distance if sensor_distance is not None else size * 6
        )
        self.attraction_factor = attraction_factor
        self.steering_channel = steering_channel
        self.reflection = reflection

    def __repr__(self):
        return (
            f"Agent(x={self.x:.1f}, y={self.y:.1f}, heading={self.heading:.1f}, "
            f"speed={self.speed:.1f})"
        )

    @property
    def position(self):
        return self.x, self.y

    def rotate(self, angle, absolute=False):
        """Turn by `angle` degrees, or face `angle` when `absolute` is set."""
        self.heading = normalize_angle(angle if absolute else self.heading + angle)

    # --- Sense ---

    def sensor_positions(self):
        positions = []
        for offset in self.sensor_offsets:
            dx, dy = polar_to_cartesian(self.heading + offset, self.sensor_distance)
            positions.append((self.x + dx, self.y + dy))
        return positions

    def sense(self):
        return [self.field.sample(sx, sy) for sx, sy in self.sensor_positions()]

    # --- Decide ---

    def decide(self, readings):
        left, center, right = (r.strength(self.steering_channel) for r in readings)
        delta = steer(
            left, center, right, self.sensor_offsets, self.attraction_factor, self.rng
        )
        self.rotate(delta)
        return delta

    # --- Move ---

    def reflect(self):
        """Clamp to the field edges, bouncing the heading off any edge touched."""
        width, height = self.field.width, self.field.height

        if self.x <= 0:
            self.x = 0.0
            self._bounce(vertical_edge=True)
        if self.y <= 0:
            self.y = 0.0
            self._bounce(vertical_edge=False)
        if self.x + self.size >= width:
            self.x = float(width - self.size)
            self._bounce(vertical_edge=True)
        if self.y + self.size >= height:
            self.y = float(height - self.size)
            self._bounce(vertical_edge=False)

    def _bounce(self, vertical_edge):
        if vertical_edge or self.reflection is ReflectionMode.LEGACY:
            self.rotate(180 - self.heading, absolute=True)
        else:
            self.rotate(-self.heading, absolute=True)

    def contain(self):
        """Clamp the position into the field without touching the heading."""
        self.x = min(max(self.x, 0.0), float(self.field.width - self.size))
        self.y = min(max(self.y, 0.0), float(self.field.height - self.size))

    def follow_pointer(self):
        self.rotate(
            angle_between(self.x, self.y, self.pointer.x, self.pointer.y)
            + random_int_in_range(-POINTER_JITTER, POINTER_JITTER, self.rng),
            absolute=True,
        )
        self.speed = self.max_speed * POINTER_SPEED_MULTIPLIER

    def move(self, delta_time):
        if self.speed > self.max_speed:
            self.speed = self.max_speed

        self.reflect()

        if self.pointer.down:
            self.follow_pointer()

        dx, dy = polar_to_cartesian(self.heading, self.speed)
        self.x += dx * delta_time
        self.y += dy * delta_time
        self.contain()

    # --- Deposit ---

    def deposit(self):
        """Draw the path since the last tick. Returns False if it was skipped."""
        try:
            self.field.deposit(
                self.position, self.last_position, self.color, self.size
            )
        except COORDINATE_FAULTS as err:
            logger.debug("Skipping deposit for %r: %s", self, err)
            return False
        self.last_position = self.position
        return True

    def step(self, delta_time):
        self.decide(self.sense())
        self.move(delta_time)
        self.deposit()
