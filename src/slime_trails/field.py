"""The trail field: a shared RGBA buffer agents sense and deposit into.

The field is a plain numpy array of shape (height, width, 4) holding
channel values in 0..255, with RGB stored premultiplied by alpha. Agents
read it through `sample` and write it only through `deposit`; once per tick
the simulation fades it with `decay`. Every access is bounds tolerant:
probing outside the field reads as empty and drawing outside the field is
clipped.
"""

import logging
import math
from enum import Enum
from typing import NamedTuple

import numpy as np

logger = logging.getLogger(__name__)

# Exceptions raised by unaddressable coordinates (NaN, inf, huge floats)
COORDINATE_FAULTS = (ValueError, OverflowError, IndexError)

# Faded signal below one 8-bit step is dropped
MIN_SIGNAL = 1 / 255


class SteeringChannel(Enum):
    """Which part of a sample counts as the signal when agents compare sensors."""

    ALPHA = "alpha"
    COLOR = "color"


class SensorReading(NamedTuple):
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0

    @property
    def color(self):
        """Summed RGB strength."""
        return self.r + self.g + self.b

    @property
    def alpha(self):
        return self.a

    def strength(self, channel):
        if channel is SteeringChannel.COLOR:
            return self.color
        return self.alpha


ZERO_READING = SensorReading()


def parse_color(color):
    """Turn an (r, g, b) or (r, g, b, a) tuple into a float32 RGBA vector."""
    values = [float(c) for c in color]
    if len(values) == 3:
        values.append(255.0)
    if len(values) != 4:
        raise ValueError(f"color needs 3 or 4 channels, got {len(values)}")
    return np.clip(np.array(values, dtype=np.float32), 0.0, 255.0)


class TrailField:
    def __init__(self, width, height):
        self.width = int(width)
        self.height = int(height)
        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)

    def __repr__(self):
        return f"TrailField({self.width}x{self.height})"

    def contains(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def resize(self, width, height):
        """Reallocate the buffer for new extents. Existing trails are dropped."""
        self.width = int(width)
        self.height = int(height)
        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)
        logger.info("Trail field resized to %dx%d", self.width, self.height)

    def clear(self):
        self.buffer.fill(0.0)

    # --- Sense ---

    def sample(self, x, y):
        """Read the cell under a continuous coordinate.

        Coordinates are truncated towards negative infinity to the cell that
        contains them. Anything outside the field, or not a finite number,
        reads as `ZERO_READING`.
        """
        try:
            gx = math.floor(x)
            gy = math.floor(y)
            if not (0 <= gx < self.width and 0 <= gy < self.height):
                return ZERO_READING
            r, g, b, a = self.buffer[gy, gx]
        except COORDINATE_FAULTS as err:
            logger.debug("sample(%r, %r) failed: %s", x, y, err)
            return ZERO_READING
        return SensorReading(float(r), float(g), float(b), float(a))

    # --- Deposit ---

    def deposit(self, position, prior_position, color, size):
        """Mark the path from `prior_position` to `position`.

        Strokes a segment of width 2 * size between the two points and fills
        a size x size square at `position`, compositing `color` over what is
        already there. Raises ValueError for non-finite coordinates.
        """
        x, y = position
        px, py = prior_position
        if not all(math.isfinite(v) for v in (x, y, px, py, size)):
            raise ValueError(f"cannot deposit at {position} from {prior_position}")

        rgba = parse_color(color)
        half_width = float(size)

        x0 = max(math.floor(min(x, px) - half_width), 0)
        y0 = max(math.floor(min(y, py) - half_width), 0)
        x1 = min(math.ceil(max(x + size, px) + half_width), self.width)
        y1 = min(math.ceil(max(y + size, py) + half_width), self.height)
        if x0 >= x1 or y0 >= y1:
            return 0

        cx = np.arange(x0, x1, dtype=np.float64)[np.newaxis, :] + 0.5
        cy = np.arange(y0, y1, dtype=np.float64)[:, np.newaxis] + 0.5

        mask = self._square_mask(cx, cy, x, y, size)
        if (x, y) != (px, py):
            mask |= self._segment_mask(cx, cy, px, py, x, y, half_width)

        count = int(mask.sum())
        if count:
            self._composite(self.buffer[y0:y1, x0:x1], mask, rgba)
        return count

    @staticmethod
    def _square_mask(cx, cy, x, y, size):
        return (cx >= x) & (cx < x + size) & (cy >= y) & (cy < y + size)

    @staticmethod
    def _segment_mask(cx, cy, x0, y0, x1, y1, half_width):
        # butt-capped stroke: project onto the segment, keep the cells whose
        # projection falls inside it and whose perpendicular distance is small
        dx = x1 - x0
        dy = y1 - y0
        length_sq = dx * dx + dy * dy
        t = ((cx - x0) * dx + (cy - y0) * dy) / length_sq
        perp = np.abs((cx - x0) * dy - (cy - y0) * dx) / math.sqrt(length_sq)
        return (t >= 0.0) & (t <= 1.0) & (perp <= half_width)

    @staticmethod
    def _composite(region, mask, rgba):
        src_alpha = rgba[3] / 255.0
        cells = region[mask]
        cells[:, :3] = rgba[:3] * src_alpha + cells[:, :3] * (1.0 - src_alpha)
        cells[:, 3] = rgba[3] + cells[:, 3] * (1.0 - src_alpha)
        region[mask] = cells

    # --- Decay ---

    def decay(self, rate):
        """Fade every channel of every cell towards zero by `rate`."""
        rate = min(max(float(rate), 0.0), 1.0)
        self.buffer *= np.float32(1.0 - rate)
        self.buffer[self.buffer < MIN_SIGNAL] = 0.0

    def total_signal(self, channel=SteeringChannel.ALPHA):
        if channel is SteeringChannel.COLOR:
            return float(self.buffer[:, :, :3].sum())
        return float(self.buffer[:, :, 3].sum())
