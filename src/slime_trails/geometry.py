"""Angle and vector helpers shared by the agents and the front end.

All angles taken and returned by the public functions are in degrees; the
trigonometry underneath works in radians.
"""

import math
import random


def degrees_to_radians(degrees):
    return degrees * (math.pi / 180)


def radians_to_degrees(radians):
    return radians * (180 / math.pi)


def random_int_in_range(low, high, rng=None):
    """Uniform integer in the closed interval [low, high].

    Fractional bounds are rounded inwards so the result never leaves the
    interval. Bounds given in the wrong order are swapped.
    """
    rng = rng or random
    if low > high:
        low, high = high, low
    start, stop = math.ceil(low), math.floor(high)
    if start > stop:
        # no whole number between fractional bounds
        return low
    return rng.randint(start, stop)


def polar_to_cartesian(angle, magnitude):
    """Return the (x, y) components of a vector of the given heading and length."""
    theta = degrees_to_radians(angle)
    return magnitude * math.cos(theta), magnitude * math.sin(theta)


def cartesian_to_polar(x, y):
    """Return (angle, magnitude) of the vector from the origin to (x, y)."""
    return radians_to_degrees(math.atan2(y, x)), math.sqrt(x**2 + y**2)


def angle_between(x1, y1, x2, y2):
    """Heading, in degrees, that points from (x1, y1) towards (x2, y2)."""
    return radians_to_degrees(math.atan2(y2 - y1, x2 - x1))


def distance_between(x1, y1, x2, y2):
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def point_on_circle(radius, center_x, center_y, angle=0.0):
    theta = degrees_to_radians(angle)
    return radius * math.cos(theta) + center_x, radius * math.sin(theta) + center_y


def normalize_angle(angle):
    """Wrap an angle into [0, 360)."""
    wrapped = angle % 360.0
    # a tiny negative input rounds up to exactly 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped
