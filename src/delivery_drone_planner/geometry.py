# src/delivery_drone_planner/geometry.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Sequence

from delivery_drone_planner.flight_config import (
    DEFAULT_CONFIG,
    DEPOT_LAT,
    DEPOT_LNG,
    FlightConfig,
)

"""
Module: point and direction primitives.

Coordinates are plain (longitude, latitude) pairs treated as a flat plane:
all distances are Euclidean in degrees, matching how the step length is
defined. Key functions:
- distance(a, b), is_close(a, b): metric and arrival predicate.
- step(p, d): displacement of one move in compass direction d (None = hover).
- interpolate(p, q, t): point at fraction t along p->q.
- resolve_direction(angle), opposite(d): direction table lookups.
"""

logger = logging.getLogger(__name__)

INVALID_DISTANCE = -1.0
DIRECTION_SPACING = 22.5  # degrees between neighbouring compass directions


@dataclass(frozen=True)
class LngLat:
    """
    An immutable point. Equality and hashing are exact on both components,
    so two points are the same graph node only if both floats match.
    """
    lng: float
    lat: float

    def to_dict(self) -> Dict:
        return {"longitude": self.lng, "latitude": self.lat}

    @staticmethod
    def from_dict(d: Dict) -> "LngLat":
        try:
            return LngLat(float(d["longitude"]), float(d["latitude"]))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"not a longitude/latitude mapping: {d!r}") from exc


DEPOT = LngLat(DEPOT_LNG, DEPOT_LAT)


class Direction(IntEnum):
    """
    The 16 compass directions, counter-clockwise from east in 22.5 degree
    increments. The integer value is the index into the compass rose.
    """
    E = 0
    ENE = 1
    NE = 2
    NNE = 3
    N = 4
    NNW = 5
    NW = 6
    WNW = 7
    W = 8
    WSW = 9
    SW = 10
    SSW = 11
    S = 12
    SSE = 13
    SE = 14
    ESE = 15

    @property
    def angle(self) -> float:
        """Angle in degrees, in $$[0, 360)$$."""
        return self.value * DIRECTION_SPACING

    @property
    def radians(self) -> float:
        return math.radians(self.angle)

    @property
    def opposite(self) -> "Direction":
        return Direction((self.value + 8) % 16)


_ANGLE_TO_DIRECTION = {d.angle: d for d in Direction}


def resolve_direction(angle: float) -> Direction:
    """
    Return the direction whose angle is exactly ``angle`` degrees.

    Raises ValueError if no direction matches; the stepper only ever emits
    table angles, so a miss means the caller produced a corrupted angle.
    """
    try:
        return _ANGLE_TO_DIRECTION[angle]
    except (KeyError, TypeError):
        raise ValueError(f"No compass direction has an angle of {angle!r} degrees") from None


def opposite(direction: Optional[Direction]) -> Direction:
    if direction is None:
        raise ValueError("A hover move has no opposite direction")
    return Direction(direction).opposite


def distance(a: Optional[LngLat], b: Optional[LngLat]) -> float:
    """
    Euclidean distance $$\\sqrt{(\\Delta lng)^2 + (\\Delta lat)^2}$$.

    Returns INVALID_DISTANCE (and logs an error) if either point is missing,
    so that a missing point can never pass for a real distance.
    """
    if a is None or b is None:
        logger.error("Cannot measure a distance to a missing point (%r, %r)", a, b)
        return INVALID_DISTANCE
    return math.hypot(a.lng - b.lng, a.lat - b.lat)


def is_close(a: Optional[LngLat], b: Optional[LngLat], config: FlightConfig = DEFAULT_CONFIG) -> bool:
    """True if the points are less than one step (plus round-off slack) apart."""
    if a is None or b is None:
        logger.error("Cannot compare a missing point (%r, %r)", a, b)
        return False
    return distance(a, b) < config.close_threshold


def step(point: LngLat, direction: Optional[Direction], config: FlightConfig = DEFAULT_CONFIG) -> LngLat:
    """
    Position after one move from ``point``. A hover (``direction is None``)
    returns the point unchanged.
    """
    if direction is None:
        return point
    rad = direction.radians
    return LngLat(point.lng + config.step_length * math.cos(rad),
                  point.lat + config.step_length * math.sin(rad))


def interpolate(p: LngLat, q: LngLat, t: float, legacy: bool = False) -> LngLat:
    """
    Point at fraction ``t`` along p->q.

    The endpoints are returned as-is for $$t = 0$$ and $$t = 1$$. Values of t
    outside $$[0, 1]$$ are logged but still evaluated. With ``legacy=True`` the
    interior point is $$(p + q)\\cdot t$$, which only coincides with the true
    interpolant at the midpoint; it is kept so that pruning results can be
    reproduced against older flight logs.
    """
    if t == 0.0:
        return p
    if t == 1.0:
        return q
    if t < 0.0 or t > 1.0:
        logger.warning("Interpolation fraction %r is outside [0, 1]", t)
    if legacy:
        return LngLat((p.lng + q.lng) * t, (p.lat + q.lat) * t)
    return LngLat(p.lng + (q.lng - p.lng) * t, p.lat + (q.lat - p.lat) * t)


def path_length(points: Sequence[LngLat]) -> float:
    """Sum of the distances between consecutive points (0 for < 2 points)."""
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))
