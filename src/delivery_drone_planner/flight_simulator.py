from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

import numpy as np

from delivery_drone_planner.flight_config import DEFAULT_CONFIG, FlightConfig
from delivery_drone_planner.geometry import (
    Direction,
    LngLat,
    distance,
    is_close,
    opposite,
    step,
)
from delivery_drone_planner.polygon import Polygon, crosses_any

"""
Module: turning waypoint routes into single-step moves.

The simulator keeps a current position and greedily steps towards each
waypoint in turn, one of 16 compass directions at a time, never taking a step
whose segment crosses a no-fly zone. After the last waypoint it hovers once
(the delivery), then flies the outbound moves back in reverse and hovers once
more at the start.

Key entry points:
- FlightSimulator.travel(start, waypoints, order_no, zones): full round trip.
- FlightSimulator.replay(order_no, moves): reuse a computed round trip for
  another order to the same destination.
"""


@dataclass(frozen=True)
class Move:
    """
    One entry of the flight log: the vehicle was at ``position`` and then
    moved one step in ``direction`` (None = hover). ``tick`` is the number of
    nanoseconds since the simulator started and is for diagnostics only.
    """
    position: LngLat
    direction: Optional[Direction]
    order_no: str
    tick: int = 0

    @property
    def is_hover(self) -> bool:
        return self.direction is None

    def next_position(self, config: FlightConfig = DEFAULT_CONFIG) -> LngLat:
        return step(self.position, self.direction, config)

    def to_dict(self, config: FlightConfig = DEFAULT_CONFIG) -> Dict:
        to = self.next_position(config)
        return {
            "orderNo": self.order_no,
            "fromLongitude": self.position.lng,
            "fromLatitude": self.position.lat,
            "angle": None if self.direction is None else self.direction.angle,
            "toLongitude": to.lng,
            "toLatitude": to.lat,
            "ticksSinceStartOfCalculation": self.tick,
        }


@dataclass
class FlightSimulator:
    """
    Greedy single-step flight simulator.

    Fields:
    - config: FlightConfig providing the step length, arrival threshold and
      the per-leg move bound.
    - position: current simulated position; set by travel().
    - start_tick: perf_counter_ns() value of the first tick() call.
    """
    config: FlightConfig = DEFAULT_CONFIG
    position: Optional[LngLat] = None
    start_tick: Optional[int] = field(default=None, repr=False)

    def tick(self) -> int:
        """Nanoseconds elapsed since the first call on this simulator."""
        now = time.perf_counter_ns()
        if self.start_tick is None:
            self.start_tick = now
        return now - self.start_tick

    def next_move(self, destination: LngLat, order_no: str, no_fly_zones: Sequence[Polygon]) -> Move:
        """
        Take the single step that gets closest to ``destination``.

        Directions whose step strictly crosses a zone are masked out; among the
        rest the smallest resulting distance wins, ties going to the earliest
        direction in compass order. The move is recorded at the pre-step
        position. Raises RuntimeError if every direction is blocked.
        """
        origin = self.position
        candidates = [step(origin, d, self.config) for d in Direction]
        dists = np.array([
            np.inf if no_fly_zones and crosses_any(origin, nxt, no_fly_zones) else distance(nxt, destination)
            for nxt in candidates
        ])
        best = int(np.argmin(dists))
        if not np.isfinite(dists[best]):
            raise RuntimeError(f"Every direction from {origin} crosses a no-fly zone")
        direction = Direction(best)
        self.position = candidates[best]
        return Move(origin, direction, order_no, self.tick())

    def fly_to(self, destination: LngLat, order_no: str, no_fly_zones: Sequence[Polygon]) -> List[Move]:
        """Step until close to ``destination``; returns the moves taken."""
        moves: List[Move] = []
        while not is_close(self.position, destination, self.config):
            if len(moves) >= self.config.max_leg_moves:
                raise RuntimeError(
                    f"Did not reach {destination} within {self.config.max_leg_moves} moves"
                )
            moves.append(self.next_move(destination, order_no, no_fly_zones))
        return moves

    def hover(self, order_no: str) -> Move:
        return Move(self.position, None, order_no, self.tick())

    def reverse_path(self, moves: Sequence[Move], start: LngLat, order_no: str) -> List[Move]:
        """
        Mirror the outbound moves. Walking back from the last recorded
        position, each return move leaves position i in the direction opposite
        to the one that brought the vehicle there, e.g.

            [(0,0), E] -> [(1,0), hover] -> [(1,0), W] -> [(0,0), hover]
        """
        back = [
            Move(moves[i].position, opposite(moves[i - 1].direction), order_no, self.tick())
            for i in range(len(moves) - 1, 0, -1)
        ]
        self.position = start
        return back

    def travel(
        self,
        start: LngLat,
        waypoints: Sequence[LngLat],
        order_no: str,
        no_fly_zones: Sequence[Polygon],
    ) -> List[Move]:
        """
        Round trip from ``start`` through ``waypoints`` and back.

        Layout of the result: outbound moves, one hover at the destination,
        the mirrored return moves, one hover at ``start``.
        """
        self.tick()
        self.position = start
        moves: List[Move] = []
        for wp in waypoints:
            moves.extend(self.fly_to(wp, order_no, no_fly_zones))
        moves.append(self.hover(order_no))
        moves.extend(self.reverse_path(moves, start, order_no))
        moves.append(self.hover(order_no))
        return moves

    def replay(self, order_no: str, moves: Sequence[Move]) -> List[Move]:
        """Copy of a computed route with a new order number and fresh ticks."""
        return [replace(m, order_no=order_no, tick=self.tick()) for m in moves]
