# src/delivery_drone_planner/post_processing.py
from __future__ import annotations
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Sequence

import numpy as np

from delivery_drone_planner.geometry import path_length

if TYPE_CHECKING:
    from delivery_drone_planner.delivery_run import RunResult
    from delivery_drone_planner.flight_simulator import Move

# -----------------------------
# Timing helpers (runtime)
# -----------------------------

@dataclass
class Timer:
    """Context manager for wall-clock and CPU time."""
    label: str = "block"
    start_wall: float = field(default=0.0, init=False)
    start_cpu: float = field(default=0.0, init=False)
    elapsed_wall: float = field(default=0.0, init=False)
    elapsed_cpu: float = field(default=0.0, init=False)

    def __enter__(self):
        self.start_wall = time.perf_counter()
        self.start_cpu = time.process_time()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed_wall = time.perf_counter() - self.start_wall
        self.elapsed_cpu = time.process_time() - self.start_cpu

# -----------------------------
# Post-run analysis
# -----------------------------

def compute_order_move_counts(moves: Sequence[Move]) -> Dict[str, int]:
    """Number of logged moves per order number."""
    return dict(Counter(m.order_no for m in moves))

def flight_path_length(moves: Sequence[Move]) -> float:
    """Distance covered by a flight log, summed over the displacement of each move."""
    if not moves:
        return 0.0
    start = np.array([[m.position.lng, m.position.lat] for m in moves])
    end = np.array([[p.lng, p.lat] for p in (m.next_position() for m in moves)])
    return float(np.hypot(*(end - start).T).sum())

def summarize_run(result: RunResult) -> Dict[str, Any]:
    """
    Final state summary of a delivery run.

    ``planned_route_length`` is the waypoint length of every delivered round
    trip ($$2 \\times$$ the outbound route), to compare against ``distance_flown``.
    """
    outcomes = Counter(r.outcome.value for r in result.results)
    planned = sum(
        2 * path_length(result.routes[r.request.destination].waypoints)
        for r in result.delivered()
    )
    return {
        "n_orders": len(result.results),
        "n_delivered": outcomes.get("DELIVERED", 0),
        "n_not_delivered": outcomes.get("NOT_DELIVERED", 0),
        "n_unreachable": outcomes.get("UNREACHABLE", 0),
        "n_moves": len(result.moves),
        "n_hovers": sum(m.is_hover for m in result.moves),
        "battery_remaining": result.drone.battery,
        "distance_flown": flight_path_length(result.moves),
        "planned_route_length": planned,
    }
