# src/delivery_drone_planner/flight_config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# ---------------------------------------------------------------------------
# Module: configuration shared by the planner
#
# Fixed values that the flight log format depends on live as module constants;
# everything a caller may want to vary for a run is bundled in FlightConfig.
# ---------------------------------------------------------------------------

STEP_LENGTH = 0.00015          # distance of one move, in degrees
CLOSE_TOLERANCE = 1e-12        # slack added to the arrival threshold
BATTERY_CAPACITY = 2000        # moves per run
MOVE_COST = 1                  # battery units consumed per move (hover included)
DEPOT_LNG = -3.186874
DEPOT_LAT = 55.944494


@dataclass(frozen=True)
class Tolerances:
    """
    Numeric tolerances used by the geometric predicates.

    Attributes:
    - close: slack added to the step length when deciding that the vehicle
      has arrived at a waypoint (default: $$1\\mathrm{e}{-12}$$).
    """
    close: float = CLOSE_TOLERANCE


@dataclass(frozen=True)
class FlightConfig:
    """
    Parameters of a planning run.

    Fields:
    - step_length: distance travelled by one non-hover move.
    - battery_capacity: number of moves the vehicle can make in one run.
    - sample_fractions: fractions along a visibility edge whose points are
      tested for containment in a no-fly zone while pruning. An empty tuple
      keeps only the strict edge-crossing test.
    - legacy_interpolation: if True, sample points are computed with the
      historical $$(p + q)\\cdot t$$ formula instead of $$p + (q - p)\\cdot t$$.
    - max_search_iterations: upper bound on A* expansions for a single query.
    - max_leg_moves: upper bound on moves flown towards a single waypoint;
      defaults to the battery capacity since a longer leg can never be flown.
    - tols: Tolerances instance.
    """
    step_length: float = STEP_LENGTH
    battery_capacity: int = BATTERY_CAPACITY
    sample_fractions: Tuple[float, ...] = (0.25, 0.5, 0.75)
    legacy_interpolation: bool = False
    max_search_iterations: int = 1_000_000
    max_leg_moves: int = BATTERY_CAPACITY
    tols: Tolerances = Tolerances()

    def __post_init__(self):
        if self.step_length <= 0:
            raise ValueError("step_length must be > 0")
        if self.battery_capacity < 0:
            raise ValueError("battery_capacity must be non-negative")
        if self.max_leg_moves <= 0:
            raise ValueError("max_leg_moves must be positive")

    @property
    def close_threshold(self) -> float:
        """Distance below which two points count as close."""
        return self.step_length + self.tols.close


DEFAULT_CONFIG = FlightConfig()
