# src/delivery_drone_planner/__init__.py
"""
delivery_drone_planner

Route planning and flight simulation for a single delivery drone that flies
from a depot to destination points and back while avoiding polygonal no-fly
zones. The drone moves in fixed steps of 0.00015 degrees along one of 16
compass directions and has a battery of 2000 moves per run.

Public entry points
-------------------
Typical usage pattern:

    from delivery_drone_planner import (
        DEPOT, LngLat, Polygon, DeliveryRequest, run_deliveries,
    )

    zones = [Polygon.from_dict(z) for z in raw_zones]
    requests = [DeliveryRequest("0000ABCD", LngLat(-3.1912, 55.9455))]

    # Build the visibility graph, search, simulate and fly every request
    result = run_deliveries(requests, zones, depot=DEPOT)

    # Inspect result.results (outcome per order) and result.moves (flight log)

Lower-level pieces (VisibilityGraph, FlightSimulator, Drone) can be used on
their own.
"""

from .flight_config import (
    FlightConfig,
    Tolerances,
    DEFAULT_CONFIG,
    STEP_LENGTH,
    BATTERY_CAPACITY,
)

from .geometry import (
    LngLat,
    Direction,
    DEPOT,
    INVALID_DISTANCE,
    distance,
    is_close,
    step,
    interpolate,
    resolve_direction,
    opposite,
    path_length,
)

from .polygon import (
    Polygon,
    orientation,
    segments_intersect,
    segments_cross_strictly,
    crosses_any,
)

from .visibility_graph import (
    Edge,
    VisibilityGraph,
    WaypointPath,
)

from .flight_simulator import (
    Move,
    FlightSimulator,
)

from .drone import Drone

from .delivery_run import (
    DeliveryRequest,
    DeliveryOutcome,
    DeliveryResult,
    RunResult,
    run_deliveries,
)

from .post_processing import (
    Timer,
    compute_order_move_counts,
    flight_path_length,
    summarize_run,
)

from .scenario_generation import (
    ScenarioConfig,
    Scenario,
    generate_scenario,
)

__all__ = [
    # Configuration
    "FlightConfig",
    "Tolerances",
    "DEFAULT_CONFIG",
    "STEP_LENGTH",
    "BATTERY_CAPACITY",
    # Geometry
    "LngLat",
    "Direction",
    "DEPOT",
    "INVALID_DISTANCE",
    "distance",
    "is_close",
    "step",
    "interpolate",
    "resolve_direction",
    "opposite",
    "path_length",
    # Spatial predicates
    "Polygon",
    "orientation",
    "segments_intersect",
    "segments_cross_strictly",
    "crosses_any",
    # Graph / search
    "Edge",
    "VisibilityGraph",
    "WaypointPath",
    # Simulation / execution
    "Move",
    "FlightSimulator",
    "Drone",
    # Delivery run
    "DeliveryRequest",
    "DeliveryOutcome",
    "DeliveryResult",
    "RunResult",
    "run_deliveries",
    # Post-processing
    "Timer",
    "compute_order_move_counts",
    "flight_path_length",
    "summarize_run",
    # Scenarios
    "ScenarioConfig",
    "Scenario",
    "generate_scenario",
]

__version__ = "0.1.0"
