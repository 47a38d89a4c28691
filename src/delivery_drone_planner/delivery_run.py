import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from delivery_drone_planner.drone import Drone
from delivery_drone_planner.flight_config import DEFAULT_CONFIG, FlightConfig
from delivery_drone_planner.flight_simulator import FlightSimulator, Move
from delivery_drone_planner.geometry import DEPOT, LngLat, distance
from delivery_drone_planner.polygon import Polygon
from delivery_drone_planner.post_processing import Timer
from delivery_drone_planner.visibility_graph import VisibilityGraph, WaypointPath

# -----------------------------------------------------------------------------
# Module: delivery run driver
#
# run_deliveries() plays out one day of deliveries for a single drone:
#  - builds the visibility graph over the depot and all destinations,
#  - searches one waypoint route per distinct destination,
#  - orders the requests by straight-line distance from the depot,
#  - simulates (or replays) the round trip for each request,
#  - commits the route only if the battery covers all of it, and stops the run
#    at the first route that does not fit.
#
# Routes are cached per destination, so repeated orders to the same place are
# only searched and simulated once.
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)


class DeliveryOutcome(Enum):
    """Final state of a delivery request after a run."""
    DELIVERED = "DELIVERED"
    NOT_DELIVERED = "NOT_DELIVERED"  # reachable, but the run ended first
    UNREACHABLE = "UNREACHABLE"


@dataclass(frozen=True)
class DeliveryRequest:
    order_no: str
    destination: LngLat


@dataclass
class DeliveryResult:
    """
    Per-request bookkeeping.

    - distance: straight-line distance from the depot, $$\\infty$$ when the
      destination cannot be reached.
    - move_count: moves of the committed round trip (0 if not delivered).
    """
    request: DeliveryRequest
    outcome: DeliveryOutcome = DeliveryOutcome.NOT_DELIVERED
    distance: float = math.inf
    move_count: int = 0


@dataclass
class RunResult:
    results: List[DeliveryResult]
    moves: List[Move]
    drone: Drone
    routes: Dict[LngLat, Optional[WaypointPath]] = field(default_factory=dict)

    def delivered(self) -> List[DeliveryResult]:
        return [r for r in self.results if r.outcome is DeliveryOutcome.DELIVERED]


def schedule_by_distance(results: List[DeliveryResult]) -> List[DeliveryResult]:
    """Ascending distance from the depot; unreachable requests go last."""
    return sorted(results, key=lambda r: r.distance)


def run_deliveries(
    requests: Sequence[DeliveryRequest],
    no_fly_zones: Sequence[Polygon],
    depot: LngLat = DEPOT,
    config: FlightConfig = DEFAULT_CONFIG,
    on_delivery: Optional[Callable[[DeliveryResult, List[Move]], None]] = None,
) -> RunResult:
    """
    Plan and fly every request with a single drone.

    Parameters:
    - requests: orders to deliver; several may share a destination.
    - no_fly_zones: polygons the drone must not cross.
    - depot: start and end point of every round trip.
    - config: FlightConfig for the graph, the simulator and the drone.
    - on_delivery: optional callback ``on_delivery(result, moves)`` invoked
      after each committed delivery (e.g. to stream the log to a writer).

    Returns a RunResult whose ``results`` are in scheduling order and whose
    ``moves`` is the concatenated flight log of all delivered orders.

    Raises ValueError for malformed inputs (missing depot, no requests).
    """
    if not requests:
        raise ValueError("There must be at least one delivery request")

    with Timer("run_deliveries") as timer:
        destinations = list(dict.fromkeys(r.destination for r in requests))
        graph = VisibilityGraph.build(depot, destinations, no_fly_zones, config)
        drone = Drone.at_depot(depot, config)
        simulator = FlightSimulator(config)

        routes: Dict[LngLat, Optional[WaypointPath]] = {}
        for dest in destinations:
            routes[dest] = graph.shortest_path(depot, dest)

        results = []
        for req in requests:
            res = DeliveryResult(req)
            if routes[req.destination] is None:
                res.outcome = DeliveryOutcome.UNREACHABLE
            else:
                res.distance = distance(depot, req.destination)
            results.append(res)
        results = schedule_by_distance(results)

        flown: Dict[LngLat, List[Move]] = {}
        log: List[Move] = []
        for res in results:
            if res.outcome is DeliveryOutcome.UNREACHABLE:
                continue
            req = res.request
            if req.destination in flown:
                moves = simulator.replay(req.order_no, flown[req.destination])
            else:
                try:
                    moves = simulator.travel(depot, routes[req.destination].waypoints,
                                             req.order_no, no_fly_zones)
                except RuntimeError as exc:
                    logger.warning("Cannot fly order %s: %s", req.order_no, exc)
                    _mark_unreachable(results, req.destination)
                    continue
                flown[req.destination] = moves

            if not drone.has_capacity(len(moves)):
                # Later requests are farther away, so none of them fits either.
                logger.info("Battery at %d cannot cover %d moves for order %s; stopping",
                            drone.battery, len(moves), req.order_no)
                break

            drone.follow_path(req.order_no, moves)
            log.extend(drone.moves)
            res.outcome = DeliveryOutcome.DELIVERED
            res.move_count = len(moves)
            if on_delivery:
                on_delivery(res, moves)
            drone.reset(depot)

    n_delivered = sum(r.outcome is DeliveryOutcome.DELIVERED for r in results)
    logger.info("Delivered %d of %d orders in %.1f ms", n_delivered, len(results), timer.elapsed_wall * 1e3)
    return RunResult(results=results, moves=log, drone=drone, routes=routes)


def _mark_unreachable(results: List[DeliveryResult], destination: LngLat) -> None:
    for r in results:
        if r.request.destination == destination:
            r.outcome = DeliveryOutcome.UNREACHABLE
            r.distance = math.inf
