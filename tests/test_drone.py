import pytest

from delivery_drone_planner.drone import Drone, NO_ORDER
from delivery_drone_planner.flight_config import BATTERY_CAPACITY, FlightConfig
from delivery_drone_planner.flight_simulator import FlightSimulator, Move
from delivery_drone_planner.geometry import DEPOT, Direction, LngLat


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def make_drone(battery: int = BATTERY_CAPACITY, position: LngLat = DEPOT) -> Drone:
    return Drone(position=position, battery=battery)


def make_route(n_steps: int = 2, order_no: str = "A") -> list:
    """n_steps moves north followed by one hover, starting at DEPOT."""
    moves = []
    p = DEPOT
    for _ in range(n_steps):
        m = Move(p, Direction.N, order_no)
        moves.append(m)
        p = m.next_position()
    moves.append(Move(p, None, order_no))
    return moves


# ----------------------------------------------------------------------
# Tests
# ----------------------------------------------------------------------

def test_at_depot_is_fully_charged():
    d = Drone.at_depot(DEPOT)
    assert d.position == DEPOT
    assert d.battery == BATTERY_CAPACITY
    assert d.order_no == NO_ORDER
    assert d.moves == []

    small = Drone.at_depot(DEPOT, FlightConfig(battery_capacity=10))
    assert small.battery == 10


def test_has_capacity_boundary():
    d = make_drone(battery=5)
    assert d.has_capacity(0)
    assert d.has_capacity(5)
    assert not d.has_capacity(6)


def test_follow_path_applies_every_move():
    d = make_drone()
    route = make_route(2)
    d.follow_path("A", route)
    assert d.battery == BATTERY_CAPACITY - 3
    assert d.moves == route
    assert d.order_no == "A"
    # The trailing hover leaves the position where the last step ended
    assert d.position == route[-1].position


def test_follow_path_insufficient_battery_changes_nothing():
    d = make_drone(battery=2)
    with pytest.raises(ValueError):
        d.follow_path("A", make_route(2))
    assert d.battery == 2
    assert d.position == DEPOT
    assert d.moves == []
    assert d.order_no == NO_ORDER


def test_follow_path_round_trip_returns_to_start():
    sim = FlightSimulator()
    moves = sim.travel(DEPOT, [DEPOT, LngLat(DEPOT.lng + 0.0006, DEPOT.lat)], "A", [])
    d = make_drone()
    d.follow_path("A", moves)
    assert d.position == DEPOT
    assert d.battery == BATTERY_CAPACITY - len(moves)


def test_reset_keeps_battery():
    d = make_drone()
    d.follow_path("A", make_route(3))
    d.reset(DEPOT)
    assert d.position == DEPOT
    assert d.moves == []
    assert d.order_no == NO_ORDER
    assert d.battery == BATTERY_CAPACITY - 4


def test_battery_never_negative_over_many_routes():
    d = make_drone(battery=10)
    for _ in range(5):
        route = make_route(2)
        if not d.has_capacity(len(route)):
            with pytest.raises(ValueError):
                d.follow_path("A", route)
            break
        d.follow_path("A", route)
        d.reset(DEPOT)
    assert d.battery == 1
