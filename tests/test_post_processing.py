# tests/test_post_processing.py

import time

import pytest

from delivery_drone_planner.delivery_run import DeliveryRequest, run_deliveries
from delivery_drone_planner.flight_config import BATTERY_CAPACITY, STEP_LENGTH
from delivery_drone_planner.flight_simulator import Move
from delivery_drone_planner.geometry import Direction, LngLat
from delivery_drone_planner.polygon import Polygon
from delivery_drone_planner.post_processing import (
    Timer,
    compute_order_move_counts,
    flight_path_length,
    summarize_run,
)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

DEPOT = LngLat(0.0, 0.0)


def make_moves(order_no: str, directions) -> list:
    moves, p = [], DEPOT
    for d in directions:
        m = Move(p, d, order_no)
        moves.append(m)
        p = m.next_position()
    return moves


# ----------------------------------------------------------------------
# Timer
# ----------------------------------------------------------------------

def test_timer_measures_elapsed_time():
    with Timer("sleep") as t:
        time.sleep(0.01)
    assert t.label == "sleep"
    assert t.elapsed_wall >= 0.009
    assert t.elapsed_cpu >= 0.0


# ----------------------------------------------------------------------
# Flight log metrics
# ----------------------------------------------------------------------

def test_compute_order_move_counts():
    moves = make_moves("A", [Direction.E, None]) + make_moves("B", [Direction.N, Direction.N, None])
    assert compute_order_move_counts(moves) == {"A": 2, "B": 3}
    assert compute_order_move_counts([]) == {}


def test_flight_path_length_ignores_hovers():
    moves = make_moves("A", [Direction.E, Direction.E, None, Direction.N])
    assert flight_path_length(moves) == pytest.approx(3 * STEP_LENGTH)
    assert flight_path_length([]) == 0.0
    assert flight_path_length(make_moves("A", [None, None])) == 0.0


def test_summarize_run():
    boxed = Polygon.from_points(
        [LngLat(4.0, 4.0), LngLat(4.0, 6.0), LngLat(6.0, 6.0), LngLat(6.0, 4.0)]
    )
    requests = [
        DeliveryRequest("near", LngLat(0.0006, 0.0)),
        DeliveryRequest("boxed", LngLat(5.0, 5.5)),
    ]
    result = run_deliveries(requests, [boxed], depot=DEPOT)
    summary = summarize_run(result)

    assert summary["n_orders"] == 2
    assert summary["n_delivered"] == 1
    assert summary["n_not_delivered"] == 0
    assert summary["n_unreachable"] == 1
    assert summary["n_moves"] == 8
    assert summary["n_hovers"] == 2
    assert summary["battery_remaining"] == BATTERY_CAPACITY - 8
    assert summary["distance_flown"] == pytest.approx(6 * STEP_LENGTH)
    assert summary["planned_route_length"] == pytest.approx(2 * 0.0006)
