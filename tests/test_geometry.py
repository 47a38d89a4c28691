import dataclasses
import logging
import math
import pytest

from delivery_drone_planner.flight_config import FlightConfig, STEP_LENGTH
from delivery_drone_planner.geometry import (
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

# ---------- LngLat ----------

def test_lnglat_equality_is_exact():
    assert LngLat(1.0, 2.0) == LngLat(1.0, 2.0)
    assert LngLat(1.0, 2.0) != LngLat(1.0, 2.0 + 1e-15)
    assert len({LngLat(1.0, 2.0), LngLat(1.0, 2.0)}) == 1

def test_lnglat_is_immutable():
    p = LngLat(0.0, 0.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.lng = 1.0

def test_lnglat_dict_round_trip_and_malformed():
    d = {"longitude": -3.19, "latitude": 55.94, "name": "ignored"}
    p = LngLat.from_dict(d)
    assert p == LngLat(-3.19, 55.94)
    assert p.to_dict() == {"longitude": -3.19, "latitude": 55.94}
    with pytest.raises(ValueError):
        LngLat.from_dict({"longitude": 1.0})

def test_depot_constant():
    assert DEPOT == LngLat(-3.186874, 55.944494)

# ---------- distance / is_close ----------

def test_distance_symmetric_and_zero_on_self():
    a, b = LngLat(-3.19, 55.94), LngLat(-3.185, 55.946)
    assert distance(a, b) == distance(b, a)
    assert distance(a, a) == 0.0
    assert distance(LngLat(0.0, 0.0), LngLat(3.0, 4.0)) == pytest.approx(5.0)

def test_distance_with_missing_point_returns_sentinel(caplog):
    with caplog.at_level(logging.ERROR):
        assert distance(None, LngLat(0.0, 0.0)) == INVALID_DISTANCE
        assert distance(LngLat(0.0, 0.0), None) == INVALID_DISTANCE
    assert INVALID_DISTANCE < 0
    assert "missing point" in caplog.text

def test_is_close_thresholds():
    p = LngLat(0.0, 0.0)
    assert is_close(p, p)
    assert is_close(p, LngLat(STEP_LENGTH - 1e-13, 0.0))
    # The threshold is one step plus 1e-12 of round-off slack
    assert is_close(p, LngLat(STEP_LENGTH, 0.0))
    assert not is_close(p, LngLat(STEP_LENGTH + 1e-11, 0.0))
    assert not is_close(p, LngLat(2 * STEP_LENGTH, 0.0))

def test_is_close_with_missing_point_is_false():
    assert is_close(None, LngLat(0.0, 0.0)) is False

def test_is_close_respects_config_step_length():
    cfg = FlightConfig(step_length=1.0)
    assert is_close(LngLat(0.0, 0.0), LngLat(0.9, 0.0), cfg)
    assert not is_close(LngLat(0.0, 0.0), LngLat(1.1, 0.0), cfg)

# ---------- Direction ----------

def test_direction_angles_are_the_compass_rose():
    angles = [d.angle for d in Direction]
    assert len(Direction) == 16
    assert angles == [i * 22.5 for i in range(16)]
    assert Direction.E.angle == 0.0
    assert Direction.N.angle == 90.0
    assert Direction.W.angle == 180.0
    assert Direction.S.angle == 270.0

def test_opposite_is_an_involution():
    for d in Direction:
        assert opposite(opposite(d)) == d
        assert (opposite(d).angle - d.angle) % 360 == 180.0
    assert opposite(Direction.E) is Direction.W
    assert opposite(Direction.NNE) is Direction.SSW

def test_opposite_of_hover_raises():
    with pytest.raises(ValueError):
        opposite(None)

def test_resolve_direction_exact_match():
    assert resolve_direction(0.0) is Direction.E
    assert resolve_direction(22.5) is Direction.ENE
    assert resolve_direction(337.5) is Direction.ESE
    assert resolve_direction(90) is Direction.N

@pytest.mark.parametrize("angle", [10.0, 22.500001, 360.0, -90.0])
def test_resolve_direction_rejects_unknown_angles(angle):
    with pytest.raises(ValueError):
        resolve_direction(angle)

# ---------- step ----------

def test_step_hover_returns_same_point():
    p = LngLat(-3.19, 55.94)
    assert step(p, None) is p

def test_step_east_and_south():
    e = step(LngLat(0.0, 0.0), Direction.E)
    assert e.lng == pytest.approx(0.00015, abs=1e-15)
    assert e.lat == pytest.approx(0.0, abs=1e-15)
    s = step(LngLat(0.0, 0.0), Direction.S)
    assert s.lng == pytest.approx(0.0, abs=1e-15)
    assert s.lat == pytest.approx(-0.00015, abs=1e-15)

def test_step_length_is_constant_for_all_directions():
    p = LngLat(-3.186874, 55.944494)
    for d in Direction:
        assert distance(p, step(p, d)) == pytest.approx(STEP_LENGTH, rel=1e-9)

def test_step_then_opposite_returns_near_start():
    p = LngLat(-3.186874, 55.944494)
    for d in Direction:
        back = step(step(p, d), opposite(d))
        assert distance(p, back) < 1e-12

# ---------- interpolate ----------

def test_interpolate_endpoints_are_exact():
    p, q = LngLat(1.0, 2.0), LngLat(3.0, 6.0)
    assert interpolate(p, q, 0.0) is p
    assert interpolate(p, q, 1.0) is q

def test_interpolate_interior_is_affine():
    p, q = LngLat(1.0, 2.0), LngLat(3.0, 6.0)
    assert interpolate(p, q, 0.5) == LngLat(2.0, 4.0)
    assert interpolate(p, q, 0.25) == LngLat(1.5, 3.0)

def test_interpolate_legacy_formula():
    p, q = LngLat(1.0, 2.0), LngLat(3.0, 6.0)
    # (p + q) * t: matches the midpoint, not the quarter point
    assert interpolate(p, q, 0.5, legacy=True) == LngLat(2.0, 4.0)
    assert interpolate(p, q, 0.25, legacy=True) == LngLat(1.0, 2.0)
    assert interpolate(p, q, 0.0, legacy=True) is p

def test_interpolate_out_of_range_warns_but_computes(caplog):
    p, q = LngLat(0.0, 0.0), LngLat(1.0, 1.0)
    with caplog.at_level(logging.WARNING):
        r = interpolate(p, q, 2.0)
    assert r == LngLat(2.0, 2.0)
    assert "outside [0, 1]" in caplog.text

# ---------- path_length ----------

def test_path_length():
    pts = [LngLat(0.0, 0.0), LngLat(3.0, 4.0), LngLat(3.0, 0.0)]
    assert path_length(pts) == pytest.approx(9.0)
    assert path_length(pts[:1]) == 0.0
    assert path_length([]) == 0.0
    assert math.isfinite(path_length(pts))
