from datetime import datetime, timedelta, timezone

import pytest

from aistiles import geodesic
from aistiles.geometry import CoordM, LineM
from aistiles.modeling import (
    barycentric_to_cartesian,
    line_to_triangle_pair,
    meters_between_points,
    probe_occupation,
    probe_ratio,
    probe_timestamp,
    probe_vector,
    time_to_travel_distance,
    vector_length,
    vector_length2,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
T1 = datetime(2024, 1, 1, 0, 2, tzinfo=timezone.utc)


def _line(x1, y1, m1, x2, y2, m2):
    return LineM.from_coords(CoordM(x1, y1, m1), CoordM(x2, y2, m2))


def test_half_way_with_matching_a_b():
    line = _line(8.0, 56.0, T0.timestamp(), 8.005, 56.0, T1.timestamp())
    first, _ = line_to_triangle_pair(line, 10.0, 10.0, 10.0, 10.0)
    start, end = first.point_occupation(0.5, 0.0, 0.5)
    mid = ((end - T0).total_seconds() + (start - T0).total_seconds()) / 2.0
    assert mid == pytest.approx((T1 - T0).total_seconds() / 2.0, abs=1.0)
    assert start <= end


def test_no_distance_line():
    line = _line(8.0, 56.0, T0.timestamp(), 8.0, 56.0, T1.timestamp())
    first, _ = line_to_triangle_pair(line, 1.0, 1.0, 10.0, 10.0)
    start, end = first.point_occupation(0.0, 1.0, 0.0)
    assert start == T0
    assert end == T1


def test_triangle_pair_shares_edge_and_ba_line():
    line = _line(8.0, 56.0, T0.timestamp(), 8.005, 56.0, T1.timestamp())
    first, second = line_to_triangle_pair(line, 10.0, 20.0, 5.0, 5.0)
    assert first.triangle[1] == second.triangle[0]
    assert first.triangle[2] == second.triangle[1]
    assert first.ba_line == second.ba_line
    b_start, a_end = first.ba_line
    assert geodesic.distance((8.0, 56.0), b_start) == pytest.approx(20.0, rel=1e-6)
    assert geodesic.distance((8.005, 56.0), a_end) == pytest.approx(10.0, rel=1e-6)


def test_barycentric_to_cartesian():
    triangle = ((0.0, 0.0), (2.0, 0.0), (0.0, 2.0))
    assert barycentric_to_cartesian(triangle, 0.5, 0.25, 0.25) == (0.5, 0.5)
    assert barycentric_to_cartesian(triangle, 0.0, 1.0, 0.0) == (2.0, 0.0)


def test_probe_vector_relative_to_line_start():
    triangle = ((0.0, 0.0), (2.0, 0.0), (0.0, 2.0))
    ba_line = ((1.0, 1.0), (3.0, 1.0))
    assert probe_vector(ba_line, triangle, 0.0, 1.0, 0.0) == (1.0, -1.0)


def test_probe_ratio():
    assert probe_ratio((1.0, 1.0), 0.0, 0.0) == 0.0
    assert probe_ratio((1.0, 1.0), 2.0, 0.0) == 0.5
    assert probe_ratio((4.0, 0.0), 2.0, 0.0) == 2.0


def test_vector_lengths():
    assert vector_length(3.0, 4.0) == 5.0
    assert vector_length2(3.0, 4.0) == 25.0


def test_probe_timestamp_truncates():
    assert probe_timestamp(1000.0, 100.0, 0.255) == datetime.fromtimestamp(1025, timezone.utc)


def test_time_to_travel_distance():
    line = _line(0.0, 0.0, 0.0, 1.0, 0.0, 100.0)
    assert time_to_travel_distance(line, 10.0, 300.0) == timedelta(seconds=3)
    assert time_to_travel_distance(line, 10.0, 0.0) == timedelta(0)


def test_probe_occupation_zero_length():
    assert probe_occupation(T0, 120.0, 0.0, 5.0, 5.0) == (T0, T1)


def test_probe_occupation_widens_by_a_and_b():
    start, end = probe_occupation(T0, 100.0, 50.0, 10.0, 5.0)
    assert start == T0 - timedelta(seconds=20)
    assert end == T0 + timedelta(seconds=10)


def test_meters_between_points_zero_and_symmetric():
    assert meters_between_points((8.0, 56.0), (8.0, 56.0)) == 0.0
    there = meters_between_points((8.0, 56.0), (8.005, 56.0))
    back = meters_between_points((8.005, 56.0), (8.0, 56.0))
    assert there == pytest.approx(back)
    assert 250.0 < there < 350.0