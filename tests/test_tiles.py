from datetime import datetime, timedelta, timezone

from aistiles.geometry import CoordM, LineStringM
from aistiles.tiles import (
    FilterTile,
    GridPoint,
    PointWTime,
    PointWZ,
    draw_2d_vessel,
    draw_line,
    draw_linestring,
    enhance_point,
    point_time_duration,
    point_to_grid,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_line():
    points = draw_line(GridPoint(1, 1), GridPoint(3, 3))
    assert points[1] == GridPoint(2, 2)
    assert points == [GridPoint(1, 1), GridPoint(2, 2), GridPoint(3, 3)]


def test_not_a_line():
    assert len(draw_line(GridPoint(0, 0), GridPoint(0, 0))) == 1


def test_horizontal_line():
    assert draw_line(GridPoint(0, 0), GridPoint(3, 0)) == [
        GridPoint(0, 0),
        GridPoint(1, 0),
        GridPoint(2, 0),
        GridPoint(3, 0),
    ]


def test_line_is_connected_and_ends_at_target():
    points = draw_line(GridPoint(-2, 5), GridPoint(7, -1))
    assert points[0] == GridPoint(-2, 5)
    assert points[-1] == GridPoint(7, -1)
    for a, b in zip(points, points[1:]):
        assert max(abs(b.x - a.x), abs(b.y - a.y)) == 1


def test_coord_to_point():
    assert point_to_grid((9.99083572, 57.01233944), 16) == GridPoint(34586, 20073)


def test_point_to_grid_origin():
    assert point_to_grid((0.0, 0.0), 1) == GridPoint(1, 1)


def test_grid_point_sub():
    assert GridPoint(5, 3) - GridPoint(2, 7) == GridPoint(3, -4)


def test_point_wz_change_zoom():
    assert PointWZ(GridPoint(5, 7), 3).change_zoom(1) == PointWZ(GridPoint(1, 1), 1)
    assert PointWZ(GridPoint(1, 1), 1).change_zoom(3) == PointWZ(GridPoint(4, 4), 3)


def test_point_w_time_change_zoom_keeps_times():
    end = T0 + timedelta(seconds=10)
    moved = PointWTime(GridPoint(6, 2), 4, T0, end).change_zoom(2)
    assert moved == PointWTime(GridPoint(1, 0), 2, T0, end)


def test_enhance_single_point():
    end = T0 + timedelta(minutes=2)
    assert enhance_point([GridPoint(1, 2)], T0, end, 5) == [PointWTime(GridPoint(1, 2), 5, T0, end)]


def test_enhance_empty():
    assert enhance_point([], T0, T0 + timedelta(seconds=1), 5) == []


def test_enhance_spreads_time():
    end = T0 + timedelta(minutes=2)
    points = [GridPoint(0, 0), GridPoint(1, 0), GridPoint(2, 0)]
    result = enhance_point(points, T0, end, 7)
    eps = timedelta(microseconds=1)
    assert [p.time_start for p in result] == [
        T0,
        T0 + timedelta(seconds=30),
        T0 + timedelta(seconds=90),
    ]
    assert [p.time_end for p in result] == [
        T0 + timedelta(seconds=30) + eps,
        T0 + timedelta(seconds=90) + eps,
        end,
    ]
    assert all(p.z == 7 for p in result)


def test_point_time_duration():
    end = T0 + timedelta(minutes=2)
    assert point_time_duration(T0, end, 4) == timedelta(seconds=30)
    assert point_time_duration(T0, end, 0) == timedelta(minutes=2)


def test_draw_linestring_single_tile():
    ls = LineStringM((CoordM(10.0, 57.0, 0.0), CoordM(10.0000001, 57.0, 60.0)))
    result = draw_linestring([ls], 10, 10, None)
    assert result == [
        PointWTime(point_to_grid((10.0, 57.0), 10), 10, EPOCH, EPOCH + timedelta(seconds=60))
    ]


def test_draw_linestring_merges_at_lower_zoom():
    ls = LineStringM((CoordM(10.0, 57.0, 0.0), CoordM(10.01, 57.0, 600.0)))
    result = draw_linestring([ls], 10, 18, None)
    assert result == [
        PointWTime(point_to_grid((10.0, 57.0), 10), 10, EPOCH, EPOCH + timedelta(seconds=600))
    ]


def test_draw_linestring_filter_excludes():
    ls = LineStringM((CoordM(10.0, 57.0, 0.0), CoordM(10.01, 57.0, 600.0)))
    assert draw_linestring([ls], 10, 18, FilterTile(0, 0, 10)) == []


def test_draw_linestring_filter_keeps_matching_tile():
    ls = LineStringM((CoordM(10.0, 57.0, 0.0), CoordM(10.01, 57.0, 600.0)))
    tile = point_to_grid((10.0, 57.0), 8)
    result = draw_linestring([ls], 18, 18, FilterTile(tile.x, tile.y, 8))
    unfiltered = draw_linestring([ls], 18, 18, None)
    assert result == unfiltered
    assert len(result) > 1


def test_draw_2d_vessel_empty():
    assert draw_2d_vessel([], 10, 10, 5, 5, 18, 18, None) == []


def test_draw_2d_vessel_covers_track():
    start = T0.timestamp()
    ls = LineStringM(
        (CoordM(9.99105250, 57.01534956, start), CoordM(9.99096883, 57.01322067, start + 120.0))
    )
    result = draw_2d_vessel([ls], 50, 50, 50, 50, 20, 20, None)
    assert result
    assert all(p.z == 20 for p in result)
    assert all(p.time_start <= p.time_end for p in result)
    keys = [(p.point, p.time_start) for p in result]
    assert keys == sorted(keys)
    assert draw_2d_vessel([ls], 50, 50, 50, 50, 20, 20, FilterTile(0, 0, 20)) == []