import pytest

from aistiles.errors import DimensionError, NumPointsError, TimestampError
from aistiles.geometry import CoordM, LineM, LineStringM, PointM


def _coords():
    return [CoordM(*t) for t in [(1.0, 2.0, 0.0), (2.0, 3.0, 1.0), (3.0, 4.0, 2.0)]]


def test_iterate():
    ls = LineStringM.from_coords(_coords())
    it = ls.points()
    assert next(it) == PointM.from_xym(1.0, 2.0, 0.0)
    assert next(it) == PointM.from_xym(2.0, 3.0, 1.0)
    assert next(it) == PointM.from_xym(3.0, 4.0, 2.0)
    assert next(it, None) is None


def test_line_iterator():
    coords = _coords()
    ls = LineStringM.from_coords(coords)
    it = ls.lines()
    assert next(it) == LineM.from_coords(coords[0], coords[1])
    assert next(it) == LineM.from_coords(coords[1], coords[2])
    assert next(it, None) is None


def test_len_iter_and_index():
    coords = _coords()
    ls = LineStringM.checked(coords)
    assert len(ls) == 3
    assert list(ls) == coords
    assert ls[1] == coords[1]


def test_checked_rejects_single_point():
    with pytest.raises(NumPointsError):
        LineStringM.checked([CoordM(1.0, 2.0, 0.0)])


def test_checked_rejects_unordered_measures():
    coords = [CoordM(1.0, 2.0, 5.0), CoordM(2.0, 3.0, 1.0)]
    with pytest.raises(TimestampError):
        LineStringM.checked(coords)


def test_checked_rejects_nan_measure():
    coords = [CoordM(1.0, 2.0, 0.0), CoordM(2.0, 3.0, float("nan"))]
    with pytest.raises(TimestampError):
        LineStringM.checked(coords)


def test_checked_allows_empty_and_equal_measures():
    assert len(LineStringM.checked([])) == 0
    ls = LineStringM.checked([CoordM(1.0, 2.0, 3.0), CoordM(2.0, 3.0, 3.0)])
    assert [c.m for c in ls] == [3.0, 3.0]


def test_from_coords_does_not_check_order():
    coords = [CoordM(1.0, 2.0, 5.0), CoordM(2.0, 3.0, 1.0)]
    assert list(LineStringM.from_coords(coords)) == coords


def test_from_coords_rejects_single_point():
    with pytest.raises(NumPointsError):
        LineStringM.from_coords([CoordM(1.0, 2.0, 0.0)])


def test_from_line_round_trip():
    line = LineM.from_coords(CoordM(1.0, 2.0, 0.0), CoordM(2.0, 3.0, 1.0))
    ls = LineStringM.from_line(line)
    assert list(ls.lines()) == [line]


def test_from_line_rejects_backwards_time():
    line = LineM.from_coords(CoordM(1.0, 2.0, 4.0), CoordM(2.0, 3.0, 1.0))
    with pytest.raises(TimestampError):
        LineStringM.from_line(line)


def test_coord_nth_and_xy():
    c = CoordM(1.5, 2.5, 3.5)
    assert [c.nth(0), c.nth(1), c.nth(2)] == [1.5, 2.5, 3.5]
    assert c.xy() == (1.5, 2.5)
    with pytest.raises(DimensionError):
        c.nth(3)


def test_point_accessors():
    p = PointM.from_xym(1.0, 2.0, 3.5)
    assert (p.x, p.y, p.m) == (1.0, 2.0, 3.5)
    assert p.coord == CoordM(1.0, 2.0, 3.5)
    assert p.crs == 4326


def test_coords_are_hashable_and_equal_by_value():
    a = CoordM(1.0, 2.0, 3.0)
    b = CoordM(1.0, 2.0, 3.0)
    assert a == b
    assert len({a, b}) == 1
    assert LineStringM([a, b]) == LineStringM((a, b))