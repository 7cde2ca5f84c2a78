"""Rasterising measured trajectories onto slippy-map tile grids with time spans."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from itertools import pairwise
from typing import Iterable, Sequence

from aistiles.geometry import LineStringM
from aistiles.modeling import line_to_triangle_pair

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_MICROSECOND = timedelta(microseconds=1)
# Makes the intervals of neighbouring samples overlap so that they can be merged.
_OVERLAP = _MICROSECOND


def _saturate(value: float, low: int, high: int) -> int:
    if math.isnan(value):
        return 0
    if value >= high:
        return high
    if value <= low:
        return low
    return int(value)


def _div_trunc(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _div_delta(delta: timedelta, n: int) -> timedelta:
    return timedelta(microseconds=_div_trunc(delta // _MICROSECOND, n))


def _from_secs(m: float) -> datetime:
    try:
        return _EPOCH + timedelta(seconds=_saturate(m, _I64_MIN, _I64_MAX))
    except OverflowError as exc:
        raise ValueError("timestamp should be well within range") from exc


@dataclass(frozen=True, order=True)
class GridPoint:
    """A tile (or pixel) position on a zoom-level grid."""

    x: int
    y: int

    def __sub__(self, other: GridPoint) -> GridPoint:
        return GridPoint(self.x - other.x, self.y - other.y)


def _rezoom(point: GridPoint, change: int) -> GridPoint:
    factor = 2 ** abs(change)
    if change > 0:
        return GridPoint(_div_trunc(point.x, factor), _div_trunc(point.y, factor))
    return GridPoint(point.x * factor, point.y * factor)


@dataclass(frozen=True, order=True)
class PointWZ:
    """A grid point at a given zoom level."""

    point: GridPoint
    z: int

    def change_zoom(self, zoom_level: int) -> PointWZ:
        """The same position expressed on the grid of ``zoom_level``."""
        return PointWZ(_rezoom(self.point, self.z - zoom_level), zoom_level)


@dataclass(frozen=True)
class FilterTile:
    """Keep only results that fall in tile ``(x, y)`` at zoom ``z``."""

    x: int
    y: int
    z: int


@dataclass(frozen=True)
class PointWTime:
    """A grid point at a zoom level, occupied from ``time_start`` to ``time_end``."""

    point: GridPoint
    z: int
    time_start: datetime
    time_end: datetime

    def change_zoom(self, zoom_level: int) -> PointWTime:
        """The same position and time span on the grid of ``zoom_level``."""
        return replace(self, point=_rezoom(self.point, self.z - zoom_level), z=zoom_level)


def _in_tile(point: PointWTime, tile: FilterTile) -> bool:
    moved = point.change_zoom(tile.z)
    return moved.point.x == tile.x and moved.point.y == tile.y


def _merge(points: Iterable[PointWTime]) -> list[PointWTime]:
    """Join runs of the same grid point whose time spans overlap."""
    ordered = sorted(points, key=lambda p: (p.point, p.time_start, p.time_end))
    chunks: list[list[PointWTime]] = []
    for point in ordered:
        if chunks:
            previous = chunks[-1][-1]
            if previous.point == point.point and previous.time_end >= point.time_start:
                chunks[-1].append(point)
                continue
        chunks.append([point])
    return [replace(chunk[0], time_end=chunk[-1].time_end) for chunk in chunks]


def draw_linestring(
    linestrings: Iterable[LineStringM],
    zoom_level: int,
    sampling_zoom_level: int,
    filter_tile: FilterTile | None,
) -> list[PointWTime]:
    """Rasterise each linestring's path and give every grid point its time span.

    Sampling happens at ``sampling_zoom_level`` and the result is expressed at
    ``zoom_level``; overlapping spans of the same point are merged per linestring.
    """
    result: list[PointWTime] = []
    for linestring in linestrings:
        stamped = [
            (point_to_grid((p.x, p.y), sampling_zoom_level), _from_secs(p.m))
            for p in linestring.points()
        ]
        sampled = [
            q.change_zoom(zoom_level)
            for (ap, at), (bp, bt) in pairwise(stamped)
            for q in enhance_point(draw_line(ap, bp), at, bt, sampling_zoom_level)
            if filter_tile is None or _in_tile(q, filter_tile)
        ]
        result.extend(_merge(sampled))
    return result


def draw_2d_vessel(
    linestrings: Iterable[LineStringM],
    a: int,
    b: int,
    c: int,
    d: int,
    zoom_level: int,
    sampling_zoom_level: int,
    filter_tile: FilterTile | None,
) -> list[PointWTime]:
    """Rasterise the area a vessel of the given dimensions sweeps along the linestrings."""
    from aistiles.tile3d import draw_line_triangle

    sampled: list[PointWTime] = []
    for linestring in linestrings:
        for line in linestring.lines():
            for triangle in line_to_triangle_pair(line, float(a), float(b), float(c), float(d)):
                sampled.extend(
                    p.change_zoom(zoom_level)
                    for p in draw_line_triangle(triangle, sampling_zoom_level)
                )
    if filter_tile is not None:
        sampled = [p for p in sampled if _in_tile(p, filter_tile)]
    return _merge(sampled)


def enhance_point(
    points: Sequence[GridPoint],
    time_from: datetime,
    time_to: datetime,
    sampling_zoom_level: int,
) -> list[PointWTime]:
    """Spread the interval ``time_from``..``time_to`` evenly over consecutive grid points.

    Each point gets a span centred on its share of the interval, clamped to the
    interval, and extended by one microsecond so neighbouring spans overlap.
    """
    points = list(points)
    if not points:
        return []
    if len(points) == 1:
        return [PointWTime(points[0], sampling_zoom_level, time_from, time_to)]

    step = _div_delta(time_to - time_from, len(points) - 1)
    half = _div_delta(step, 2)
    return [
        PointWTime(
            point,
            sampling_zoom_level,
            max(time_from, time_from + step * i - half),
            min(time_to, time_from + step * i + half + _OVERLAP),
        )
        for i, point in enumerate(points)
    ]


def _ln(value: float) -> float:
    if value > 0:
        return math.log(value)
    if value == 0:
        return -math.inf
    return math.nan


def _xy(point) -> tuple[float, float]:
    if hasattr(point, "x") and hasattr(point, "y"):
        return float(point.x), float(point.y)
    x, y, *_ = point
    return float(x), float(y)


def point_to_grid(point, sampling_zoom_level: int) -> GridPoint:
    """Slippy-map tile containing a lon/lat point at the given zoom level."""
    lon, lat = _xy(point)
    n = float(1 << sampling_zoom_level)
    x = _saturate(n * (lon + 180.0) / 360.0, _I32_MIN, _I32_MAX)
    lat_rad = math.radians(lat)
    merc = _ln(math.tan(lat_rad) + 1.0 / math.cos(lat_rad))
    y = _saturate(n * (1.0 - merc / math.pi) / 2.0, _I32_MIN, _I32_MAX)
    return GridPoint(x, y)


def point_time_duration(time_from: datetime, time_to: datetime, point_count: int) -> timedelta:
    """The interval divided by ``point_count``; the whole interval when the count is zero."""
    span = time_to - time_from
    if point_count == 0:
        return span
    return _div_delta(span, point_count)


def draw_line(start: GridPoint, end: GridPoint) -> list[GridPoint]:
    """Grid points on the Bresenham line from ``start`` to ``end``, both included."""
    dx = abs(end.x - start.x)
    dy = abs(end.y - start.y)
    sx = 1 if start.x < end.x else -1
    sy = 1 if start.y < end.y else -1

    error = _div_trunc(dx if dx > dy else -dy, 2)
    x, y = start.x, start.y
    coordinates: list[GridPoint] = []
    while True:
        coordinates.append(GridPoint(x, y))
        if x == end.x and y == end.y:
            return coordinates
        previous = error
        if previous > -dx:
            error -= dy
            x += sx
        if previous < dy:
            error += dx
            y += sy