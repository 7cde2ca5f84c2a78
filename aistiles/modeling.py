"""Vessel footprints along a trajectory segment and when they cover a given point."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from aistiles import geodesic
from aistiles.geometry import LineM

Coord = tuple[float, float]
Triangle = tuple[Coord, Coord, Coord]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _as_i64(value: float) -> int:
    """Truncate towards zero, saturating at the 64-bit range; NaN becomes 0."""
    if math.isnan(value):
        return 0
    if value >= _I64_MAX:
        return _I64_MAX
    if value <= _I64_MIN:
        return _I64_MIN
    return int(value)


def _seconds(count: int) -> timedelta:
    try:
        return timedelta(seconds=count)
    except OverflowError as exc:
        raise ValueError(f"duration of {count} seconds is out of range") from exc


def _from_secs(count: int) -> datetime:
    try:
        return _EPOCH + timedelta(seconds=count)
    except OverflowError as exc:
        raise ValueError(f"timestamp {count} is out of range") from exc


def _epoch_seconds(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(seconds=1)


@dataclass(frozen=True)
class LineTriangle:
    """One of the two triangles that make up a vessel's footprint along a line.

    ``a``, ``b``, ``c`` and ``d`` are the distances in metres from the
    transponder to the bow, stern, port and starboard sides. ``ba_line`` runs
    from the stern position at the start of the line to the bow position at its end.
    """

    triangle: Triangle
    line: LineM
    a: float
    b: float
    c: float
    d: float
    ba_line: tuple[Coord, Coord]

    def point_occupation(self, ba: float, bb: float, bc: float) -> tuple[datetime, datetime]:
        """Time span during which the vessel covers the point with the given barycentric coordinates."""
        probe = probe_vector(self.ba_line, self.triangle, ba, bb, bc)
        (sx, sy), (ex, ey) = self.ba_line
        ratio = probe_ratio(probe, ex - sx, ey - sy)

        line_meters = meters_between_points(self.line.start, self.line.end)

        # When the stern edge passed the line start, and the bow edge passed the line end.
        b_start = _from_secs(_as_i64(self.line.start.m)) - time_to_travel_distance(
            self.line, self.b, line_meters
        )
        a_end = _from_secs(_as_i64(self.line.end.m)) + time_to_travel_distance(
            self.line, self.a, line_meters
        )

        start_s = _epoch_seconds(b_start)
        delta = float(_epoch_seconds(a_end) - start_s)
        probe_m = probe_timestamp(float(start_s), delta, ratio)

        ba_meters = meters_between_points((sx, sy), (ex, ey))
        return probe_occupation(probe_m, delta, ba_meters, self.a, self.b)


def barycentric_to_cartesian(triangle: Triangle, ba: float, bb: float, bc: float) -> Coord:
    """Cartesian position of barycentric coordinates within ``triangle``."""
    (x0, y0), (x1, y1), (x2, y2) = triangle
    return (ba * x0 + bb * x1 + bc * x2, ba * y0 + bb * y1 + bc * y2)


def line_to_triangle_pair(
    line: LineM, a: float, b: float, c: float, d: float
) -> tuple[LineTriangle, LineTriangle]:
    """Split the footprint swept by a vessel along ``line`` into two triangles."""
    sx, sy = line.start.x, line.start.y
    ex, ey = line.end.x, line.end.y
    dx = ex - sx
    dy = ey - sy
    towards = geodesic.point_at_distance_between

    b_start = towards((sx, sy), (sx - dx, sy - dy), b)
    a_end = towards((ex, ey), (ex + dx, ey + dy), a)

    start_c = towards(b_start, (b_start[0] - dy, b_start[1] + dx), c)
    start_d = towards(b_start, (b_start[0] + dy, b_start[1] - dx), d)
    end_c = towards(a_end, (a_end[0] - dy, a_end[1] + dx), c)
    end_d = towards(a_end, (a_end[0] + dy, a_end[1] - dx), d)

    ba_line = (b_start, a_end)
    return (
        LineTriangle((start_c, start_d, end_c), line, a, b, c, d, ba_line),
        LineTriangle((start_d, end_c, end_d), line, a, b, c, d, ba_line),
    )


def probe_timestamp(start_m: float, delta_m: float, ratio: float) -> datetime:
    """The moment ``ratio`` of the way through an interval, in whole seconds."""
    return _from_secs(_as_i64(delta_m * ratio) + _as_i64(start_m))


def time_to_travel_distance(line: LineM, distance: float, line_meters: float) -> timedelta:
    """How long the vessel takes to travel ``distance`` metres at its speed along ``line``."""
    if line_meters == 0.0:
        return timedelta(0)
    return _seconds(_as_i64((line.end.m - line.start.m) / line_meters * distance))


def probe_occupation(
    probe_m: datetime, delta_m: float, line_meters: float, a: float, b: float
) -> tuple[datetime, datetime]:
    """Widen a probe moment by the time the bow arrives earlier and the stern leaves later."""
    if line_meters == 0.0:
        return probe_m, probe_m + _seconds(_as_i64(delta_m))
    return (
        probe_m - _seconds(_as_i64(delta_m / line_meters * a)),
        probe_m + _seconds(_as_i64(delta_m / line_meters * b)),
    )


def vector_length(x: float, y: float) -> float:
    """Euclidean length of the vector ``(x, y)``."""
    return math.sqrt(x * x + y * y)


def vector_length2(x: float, y: float) -> float:
    """Squared Euclidean length of the vector ``(x, y)``."""
    return x * x + y * y


def meters_between_points(origin, destination) -> float:
    """Geodesic distance in metres between two lon/lat points."""
    return geodesic.distance(origin, destination)


def probe_vector(
    ba_line: tuple[Coord, Coord], triangle: Triangle, ba: float, bb: float, bc: float
) -> Coord:
    """Vector from the start of ``ba_line`` to the probed point of ``triangle``."""
    x, y = barycentric_to_cartesian(triangle, ba, bb, bc)
    sx, sy = ba_line[0]
    return (x - sx, y - sy)


def probe_ratio(coord: Coord, dx: float, dy: float) -> float:
    """How far along the vector ``(dx, dy)`` the projection of ``coord`` lies, as a fraction."""
    if dx == 0.0 and dy == 0.0:
        return 0.0
    return (coord[0] * dx + coord[1] * dy) / vector_length2(dx, dy)