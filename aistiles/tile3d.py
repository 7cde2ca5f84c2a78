"""Rasterising triangles and polygons onto slippy-map grids."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from aistiles.modeling import LineTriangle
from aistiles.planar import TriangulationError, triangulate
from aistiles.tiles import FilterTile, GridPoint, PointWTime, PointWZ, point_to_grid

EPS = 0.001
EPS_SQUARE = EPS * EPS

Coord = tuple[float, float]
Barycentric = tuple[float, float, float]


@dataclass(frozen=True)
class GridTriangle:
    """A triangle whose corners are grid points."""

    v1: GridPoint
    v2: GridPoint
    v3: GridPoint

    def bbox(self) -> tuple[int, int, int, int]:
        """Bounding box as ``(min_x, min_y, max_x, max_y)``."""
        xs = (self.v1.x, self.v2.x, self.v3.x)
        ys = (self.v1.y, self.v2.y, self.v3.y)
        return min(xs), min(ys), max(xs), max(ys)

    def area(self) -> float:
        return signed_total_area(
            self.v1.x, self.v1.y, self.v2.x, self.v2.y, self.v3.x, self.v3.y
        )


def _divide(a: float, b: float) -> float:
    """Floating-point division that yields inf or NaN instead of raising."""
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _clamp(value: float) -> float:
    if math.isnan(value):
        return value
    return min(max(value, 0.0), 1.0)


def _barycentric(tri: GridTriangle, x: int, y: int, total_area: float) -> Barycentric:
    v1, v2, v3 = tri.v1, tri.v2, tri.v3
    alpha = _divide(signed_total_area(x, y, v2.x, v2.y, v3.x, v3.y), total_area)
    beta = _divide(signed_total_area(x, y, v3.x, v3.y, v1.x, v1.y), total_area)
    gamma = _divide(signed_total_area(x, y, v1.x, v1.y, v2.x, v2.y), total_area)
    return alpha, beta, gamma


def _distance_square_to_segment(
    x1: float, y1: float, x2: float, y2: float, x: float, y: float
) -> float:
    seg_len2 = (x2 - x1) ** 2 + (y2 - y1) ** 2
    dot = _divide((x - x1) * (x2 - x1) + (y - y1) * (y2 - y1), seg_len2)
    if dot < 0.0:
        return (x - x1) ** 2 + (y - y1) ** 2
    if dot <= 1.0:
        return (x1 - x) ** 2 + (y1 - y) ** 2 - dot**2 * seg_len2
    return (x - x2) ** 2 + (y - y2) ** 2


def _check_point(tri: GridTriangle, x: int, y: int, total_area: float) -> Barycentric | None:
    """Barycentric coordinates of ``(x, y)`` if it lies in or on the triangle."""
    alpha, beta, gamma = _barycentric(tri, x, y, total_area)
    if alpha >= 0.0 and beta >= 0.0 and gamma >= 0.0:
        return alpha, beta, gamma
    corners = [(float(v.x), float(v.y)) for v in (tri.v1, tri.v2, tri.v3)]
    for (ax, ay), (bx, by) in zip(corners, corners[1:] + corners[:1]):
        if _distance_square_to_segment(ax, ay, bx, by, float(x), float(y)) <= EPS_SQUARE:
            return _clamp(alpha), _clamp(beta), _clamp(gamma)
    return None


def _real_to_grid(triangle: Iterable[Coord], sampling_zoom_level: int) -> GridTriangle:
    v1, v2, v3 = (point_to_grid(c, sampling_zoom_level) for c in triangle)
    return GridTriangle(v1, v2, v3)


def _covered(tri: GridTriangle):
    """Yield ``(x, y, barycentric)`` for every grid point covered by the triangle."""
    min_x, min_y, max_x, max_y = tri.bbox()
    total_area = tri.area()
    for x in range(min_x, max_x + 1):
        for y in range(min_y, max_y + 1):
            weights = _check_point(tri, x, y, total_area)
            if weights is not None:
                yield x, y, weights


def draw_line_triangle(triangle: LineTriangle, sample_zoom_level: int) -> list[PointWTime]:
    """Grid points covered by a vessel footprint triangle, with their occupation times."""
    grid = _real_to_grid(triangle.triangle, sample_zoom_level)
    points = []
    for x, y, (alpha, beta, gamma) in _covered(grid):
        start, end = triangle.point_occupation(alpha, beta, gamma)
        points.append(PointWTime(GridPoint(x, y), sample_zoom_level, start, end))
    return points


def draw_triangle(triangle: Iterable[Coord], sample_zoom_level: int) -> list[PointWZ]:
    """Grid points covered by a lon/lat triangle at ``sample_zoom_level``."""
    grid = _real_to_grid(triangle, sample_zoom_level)
    return [PointWZ(GridPoint(x, y), sample_zoom_level) for x, y, _ in _covered(grid)]


def _tile_xyz(filter_tile) -> tuple[int, int, int]:
    if isinstance(filter_tile, FilterTile):
        return filter_tile.x, filter_tile.y, filter_tile.z
    x, y, z = filter_tile
    return int(x), int(y), int(z)


def render_stop_object(
    polygon: Iterable[Coord],
    zoom_level: int,
    sampling_zoom_level: int,
    filter_tile=None,
) -> list[tuple[int, int, int]] | None:
    """Sorted, distinct ``(x, y, z)`` grid points covered by a polygon.

    The polygon is given by its exterior ring. Returns ``None`` if it cannot be
    triangulated. ``filter_tile`` is a ``FilterTile`` or an ``(x, y, z)`` tuple.
    """
    try:
        triangles = triangulate(polygon)
    except TriangulationError:
        return None
    tile = _tile_xyz(filter_tile) if filter_tile is not None else None

    found: set[tuple[int, int, int]] = set()
    for triangle in triangles:
        for point in draw_triangle(triangle, sampling_zoom_level):
            if tile is not None:
                moved = point.change_zoom(tile[2])
                if (moved.point.x, moved.point.y) != tile[:2]:
                    continue
            zoomed = point.change_zoom(zoom_level)
            found.add((zoomed.point.x, zoomed.point.y, zoomed.z))
    return sorted(found)


def signed_total_area(v1x: int, v1y: int, v2x: int, v2y: int, v3x: int, v3y: int) -> float:
    """Signed area of the triangle with the given integer corners."""
    return 0.5 * float(
        (v2y - v1y) * (v2x + v1x) + (v3y - v2y) * (v3x + v2x) + (v1y - v3y) * (v1x + v3x)
    )