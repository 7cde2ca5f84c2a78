"""Planar polygon helpers: convex hulls and triangulation of simple polygons."""

from __future__ import annotations

import math
from typing import Iterable

Coord = tuple[float, float]
Triangle = tuple[Coord, Coord, Coord]


class TriangulationError(ValueError):
    """A polygon could not be split into triangles."""


def _cross(o: Coord, a: Coord, b: Coord) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _ring_area(ring: list[Coord]) -> float:
    """Signed area of an open ring; positive when counter-clockwise."""
    if not ring:
        return 0.0
    shifted = ring[1:] + ring[:1]
    return 0.5 * sum(a[0] * b[1] - b[0] * a[1] for a, b in zip(ring, shifted))


def _half_hull(points: Iterable[Coord]) -> list[Coord]:
    chain: list[Coord] = []
    for point in points:
        while len(chain) >= 2 and _cross(chain[-2], chain[-1], point) <= 0:
            chain.pop()
        chain.append(point)
    return chain


def convex_hull(points: Iterable[tuple[float, float]]) -> tuple[Coord, ...]:
    """Return the convex hull of ``points`` as a closed, counter-clockwise ring.

    Collinear points on the hull are left out. A single distinct point gives a
    ring of that point twice; collinear input gives its two ends and the first
    end again; no points give an empty ring.
    """
    unique = sorted({(float(x), float(y)) for x, y in points})
    if not unique:
        return ()
    if len(unique) == 1:
        return (unique[0], unique[0])
    lower = _half_hull(unique)
    upper = _half_hull(reversed(unique))
    ring = lower[:-1] + upper[:-1]
    if len(ring) < 3:
        ring = [unique[0], unique[-1]]
    return tuple(ring + [ring[0]])


def _clean_ring(ring: list[Coord]) -> list[Coord]:
    cleaned: list[Coord] = []
    for point in ring:
        if not cleaned or cleaned[-1] != point:
            cleaned.append(point)
    while len(cleaned) > 1 and cleaned[0] == cleaned[-1]:
        cleaned.pop()
    return cleaned


def _in_triangle(point: Coord, a: Coord, b: Coord, c: Coord) -> bool:
    return _cross(a, b, point) >= 0 and _cross(b, c, point) >= 0 and _cross(c, a, point) >= 0


def _corner(vertices: list[Coord], index: int) -> Triangle:
    return vertices[index - 1], vertices[index], vertices[(index + 1) % len(vertices)]


def _find_ear(vertices: list[Coord]) -> int | None:
    for index in range(len(vertices)):
        prev, cur, nxt = _corner(vertices, index)
        turn = _cross(prev, cur, nxt)
        if turn == 0:
            return index
        if turn < 0:
            continue
        corners = {prev, cur, nxt}
        if any(p not in corners and _in_triangle(p, prev, cur, nxt) for p in vertices):
            continue
        return index
    return None


def triangulate(polygon: Iterable[tuple[float, float]]) -> list[Triangle]:
    """Split a simple polygon, given by its exterior ring, into triangles.

    The triangles are counter-clockwise and together cover the polygon.
    Degenerate polygons with no area give no triangles.
    """
    ring = [(float(x), float(y)) for x, y in polygon]
    if not all(math.isfinite(v) for point in ring for v in point):
        raise TriangulationError("polygon has non-finite coordinates")
    vertices = _clean_ring(ring)
    if len(vertices) < 3:
        return []
    area = _ring_area(vertices)
    if area == 0:
        return []
    if area < 0:
        vertices.reverse()

    triangles: list[Triangle] = []
    while len(vertices) > 3:
        index = _find_ear(vertices)
        if index is None:
            raise TriangulationError("polygon is not simple")
        prev, cur, nxt = _corner(vertices, index)
        if _cross(prev, cur, nxt) > 0:
            triangles.append((prev, cur, nxt))
        del vertices[index]
    a, b, c = vertices
    if _cross(a, b, c) > 0:
        triangles.append((a, b, c))
    return triangles