"""Reading and writing measured geometries as well-known binary (WKB)."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Any, Iterable

from aistiles.errors import (
    DimensionError,
    EmptyError,
    GeometryError,
    IncompatibleTypeError,
)
from aistiles.geometry import CoordM, LineStringM, PointM
from aistiles.multi import MultiLineStringM, MultiPointM

POINT = 1
LINESTRING = 2
POLYGON = 3
MULTIPOINT = 4
MULTILINESTRING = 5
MULTIPOLYGON = 6
GEOMETRYCOLLECTION = 7

POINT_M = 2001
LINESTRING_M = 2002
MULTIPOINT_M = 2004
MULTILINESTRING_M = 2005

_EWKB_Z = 0x80000000
_EWKB_M = 0x40000000
_EWKB_SRID = 0x20000000
_EWKB_FLAGS = _EWKB_Z | _EWKB_M | _EWKB_SRID


@dataclass(frozen=True)
class _Parsed:
    kind: int
    has_z: bool
    has_m: bool
    body: Any


class _Cursor:
    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.pos = 0

    def unpack(self, fmt: str) -> tuple:
        try:
            values = struct.unpack_from(fmt, self.data, self.pos)
        except struct.error as exc:
            raise GeometryError("truncated WKB data") from exc
        self.pos += struct.calcsize(fmt)
        return values


def _parse_geometry(cursor: _Cursor) -> _Parsed:
    (order,) = cursor.unpack("B")
    if order == 0:
        prefix = ">"
    elif order == 1:
        prefix = "<"
    else:
        raise GeometryError(f"invalid WKB byte order {order}")

    (code,) = cursor.unpack(prefix + "I")
    has_z = bool(code & _EWKB_Z)
    has_m = bool(code & _EWKB_M)
    has_srid = bool(code & _EWKB_SRID)
    code &= ~_EWKB_FLAGS & 0xFFFFFFFF
    kind, iso = code % 1000, code // 1000
    if iso > 3:
        raise GeometryError(f"unsupported WKB geometry code {code}")
    has_z = has_z or iso in (1, 3)
    has_m = has_m or iso in (2, 3)
    if has_srid:
        cursor.unpack(prefix + "I")

    coord_fmt = prefix + "d" * (2 + has_z + has_m)
    count_fmt = prefix + "I"

    def read_coords() -> tuple[tuple[float, ...], ...]:
        (count,) = cursor.unpack(count_fmt)
        return tuple(cursor.unpack(coord_fmt) for _ in range(count))

    if kind == POINT:
        coord = cursor.unpack(coord_fmt)
        body = None if all(math.isnan(v) for v in coord) else coord
    elif kind == LINESTRING:
        body = read_coords()
    elif kind == POLYGON:
        (rings,) = cursor.unpack(count_fmt)
        body = tuple(read_coords() for _ in range(rings))
    elif kind in (MULTIPOINT, MULTILINESTRING, MULTIPOLYGON, GEOMETRYCOLLECTION):
        (count,) = cursor.unpack(count_fmt)
        body = tuple(_parse_geometry(cursor) for _ in range(count))
    else:
        raise GeometryError(f"unsupported WKB geometry type {kind}")
    return _Parsed(kind, has_z, has_m, body)


def _parse(data: bytes) -> _Parsed:
    return _parse_geometry(_Cursor(data))


def _measured(coord: tuple[float, ...]) -> CoordM:
    if len(coord) < 3:
        raise DimensionError()
    return CoordM(coord[0], coord[1], coord[2])


def _as_point(parsed: _Parsed) -> PointM:
    if parsed.kind != POINT or parsed.body is None:
        raise IncompatibleTypeError()
    return PointM(_measured(parsed.body))


def _as_linestring(parsed: _Parsed) -> LineStringM:
    if parsed.kind != LINESTRING:
        raise IncompatibleTypeError()
    return LineStringM(tuple(_measured(c) for c in parsed.body))


def _as_multipoint(parsed: _Parsed) -> MultiPointM:
    if parsed.kind != MULTIPOINT:
        raise IncompatibleTypeError()
    points = []
    for member in parsed.body:
        if member.kind != POINT:
            raise IncompatibleTypeError()
        if member.body is None:
            raise DimensionError()
        points.append(PointM(_measured(member.body)))
    return MultiPointM(points)


def _as_multilinestring(parsed: _Parsed) -> MultiLineStringM:
    if parsed.kind != MULTILINESTRING:
        raise IncompatibleTypeError()
    return MultiLineStringM(_as_linestring(member) for member in parsed.body)


def _as_polygon(parsed: _Parsed) -> tuple[tuple[float, float], ...]:
    if parsed.has_z or parsed.has_m:
        raise DimensionError("Received non XY dimension geometry")
    if parsed.kind != POLYGON:
        raise IncompatibleTypeError("Expected Polygon")
    if not parsed.body:
        return ()
    return tuple((c[0], c[1]) for c in parsed.body[0])


def read_coord(data: bytes) -> CoordM:
    """Read a measured coordinate from a WKB point."""
    parsed = _parse(data)
    if parsed.kind != POINT:
        raise IncompatibleTypeError()
    if parsed.body is None:
        raise EmptyError()
    return _measured(parsed.body)


def read_point(data: bytes) -> PointM:
    """Read a measured point from WKB."""
    return _as_point(_parse(data))


def read_linestring(data: bytes) -> LineStringM:
    """Read a measured linestring from WKB, without validating it."""
    return _as_linestring(_parse(data))


def read_multipoint(data: bytes) -> MultiPointM:
    """Read a measured multipoint from WKB."""
    return _as_multipoint(_parse(data))


def read_multilinestring(data: bytes) -> MultiLineStringM:
    """Read a measured multilinestring from WKB."""
    return _as_multilinestring(_parse(data))


def read_polygon(data: bytes) -> tuple[tuple[float, float], ...]:
    """Read the exterior ring of a planar (XY) WKB polygon."""
    return _as_polygon(_parse(data))


_READERS = {
    POINT: _as_point,
    LINESTRING: _as_linestring,
    POLYGON: _as_polygon,
    MULTIPOINT: _as_multipoint,
    MULTILINESTRING: _as_multilinestring,
}


def loads(data: bytes):
    """Read any supported geometry from WKB.

    Polygons come back as their exterior ring of ``(x, y)`` pairs.
    """
    parsed = _parse(data)
    reader = _READERS.get(parsed.kind)
    if reader is None:
        raise IncompatibleTypeError()
    return reader(parsed)


def _point_bytes(coord: CoordM) -> bytes:
    return struct.pack("<BIddd", 1, POINT_M, coord.x, coord.y, coord.m)


def _linestring_bytes(linestring: LineStringM) -> bytes:
    parts = [struct.pack("<BII", 1, LINESTRING_M, len(linestring))]
    parts.extend(struct.pack("<ddd", c.x, c.y, c.m) for c in linestring)
    return b"".join(parts)


def dumps(geometry) -> bytes:
    """Write a measured geometry as little-endian ISO WKB."""
    if isinstance(geometry, CoordM):
        return _point_bytes(geometry)
    if isinstance(geometry, PointM):
        return _point_bytes(geometry.coord)
    if isinstance(geometry, LineStringM):
        return _linestring_bytes(geometry)
    if isinstance(geometry, MultiPointM):
        head = struct.pack("<BII", 1, MULTIPOINT_M, len(geometry))
        return head + b"".join(_point_bytes(p.coord) for p in geometry)
    if isinstance(geometry, MultiLineStringM):
        head = struct.pack("<BII", 1, MULTILINESTRING_M, len(geometry))
        return head + b"".join(_linestring_bytes(ls) for ls in geometry)
    raise TypeError(f"cannot write {type(geometry).__name__} as WKB")


def dumps_polygon(exterior: Iterable[tuple[float, float]]) -> bytes:
    """Write a planar polygon with the given exterior ring as little-endian WKB."""
    ring = [(float(x), float(y)) for x, y in exterior]
    if not ring:
        return struct.pack("<BII", 1, POLYGON, 0)
    parts = [struct.pack("<BIII", 1, POLYGON, 1, len(ring))]
    parts.extend(struct.pack("<dd", x, y) for x, y in ring)
    return b"".join(parts)