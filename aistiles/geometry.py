"""Coordinates, points, lines and linestrings carrying a measure (time) value."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import pairwise
from typing import Iterable, Iterator

from aistiles.errors import DimensionError, NumPointsError, TimestampError

DEFAULT_CRS = 4326


@dataclass(frozen=True)
class CoordM:
    """An x/y coordinate with a measure value, usually a unix timestamp."""

    x: float
    y: float
    m: float
    crs: int = DEFAULT_CRS

    def nth(self, n: int) -> float:
        """Return dimension ``n``: 0 is x, 1 is y and 2 is m."""
        if n == 0:
            return self.x
        if n == 1:
            return self.y
        if n == 2:
            return self.m
        raise DimensionError(f"tried to access dimension {n} in 3-dimensional coordinate")

    def xy(self) -> tuple[float, float]:
        """The planar part of the coordinate."""
        return (self.x, self.y)


@dataclass(frozen=True)
class PointM:
    """A point geometry wrapping a single measured coordinate."""

    coord: CoordM

    @classmethod
    def from_xym(cls, x: float, y: float, m: float) -> PointM:
        return cls(CoordM(x, y, m))

    @property
    def x(self) -> float:
        return self.coord.x

    @property
    def y(self) -> float:
        return self.coord.y

    @property
    def m(self) -> float:
        return self.coord.m

    @property
    def crs(self) -> int:
        return self.coord.crs


@dataclass(frozen=True)
class LineM:
    """A single segment between two measured points."""

    start: PointM
    end: PointM

    @classmethod
    def from_coords(cls, start: CoordM, end: CoordM) -> LineM:
        return cls(PointM(start), PointM(end))


def _sorted_by_measure(coords: tuple[CoordM, ...]) -> bool:
    return all(a.m <= b.m for a, b in pairwise(coords))


@dataclass(frozen=True)
class LineStringM:
    """A sequence of measured coordinates."""

    coords: tuple[CoordM, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "coords", tuple(self.coords))

    @classmethod
    def checked(cls, coords: Iterable[CoordM]) -> LineStringM:
        """Build a linestring that is not a single point and is ordered by measure."""
        coords = tuple(coords)
        if len(coords) == 1:
            raise NumPointsError()
        if not _sorted_by_measure(coords):
            raise TimestampError()
        return cls(coords)

    @classmethod
    def from_coords(cls, coords: Iterable[CoordM]) -> LineStringM:
        """Build a linestring, rejecting only a single point."""
        coords = tuple(coords)
        if len(coords) == 1:
            raise NumPointsError()
        return cls(coords)

    @classmethod
    def from_line(cls, line: LineM) -> LineStringM:
        """Build a two-point linestring; the line must be ordered by measure."""
        return cls.checked((line.start.coord, line.end.coord))

    def points(self) -> Iterator[PointM]:
        """Yield each coordinate as a point."""
        return (PointM(c) for c in self.coords)

    def lines(self) -> Iterator[LineM]:
        """Yield the segments between consecutive coordinates."""
        return (LineM(PointM(a), PointM(b)) for a, b in pairwise(self.coords))

    def __len__(self) -> int:
        return len(self.coords)

    def __iter__(self) -> Iterator[CoordM]:
        return iter(self.coords)

    def __getitem__(self, index):
        return self.coords[index]