"""Density clustering of trajectory points into stop objects."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from itertools import groupby
from typing import Callable, Iterable, Sequence, Union

from aistiles.errors import GeometryError
from aistiles.geometry import LineStringM, PointM
from aistiles.planar import Triangle, convex_hull, triangulate

MS_TO_KNOT = 1.9438400

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

DistFunc = Callable[[PointM, PointM], float]


class ClassKind(enum.Enum):
    """The role a point plays in a clustering."""

    CORE = "core"
    EDGE = "edge"
    NOISE = "noise"
    UNCLASSIFIED = "unclassified"


_CLUSTERED = (ClassKind.CORE, ClassKind.EDGE)


@dataclass(frozen=True)
class Classification:
    """A point's class and, for core and edge points, its cluster index."""

    kind: ClassKind
    cluster: int | None = None

    def __post_init__(self) -> None:
        if (self.kind in _CLUSTERED) != (self.cluster is not None):
            raise ValueError(f"{self.kind.value} classification with cluster {self.cluster!r}")

    @classmethod
    def core(cls, cluster: int) -> Classification:
        return cls(ClassKind.CORE, cluster)

    @classmethod
    def edge(cls, cluster: int) -> Classification:
        return cls(ClassKind.EDGE, cluster)

    @classmethod
    def noise(cls) -> Classification:
        return cls(ClassKind.NOISE)

    @classmethod
    def unclassified(cls) -> Classification:
        return cls(ClassKind.UNCLASSIFIED)

    @property
    def clustered(self) -> bool:
        return self.kind in _CLUSTERED


_NOISE = Classification.noise()
_UNCLASSIFIED = Classification.unclassified()


def _seconds(m: float) -> int:
    """Truncate a measure value to whole seconds."""
    if math.isnan(m):
        return 0
    return int(m)


def _to_datetime(m: float) -> datetime:
    try:
        return _EPOCH + timedelta(seconds=_seconds(m))
    except OverflowError as exc:
        raise ValueError("timestamp should be well within bounds") from exc


@dataclass(kw_only=True)
class DbScanConf:
    """Settings for DBSCAN over time-ordered points with speed over ground.

    ``min_cluster_size`` is the number of neighbours a core point needs,
    ``dist`` measures the distance between two points, ``dist_thres`` is the
    largest distance to a neighbour, ``speed_thres`` the largest speed over
    ground a clustered point may have and ``max_time_thres`` the largest time
    gap to a neighbour.
    """

    min_cluster_size: int
    dist: DistFunc
    dist_thres: float
    speed_thres: float
    max_time_thres: timedelta
    _classes: list[Classification] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.min_cluster_size < 1:
            raise ValueError("min_cluster_size must be at least 1")

    def run(
        self, points: Iterable[tuple[PointM, float]]
    ) -> list[tuple[PointM, Classification]]:
        """Classify each ``(point, speed)`` pair; points must be ordered by time."""
        points = list(points)
        self._classes = [_UNCLASSIFIED] * len(points)
        cluster = 0
        queue: list[int] = []
        for index in range(len(points)):
            if self._classes[index] != _UNCLASSIFIED:
                continue
            self._classes[index] = _NOISE
            queue.append(index)
            if self._expand_cluster(queue, points, cluster):
                cluster += 1
        classes, self._classes = self._classes, []
        return [(point, cls) for (point, _), cls in zip(points, classes)]

    def _expand_cluster(
        self, queue: list[int], points: Sequence[tuple[PointM, float]], cluster: int
    ) -> bool:
        new_cluster = False
        while queue:
            index = queue.pop()
            neighbors = self._range_query(points, index)
            if len(neighbors) < self.min_cluster_size:
                continue
            new_cluster = True
            self._classes[index] = Classification.core(cluster)
            for neighbor in neighbors:
                if self._classes[neighbor] == _NOISE:
                    self._classes[neighbor] = Classification.edge(cluster)
                if self._classes[neighbor] != _UNCLASSIFIED:
                    continue
                self._classes[neighbor] = _NOISE
                queue.append(neighbor)
        return new_cluster

    def _range_query(self, points: Sequence[tuple[PointM, float]], index: int) -> list[int]:
        """Neighbours of ``points[index]``; they form a contiguous run around it."""
        query = points[index][0]

        def scan(indices: Iterable[int]) -> list[int]:
            found = []
            for i in indices:
                point, sog = points[i]
                if not (
                    self.dist(query, point) < self.dist_thres
                    and self._temporal_sog_close(query, point, sog)
                ):
                    break
                found.append(i)
            return found

        return scan(range(index - 1, -1, -1)) + scan(range(index, len(points)))

    def _temporal_sog_close(self, query: PointM, point: PointM, sog: float) -> bool:
        gap = timedelta(seconds=abs(_seconds(point.m) - _seconds(query.m)))
        return sog < self.speed_thres and gap < self.max_time_thres


@dataclass(frozen=True)
class Stop:
    """A cluster of points: its convex hull and the time span it covers."""

    polygon: tuple[tuple[float, float], ...]
    time_range: tuple[datetime, datetime]


@dataclass(frozen=True)
class TrajectoryPart:
    """A run of unclustered points between stops."""

    linestring: LineStringM


StopOrLs = Union[Stop, TrajectoryPart]


def _group_key(entry: tuple[PointM, Classification]) -> tuple[bool, int | None]:
    cls = entry[1]
    return (True, cls.cluster) if cls.clustered else (False, None)


def cluster_to_traj_with_stop_object(
    classes: Iterable[tuple[PointM, Classification]],
) -> list[StopOrLs]:
    """Turn consecutive runs of classified points into stops and trajectory parts.

    A run of points in the same cluster becomes a ``Stop``; a run of noise or
    unclassified points becomes a ``TrajectoryPart``, whose linestring is empty
    when the run is a single point or is not ordered by time.
    """
    parts: list[StopOrLs] = []
    for (clustered, _), group in groupby(classes, key=_group_key):
        points = [point for point, _ in group]
        if clustered:
            measures = [p.m for p in points]
            parts.append(
                Stop(
                    polygon=convex_hull((p.x, p.y) for p in points),
                    time_range=(_to_datetime(min(measures)), _to_datetime(max(measures))),
                )
            )
        else:
            try:
                linestring = LineStringM.checked(p.coord for p in points)
            except GeometryError:
                linestring = LineStringM()
            parts.append(TrajectoryPart(linestring))
    return parts


def triangulate_stop_object(polygon: Iterable[tuple[float, float]]) -> list[Triangle]:
    """Split a stop object's polygon into triangles."""
    return triangulate(polygon)