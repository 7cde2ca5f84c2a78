"""Splitting measured linestrings into sub-trajectories and isolated points."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Union

from aistiles import wkb
from aistiles.geometry import CoordM, LineStringM, PointM

SplitFunc = Callable[[PointM, PointM], bool]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class SubTrajectory:
    """A split that resulted in a linestring of at least two points."""

    linestring: LineStringM

    def to_wkb(self) -> bytes:
        """Little-endian WKB of the linestring."""
        return wkb.dumps(self.linestring)


@dataclass(frozen=True)
class SplitPoint:
    """A split that resulted in a single point."""

    point: PointM

    def to_wkb(self) -> bytes:
        """Little-endian WKB of the point."""
        return wkb.dumps(self.point)


TrajectorySplit = Union[SubTrajectory, SplitPoint]


def _split_coords(split: TrajectorySplit) -> tuple[CoordM, ...]:
    if isinstance(split, SplitPoint):
        return (split.point.coord,)
    return split.linestring.coords


def concat_to_linestring(splits: Iterable[TrajectorySplit]) -> LineStringM:
    """Join splits back into one linestring.

    Raises ``NumPointsError`` if the result is a single point and
    ``TimestampError`` if it is not ordered by measure.
    """
    coords = [c for split in splits for c in _split_coords(split)]
    return LineStringM.checked(coords)


def _chunks(coords: tuple[CoordM, ...], func: SplitFunc) -> list[list[CoordM]]:
    chunks: list[list[CoordM]] = []
    for coord in coords:
        if chunks and func(PointM(chunks[-1][-1]), PointM(coord)):
            chunks[-1].append(coord)
        else:
            chunks.append([coord])
    return chunks


def segmenter(linestring: LineStringM, func: SplitFunc) -> list[TrajectorySplit]:
    """Split ``linestring`` wherever ``func`` returns false for two consecutive points.

    Runs of one point become ``SplitPoint``; longer runs become ``SubTrajectory``.
    Order and points are preserved.
    """
    splits: list[TrajectorySplit] = []
    for chunk in _chunks(tuple(linestring), func):
        if len(chunk) == 1:
            splits.append(SplitPoint(PointM(chunk[0])))
        else:
            splits.append(SubTrajectory(LineStringM.checked(chunk)))
    return splits


def _to_datetime(seconds: int) -> datetime:
    try:
        return _EPOCH + timedelta(seconds=seconds)
    except OverflowError as exc:
        raise ValueError(
            "failed to convert measure value to DateTime object, measure value may be too big"
        ) from exc


def _truncate(value: float) -> int:
    if math.isnan(value):
        return 0
    try:
        return int(value)
    except OverflowError as exc:
        raise ValueError(
            "failed to convert measure value to DateTime object, measure value may be too big"
        ) from exc


def segment_timestamp(
    linestring: LineStringM, func: SplitFunc
) -> list[tuple[datetime, timedelta]]:
    """Segment ``linestring`` and return each split as ``(start, duration)``.

    Start times are truncated to whole seconds; the end of a sub-trajectory
    is rounded up so its last point lies inside the interval.
    """
    times: list[tuple[datetime, timedelta]] = []
    for split in segmenter(linestring, func):
        if isinstance(split, SplitPoint):
            times.append((_to_datetime(_truncate(split.point.m)), timedelta(0)))
        else:
            coords = split.linestring.coords
            first = _to_datetime(_truncate(coords[0].m))
            last_m = coords[-1].m
            last = _to_datetime(_truncate(math.ceil(last_m) if math.isfinite(last_m) else last_m))
            times.append((first, last - first))
    return times