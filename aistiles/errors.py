"""Errors raised by the measured-geometry types, and the known CRS groups."""

from __future__ import annotations

METRIC_CRS: tuple[int, ...] = (3857,)
"""Coordinate reference systems whose units are metres."""

DEGREE_CRS: tuple[int, ...] = (4326,)
"""Coordinate reference systems whose units are degrees."""


class GeometryError(ValueError):
    """Base class for invalid or unexpected geometry."""

    default_message = "invalid geometry"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NumPointsError(GeometryError):
    """A linestring was given exactly one point."""

    default_message = "Illegal Linestring with length 1"


class TimestampError(GeometryError):
    """Linestring points are not ordered by their measure value."""

    default_message = "Linestring points must temporally ordered"


class IncompatibleTypeError(GeometryError):
    """A geometry could not be converted to the requested sub-type."""

    default_message = "tried to convert to wrong geometry sub-type"


class EmptyError(GeometryError):
    """A geometry was unexpectedly empty."""

    default_message = "Geometry unexpectedly empty"


class DimensionError(GeometryError):
    """A coordinate dimension that does not exist was read."""

    default_message = "tried to read from a non-existent dimension"