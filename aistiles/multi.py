"""Collections of measured points and measured linestrings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from aistiles.geometry import LineStringM, PointM


@dataclass(frozen=True)
class MultiPointM:
    """A collection of measured points."""

    points: tuple[PointM, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PointM]:
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]


@dataclass(frozen=True)
class MultiLineStringM:
    """A collection of measured linestrings."""

    linestrings: tuple[LineStringM, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "linestrings", tuple(self.linestrings))

    def __len__(self) -> int:
        return len(self.linestrings)

    def __iter__(self) -> Iterator[LineStringM]:
        return iter(self.linestrings)

    def __getitem__(self, index):
        return self.linestrings[index]