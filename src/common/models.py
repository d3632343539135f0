"""Dataclasses shared between the grid hasher, layer builder and the Spark job."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


@dataclass(frozen=True)
class GridOffset:
    """Angular size of one grid cell, in degrees."""

    x_offset: float
    y_offset: float

    @property
    def is_degenerate(self) -> bool:
        """True when no grid can be laid out (non-positive or NaN offsets)."""

        return not (self.x_offset > 0 and self.y_offset > 0)


class CellKey(NamedTuple):
    lat_idx: Optional[int]
    lon_idx: Optional[int]


@dataclass
class GridCell:
    count: int = 0
    points: List[Any] = field(default_factory=list)

    def add(self, point: Any) -> None:
        self.count += 1
        self.points.append(point)


GridHash = Dict[CellKey, GridCell]


@dataclass(frozen=True)
class GridHashResult:
    grid_hash: GridHash
    grid_offset: GridOffset


@dataclass(frozen=True)
class LayerDatum:
    """One occupied cell, anchored at its southwest corner."""

    index: int
    position: Tuple[float, float]
    count: int
    points: List[Any]

    @property
    def longitude(self) -> float:
        return self.position[0]

    @property
    def latitude(self) -> float:
        return self.position[1]


@dataclass(frozen=True)
class DensityGrid:
    """Aggregated grid plus the cell dimensions it was built with."""

    grid_offset: GridOffset
    layer_data: List[LayerDatum]

    @property
    def total_count(self) -> int:
        return sum(datum.count for datum in self.layer_data)


EMPTY_OFFSET = GridOffset(x_offset=0.0, y_offset=0.0)
