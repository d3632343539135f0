"""Geospatial helpers for density grid aggregations."""

from __future__ import annotations

import math
from typing import Optional, Tuple

from .models import CellKey, GridOffset

R_EARTH = 6378000  # meters

LatitudeSpan = Tuple[float, float]


def calculate_lat_offset(dy: float) -> float:
    """Degrees of latitude covered by ``dy`` meters."""

    return (dy / R_EARTH) * (180 / math.pi)


def calculate_lon_offset(latitude: float, dx: float) -> float:
    """Degrees of longitude covered by ``dx`` meters at ``latitude``.

    Grows without bound towards the poles. A non-finite latitude gives NaN.
    """

    if not math.isfinite(latitude):
        return math.nan
    degrees = (dx / R_EARTH) * (180 / math.pi)
    return degrees / math.cos(latitude * math.pi / 180)


def compute_grid_offset(cell_size: float, latitude: float) -> GridOffset:
    """Angular cell size for a cell of ``cell_size`` meters around ``latitude``."""

    return GridOffset(
        x_offset=calculate_lon_offset(latitude, cell_size),
        y_offset=calculate_lat_offset(cell_size),
    )


def latitude_span(latitude: float) -> LatitudeSpan:
    return (latitude, latitude)


def merge_latitude_span(a: LatitudeSpan, b: LatitudeSpan) -> LatitudeSpan:
    """Combine two (min, max) spans. NaN anywhere poisons the result."""

    if math.isnan(a[0]) or math.isnan(b[0]):
        return (math.nan, math.nan)
    return (min(a[0], b[0]), max(a[1], b[1]))


def reference_latitude(lat_min: float, lat_max: float) -> float:
    # midpoint of the range, not a centroid
    return (lat_min + lat_max) / 2


def _index_or_nan(value: Optional[int]) -> float:
    return math.nan if value is None else float(value)


def _floor_index(value: float, offset: float) -> Optional[int]:
    quotient = value / offset
    if not math.isfinite(quotient):
        return None
    return math.floor(quotient)


class GridBucketer:
    """Maps longitude/latitude pairs into cells of a fixed angular size."""

    def __init__(self, grid_offset: GridOffset) -> None:
        self.grid_offset = grid_offset

    def bucket(self, longitude: float, latitude: float) -> CellKey:
        return CellKey(
            lat_idx=_floor_index(latitude + 90, self.grid_offset.y_offset),
            lon_idx=_floor_index(longitude + 180, self.grid_offset.x_offset),
        )

    def anchor(self, key: CellKey) -> Tuple[float, float]:
        """Southwest corner of ``key`` in world degrees."""

        return (
            -180 + self.grid_offset.x_offset * _index_or_nan(key.lon_idx),
            -90 + self.grid_offset.y_offset * _index_or_nan(key.lat_idx),
        )
