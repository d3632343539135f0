"""Bin points into a sparse density grid and build per-cell layer records."""

from __future__ import annotations

import logging
from functools import reduce
from typing import Any, Callable, Iterable, List, Sequence

from src.common.geo import (
    GridBucketer,
    compute_grid_offset,
    latitude_span,
    merge_latitude_span,
    reference_latitude,
)
from src.common.models import (
    EMPTY_OFFSET,
    DensityGrid,
    GridCell,
    GridHash,
    GridHashResult,
    GridOffset,
    LayerDatum,
)

logger = logging.getLogger(__name__)

PositionAccessor = Callable[[Any], Sequence[float]]


def point_to_density_grid_data(
    points: Iterable[Any], cell_size: float, get_position: PositionAccessor
) -> DensityGrid:
    """Calculate a density grid from ``points``.

    Args:
        points: Point records, only read through ``get_position``.
        cell_size: Cell size in meters.
        get_position: Returns ``(longitude, latitude)`` for a point.

    Returns:
        DensityGrid with the cell dimensions and one LayerDatum per occupied cell.
    """

    hashed = hash_points_to_grid(points, cell_size, get_position)
    layer_data = build_layer_data(hashed.grid_hash, hashed.grid_offset)
    logger.debug(
        "Binned points into %d cells (x_offset=%s, y_offset=%s)",
        len(layer_data),
        hashed.grid_offset.x_offset,
        hashed.grid_offset.y_offset,
    )
    return DensityGrid(grid_offset=hashed.grid_offset, layer_data=layer_data)


def hash_points_to_grid(
    points: Iterable[Any], cell_size: float, get_position: PositionAccessor
) -> GridHashResult:
    """Project points into cells, returning the cell hash and cell dimensions.

    Empty input returns a zero offset without evaluating the offset formulas.
    A degenerate offset (non-positive or NaN) returns an empty hash.
    """

    points = list(points)
    if not points:
        return GridHashResult(grid_hash={}, grid_offset=EMPTY_OFFSET)

    positions = [get_position(point) for point in points]
    lat_min, lat_max = reduce(
        merge_latitude_span, (latitude_span(position[1]) for position in positions)
    )
    grid_offset = compute_grid_offset(cell_size, reference_latitude(lat_min, lat_max))

    if grid_offset.is_degenerate:
        logger.debug(
            "Degenerate grid offset %s for cell_size=%s, skipping binning",
            grid_offset,
            cell_size,
        )
        return GridHashResult(grid_hash={}, grid_offset=grid_offset)

    bucketer = GridBucketer(grid_offset)
    grid_hash: GridHash = {}
    for point, (longitude, latitude) in zip(points, positions):
        key = bucketer.bucket(longitude, latitude)
        cell = grid_hash.get(key)
        if cell is None:
            cell = grid_hash[key] = GridCell()
        cell.add(point)
    return GridHashResult(grid_hash=grid_hash, grid_offset=grid_offset)


def build_layer_data(grid_hash: GridHash, grid_offset: GridOffset) -> List[LayerDatum]:
    bucketer = GridBucketer(grid_offset)
    return [
        LayerDatum(
            index=index,
            position=bucketer.anchor(key),
            count=cell.count,
            points=cell.points,
        )
        for index, (key, cell) in enumerate(grid_hash.items())
    ]
