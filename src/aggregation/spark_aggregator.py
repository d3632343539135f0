"""Spark version of the density grid for point sets spread across a cluster."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from pyspark import RDD
from pyspark.sql import DataFrame, SparkSession

from src.aggregation.density_grid import PositionAccessor, build_layer_data
from src.common.geo import (
    GridBucketer,
    compute_grid_offset,
    latitude_span,
    merge_latitude_span,
    reference_latitude,
)
from src.common.models import EMPTY_OFFSET, CellKey, DensityGrid, GridCell, GridHash

logger = logging.getLogger(__name__)


class SparkDensityGrid:
    """Bins an RDD of points with the same rules as ``point_to_density_grid_data``.

    Cells come back ordered by the first input point that touched them and
    points inside a cell keep their input order, so the output matches the
    local pipeline row for row.
    """

    def __init__(self, spark: SparkSession, cell_size: float) -> None:
        self.spark = spark
        self.cell_size = cell_size

    def run(self, points_rdd: RDD, get_position: PositionAccessor) -> DensityGrid:
        positioned = points_rdd.zipWithIndex().map(
            lambda item: (item[1], item[0], tuple(get_position(item[0])))
        ).cache()
        try:
            if positioned.isEmpty():
                return DensityGrid(grid_offset=EMPTY_OFFSET, layer_data=[])

            lat_min, lat_max = positioned.map(
                lambda item: latitude_span(item[2][1])
            ).reduce(merge_latitude_span)
            grid_offset = compute_grid_offset(
                self.cell_size, reference_latitude(lat_min, lat_max)
            )
            if grid_offset.is_degenerate:
                logger.debug(
                    "Degenerate grid offset %s for cell_size=%s, no cells produced",
                    grid_offset,
                    self.cell_size,
                )
                return DensityGrid(grid_offset=grid_offset, layer_data=[])

            bucketer = GridBucketer(grid_offset)
            cells = (
                positioned.map(
                    lambda item: (bucketer.bucket(*item[2]), (item[0], item[1]))
                )
                .groupByKey()
                .map(_to_ordered_cell)
                .collect()
            )
        finally:
            positioned.unpersist()

        grid_hash: GridHash = {
            key: cell for _, key, cell in sorted(cells, key=lambda entry: entry[0])
        }
        layer_data = build_layer_data(grid_hash, grid_offset)
        logger.info("Spark density grid produced %d cells", len(layer_data))
        return DensityGrid(grid_offset=grid_offset, layer_data=layer_data)

    def to_frames(self, grid: DensityGrid) -> Dict[str, DataFrame]:
        """Tabular view of ``grid`` for persistence; member points are left out."""

        cell_rows = [
            (datum.index, float(datum.longitude), float(datum.latitude), datum.count)
            for datum in grid.layer_data
        ]
        offset_rows = [
            (float(grid.grid_offset.x_offset), float(grid.grid_offset.y_offset))
        ]
        return {
            "grid_cells": self.spark.createDataFrame(
                cell_rows, schema="index long, longitude double, latitude double, count long"
            ),
            "grid_offset": self.spark.createDataFrame(
                offset_rows, schema="x_offset double, y_offset double"
            ),
        }


def _to_ordered_cell(item) -> Tuple[int, CellKey, GridCell]:
    key, members = item
    ordered: List[Tuple[int, object]] = sorted(members, key=lambda member: member[0])
    cell = GridCell()
    for _, point in ordered:
        cell.add(point)
    return ordered[0][0], key, cell
