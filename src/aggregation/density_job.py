"""Entry point for the density grid batch job."""

from __future__ import annotations

import argparse
import logging

from pyspark.sql import SparkSession

from src.aggregation.density_grid import point_to_density_grid_data
from src.aggregation.persistence import Persistence
from src.aggregation.spark_aggregator import SparkDensityGrid
from src.common.config import load_config
from src.ingest.ingestion_service import PointIngestionService

logger = logging.getLogger(__name__)

ENGINES = ("local", "spark")


def main() -> None:
    parser = argparse.ArgumentParser(description="Bin geographic points into a density grid.")
    parser.add_argument("--config", default="config/local.yaml", help="Path to YAML config.")
    parser.add_argument("--cell-size", type=float, default=None, help="Cell size in meters (overrides config).")
    parser.add_argument("--engine", choices=ENGINES, default=None, help="Override engine.type from config.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = load_config(args.config)
    cell_size = args.cell_size if args.cell_size is not None else config.grid.cell_size_m
    engine = args.engine or config.engine.type
    if engine not in ENGINES:
        raise ValueError(f"Unknown engine.type: {engine}")

    spark = (
        SparkSession.builder.appName("DensityGrid")
        .master(config.engine.master)
        .config("spark.sql.shuffle.partitions", str(config.engine.shuffle_partitions))
        .getOrCreate()
    )

    try:
        ingestion = PointIngestionService(
            spark,
            points_path=config.dataset.points_path,
            dataset_format=config.dataset.format,
            longitude_column=config.dataset.longitude_column,
            latitude_column=config.dataset.latitude_column,
            limit=config.dataset.limit,
        )
        points_df = ingestion.load_points()
        aggregator = SparkDensityGrid(spark, cell_size)

        logger.info("Binning %s with cell size %.1fm on the %s engine", config.dataset.points_path, cell_size, engine)
        if engine == "spark":
            grid = aggregator.run(points_df.rdd, PointIngestionService.position_of)
        else:
            grid = point_to_density_grid_data(
                points_df.collect(), cell_size, PointIngestionService.position_of
            )

        if not grid.layer_data:
            logger.warning(
                "No grid cells produced (offset x=%s, y=%s). Check the dataset and cell size.",
                grid.grid_offset.x_offset,
                grid.grid_offset.y_offset,
            )
        else:
            logger.info("Assigned %d points to %d cells", grid.total_count, len(grid.layer_data))

        Persistence(config.output.base_path).write(aggregator.to_frames(grid))
        print(f"Wrote density grid tables to {config.output.base_path}")
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
