"""Load point datasets into Spark DataFrames."""

from __future__ import annotations

from typing import Optional, Tuple

from pyspark.sql import DataFrame, Row, SparkSession
from pyspark.sql import functions as F

SUPPORTED_FORMATS = ("json", "csv")


class PointIngestionService:
    """Reads newline-delimited JSON or CSV points with lon/lat columns."""

    def __init__(
        self,
        spark: SparkSession,
        points_path: str,
        dataset_format: str = "json",
        longitude_column: str = "longitude",
        latitude_column: str = "latitude",
        limit: Optional[int] = None,
    ) -> None:
        if dataset_format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported dataset format {dataset_format!r}; expected one of {SUPPORTED_FORMATS}."
            )
        self.spark = spark
        self.points_path = points_path
        self.dataset_format = dataset_format
        self.longitude_column = longitude_column
        self.latitude_column = latitude_column
        self.limit = limit

    def load_points(self) -> DataFrame:
        """Return points with double ``longitude``/``latitude`` columns."""

        if self.dataset_format == "csv":
            df = self.spark.read.option("header", "true").option("inferSchema", "true").csv(
                self.points_path
            )
        else:
            df = self.spark.read.json(self.points_path)
        return self._clean_points(df)

    def _clean_points(self, df: DataFrame) -> DataFrame:
        for column in (self.longitude_column, self.latitude_column):
            if column not in df.columns:
                raise ValueError(
                    f"Column {column!r} not found in {self.points_path}; available: {df.columns}"
                )

        cleaned = (
            df.withColumn("longitude", F.col(self.longitude_column).cast("double"))
            .withColumn("latitude", F.col(self.latitude_column).cast("double"))
            .dropna(subset=("longitude", "latitude"))
        )
        if self.limit:
            cleaned = cleaned.limit(self.limit)
        return cleaned

    @staticmethod
    def position_of(row: Row) -> Tuple[float, float]:
        return (row.longitude, row.latitude)
