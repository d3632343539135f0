"""Configuration helpers for the density grid job."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class DatasetConfig:
    """Where the points live and which columns hold the coordinates."""

    points_path: str
    format: str = "json"  # json | csv
    longitude_column: str = "longitude"
    latitude_column: str = "latitude"
    limit: Optional[int] = None


@dataclass(frozen=True)
class GridConfig:
    cell_size_m: float = 1000.0


@dataclass(frozen=True)
class EngineConfig:
    """Select where binning runs (driver process vs Spark executors)."""

    type: str = "local"  # local | spark
    master: str = "local[*]"
    shuffle_partitions: int = 8


@dataclass(frozen=True)
class OutputConfig:
    """Where the job should persist derived tables."""

    base_path: str = "./data/output"


@dataclass(frozen=True)
class AppConfig:
    """Aggregated configuration model."""

    dataset: DatasetConfig
    grid: GridConfig
    engine: EngineConfig
    output: OutputConfig


def load_config(path: str | Path) -> AppConfig:
    """Parse a YAML config file into an AppConfig dataclass."""

    raw = _load_yaml(path)
    dataset_cfg = raw.get("dataset", {})
    grid_cfg = raw.get("grid", {})
    engine_cfg = raw.get("engine", {})
    output_cfg = raw.get("output", {})

    limit = dataset_cfg.get("limit")
    dataset = DatasetConfig(
        points_path=str(dataset_cfg.get("points_path", "./data/points.json")),
        format=str(dataset_cfg.get("format", "json")).lower(),
        longitude_column=str(dataset_cfg.get("longitude_column", "longitude")),
        latitude_column=str(dataset_cfg.get("latitude_column", "latitude")),
        limit=int(limit) if limit is not None else None,
    )
    grid = GridConfig(cell_size_m=float(grid_cfg.get("cell_size_m", 1000.0)))
    engine = EngineConfig(
        type=str(engine_cfg.get("type", "local")).lower(),
        master=str(engine_cfg.get("master", "local[*]")),
        shuffle_partitions=int(engine_cfg.get("shuffle_partitions", 8)),
    )
    output = OutputConfig(base_path=str(output_cfg.get("base_path", "./data/output")))
    return AppConfig(dataset=dataset, grid=grid, engine=engine, output=output)


def _load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a top-level mapping.")
    return data
