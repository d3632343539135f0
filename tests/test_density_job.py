import json
import sys

import pytest

from src.aggregation import density_job


def _write_config(tmp_path, engine: str, cell_size: float = 1000) -> str:
    points_path = tmp_path / "points.json"
    with open(points_path, "w", encoding="utf-8") as handle:
        for lon, lat in [(0.0, 0.0), (0.0005, 0.0005), (10.0, 10.0)]:
            handle.write(json.dumps({"longitude": lon, "latitude": lat}) + "\n")

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "\n".join(
            [
                "dataset:",
                f"  points_path: {points_path}",
                "grid:",
                f"  cell_size_m: {cell_size}",
                "engine:",
                f"  type: {engine}",
                "output:",
                f"  base_path: {tmp_path / 'output'}",
            ]
        ),
        encoding="utf-8",
    )
    return str(config_path)


@pytest.fixture
def shared_spark(spark, monkeypatch):
    # the job stops its session; keep the shared test session alive
    monkeypatch.setattr(spark, "stop", lambda: None)
    return spark


@pytest.mark.parametrize("engine", ["local", "spark"])
def test_job_writes_grid_tables(shared_spark, tmp_path, monkeypatch, engine):
    config_path = _write_config(tmp_path, engine)
    monkeypatch.setattr(sys, "argv", ["density_job", "--config", config_path])

    density_job.main()

    cells = shared_spark.read.parquet(str(tmp_path / "output" / "grid_cells"))
    assert sorted(row["count"] for row in cells.collect()) == [1, 2]


def test_job_cell_size_override_can_produce_empty_grid(shared_spark, tmp_path, monkeypatch):
    config_path = _write_config(tmp_path, "local")
    monkeypatch.setattr(
        sys, "argv", ["density_job", "--config", config_path, "--cell-size", "0"]
    )

    density_job.main()

    cells = shared_spark.read.parquet(str(tmp_path / "output" / "grid_cells"))
    offset = shared_spark.read.parquet(str(tmp_path / "output" / "grid_offset"))
    assert cells.count() == 0
    assert offset.collect()[0]["y_offset"] == 0.0


def test_job_rejects_unknown_engine(shared_spark, tmp_path, monkeypatch):
    config_path = _write_config(tmp_path, "dask")
    monkeypatch.setattr(sys, "argv", ["density_job", "--config", config_path])

    with pytest.raises(ValueError, match="dask"):
        density_job.main()
