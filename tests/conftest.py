import os
import sys
from pathlib import Path

import pytest
from pyspark.sql import SparkSession

# Ensure the repository root (which contains the `src` package) is importable in tests.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Spark Python workers unpickle functions defined in test modules, so they need
# the tests directory and repository root on their import path as well.
_worker_paths = [str(PROJECT_ROOT / "tests"), str(PROJECT_ROOT)]
if os.environ.get("PYTHONPATH"):
    _worker_paths.append(os.environ["PYTHONPATH"])
os.environ["PYTHONPATH"] = os.pathsep.join(_worker_paths)


@pytest.fixture(scope="session")
def spark():
    spark = (
        SparkSession.builder.master("local[1]")
        .appName("density-grid-tests")
        .config("spark.ui.enabled", "false")
        .getOrCreate()
    )
    yield spark
    spark.stop()
