"""
Pytest configuration and shared fixtures for the test suite.

Provides synthetic elevation grids so the pipeline can be exercised without
real DEM tiles.
"""

import logging
import sys
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

# Add src/ to Python path to enable imports of the lakeparam package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from lakeparam.config import ClassificationConfig, LakeParamConfig  # noqa: E402
from lakeparam.core import ElevationGrid, GridHeader, PipelineRun, write_ascii_grid  # noqa: E402

NODATA = -9999.0


@pytest.fixture(autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(
        level=logging.WARNING,  # Reduce noise during tests
        format="%(name)s - %(levelname)s - %(message)s",
    )


def make_header(nrows: int, ncols: int, cellsize: float = 0.000833) -> GridHeader:
    """Create a header for a grid in the middle of the Hungarian plain."""
    return GridHeader(
        ncols=ncols,
        nrows=nrows,
        xllcorner=20.0,
        yllcorner=47.0,
        cellsize=cellsize,
        nodata=NODATA,
    )


@pytest.fixture
def make_grid() -> Callable[..., ElevationGrid]:
    """Return a factory that wraps a 2-D array in an ElevationGrid."""

    def _make_grid(values: np.ndarray | list[list[float]], cellsize: float = 0.000833) -> ElevationGrid:
        values = np.asarray(values, dtype=np.float64)
        return ElevationGrid(header=make_header(*values.shape, cellsize=cellsize), values=values)

    return _make_grid


@pytest.fixture
def valley_grid() -> ElevationGrid:
    """
    A 20x20 tilted V-shaped valley with small noise.

    The valley floor runs down the middle column and drops towards the last
    row, so flow converges into a wet channel. Two corner cells are nodata.
    """
    rng = np.random.default_rng(42)
    rows, cols = 20, 20
    row_index, col_index = np.mgrid[0:rows, 0:cols]
    values = 100.0 + 2.0 * np.abs(col_index - cols // 2) + 0.5 * (rows - row_index)
    values += rng.uniform(0.0, 0.3, size=(rows, cols))
    values[0, 0] = NODATA
    values[0, -1] = NODATA
    return ElevationGrid(header=make_header(rows, cols), values=values)


@pytest.fixture
def island_grid() -> ElevationGrid:
    """
    A 24x24 cone-shaped island inside a two-cell ring of nodata sea.

    No active cell touches the grid border, so the land has to drain to its
    own coast.
    """
    rng = np.random.default_rng(11)
    rows, cols = 24, 24
    row_index, col_index = np.mgrid[0:rows, 0:cols]
    values = 50.0 - np.hypot(row_index - 11.5, col_index - 11.5)
    values += rng.uniform(0.0, 0.2, size=(rows, cols))
    sea = (row_index < 2) | (row_index > 21) | (col_index < 2) | (col_index > 21)
    values[sea] = NODATA
    return ElevationGrid(header=make_header(rows, cols), values=values)


@pytest.fixture
def valley_thresholds(valley_grid: ElevationGrid) -> tuple[float, float]:
    """
    Wetland and water thresholds at the 50th and 90th wetness percentiles.

    Thresholds do not influence the wetness index itself, so one default run
    is enough to pick them.
    """
    run = PipelineRun.prepare(valley_grid, "0")
    run.run()
    wetness_index = run.wetness.wetness_index[valley_grid.active]
    return float(np.percentile(wetness_index, 50)), float(np.percentile(wetness_index, 90))


@pytest.fixture
def valley_config(valley_thresholds: tuple[float, float]) -> LakeParamConfig:
    """Configuration that classes about half the valley as wetland or water."""
    wetland_threshold, water_threshold = valley_thresholds
    return LakeParamConfig(
        classification=ClassificationConfig(
            wetland_threshold=wetland_threshold,
            water_threshold=water_threshold,
        )
    )


@pytest.fixture
def valley_dem_file(tmp_path: Path, valley_grid: ElevationGrid) -> Path:
    """Write the valley grid to an ASCII grid file."""
    return write_ascii_grid(tmp_path / "valley.asc", valley_grid, fmt="%.6f")


@pytest.fixture
def valley_config_file(tmp_path: Path, valley_thresholds: tuple[float, float]) -> Path:
    """Write a TOML configuration with the valley thresholds."""
    wetland_threshold, water_threshold = valley_thresholds
    config_file = tmp_path / "lakeparam.toml"
    config_file.write_text(
        f"[classification]\nwetland_threshold = {wetland_threshold!r}\nwater_threshold = {water_threshold!r}\n"
    )
    return config_file
