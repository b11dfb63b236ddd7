"""
Tests for grid storage.
"""

from unittest.mock import patch

import numpy as np
import pytest

from lakeparam.core.exceptions import GridAllocationError
from lakeparam.core.grid import ElevationGrid, GridHeader, allocate_grid


@pytest.fixture
def header() -> GridHeader:
    return GridHeader(ncols=3, nrows=2, xllcorner=20.0, yllcorner=47.0, cellsize=0.5, nodata=-9999.0)


class TestGridHeader:
    """Tests for GridHeader."""

    def test_shape(self, header: GridHeader) -> None:
        """Shape is (nrows, ncols)."""
        assert header.shape == (2, 3)

    def test_centroid(self, header: GridHeader) -> None:
        """Centroid is (lat, lon) of the grid centre."""
        assert header.centroid == pytest.approx((47.5, 20.75))


class TestElevationGrid:
    """Tests for ElevationGrid."""

    def test_active_mask(self, header: GridHeader) -> None:
        """Cells equal to nodata are inactive."""
        grid = ElevationGrid(header=header, values=np.array([[1.0, -9999.0, 3.0], [4.0, 5.0, -9999.0]]))

        assert grid.active_count == 4
        assert not grid.active[0, 1]

    def test_shape_mismatch(self, header: GridHeader) -> None:
        """Values must match the header shape."""
        with pytest.raises(ValueError, match="header declares"):
            ElevationGrid(header=header, values=np.zeros((3, 2)))


class TestAllocateGrid:
    """Tests for allocate_grid."""

    def test_fill_value(self) -> None:
        """Grids start at the requested value."""
        grid = allocate_grid("test", (2, 2), fill_value=-9999.0)
        np.testing.assert_array_equal(grid, -9999.0)

    def test_allocation_failure(self) -> None:
        """MemoryError is reported with the structure name."""
        with patch("lakeparam.core.grid.np.full", side_effect=MemoryError):
            with pytest.raises(GridAllocationError, match="Cannot allocate memory for flow accumulation"):
                allocate_grid("flow accumulation", (2, 2))
