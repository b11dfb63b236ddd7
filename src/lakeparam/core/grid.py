"""
Grid storage for elevation and derived fields.

All grids are numpy float64 arrays of shape ``(nrows, ncols)`` addressed
``[row, col]`` in row-major order. Flat indices used by the iterative stages
are ``row * ncols + col`` on the same arrays.
"""

import logging
from dataclasses import dataclass

import numpy as np

from lakeparam.core.exceptions import GridAllocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridHeader:
    """Six-line ASCII grid header."""

    ncols: int
    nrows: int
    xllcorner: float
    yllcorner: float
    cellsize: float  # degrees
    nodata: float

    @property
    def shape(self) -> tuple[int, int]:
        return (self.nrows, self.ncols)

    @property
    def centroid(self) -> tuple[float, float]:
        """Return (lat, lon) of the grid centre."""
        lat = self.yllcorner + self.cellsize * self.nrows / 2
        lon = self.xllcorner + self.cellsize * self.ncols / 2
        return lat, lon


@dataclass
class ElevationGrid:
    """An elevation raster together with its header."""

    header: GridHeader
    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.shape != self.header.shape:
            raise ValueError(f"Grid values have shape {self.values.shape}, header declares {self.header.shape}")

    @property
    def active(self) -> np.ndarray:
        """Boolean mask of cells holding a usable elevation."""
        return self.values != self.header.nodata

    @property
    def active_count(self) -> int:
        return int(np.count_nonzero(self.active))


def allocate_grid(name: str, shape: tuple[int, int], fill_value: float = 0.0) -> np.ndarray:
    """
    Allocate a float64 working grid.

    Args:
        name: Name of the structure, reported if allocation fails
        shape: (nrows, ncols)
        fill_value: Initial value of every cell

    Returns:
        Array of the requested shape filled with ``fill_value``

    Raises:
        GridAllocationError: If the array cannot be allocated
    """
    try:
        grid = np.full(shape, fill_value, dtype=np.float64)
    except MemoryError as e:
        raise GridAllocationError(name) from e

    logger.debug(f"Allocated {name} grid {shape[0]}x{shape[1]}")
    return grid
