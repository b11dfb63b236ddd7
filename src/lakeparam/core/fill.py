"""
Sink and flat elimination for grid-cell DEMs.

Follows the pit-filling scheme of Pelletier (2008, Quantitative Modeling of
Earth Surface Processes): an interior cell that is not higher than any of its
valid neighbors is raised a small increment above the lowest of them, and the
cell and its neighbors are examined again. Repeating this until nothing
changes leaves every interior cell with at least one strictly lower neighbor,
so each cell has a downhill path to an outlet.

Outlets are the outer ring of the grid and every active cell next to a nodata
cell (coast, basin edge). Outlets and nodata cells are never modified, so land
enclosed by nodata drains to its own edge instead of being raised forever.

The re-examination runs from an explicit FIFO worklist rather than recursion,
so large flat plateaus cannot exhaust the call stack.
"""

import logging
from collections import deque

import numpy as np

from lakeparam.config.defaults import DEFAULT_FILL_INCREMENT, DEFAULT_FILL_REVISIT_FACTOR
from lakeparam.core.exceptions import FillLimitError
from lakeparam.core.grid import allocate_grid
from lakeparam.core.topology import NeighborTopology

logger = logging.getLogger(__name__)


def nodata_adjacent(active: np.ndarray, topology: NeighborTopology) -> np.ndarray:
    """Boolean grid that is True where a cell has at least one inactive neighbor."""
    flat_active = active.ravel()
    adjacent = ~flat_active[topology.table].all(axis=1)
    return adjacent.reshape(active.shape)


def fill_sinks_and_flats(
    elevation: np.ndarray,
    active: np.ndarray,
    topology: NeighborTopology,
    increment: float = DEFAULT_FILL_INCREMENT,
    max_raises: int | None = None,
) -> np.ndarray:
    """
    Remove interior pits and flats from a DEM.

    Args:
        elevation: (rows, cols) elevation grid
        active: Boolean mask of cells with valid elevation
        topology: Clamped neighbor topology for the grid
        increment: Height added above the lowest neighbor when a cell is raised
        max_raises: Abort after this many raises. Defaults to
            DEFAULT_FILL_REVISIT_FACTOR raises per grid cell.

    Returns:
        New (rows, cols) grid of filled elevations; inactive cells keep their
        input value.

    Raises:
        FillLimitError: If more than ``max_raises`` raises are needed
    """
    if max_raises is None:
        max_raises = DEFAULT_FILL_REVISIT_FACTOR * topology.size

    filled = allocate_grid("filled elevation", elevation.shape)
    filled[:] = elevation

    z = filled.ravel().tolist()
    valid = active.ravel().tolist()
    candidates = (active & ~topology.border_mask() & ~nodata_adjacent(active, topology)).ravel()
    neighbors = topology.table.tolist()

    queue = deque(np.flatnonzero(candidates).tolist())
    queued = candidates.tolist()
    candidates = candidates.tolist()

    raises = 0
    while queue:
        cell = queue.popleft()
        queued[cell] = False

        lowest = min((z[n] for n in neighbors[cell] if valid[n]), default=None)
        if lowest is None or z[cell] > lowest:
            continue

        z[cell] = lowest + increment
        raises += 1
        if raises > max_raises:
            row, col = topology.cell(cell)
            raise FillLimitError(
                f"Sink filling exceeded {max_raises} raises (last raised cell row={row}, col={col})"
            )

        for n in (cell, *neighbors[cell]):
            if candidates[n] and not queued[n]:
                queued[n] = True
                queue.append(n)

    filled[:] = np.asarray(z, dtype=np.float64).reshape(elevation.shape)

    logger.info(f"Filled sinks and flats with {raises} raises")
    return filled
