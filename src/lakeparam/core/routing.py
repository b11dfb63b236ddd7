"""
Multiple flow direction (MFD) routing over a filled DEM.

Every active cell starts with its own area. Cells are visited from the
highest to the lowest filled elevation; each passes its accumulated flow to
its lower neighbors in proportion to ``(drop / distance) ** exponent``.
Because a cell only receives flow from strictly higher cells, all of its
inflow has arrived by the time it is visited.

Neighbors come from the clamped topology, so border cells never route
outside the grid: flow reaching a cell with no lower neighbor stays there.
"""

import logging

import numpy as np

from lakeparam.config.defaults import DEFAULT_FLOW_EXPONENT
from lakeparam.core.grid import allocate_grid
from lakeparam.core.ranking import RankedItem
from lakeparam.core.topology import NeighborTopology

logger = logging.getLogger(__name__)


def outflow_fractions(
    cell: int,
    z: list[float],
    valid: list[bool],
    neighbors: list[int],
    distances: tuple[float, ...],
    exponent: float = DEFAULT_FLOW_EXPONENT,
) -> list[float]:
    """
    Fraction of a cell's flow sent to each of its 8 neighbors.

    Args:
        cell: Flat index of the cell
        z: Flat filled elevations
        valid: Flat active-cell flags
        neighbors: Flat indices of the 8 clamped neighbors of ``cell``
        distances: Neighbor distances in NEIGHBOR_OFFSETS order
        exponent: Slope exponent

    Returns:
        8 fractions summing to 1, or all zeros when no neighbor is lower
    """
    center = z[cell]
    proxies = [0.0] * len(neighbors)
    for direction, neighbor in enumerate(neighbors):
        if valid[neighbor] and z[neighbor] < center:
            proxies[direction] = ((center - z[neighbor]) / distances[direction]) ** exponent

    total = sum(proxies)
    if total <= 0.0:
        return proxies
    return [proxy / total for proxy in proxies]


def route_mfd_flow(
    filled: np.ndarray,
    active: np.ndarray,
    topology: NeighborTopology,
    distances: tuple[float, ...],
    cell_area: float,
    order: list[RankedItem],
    exponent: float = DEFAULT_FLOW_EXPONENT,
) -> np.ndarray:
    """
    Accumulate flow with the MFD algorithm.

    Args:
        filled: (rows, cols) filled elevation grid
        active: Boolean mask of active cells
        topology: Clamped neighbor topology
        distances: Neighbor distances in NEIGHBOR_OFFSETS order (m)
        cell_area: Area contributed by every active cell (m²)
        order: Active cells ranked ascending by filled elevation
        exponent: Slope exponent for flow partitioning

    Returns:
        (rows, cols) accumulated flow; zero on inactive cells
    """
    flow = allocate_grid("flow accumulation", filled.shape)
    flow[active] = cell_area

    z = filled.ravel().tolist()
    valid = active.ravel().tolist()
    accumulated = flow.ravel().tolist()
    neighbors = topology.table.tolist()
    ncols = topology.cols

    for item in reversed(order):
        cell = item.row * ncols + item.col
        outflow = accumulated[cell]
        fractions = outflow_fractions(cell, z, valid, neighbors[cell], distances, exponent)
        for neighbor, fraction in zip(neighbors[cell], fractions, strict=True):
            if fraction > 0.0:
                accumulated[neighbor] += outflow * fraction

    flow[:] = np.asarray(accumulated, dtype=np.float64).reshape(filled.shape)

    logger.info(f"Routed flow over {len(order)} cells (max accumulation {flow.max():.1f} m²)")
    return flow
