"""
Topographic wetness index and wetland/open-water classification.

For each active cell the local slope tan(beta) is the contour-length weighted
mean of the slopes to its strictly lower neighbors, and the wetness index is

    TWI = flow_accumulation / (contour_length * tan(beta))

Diagonal neighbors carry a contour weight of ``0.2*dx + 0.2*dy``; the
row-step cardinals ``0.6*dx`` and the column-step cardinals ``0.6*dy``.
Cells with no lower neighbor take a slope floor derived from the nominal
vertical resolution of the DEM, and no cell may fall below that floor.

Unlike routing, neighbor lookups here are bounded: neighbors outside the
grid are skipped instead of being clamped onto the edge.
"""

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from lakeparam.config.defaults import (
    DEFAULT_VERTICAL_RESOLUTION,
    DEFAULT_WATER_THRESHOLD,
    DEFAULT_WETLAND_THRESHOLD,
)
from lakeparam.core.grid import allocate_grid
from lakeparam.core.ranking import RankedItem
from lakeparam.core.topology import NEIGHBOR_OFFSETS, NNEIGHBORS, is_diagonal, is_row_step, neighbor_distances

logger = logging.getLogger(__name__)


class CellClass(IntEnum):
    """Land class of a grid cell derived from its wetness index."""

    NODATA = -1
    UPLAND = 0
    WETLAND = 1
    WATER = 2


@dataclass
class WetnessResult:
    """Per-cell wetness fields and class counts for one grid."""

    tan_beta: np.ndarray
    contour_length: np.ndarray
    wetness_index: np.ndarray
    mean_drop: np.ndarray
    cell_class: np.ndarray
    active_cells: int
    water_cells: int
    wetland_cells: int

    @property
    def water_fraction(self) -> float:
        return self.water_cells / self.active_cells

    @property
    def wetland_fraction(self) -> float:
        return self.wetland_cells / self.active_cells

    @property
    def upland_fraction(self) -> float:
        return (self.active_cells - self.water_cells - self.wetland_cells) / self.active_cells


def tan_beta_floor(dx: float, dy: float, vertical_resolution: float = DEFAULT_VERTICAL_RESOLUTION) -> float:
    """
    Minimum tan(beta) for a cell.

    Half the vertical resolution of the DEM over the distance to each of the
    8 neighbors, averaged.
    """
    diagonal = math.sqrt(dx**2 + dy**2)
    half = 0.5 * vertical_resolution
    return (4.0 * half / diagonal + 2.0 * half / dx + 2.0 * half / dy) / NNEIGHBORS


def contour_weight(direction: int, dx: float, dy: float) -> float:
    """Contour length assigned to flow towards a neighbor."""
    if is_diagonal(direction):
        return 0.2 * dx + 0.2 * dy
    if is_row_step(direction):
        return 0.6 * dx
    return 0.6 * dy


def _bounded_neighbors(row: int, col: int, rows: int, cols: int) -> Iterator[tuple[int, int]]:
    """Yield (direction, flat index) for each neighbor inside the grid."""
    for direction, (dcol, drow) in enumerate(NEIGHBOR_OFFSETS):
        nrow = row + drow
        ncol = col + dcol
        if 0 <= nrow < rows and 0 <= ncol < cols:
            yield direction, nrow * cols + ncol


def compute_slope_geometry(
    filled: np.ndarray,
    active: np.ndarray,
    dx: float,
    dy: float,
    order: list[RankedItem],
    vertical_resolution: float = DEFAULT_VERTICAL_RESOLUTION,
    nodata: float = -9999.0,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Compute tan(beta) and contour length for every active cell.

    Args:
        filled: (rows, cols) filled elevation grid
        active: Boolean mask of active cells
        dx: Cell width (m)
        dy: Cell height (m)
        order: Active cells ranked ascending by elevation; visited high to low
        vertical_resolution: Nominal DEM vertical resolution (m)
        nodata: Value written to inactive cells

    Returns:
        Tuple of (tan_beta, contour_length) grids
    """
    rows, cols = filled.shape
    tan_beta = allocate_grid("tan(beta)", filled.shape, nodata)
    contour_length = allocate_grid("contour length", filled.shape, nodata)

    distances = neighbor_distances(dx, dy)
    weights = [contour_weight(direction, dx, dy) for direction in range(NNEIGHBORS)]
    floor = tan_beta_floor(dx, dy, vertical_resolution)

    z = filled.ravel().tolist()
    valid = active.ravel().tolist()
    slopes = tan_beta.ravel().tolist()
    lengths = contour_length.ravel().tolist()

    for item in reversed(order):
        cell = item.row * cols + item.col
        center = z[cell]
        weighted_slope = 0.0
        total_weight = 0.0
        lower = 0

        for direction, n in _bounded_neighbors(item.row, item.col, rows, cols):
            if not valid[n] or z[n] >= center:
                continue
            weight = weights[direction]
            weighted_slope += weight * (center - z[n]) / distances[direction]
            total_weight += weight
            lower += 1

        if lower == 0:
            slopes[cell] = floor
            lengths[cell] = 2.0 * dx + 2.0 * dy
        else:
            slopes[cell] = max(weighted_slope / total_weight, floor)
            lengths[cell] = total_weight / lower

    tan_beta[:] = np.asarray(slopes, dtype=np.float64).reshape(filled.shape)
    contour_length[:] = np.asarray(lengths, dtype=np.float64).reshape(filled.shape)
    return tan_beta, contour_length


def classify_cells(
    wetness_index: np.ndarray,
    active: np.ndarray,
    wetland_threshold: float = DEFAULT_WETLAND_THRESHOLD,
    water_threshold: float = DEFAULT_WATER_THRESHOLD,
) -> np.ndarray:
    """
    Classify active cells as upland, wetland or open water.

    Returns:
        int8 grid of CellClass values; inactive cells are CellClass.NODATA
    """
    cell_class = np.full(wetness_index.shape, CellClass.NODATA, dtype=np.int8)
    cell_class[active] = CellClass.UPLAND
    cell_class[active & (wetness_index >= wetland_threshold)] = CellClass.WETLAND
    cell_class[active & (wetness_index >= water_threshold)] = CellClass.WATER
    return cell_class


def mean_elevation_drop(
    filled: np.ndarray,
    wetness_index: np.ndarray,
    active: np.ndarray,
    dx: float,
    dy: float,
    order: list[RankedItem],
    nodata: float = -9999.0,
) -> np.ndarray:
    """
    Average slope towards neighbors that are lower and wetter.

    A neighbor qualifies only if it is strictly lower in elevation and has a
    strictly higher wetness index than the cell. Cells without a qualifying
    neighbor get zero.

    Returns:
        (rows, cols) grid of mean drop per unit distance; nodata on inactive cells
    """
    rows, cols = filled.shape
    mean_drop = allocate_grid("mean elevation drop", filled.shape, nodata)
    distances = neighbor_distances(dx, dy)

    z = filled.ravel().tolist()
    valid = active.ravel().tolist()
    wetness = wetness_index.ravel().tolist()
    drops = mean_drop.ravel().tolist()

    for item in reversed(order):
        cell = item.row * cols + item.col
        center = z[cell]
        total = 0.0
        lower = 0

        for direction, n in _bounded_neighbors(item.row, item.col, rows, cols):
            if valid[n] and z[n] < center and wetness[n] > wetness[cell]:
                total += (center - z[n]) / distances[direction]
                lower += 1

        drops[cell] = total / lower if lower else 0.0

    mean_drop[:] = np.asarray(drops, dtype=np.float64).reshape(filled.shape)
    return mean_drop


def compute_wetness(
    filled: np.ndarray,
    flow: np.ndarray,
    active: np.ndarray,
    dx: float,
    dy: float,
    order: list[RankedItem],
    vertical_resolution: float = DEFAULT_VERTICAL_RESOLUTION,
    wetland_threshold: float = DEFAULT_WETLAND_THRESHOLD,
    water_threshold: float = DEFAULT_WATER_THRESHOLD,
    nodata: float = -9999.0,
) -> WetnessResult:
    """
    Run the full wetness stage: slope, wetness index, classes and relief.

    Args:
        filled: (rows, cols) filled elevation grid
        flow: (rows, cols) accumulated flow (m²)
        active: Boolean mask of active cells
        dx: Cell width (m)
        dy: Cell height (m)
        order: Active cells ranked ascending by filled elevation
        vertical_resolution: Nominal DEM vertical resolution (m)
        wetland_threshold: Lowest wetness index classed as wetland
        water_threshold: Lowest wetness index classed as open water
        nodata: Value written to inactive cells of the float grids

    Returns:
        WetnessResult with all per-cell fields and class counts

    Raises:
        ValueError: If the grid has no active cells
    """
    active_cells = int(np.count_nonzero(active))
    if active_cells == 0:
        raise ValueError("Cannot compute wetness index on a grid without active cells")

    tan_beta, contour_length = compute_slope_geometry(
        filled, active, dx, dy, order, vertical_resolution=vertical_resolution, nodata=nodata
    )

    wetness_index = allocate_grid("wetness index", filled.shape, nodata)
    wetness_index[active] = flow[active] / (contour_length[active] * tan_beta[active])

    cell_class = classify_cells(wetness_index, active, wetland_threshold, water_threshold)
    mean_drop = mean_elevation_drop(filled, wetness_index, active, dx, dy, order, nodata=nodata)

    result = WetnessResult(
        tan_beta=tan_beta,
        contour_length=contour_length,
        wetness_index=wetness_index,
        mean_drop=mean_drop,
        cell_class=cell_class,
        active_cells=active_cells,
        water_cells=int(np.count_nonzero(cell_class == CellClass.WATER)),
        wetland_cells=int(np.count_nonzero(cell_class == CellClass.WETLAND)),
    )

    logger.info(
        f"Classified {active_cells} cells: water={result.water_fraction:.4f}, "
        f"wetland={result.wetland_fraction:.4f}, upland={result.upland_fraction:.4f}"
    )
    return result
