"""
Ranked ordering of grid cells.

Cells are sorted ascending by a key grid. Equal keys are ordered by their
row-major position, so every ranking is reproducible.
"""

from typing import NamedTuple

import numpy as np


class RankedItem(NamedTuple):
    """A grid cell tagged with its sort key."""

    rank: float
    row: int
    col: int


def ranked_indices(values: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """
    Flat row-major indices of the masked cells, ascending by value.

    Args:
        values: (rows, cols) key grid
        mask: Boolean grid selecting the cells to rank

    Returns:
        1-D int array of flat indices
    """
    flat_positions = np.flatnonzero(mask.ravel())
    keys = values.ravel()[flat_positions]
    order = np.lexsort((flat_positions, keys))
    return flat_positions[order]


def rank_cells(values: np.ndarray, mask: np.ndarray) -> list[RankedItem]:
    """
    Rank the masked cells of a grid from lowest to highest value.

    Args:
        values: (rows, cols) key grid (elevation, wetness index, ...)
        mask: Boolean grid selecting the cells to rank

    Returns:
        RankedItem list sorted ascending by rank, ties in row-major order
    """
    ncols = values.shape[1]
    flat_values = values.ravel()
    return [
        RankedItem(float(flat_values[index]), int(index // ncols), int(index % ncols))
        for index in ranked_indices(values, mask)
    ]
