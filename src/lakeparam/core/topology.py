"""
Eight-connected neighbor topology with clamped boundaries.

Neighbor offsets are stored as ``(dcol, drow)`` pairs. Even indices are
diagonal neighbors, odd indices are cardinal; indices 1 and 5 step along
rows, 3 and 7 along columns. The geometric weights in routing and the
wetness index depend on this parity, so the order is fixed.

A step that would leave the grid maps back onto the edge row or column.
Edge cells therefore see themselves (or an edge neighbor) instead of
wrapping around, which gives a zero-gradient boundary.
"""

import math
from dataclasses import dataclass

import numpy as np

NNEIGHBORS = 8

NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, 1),
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
)


def is_diagonal(direction: int) -> bool:
    """Return True if the neighbor index points to a diagonal neighbor."""
    return direction % 2 == 0


def is_row_step(direction: int) -> bool:
    """Return True for the two cardinal neighbors in the previous/next row."""
    return direction in (1, 5)


def neighbor_distances(dx: float, dy: float) -> tuple[float, ...]:
    """
    Center-to-center distance to each neighbor, in NEIGHBOR_OFFSETS order.

    Args:
        dx: Cell width (m)
        dy: Cell height (m)
    """
    diagonal = math.sqrt(dx**2 + dy**2)
    distances = []
    for direction in range(NNEIGHBORS):
        if is_diagonal(direction):
            distances.append(diagonal)
        elif is_row_step(direction):
            distances.append(dy)
        else:
            distances.append(dx)
    return tuple(distances)


@dataclass(frozen=True)
class NeighborTopology:
    """
    Precomputed clamped neighbor indices for a ``rows x cols`` lattice.

    ``row_up``/``row_down`` and ``col_up``/``col_down`` hold the clamped
    index one step forward/backward along each axis. ``table[cell]`` lists the
    flat indices of the 8 clamped neighbors of ``cell``.
    """

    rows: int
    cols: int
    row_up: np.ndarray
    row_down: np.ndarray
    col_up: np.ndarray
    col_down: np.ndarray
    table: np.ndarray

    @classmethod
    def build(cls, rows: int, cols: int) -> "NeighborTopology":
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must have at least one row and column, got {rows}x{cols}")

        row_index = np.arange(rows)
        col_index = np.arange(cols)
        row_up = np.minimum(row_index + 1, rows - 1)
        row_down = np.maximum(row_index - 1, 0)
        col_up = np.minimum(col_index + 1, cols - 1)
        col_down = np.maximum(col_index - 1, 0)

        row_step = {-1: row_down, 0: row_index, 1: row_up}
        col_step = {-1: col_down, 0: col_index, 1: col_up}

        table = np.empty((rows * cols, NNEIGHBORS), dtype=np.int64)
        for direction, (dcol, drow) in enumerate(NEIGHBOR_OFFSETS):
            neighbor_rows = row_step[drow]
            neighbor_cols = col_step[dcol]
            table[:, direction] = (neighbor_rows[:, None] * cols + neighbor_cols[None, :]).ravel()

        return cls(
            rows=rows,
            cols=cols,
            row_up=row_up,
            row_down=row_down,
            col_up=col_up,
            col_down=col_down,
            table=table,
        )

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def flat_index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def cell(self, flat_index: int) -> tuple[int, int]:
        return divmod(flat_index, self.cols)

    def neighbors(self, row: int, col: int) -> list[tuple[int, int]]:
        """Clamped (row, col) of the 8 neighbors of a cell."""
        return [self.cell(int(index)) for index in self.table[self.flat_index(row, col)]]

    def border_mask(self) -> np.ndarray:
        """Boolean grid that is True on the outer ring of cells."""
        border = np.zeros((self.rows, self.cols), dtype=bool)
        border[0, :] = True
        border[-1, :] = True
        border[:, 0] = True
        border[:, -1] = True
        return border
