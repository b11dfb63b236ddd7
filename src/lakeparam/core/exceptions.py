"""
Exceptions raised by the lakeparam pipeline.

Every failure the pipeline can report derives from LakeParamError so the CLI
can map them to diagnostics and exit codes in one place.
"""


class LakeParamError(Exception):
    """Base class for lakeparam errors."""

    pass


class GridFileError(LakeParamError):
    """Raised when a grid file is missing, unreadable or malformed."""

    pass


class EmptyGridFileError(GridFileError):
    """Raised when a grid file contains no data at all."""

    pass


class GridAllocationError(LakeParamError):
    """Raised when a working grid or bin array cannot be allocated."""

    def __init__(self, structure: str) -> None:
        self.structure = structure
        super().__init__(f"Cannot allocate memory for {structure}")


class NoValidDataError(LakeParamError):
    """Raised when a grid cell has too few active (non-nodata) cells."""

    def __init__(self, grid_id: str, active_cells: int) -> None:
        self.grid_id = grid_id
        self.active_cells = active_cells
        super().__init__(f"No valid data in grid cell {grid_id} ({active_cells} active cells)")


class FillLimitError(LakeParamError):
    """Raised when sink and flat elimination exceeds its raise budget."""

    pass


class ProfileConsistencyError(LakeParamError):
    """Raised when the assembled profile does not conserve wetland and lake area."""

    def __init__(self, expected: float, actual: float) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Total wetland fraction does not match: profile ends at {actual:.6f}, "
            f"expected {expected:.6f} (difference {actual - expected:.3e})"
        )
