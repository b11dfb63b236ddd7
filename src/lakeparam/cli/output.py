"""
Diagnostic output for the lakeparam CLI.

Standard output carries only the lake parameter profile, so every
human-readable message here goes to a Rich console on stderr.
"""

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from lakeparam.core.profile import LakeProfile

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Classification and profile statistics of one grid cell."""

    grid_id: str
    active_cells: int
    water_fraction: float
    wetland_fraction: float
    upland_fraction: float
    lake_depth: float
    lake_bins: int
    wetland_bins: int

    def __post_init__(self) -> None:
        """Validate summary fields."""
        if self.active_cells < 0:
            raise ValueError(f"active_cells must be non-negative, got {self.active_cells}")
        for name in ("water_fraction", "wetland_fraction", "upland_fraction"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    @classmethod
    def from_profile(cls, profile: LakeProfile) -> "RunSummary":
        return cls(
            grid_id=profile.grid_id,
            active_cells=profile.active_cells,
            water_fraction=profile.water_fraction,
            wetland_fraction=profile.wetland_fraction,
            upland_fraction=profile.upland_fraction,
            lake_depth=profile.lake_depth,
            lake_bins=profile.lake_bins,
            wetland_bins=profile.wetland_bins,
        )


def print_summary(console: Console, summary: RunSummary) -> None:
    """Print a run summary table."""
    table = Table(title=f"Grid cell {summary.grid_id}", show_header=True, header_style="bold cyan")
    table.add_column("Quantity")
    table.add_column("Value", justify="right")

    table.add_row("Active cells", f"{summary.active_cells:,}")
    table.add_row("Open water fraction", f"{summary.water_fraction:.5f}")
    table.add_row("Wetland fraction", f"{summary.wetland_fraction:.5f}")
    table.add_row("Upland fraction", f"{summary.upland_fraction:.5f}")
    table.add_row("Lake depth (m)", f"{summary.lake_depth:.3f}")
    table.add_row("Lake bins", str(summary.lake_bins))
    table.add_row("Wetland bins", str(summary.wetland_bins))

    console.print(table)
    logger.debug(f"Printed summary for grid cell {summary.grid_id}")
