"""
DEM-to-profile pipeline for a single hydrologic model grid cell.

A PipelineRun owns every working grid of one invocation and runs the stages
in a fixed order:

1. Build the clamped neighbor topology
2. Fill sinks and flats
3. Rank active cells by filled elevation
4. Route flow with the multiple flow direction algorithm
5. Compute tan(beta), wetness index, classes and relief
6. Bin wetland and lake cells into the elevation-area profile

All grids share one row-major ``[row, col]`` layout, so no stage remaps
coordinates. Nothing is kept between runs.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from lakeparam.config.schema import LakeParamConfig
from lakeparam.core.ascii_grid import read_ascii_grid
from lakeparam.core.exceptions import NoValidDataError
from lakeparam.core.fill import fill_sinks_and_flats
from lakeparam.core.geodesy import cell_dimensions
from lakeparam.core.grid import ElevationGrid
from lakeparam.core.profile import LakeProfile, build_profile
from lakeparam.core.ranking import RankedItem, rank_cells
from lakeparam.core.routing import route_mfd_flow
from lakeparam.core.topology import NeighborTopology, neighbor_distances
from lakeparam.core.wetness import WetnessResult, compute_wetness

logger = logging.getLogger(__name__)


@dataclass
class PipelineRun:
    """Working state of one pipeline invocation."""

    grid_id: str
    grid: ElevationGrid
    config: LakeParamConfig
    dx: float
    dy: float
    topology: NeighborTopology
    filled: np.ndarray | None = None
    elevation_order: list[RankedItem] = field(default_factory=list)
    flow: np.ndarray | None = None
    wetness: WetnessResult | None = None
    profile: LakeProfile | None = None

    @classmethod
    def prepare(
        cls,
        grid: ElevationGrid,
        grid_id: str,
        config: LakeParamConfig | None = None,
        cell_size: tuple[float, float] | None = None,
    ) -> "PipelineRun":
        """
        Validate the input grid and set up a run.

        Args:
            grid: Elevation grid for the model grid cell
            grid_id: Identifier echoed into the output
            config: Pipeline constants (defaults if omitted)
            cell_size: Metric (dx, dy); derived from the header when omitted

        Raises:
            NoValidDataError: If the grid has fewer active cells than required
        """
        config = config or LakeParamConfig()

        active_cells = grid.active_count
        if active_cells < config.profile.min_active_cells:
            raise NoValidDataError(grid_id, active_cells)

        if cell_size is None:
            dx, dy = cell_dimensions(grid.header, config.terrain.earth_radius_km)
        else:
            dx, dy = cell_size

        logger.info(
            f"Grid cell {grid_id}: {grid.header.nrows}x{grid.header.ncols} cells, "
            f"{active_cells} active, cell size {dx:.2f} x {dy:.2f} m"
        )

        return cls(
            grid_id=grid_id,
            grid=grid,
            config=config,
            dx=dx,
            dy=dy,
            topology=NeighborTopology.build(grid.header.nrows, grid.header.ncols),
        )

    @property
    def active(self) -> np.ndarray:
        return self.grid.active

    def fill(self) -> np.ndarray:
        terrain = self.config.terrain
        self.filled = fill_sinks_and_flats(
            self.grid.values,
            self.active,
            self.topology,
            increment=terrain.fill_increment,
            max_raises=terrain.fill_revisit_factor * self.topology.size,
        )
        return self.filled

    def rank(self) -> list[RankedItem]:
        self.elevation_order = rank_cells(self.filled, self.active)
        return self.elevation_order

    def route(self) -> np.ndarray:
        self.flow = route_mfd_flow(
            self.filled,
            self.active,
            self.topology,
            neighbor_distances(self.dx, self.dy),
            cell_area=self.dx * self.dy,
            order=self.elevation_order,
            exponent=self.config.terrain.flow_exponent,
        )
        return self.flow

    def compute_wetness(self) -> WetnessResult:
        classification = self.config.classification
        self.wetness = compute_wetness(
            self.filled,
            self.flow,
            self.active,
            self.dx,
            self.dy,
            self.elevation_order,
            vertical_resolution=self.config.terrain.vertical_resolution,
            wetland_threshold=classification.wetland_threshold,
            water_threshold=classification.water_threshold,
            nodata=self.grid.header.nodata,
        )
        return self.wetness

    def build_profile(self) -> LakeProfile:
        self.profile = build_profile(
            self.grid_id,
            self.wetness,
            self.filled,
            self.dx,
            self.dy,
            classification=self.config.classification,
            config=self.config.profile,
        )
        return self.profile

    def run(self) -> LakeProfile:
        """Run every stage and return the validated profile."""
        self.fill()
        self.rank()
        self.route()
        self.compute_wetness()
        return self.build_profile()


def create_lake_profile(
    grid: ElevationGrid,
    grid_id: str,
    config: LakeParamConfig | None = None,
    cell_size: tuple[float, float] | None = None,
) -> LakeProfile:
    """
    Compute the lake/wetland profile of one grid cell.

    Args:
        grid: Elevation grid
        grid_id: Identifier echoed into the output
        config: Pipeline constants (defaults if omitted)
        cell_size: Metric (dx, dy); derived from the header when omitted

    Returns:
        Validated LakeProfile

    Raises:
        NoValidDataError: If the grid holds too few active cells
        FillLimitError: If sink filling exceeds its raise budget
        ProfileConsistencyError: If the profile fails area conservation
        GridAllocationError: If a working grid cannot be allocated
    """
    return PipelineRun.prepare(grid, grid_id, config, cell_size).run()


def create_lake_profile_from_file(
    dem_path: Path,
    grid_id: str,
    config: LakeParamConfig | None = None,
) -> LakeProfile:
    """Read an ASCII DEM and compute its profile. See create_lake_profile."""
    grid = read_ascii_grid(dem_path)
    return create_lake_profile(grid, grid_id, config)
