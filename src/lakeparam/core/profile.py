"""
Lake and wetland elevation-area profile assembly.

The profile handed to the lake model runs from the lake bottom to the top of
the wetland:

1. Lake bins: the lake depth comes from a regional depth-area regression and
   is split into equal-depth bins. A parabolic bathymetry gives each bin the
   area ``water_fraction * sqrt(depth / lake_depth)``.
2. Wetland bins: wetland cells, walked from the highest wetness index down,
   are grouped into bins holding at most a fixed share of the grid cell.
   Each bin records mean wetness index, tan(beta) and relief, and the lowest
   elevation of its slice of the elevation-ranked wetland cells.

Every profile point carries two elevations. The bathymetric one (used by the
LAKE schema) is the bin elevation above the lowest wetland cell, stacked on
the lake depth. The gradient one (used by the SEA schema) rescales the bin's
wetness index onto an elevation range proportional to the top wetness index.
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from lakeparam.config.defaults import DEFAULT_MAX_BIN_AREA_FRACTION, DEFAULT_MIN_WETLAND_BINS
from lakeparam.config.schema import ClassificationConfig, ProfileConfig
from lakeparam.core.exceptions import ProfileConsistencyError
from lakeparam.core.grid import allocate_grid
from lakeparam.core.ranking import ranked_indices
from lakeparam.core.wetness import CellClass, WetnessResult

logger = logging.getLogger(__name__)


@dataclass
class WetlandCell:
    """Attributes of a wetland cell taken in wetness-index order."""

    wetness_index: float
    tan_beta: float
    mean_drop: float


@dataclass
class ProfileBin:
    """Aggregated wetland segment of the profile."""

    area_fraction: float
    wetness_index: float
    tan_beta: float
    mean_drop: float
    elevation: float  # lowest elevation of the bin's slice (m)
    cell_count: int


@dataclass
class ProfilePoint:
    """One cumulative entry of the elevation-area profile."""

    bathymetric_elevation: float
    gradient_elevation: float
    area_fraction: float
    wetness_index: float
    slope: float


@dataclass
class LakeProfile:
    """Elevation-area profile for one hydrologic model grid cell."""

    grid_id: str
    lake_depth: float
    lake_bins: int
    wetland_bins: int
    water_fraction: float
    wetland_fraction: float
    upland_fraction: float = 0.0
    active_cells: int = 0
    points: list[ProfilePoint] = field(default_factory=list)

    @property
    def nbins(self) -> int:
        return len(self.points)

    @property
    def is_degenerate(self) -> bool:
        """True when the grid cell has neither lake nor wetland."""
        return not self.points


def lake_area_km2(water_cells: int, dx: float, dy: float) -> float:
    """Open-water area in km² from the number of water cells."""
    return water_cells * dx * dy / (1000.0 * 1000.0)


def lake_depth_from_area(area_km2: float, config: ProfileConfig | None = None) -> float:
    """
    Estimate lake depth (m) from lake area (km²) with a two-segment regression.

    Below the area threshold depth decreases linearly with area; above it
    depth is constant.
    """
    config = config or ProfileConfig()
    if area_km2 < config.lake_area_threshold_km2:
        return config.shallow_lake_intercept_m - config.shallow_lake_slope * area_km2
    return config.deep_lake_depth_m


def wetland_bin_count(
    wetland_fraction: float,
    max_bin_area_fraction: float = DEFAULT_MAX_BIN_AREA_FRACTION,
    min_bins: int = DEFAULT_MIN_WETLAND_BINS,
) -> tuple[int, float]:
    """
    Choose the number of wetland bins and the area fraction each should hold.

    Args:
        wetland_fraction: Fraction of the grid cell classed as wetland
        max_bin_area_fraction: Largest area fraction allowed in one bin
        min_bins: Minimum number of bins

    Returns:
        Tuple of (bin count, per-bin area fraction); (0, 0.0) without wetland
    """
    if wetland_fraction <= 0.0:
        return 0, 0.0
    count = max(math.ceil(wetland_fraction / max_bin_area_fraction), min_bins)
    return count, wetland_fraction / count


def build_wetland_bins(
    cells: list[WetlandCell],
    elevations: list[float],
    active_cells: int,
    wetland_fraction: float,
    config: ProfileConfig | None = None,
) -> list[ProfileBin]:
    """
    Group wetland cells into equal-area bins.

    Cells are consumed in the given (descending wetness index) order and added
    to the current bin until it holds its share of the grid cell area. The
    last bin takes whatever cells remain.

    Args:
        cells: Wetland cells in descending wetness-index order
        elevations: Elevations of the same wetland cells, ascending
        active_cells: Number of active cells in the grid
        wetland_fraction: Fraction of active cells classed as wetland
        config: Profile constants

    Returns:
        List of ProfileBin, at most the chosen bin count

    Raises:
        ValueError: If ``cells`` and ``elevations`` differ in length
    """
    config = config or ProfileConfig()
    if len(cells) != len(elevations):
        raise ValueError(f"Got {len(cells)} wetland cells but {len(elevations)} elevations")

    nbins, per_bin = wetland_bin_count(wetland_fraction, config.max_bin_area_fraction, config.min_wetland_bins)
    if nbins == 0 or not cells:
        return []

    # rows: cell count, wetness index sum, tan(beta) sum, mean drop sum
    sums = allocate_grid("wetland bin accumulators", (4, nbins))
    target_cells = per_bin * active_cells * (1.0 - 1e-9)

    bins: list[ProfileBin] = []
    current = 0
    first_elevation = elevations[0]
    for i, cell in enumerate(cells):
        if sums[0, current] == 0:
            first_elevation = elevations[i]
        sums[:, current] += (1.0, cell.wetness_index, cell.tan_beta, cell.mean_drop)

        last_cell = i == len(cells) - 1
        if last_cell or (current < nbins - 1 and sums[0, current] >= target_cells):
            count = sums[0, current]
            bins.append(
                ProfileBin(
                    area_fraction=count / active_cells,
                    wetness_index=sums[1, current] / count,
                    tan_beta=sums[2, current] / count,
                    mean_drop=sums[3, current] / count,
                    elevation=first_elevation,
                    cell_count=int(count),
                )
            )
            current += 1

    logger.debug(f"Built {len(bins)} wetland bins (target {nbins}, {per_bin:.5f} of cell each)")
    return bins


def validate_profile(points: list[ProfilePoint], expected_area: float, tolerance: float) -> None:
    """
    Check that the profile ends at the total water plus wetland fraction.

    Raises:
        ProfileConsistencyError: If the final cumulative area is off by more
            than ``tolerance``
    """
    if not points:
        return
    actual = points[-1].area_fraction
    if abs(actual - expected_area) > tolerance:
        raise ProfileConsistencyError(expected=expected_area, actual=actual)


def assemble_profile(
    grid_id: str,
    water_fraction: float,
    wetland_fraction: float,
    lake_depth: float,
    wetland_bins: list[ProfileBin],
    top_cell: WetlandCell | None,
    min_elevation: float,
    water_threshold: float,
    config: ProfileConfig | None = None,
) -> LakeProfile:
    """
    Stack lake bins and wetland bins into one cumulative profile.

    Args:
        grid_id: Identifier of the hydrologic model grid cell
        water_fraction: Fraction of active cells classed as open water
        wetland_fraction: Fraction of active cells classed as wetland
        lake_depth: Lake depth (m); ignored without open water
        wetland_bins: Wetland bins in descending wetness-index order
        top_cell: Wetland cell with the highest wetness index, if any
        min_elevation: Lowest wetland elevation (m)
        water_threshold: Open-water wetness index threshold
        config: Profile constants

    Returns:
        LakeProfile with one point per lake and wetland bin

    Raises:
        ProfileConsistencyError: If the final cumulative area does not match
            ``water_fraction + wetland_fraction``
    """
    config = config or ProfileConfig()

    def slope_of(mean_drop: float, tan_beta: float) -> float:
        return mean_drop if config.sea_slope_source == "mean_drop" else tan_beta

    top_twi = top_cell.wetness_index if top_cell else 0.0
    top_slope = slope_of(top_cell.mean_drop, top_cell.tan_beta) if top_cell else 0.0

    points: list[ProfilePoint] = []
    lake_bins = config.lake_bins if water_fraction > 0.0 else 0
    if lake_bins == 0:
        lake_depth = 0.0

    for i in range(1, lake_bins + 1):
        depth = lake_depth * i / lake_bins
        points.append(
            ProfilePoint(
                bathymetric_elevation=depth,
                gradient_elevation=depth,
                area_fraction=water_fraction * math.sqrt(i / lake_bins),
                wetness_index=top_twi,
                slope=top_slope,
            )
        )

    area = water_fraction if lake_bins else 0.0
    elevation_range = 2.0 * top_twi / water_threshold
    twi_span = top_twi - wetland_bins[-1].wetness_index if wetland_bins else 0.0

    for wetland_bin in wetland_bins:
        area += wetland_bin.area_fraction
        if not points:
            gradient_elevation = elevation_range
        else:
            ratio = (top_twi - wetland_bin.wetness_index) / twi_span if twi_span > 0.0 else 1.0
            gradient_elevation = lake_depth + elevation_range * ratio
        points.append(
            ProfilePoint(
                bathymetric_elevation=wetland_bin.elevation - min_elevation + lake_depth,
                gradient_elevation=gradient_elevation,
                area_fraction=area,
                wetness_index=wetland_bin.wetness_index,
                slope=slope_of(wetland_bin.mean_drop, wetland_bin.tan_beta),
            )
        )

    validate_profile(points, water_fraction + wetland_fraction, config.area_tolerance)

    return LakeProfile(
        grid_id=grid_id,
        lake_depth=lake_depth,
        lake_bins=lake_bins,
        wetland_bins=len(wetland_bins),
        water_fraction=water_fraction,
        wetland_fraction=wetland_fraction,
        points=points,
    )


def build_profile(
    grid_id: str,
    wetness: WetnessResult,
    filled: np.ndarray,
    dx: float,
    dy: float,
    classification: ClassificationConfig | None = None,
    config: ProfileConfig | None = None,
) -> LakeProfile:
    """
    Build the lake/wetland profile from the classified wetness fields.

    Args:
        grid_id: Identifier of the hydrologic model grid cell
        wetness: Output of the wetness stage
        filled: (rows, cols) filled elevation grid
        dx: Cell width (m)
        dy: Cell height (m)
        classification: Wetness index thresholds
        config: Profile constants

    Returns:
        Validated LakeProfile
    """
    classification = classification or ClassificationConfig()
    config = config or ProfileConfig()

    water_fraction = wetness.water_fraction
    wetland_fraction = wetness.wetland_fraction

    lake_depth = 0.0
    if water_fraction > 0.0:
        area = lake_area_km2(wetness.water_cells, dx, dy)
        lake_depth = lake_depth_from_area(area, config)
        logger.info(f"Lake area {area:.3f} km², depth {lake_depth:.3f} m")

    wetland_mask = wetness.cell_class == CellClass.WETLAND
    by_twi = ranked_indices(wetness.wetness_index, wetland_mask)[::-1]
    by_elevation = ranked_indices(filled, wetland_mask)

    cells = [
        WetlandCell(
            wetness_index=float(wetness.wetness_index.flat[index]),
            tan_beta=float(wetness.tan_beta.flat[index]),
            mean_drop=float(wetness.mean_drop.flat[index]),
        )
        for index in by_twi
    ]
    elevations = [float(filled.flat[index]) for index in by_elevation]

    wetland_bins = build_wetland_bins(cells, elevations, wetness.active_cells, wetland_fraction, config)

    profile = assemble_profile(
        grid_id=grid_id,
        water_fraction=water_fraction,
        wetland_fraction=wetland_fraction,
        lake_depth=lake_depth,
        wetland_bins=wetland_bins,
        top_cell=cells[0] if cells else None,
        min_elevation=elevations[0] if elevations else 0.0,
        water_threshold=classification.water_threshold,
        config=config,
    )
    profile.upland_fraction = wetness.upland_fraction
    profile.active_cells = wetness.active_cells

    logger.info(f"Profile for grid cell {grid_id}: {profile.lake_bins} lake bins, {profile.wetland_bins} wetland bins")
    return profile
