"""
Core functionality for lake and wetland profile generation.

This module contains core functionality for:
- Grid storage and ASCII grid input
- Clamped 8-neighbor topology
- Sink and flat elimination
- Multiple flow direction routing
- Topographic wetness index and classification
- Lake/wetland profile binning and output
"""

from .ascii_grid import read_ascii_grid, write_ascii_grid
from .exceptions import (
    EmptyGridFileError,
    FillLimitError,
    GridAllocationError,
    GridFileError,
    LakeParamError,
    NoValidDataError,
    ProfileConsistencyError,
)
from .fill import fill_sinks_and_flats
from .geodesy import cell_dimensions, great_circle_distance
from .grid import ElevationGrid, GridHeader, allocate_grid
from .output_writer import OutputSchema, format_profile, parse_schema, write_profile
from .pipeline import PipelineRun, create_lake_profile, create_lake_profile_from_file
from .profile import (
    LakeProfile,
    ProfileBin,
    ProfilePoint,
    WetlandCell,
    assemble_profile,
    build_profile,
    build_wetland_bins,
    lake_depth_from_area,
    wetland_bin_count,
)
from .ranking import RankedItem, rank_cells, ranked_indices
from .routing import outflow_fractions, route_mfd_flow
from .topology import NEIGHBOR_OFFSETS, NeighborTopology, neighbor_distances
from .wetness import CellClass, WetnessResult, compute_wetness, tan_beta_floor

__all__ = [
    # Grids and input
    "ElevationGrid",
    "GridHeader",
    "allocate_grid",
    "read_ascii_grid",
    "write_ascii_grid",
    "cell_dimensions",
    "great_circle_distance",
    # Topology
    "NEIGHBOR_OFFSETS",
    "NeighborTopology",
    "neighbor_distances",
    # Terrain stages
    "fill_sinks_and_flats",
    "RankedItem",
    "rank_cells",
    "ranked_indices",
    "outflow_fractions",
    "route_mfd_flow",
    "CellClass",
    "WetnessResult",
    "compute_wetness",
    "tan_beta_floor",
    # Profile
    "LakeProfile",
    "ProfileBin",
    "ProfilePoint",
    "WetlandCell",
    "assemble_profile",
    "build_profile",
    "build_wetland_bins",
    "lake_depth_from_area",
    "wetland_bin_count",
    # Pipeline
    "PipelineRun",
    "create_lake_profile",
    "create_lake_profile_from_file",
    # Output
    "OutputSchema",
    "format_profile",
    "parse_schema",
    "write_profile",
    # Errors
    "LakeParamError",
    "GridFileError",
    "EmptyGridFileError",
    "GridAllocationError",
    "NoValidDataError",
    "FillLimitError",
    "ProfileConsistencyError",
]
