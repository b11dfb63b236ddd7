"""
Output writer for lake parameter profiles.

Writes a LakeProfile in one of the two text layouts read by the VIC lake
model:

- LAKE: ``<gridcell> 1 <nbins> <depth> 0.01 <depth> 1.0`` followed by one line
  of ``<elevation> <area>`` pairs
- SEA: ``<gridcell> 0 <nbins> <depth> 0.01 <depth> 1.0`` followed by one line
  of ``<elevation> <area> <wetness index> <slope>`` quadruples

Profile points are written from the top of the wetland down to the lake
bottom, the reverse of the order they are built in.
"""

import logging
import sys
from enum import Enum
from typing import TextIO

from lakeparam.core.profile import LakeProfile, ProfilePoint

logger = logging.getLogger(__name__)

# Written to the header after the lake depth
MIN_DEPTH_OFFSET = 0.01


class OutputSchema(str, Enum):
    """Supported output layouts."""

    LAKE = "LAKE"
    SEA = "SEA"

    @property
    def lake_flag(self) -> int:
        return 1 if self is OutputSchema.LAKE else 0

    @property
    def values_per_bin(self) -> int:
        return 2 if self is OutputSchema.LAKE else 4


def parse_schema(flag: str) -> OutputSchema | None:
    """Return the schema named by ``flag`` (exact, case-sensitive), or None."""
    try:
        return OutputSchema(flag)
    except ValueError:
        return None


def _format_point(point: ProfilePoint, schema: OutputSchema) -> str:
    if schema is OutputSchema.LAKE:
        return f"{point.bathymetric_elevation:.3f} {point.area_fraction:.5f}"
    return f"{point.gradient_elevation:.3f} {point.area_fraction:.5f} {point.wetness_index:.1f} {point.slope:.4f}"


def format_profile(profile: LakeProfile, schema: OutputSchema) -> list[str]:
    """
    Format a profile as the two output lines of the chosen schema.

    Args:
        profile: Assembled profile
        schema: Output layout

    Returns:
        List of two lines (header and body) without trailing newlines
    """
    if profile.is_degenerate:
        header = f"{profile.grid_id} {schema.lake_flag} 1 {0.0:.3f} 0.01 {0.0:.3f} 1.0"
        body = " ".join(["0.0"] * schema.values_per_bin)
        return [header, body]

    depth = profile.lake_depth + MIN_DEPTH_OFFSET
    header = f"{profile.grid_id} {schema.lake_flag} {profile.nbins} {depth:.3f} 0.01 {depth:.3f} 1.0"
    body = " ".join(_format_point(point, schema) for point in reversed(profile.points))
    return [header, body]


def write_profile(profile: LakeProfile, schema: OutputSchema, stream: TextIO | None = None) -> None:
    """
    Write a formatted profile to ``stream`` (standard output by default).
    """
    stream = stream or sys.stdout
    for line in format_profile(profile, schema):
        stream.write(line + "\n")

    logger.debug(f"Wrote {schema.value} profile for grid cell {profile.grid_id} ({profile.nbins} bins)")
