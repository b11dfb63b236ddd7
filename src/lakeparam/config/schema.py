"""
Pydantic models for lakeparam configuration files.

This module defines the configuration schema using Pydantic v2. It validates
TOML configuration files and provides type-safe access to the constants used
by the terrain, classification and profile stages.

The configuration hierarchy:
- LakeParamConfig: Root configuration
- TerrainConfig: Sink filling, flow routing and slope constants
- ClassificationConfig: Wetness index thresholds for wetland and open water
- ProfileConfig: Lake depth regression and wetland binning constants
"""

import logging
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from .defaults import (
    DEFAULT_AREA_TOLERANCE,
    DEFAULT_DEEP_LAKE_DEPTH_M,
    DEFAULT_EARTH_RADIUS_KM,
    DEFAULT_FILL_INCREMENT,
    DEFAULT_FILL_REVISIT_FACTOR,
    DEFAULT_FLOW_EXPONENT,
    DEFAULT_LAKE_AREA_THRESHOLD_KM2,
    DEFAULT_LAKE_BINS,
    DEFAULT_MAX_BIN_AREA_FRACTION,
    DEFAULT_MIN_ACTIVE_CELLS,
    DEFAULT_MIN_WETLAND_BINS,
    DEFAULT_SEA_SLOPE_SOURCE,
    DEFAULT_SHALLOW_LAKE_INTERCEPT_M,
    DEFAULT_SHALLOW_LAKE_SLOPE,
    DEFAULT_VERTICAL_RESOLUTION,
    DEFAULT_WATER_THRESHOLD,
    DEFAULT_WETLAND_THRESHOLD,
)

logger = logging.getLogger(__name__)


class TerrainConfig(BaseModel):
    """
    Constants for DEM conditioning and flow routing.

    These control how sinks and flats are removed, how flow is split between
    downslope neighbors and which slope floor protects the wetness index.
    """

    fill_increment: float = Field(
        default=DEFAULT_FILL_INCREMENT, gt=0, description="Elevation added above the lowest neighbor of a sink (m)"
    )
    fill_revisit_factor: int = Field(
        default=DEFAULT_FILL_REVISIT_FACTOR, ge=1, description="Sink raises allowed per grid cell before aborting"
    )
    flow_exponent: float = Field(default=DEFAULT_FLOW_EXPONENT, gt=0, description="Slope exponent for MFD routing")
    vertical_resolution: float = Field(
        default=DEFAULT_VERTICAL_RESOLUTION, gt=0, description="Nominal vertical resolution of the DEM (m)"
    )
    earth_radius_km: float = Field(default=DEFAULT_EARTH_RADIUS_KM, gt=0, description="Spherical Earth radius (km)")


class ClassificationConfig(BaseModel):
    """
    Wetness index thresholds separating upland, wetland and open water.

    A cell is open water when its index is at least ``water_threshold`` and
    wetland when it lies in ``[wetland_threshold, water_threshold)``.
    """

    wetland_threshold: float = Field(default=DEFAULT_WETLAND_THRESHOLD, description="Lowest wetland wetness index")
    water_threshold: float = Field(default=DEFAULT_WATER_THRESHOLD, description="Lowest open-water wetness index")

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "ClassificationConfig":
        """Ensure the water threshold lies above the wetland threshold."""
        if self.water_threshold <= self.wetland_threshold:
            raise ValueError(
                f"water_threshold ({self.water_threshold}) must be greater than "
                f"wetland_threshold ({self.wetland_threshold})"
            )
        return self


class ProfileConfig(BaseModel):
    """Constants for lake depth estimation and wetland binning."""

    lake_bins: int = Field(default=DEFAULT_LAKE_BINS, ge=1, description="Number of equal-depth lake bins")
    max_bin_area_fraction: float = Field(
        default=DEFAULT_MAX_BIN_AREA_FRACTION, gt=0, le=1, description="Max grid cell area fraction per wetland bin"
    )
    min_wetland_bins: int = Field(default=DEFAULT_MIN_WETLAND_BINS, ge=1, description="Minimum wetland bin count")
    lake_area_threshold_km2: float = Field(
        default=DEFAULT_LAKE_AREA_THRESHOLD_KM2, gt=0, description="Lake area separating shallow and deep regimes"
    )
    shallow_lake_intercept_m: float = Field(default=DEFAULT_SHALLOW_LAKE_INTERCEPT_M, gt=0)
    shallow_lake_slope: float = Field(default=DEFAULT_SHALLOW_LAKE_SLOPE, ge=0)
    deep_lake_depth_m: float = Field(default=DEFAULT_DEEP_LAKE_DEPTH_M, gt=0)
    area_tolerance: float = Field(
        default=DEFAULT_AREA_TOLERANCE, gt=0, description="Allowed mismatch of the final cumulative area fraction"
    )
    sea_slope_source: Literal["mean_drop", "tan_beta"] = Field(
        default=DEFAULT_SEA_SLOPE_SOURCE, description="Per-bin quantity written to the SEA slope column"
    )
    min_active_cells: int = Field(
        default=DEFAULT_MIN_ACTIVE_CELLS, ge=1, description="Fewer active cells than this means no valid data"
    )


class LakeParamConfig(BaseModel):
    """
    Root configuration for a lakeparam run.

    Every section is optional in the TOML file; omitted sections use defaults.
    """

    terrain: TerrainConfig = Field(default_factory=TerrainConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)


def load_config(config_path: Path) -> LakeParamConfig:
    """
    Load and validate a lakeparam configuration file.

    Args:
        config_path: Path to a TOML file with optional ``[terrain]``,
            ``[classification]`` and ``[profile]`` tables

    Returns:
        Validated LakeParamConfig instance

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the TOML file is malformed
        pydantic.ValidationError: If the configuration is invalid

    Example:
        >>> config = load_config(Path("lakeparam.toml"))
        >>> print(config.classification.water_threshold)
        216623.0
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in configuration file: {e}") from e

    config = LakeParamConfig.model_validate(data)

    logger.debug(f"Loaded configuration: {config.model_dump()}")

    return config
