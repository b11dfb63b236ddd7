"""
Configuration management for lakeparam.

This module provides Pydantic-based configuration schemas for validating
and loading TOML configuration files used by the lakeparam CLI.

Key exports:
- LakeParamConfig: Root configuration
- TerrainConfig: Fill, routing and slope constants
- ClassificationConfig: Wetness index thresholds
- ProfileConfig: Lake depth and wetland binning constants
- load_config(): Load and validate a configuration file
"""

from .defaults import (
    DEFAULT_AREA_TOLERANCE,
    DEFAULT_FILL_INCREMENT,
    DEFAULT_FILL_REVISIT_FACTOR,
    DEFAULT_FLOW_EXPONENT,
    DEFAULT_VERTICAL_RESOLUTION,
    DEFAULT_WATER_THRESHOLD,
    DEFAULT_WETLAND_THRESHOLD,
    ENV_CONFIG_FILE,
)
from .schema import (
    ClassificationConfig,
    LakeParamConfig,
    ProfileConfig,
    TerrainConfig,
    load_config,
)

__all__ = [
    # Main models
    "LakeParamConfig",
    "TerrainConfig",
    "ClassificationConfig",
    "ProfileConfig",
    # Loaders
    "load_config",
    # Defaults
    "DEFAULT_AREA_TOLERANCE",
    "DEFAULT_FILL_INCREMENT",
    "DEFAULT_FILL_REVISIT_FACTOR",
    "DEFAULT_FLOW_EXPONENT",
    "DEFAULT_VERTICAL_RESOLUTION",
    "DEFAULT_WATER_THRESHOLD",
    "DEFAULT_WETLAND_THRESHOLD",
    # Environment variables
    "ENV_CONFIG_FILE",
]
