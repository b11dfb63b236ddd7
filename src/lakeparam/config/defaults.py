"""
Default values and environment variables for lakeparam configuration.

This module centralizes the numeric constants of the DEM-to-profile pipeline
so the schema, the core algorithms and the CLI agree on one set of values.
"""

# Environment variable naming a TOML configuration file
ENV_CONFIG_FILE = "LAKEPARAM_CONFIG"

# Wetness index classification thresholds
DEFAULT_WETLAND_THRESHOLD = 13552.0
DEFAULT_WATER_THRESHOLD = 216623.0

# Terrain conditioning and routing
DEFAULT_FILL_INCREMENT = 0.01  # meters
DEFAULT_FILL_REVISIT_FACTOR = 1000  # raises allowed per grid cell
DEFAULT_FLOW_EXPONENT = 1.1
DEFAULT_VERTICAL_RESOLUTION = 2.3  # meters, assumed DEM vertical resolution
DEFAULT_EARTH_RADIUS_KM = 6371.0

# Lake and wetland profile
DEFAULT_LAKE_BINS = 4
DEFAULT_MAX_BIN_AREA_FRACTION = 0.091  # max fraction of grid cell area per wetland bin
DEFAULT_MIN_WETLAND_BINS = 5
DEFAULT_LAKE_AREA_THRESHOLD_KM2 = 40.9375
DEFAULT_SHALLOW_LAKE_INTERCEPT_M = 7.04
DEFAULT_SHALLOW_LAKE_SLOPE = 0.07  # meters of depth lost per km² of lake area
DEFAULT_DEEP_LAKE_DEPTH_M = 4.17
DEFAULT_AREA_TOLERANCE = 1e-5
DEFAULT_SEA_SLOPE_SOURCE = "mean_drop"

# Grids with fewer active cells than this have no usable drainage
DEFAULT_MIN_ACTIVE_CELLS = 2
