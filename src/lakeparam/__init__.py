"""
Lake and wetland profile generation for hydrologic model grid cells.

Turns a grid-cell DEM into the elevation-area profile consumed by VIC-style
lake models: sink filling, multiple-flow-direction routing, topographic
wetness index and wetland/lake binning.
"""

__version__ = "0.1.0"
