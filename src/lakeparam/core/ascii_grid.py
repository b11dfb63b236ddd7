"""
Reader for ESRI ASCII (Arc/Info) grid files.

The file starts with a six-line header::

    ncols         4
    nrows         3
    xllcorner     20.5
    yllcorner     47.0
    cellsize      0.000833
    NODATA_value  -9999

followed by ``nrows * ncols`` whitespace-separated values in row-major order.
Line breaks inside the body are not significant. The origin may also be given
as ``xllcenter``/``yllcenter``; it is then shifted by half a cell to the lower
left corner.
"""

import logging
from pathlib import Path

import numpy as np

from lakeparam.core.exceptions import EmptyGridFileError, GridFileError
from lakeparam.core.grid import ElevationGrid, GridHeader

logger = logging.getLogger(__name__)

HEADER_KEYS = ("ncols", "nrows", "xllcorner", "yllcorner", "cellsize", "nodata_value")

# Cell-center spellings of the origin keys
CENTER_KEYS = {"xllcorner": "xllcenter", "yllcorner": "yllcenter"}


def _parse_header(lines: list[str], path: Path) -> GridHeader:
    values: dict[str, str] = {}
    centered: set[str] = set()
    for expected, line in zip(HEADER_KEYS, lines, strict=True):
        parts = line.split()
        key = parts[0].lower() if parts else ""
        if len(parts) == 2 and key == CENTER_KEYS.get(expected):
            centered.add(expected)
        elif len(parts) != 2 or key != expected:
            raise GridFileError(f"Malformed header line in {path}: expected '{expected} <value>', got '{line.strip()}'")
        values[expected] = parts[1]

    try:
        cellsize = float(values["cellsize"])
        origin = {
            key: float(values[key]) - (cellsize / 2 if key in centered else 0.0) for key in ("xllcorner", "yllcorner")
        }
        return GridHeader(
            ncols=int(values["ncols"]),
            nrows=int(values["nrows"]),
            xllcorner=origin["xllcorner"],
            yllcorner=origin["yllcorner"],
            cellsize=cellsize,
            nodata=float(values["nodata_value"]),
        )
    except ValueError as e:
        raise GridFileError(f"Invalid header value in {path}: {e}") from e


def read_ascii_grid(path: Path) -> ElevationGrid:
    """
    Read an ASCII elevation grid.

    Negative elevations are treated as missing and replaced with the header's
    nodata value.

    Args:
        path: Path to the grid file

    Returns:
        ElevationGrid with float64 values of shape (nrows, ncols)

    Raises:
        GridFileError: If the file is missing, unreadable or malformed
        EmptyGridFileError: If the file is empty
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise GridFileError(f"Cannot open/read grid file {path}: {e}") from e

    if not text.strip():
        raise EmptyGridFileError(f"Grid file is empty: {path}")

    lines = text.splitlines()
    if len(lines) < len(HEADER_KEYS):
        raise GridFileError(f"Grid file {path} has an incomplete header")

    header = _parse_header(lines[: len(HEADER_KEYS)], path)
    if header.ncols < 1 or header.nrows < 1:
        raise GridFileError(f"Grid file {path} declares an empty grid ({header.nrows}x{header.ncols})")

    body = " ".join(lines[len(HEADER_KEYS) :]).split()
    try:
        values = np.array(body, dtype=np.float64)
    except ValueError as e:
        raise GridFileError(f"Non-numeric value in grid file {path}: {e}") from e

    expected = header.nrows * header.ncols
    if values.size != expected:
        raise GridFileError(f"Grid file {path} holds {values.size} values, header declares {expected}")

    values = values.reshape(header.shape)
    values[values < 0] = header.nodata

    logger.info(f"Read {header.nrows}x{header.ncols} grid from {path}")
    return ElevationGrid(header=header, values=values)


def write_ascii_grid(path: Path, grid: ElevationGrid, fmt: str = "%.3f") -> Path:
    """
    Write an elevation grid in ASCII grid format.

    Args:
        path: Destination file
        grid: Grid to write
        fmt: numpy format string for each value

    Returns:
        Path to the written file
    """
    header = grid.header
    path = Path(path)
    with path.open("w") as f:
        f.write(f"ncols         {header.ncols}\n")
        f.write(f"nrows         {header.nrows}\n")
        f.write(f"xllcorner     {header.xllcorner}\n")
        f.write(f"yllcorner     {header.yllcorner}\n")
        f.write(f"cellsize      {header.cellsize}\n")
        f.write(f"NODATA_value  {header.nodata}\n")
        np.savetxt(f, grid.values, fmt=fmt)

    logger.debug(f"Wrote {header.nrows}x{header.ncols} grid to {path}")
    return path
