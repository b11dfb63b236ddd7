"""
Typer CLI application for lakeparam.

Reads the DEM of one hydrologic model grid cell, computes its lake/wetland
elevation-area profile and prints it to standard output in the LAKE or SEA
lake parameter layout. Diagnostics and logs go to stderr.
"""

import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from lakeparam.cli.output import RunSummary, print_summary
from lakeparam.config import ENV_CONFIG_FILE, LakeParamConfig, load_config
from lakeparam.core import (
    ElevationGrid,
    GridFileError,
    LakeParamError,
    NoValidDataError,
    PipelineRun,
    parse_schema,
    read_ascii_grid,
    write_ascii_grid,
    write_profile,
)

# Initialize Typer app
app = typer.Typer(
    name="lakeparam",
    help="Lake and wetland parameter profiles from grid-cell DEMs",
    no_args_is_help=True,
    add_completion=False,
)

# Diagnostics go to stderr; stdout holds the profile only
console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """
    Configure logging level based on verbosity flags.

    Args:
        verbose: Enable debug logging
        quiet: Suppress all logging except errors
    """
    if quiet:
        logging.getLogger().setLevel(logging.ERROR)
    elif verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def _resolve_config(config_file: Path | None) -> LakeParamConfig:
    """Load the config from the option, then the environment, else defaults."""
    if config_file is None and os.getenv(ENV_CONFIG_FILE):
        config_file = Path(os.getenv(ENV_CONFIG_FILE)).expanduser()
        logger.debug(f"Using configuration from {ENV_CONFIG_FILE}: {config_file}")

    if config_file is None:
        return LakeParamConfig()
    return load_config(config_file)


@app.command()
def main(
    dem_file: Annotated[
        Path,
        typer.Argument(help="DEM (elevation) floating point grid with Arc/Info ASCII header"),
    ],
    grid_id: Annotated[
        str,
        typer.Argument(help="Number of the hydrologic model grid cell, echoed into the output"),
    ],
    schema: Annotated[
        str,
        typer.Argument(help="Output layout: SEA (wetness index profile) or LAKE (bathymetric lake profile)"),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help=f"TOML configuration file (default: ${ENV_CONFIG_FILE})"),
    ] = None,
    filled_dem: Annotated[
        Path | None,
        typer.Option("--filled-dem", help="Also write the sink-filled DEM to this ASCII grid file"),
    ] = None,
    summary: Annotated[
        bool,
        typer.Option("--summary", help="Print classification and profile statistics to stderr"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress log output except errors"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed progress"),
    ] = False,
) -> None:
    """
    Compute the lake parameter profile for DEM_FILE and print it to stdout.

    \b
    EXAMPLES:
        lakeparam cell_1042.asc 1042 LAKE
        lakeparam cell_1042.asc 1042 SEA --summary
        lakeparam cell_1042.asc 1042 SEA --config lakeparam.toml
    """
    _setup_logging(verbose=verbose, quiet=quiet)

    output_schema = parse_schema(schema)
    if output_schema is None:
        console.print(f"[yellow]Output option is not recognized:[/yellow] '{schema}' (use SEA or LAKE)")
        raise typer.Exit(0)

    try:
        config = _resolve_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(2) from e

    try:
        grid = read_ascii_grid(dem_file)
        run = PipelineRun.prepare(grid, grid_id, config)
        profile = run.run()
    except NoValidDataError as e:
        console.print(f"[yellow]No valid data in grid cell {e.grid_id}[/yellow]")
        raise typer.Exit(0) from e
    except GridFileError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except LakeParamError as e:
        logger.error(f"Grid cell {grid_id} failed: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    write_profile(profile, output_schema)

    if filled_dem is not None:
        write_ascii_grid(filled_dem, ElevationGrid(header=grid.header, values=run.filled))
        logger.info(f"Wrote filled DEM to {filled_dem}")

    if summary:
        print_summary(console, RunSummary.from_profile(profile))
