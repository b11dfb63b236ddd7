"""
Typer CLI for lakeparam.

This module exports the Typer application that provides the command-line
interface for lake parameter profile generation.
"""

from .main import app

__all__ = ["app"]
