"""Sparse, unbounded Conway's Game of Life implementation."""

__version__ = "0.1.0"

from .core.coord import Coord, Neighborhood
from .core.grid import CellState, Grid
from .core.patterns import Pattern, PatternFormatError, PatternLibrary, load_grid, load_grid_or_empty
from .core.game import GameOfLife
from .core.settings import Settings
from .config import configure_logging

__all__ = [
    "Coord",
    "Neighborhood",
    "CellState",
    "Grid",
    "Pattern",
    "PatternFormatError",
    "PatternLibrary",
    "load_grid",
    "load_grid_or_empty",
    "GameOfLife",
    "Settings",
    "configure_logging",
]
