"""Core cellular automata logic."""

from .coord import Coord, Neighborhood
from .grid import CellState, Grid
from .patterns import (
    Pattern,
    PatternFormatError,
    PatternLibrary,
    load_grid,
    load_grid_or_empty,
    parse_plaintext,
    parse_rle,
)
from .settings import Settings
from .game import GameOfLife

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
    "parse_plaintext",
    "parse_rle",
    "Settings",
    "GameOfLife",
]
