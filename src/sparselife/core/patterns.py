"""Pattern file decoders and pattern management."""

from typing import Dict, Iterable, List, Tuple, Optional, Any, Union
import json
import logging
import re
from pathlib import Path

from .coord import Coord
from .grid import Grid

logger = logging.getLogger(__name__)

Line = Union[str, bytes]

PLAINTEXT_SUFFIXES = (".txt", ".cells")
RLE_SUFFIXES = (".rle",)

_HEADER_RE = re.compile(r"x\s*=\s*(\d+)\s*,\s*y\s*=\s*(\d+)")
_RULE_RE = re.compile(r"rule\s*=\s*([^\s,]+)", re.IGNORECASE)
_RUN_RE = re.compile(r"(\d*)([A-Za-z])")
_ROW_SKIP_RE = re.compile(r"(\d+)$")
_INVALID_RUN_CHAR_RE = re.compile(r"[^0-9A-Za-z]")


class PatternFormatError(ValueError):
    """Raised when pattern data cannot be decoded."""


def _decode_line(line: Line) -> str:
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    return line.rstrip("\r\n")


def parse_plaintext(lines: Iterable[Line], grid: Optional[Grid] = None, comment_prefix: Optional[str] = None) -> Grid:
    """Decode a plain-text pattern.

    Each line is a row and each character a column; 'O' marks a living
    cell and every other character is ignored. Lines that cannot be
    decoded are skipped.

    Args:
        lines: Pattern lines (str, or bytes in UTF-8)
        grid: Grid to populate (a new one by default)
        comment_prefix: Lines starting with this prefix are not rows

    Returns:
        The populated grid
    """
    if grid is None:
        grid = Grid()

    row = 0
    for line_number, raw in enumerate(lines, start=1):
        try:
            line = _decode_line(raw)
        except UnicodeDecodeError:
            logger.debug("Skipping unreadable line %d", line_number)
            row += 1
            continue

        if comment_prefix is not None and line.startswith(comment_prefix):
            continue

        for col, char in enumerate(line):
            if char == "O":
                grid.set_alive((col, row))
        row += 1

    return grid


def _read_rle_header(lines: Iterable[str], metadata: Dict[str, Any]) -> str:
    """Consume leading comments and return the header line."""
    for line in lines:
        if line.startswith("#"):
            if line.startswith("#N"):
                metadata["name"] = line[2:].strip()
            continue
        if not line.strip():
            continue
        return line
    raise PatternFormatError("invalid file format: missing RLE header line")


def parse_rle(lines: Iterable[Line], grid: Optional[Grid] = None) -> Grid:
    """Decode a run-length encoded pattern.

    The header's width and height are recorded in ``grid.metadata`` but not
    enforced. Each run is an optional count followed by 'b' (dead) or 'o'
    (alive). Everything after '!' is ignored, and whitespace in the body is
    dropped.

    Rows are separated by '$'. A bare '$' ends one row, so each segment
    between separators is one row. A count directly before '$' (as in
    ``o2$o``) skips that many rows, following the usual RLE convention.

    Args:
        lines: Pattern lines (str, or bytes in UTF-8)
        grid: Grid to populate (a new one by default)

    Returns:
        The populated grid

    Raises:
        PatternFormatError: If the header is missing or malformed, a line
            cannot be decoded, a run uses an unknown tag, or the body holds
            a character that is not part of a run
    """
    if grid is None:
        grid = Grid()

    try:
        decoded = [_decode_line(line) for line in lines]
    except UnicodeDecodeError as e:
        raise PatternFormatError(f"could not read RLE line: {e}") from e

    remaining = iter(decoded)
    header = _read_rle_header(remaining, grid.metadata)

    match = _HEADER_RE.search(header)
    if match is None:
        raise PatternFormatError(f"could not parse RLE header: {header!r}")
    grid.metadata["width"] = int(match.group(1))
    grid.metadata["height"] = int(match.group(2))

    rule = _RULE_RE.search(header)
    if rule is not None:
        grid.metadata["rule"] = rule.group(1)
        if rule.group(1).upper() not in ("B3/S23", "23/3"):
            logger.warning("Pattern declares rule %s; simulating B3/S23 anyway", rule.group(1))

    body = "".join("".join(line.split()) for line in remaining)
    body = body.split("!", 1)[0]

    row = 0
    for segment in body.split("$"):
        stray = _INVALID_RUN_CHAR_RE.search(segment)
        if stray is not None:
            raise PatternFormatError(f"unrecognized RLE token {stray.group(0)!r} in row {row}")

        col = 0
        for run in _RUN_RE.finditer(segment):
            count = int(run.group(1)) if run.group(1) else 1
            tag = run.group(2)
            if tag == "o":
                for x in range(col, col + count):
                    grid.set_alive((x, row))
            elif tag != "b":
                raise PatternFormatError(f"unrecognized RLE token {run.group(0)!r} in row {row}")
            col += count

        skip = _ROW_SKIP_RE.search(segment)
        row += int(skip.group(1)) if skip else 1

    return grid


def load_grid(path: Union[str, Path]) -> Grid:
    """Load a grid from a pattern file, choosing the decoder by extension.

    Args:
        path: File ending in .txt, .cells or .rle

    Returns:
        Populated grid

    Raises:
        OSError: If the file cannot be opened or read
        PatternFormatError: If the extension is unsupported or the content
            cannot be decoded
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in PLAINTEXT_SUFFIXES:
        logger.debug("Decoding plain-text pattern %s", path)
        comment_prefix = "!" if suffix == ".cells" else None
        with open(path, "rb") as f:
            return parse_plaintext(f, comment_prefix=comment_prefix)

    if suffix in RLE_SUFFIXES:
        logger.debug("Decoding RLE pattern %s", path)
        with open(path, "rb") as f:
            return parse_rle(f)

    raise PatternFormatError(f"unsupported pattern file extension {suffix!r}: {path}")


def load_grid_or_empty(path: Union[str, Path]) -> Grid:
    """Load a grid from a pattern file, falling back to an empty grid.

    Failures are logged as warnings instead of raised.
    """
    try:
        return load_grid(path)
    except (OSError, PatternFormatError) as e:
        logger.warning("Failed to load pattern from %s, starting empty: %s", path, e)
        return Grid()


class Pattern:
    """Represents a Game of Life pattern."""

    def __init__(
        self,
        name: str,
        cells: List[Tuple[int, int]],
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: List of (x, y) coordinates for living cells
            description: Optional description
            metadata: Optional metadata dictionary
        """
        self.name = name
        self.cells = [Coord(*cell) for cell in cells]
        self.description = description
        self.metadata = metadata or {}

    def apply_to_grid(self, grid: Grid, offset_x: int = 0, offset_y: int = 0, clear: bool = True) -> None:
        """Apply this pattern to a grid.

        Args:
            grid: Target grid
            offset_x: Horizontal offset
            offset_y: Vertical offset
            clear: Whether to clear the grid first
        """
        if clear:
            grid.clear()
        for cell in self.cells:
            grid.set_alive(cell.offset(offset_x, offset_y))

    def to_grid(self, offset_x: int = 0, offset_y: int = 0) -> Grid:
        """Create a new grid holding this pattern."""
        grid = Grid()
        self.apply_to_grid(grid, offset_x, offset_y)
        return grid

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.cells:
            return (0, 0, 0, 0)

        xs, ys = zip(*self.cells)
        return (min(xs), min(ys), max(xs), max(ys))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size.

        Returns:
            Tuple of (width, height)
        """
        min_x, min_y, max_x, max_y = self.get_bounding_box()
        return (max_x - min_x + 1, max_y - min_y + 1)

    def normalize(self) -> "Pattern":
        """Return a new pattern with coordinates normalized to start at (0, 0)."""
        if not self.cells:
            return Pattern(self.name, [], self.description, self.metadata.copy())

        min_x, min_y, _, _ = self.get_bounding_box()
        normalized_cells = [cell.offset(-min_x, -min_y) for cell in self.cells]

        return Pattern(self.name, normalized_cells, self.description, self.metadata.copy())

    def to_dict(self) -> Dict[str, Any]:
        """Convert pattern to dictionary for serialization."""
        return {
            "name": self.name,
            "cells": [list(cell) for cell in self.cells],
            "description": self.description,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pattern":
        """Create pattern from dictionary.

        Args:
            data: Dictionary with pattern data

        Returns:
            New Pattern instance

        Raises:
            ValueError: If the data does not describe a pattern
            KeyError: If a required field is missing
        """
        if not isinstance(data, dict):
            raise ValueError(f"Pattern data must be an object, got {type(data).__name__}")

        cells = data["cells"]
        if not isinstance(cells, list):
            raise ValueError(f"Pattern cells must be a list, got {type(cells).__name__}")
        for cell in cells:
            if not isinstance(cell, (list, tuple)) or len(cell) != 2 or not all(isinstance(v, int) for v in cell):
                raise ValueError(f"Invalid pattern cell {cell!r}; expected an [x, y] integer pair")

        return cls(
            name=data["name"],
            cells=[tuple(cell) for cell in cells],
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )

    @classmethod
    def from_grid(cls, grid: Grid, name: str, description: str = "") -> "Pattern":
        """Create pattern from the living cells of a grid.

        Args:
            grid: Source grid
            name: Pattern name
            description: Optional description

        Returns:
            New Pattern instance
        """
        cells = sorted(grid.alive_cells())
        metadata = {"bounding_box": grid.get_bounding_box(), "population": len(cells)}
        return cls(name, cells, description, metadata)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Pattern":
        """Decode a .txt, .cells or .rle file into a pattern.

        Raises:
            OSError: If the file cannot be read
            PatternFormatError: If the file cannot be decoded
        """
        path = Path(path)
        grid = load_grid(path)
        name = grid.metadata.get("name") or path.stem
        pattern = cls.from_grid(grid, name, f"Loaded from {path.name}")
        pattern.metadata["source_file"] = path.name
        return pattern


class PatternLibrary:
    """Manages a collection of patterns."""

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize pattern library.

        Args:
            storage_dir: Directory for storing patterns (defaults to 'patterns')
        """
        self.storage_dir = Path(storage_dir or "patterns")
        self._patterns: Dict[str, Pattern] = {}
        self._load_builtin_patterns()

    def _load_builtin_patterns(self) -> None:
        """Load built-in common patterns."""
        # Still life patterns
        self.add_pattern(Pattern("Block", [(0, 0), (0, 1), (1, 0), (1, 1)], "2x2 still life block"))
        self.add_pattern(
            Pattern("Beehive", [(1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (2, 2)], "Beehive still life")
        )
        self.add_pattern(
            Pattern("Loaf", [(1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (3, 2), (2, 3)], "Loaf still life")
        )

        # Oscillators
        self.add_pattern(Pattern("Blinker", [(0, 1), (1, 1), (2, 1)], "Period-2 oscillator"))
        self.add_pattern(
            Pattern("Toad", [(1, 0), (2, 0), (3, 0), (0, 1), (1, 1), (2, 1)], "Period-2 oscillator")
        )
        self.add_pattern(
            Pattern("Beacon", [(0, 0), (1, 0), (0, 1), (3, 2), (2, 3), (3, 3)], "Period-2 oscillator")
        )

        # Pulsar is symmetric in both axes; build one quadrant and mirror it
        quadrant = [(2, 0), (3, 0), (4, 0), (0, 2), (5, 2), (0, 3), (5, 3), (0, 4), (5, 4), (2, 5), (3, 5), (4, 5)]
        pulsar = sorted({(x, y) for qx, qy in quadrant for x in (qx, 12 - qx) for y in (qy, 12 - qy)})
        self.add_pattern(Pattern("Pulsar", pulsar, "Period-3 oscillator"))

        # Spaceships
        self.add_pattern(
            Pattern("Glider", [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)], "Smallest spaceship, period-4")
        )
        self.add_pattern(
            Pattern(
                "Lightweight Spaceship",
                [(0, 0), (3, 0), (4, 1), (0, 2), (4, 2), (1, 3), (2, 3), (3, 3), (4, 3)],
                "LWSS - Period-4 spaceship",
            )
        )

        # Methuselahs
        self.add_pattern(
            Pattern(
                "R-pentomino",
                [(1, 0), (2, 0), (0, 1), (1, 1), (1, 2)],
                "Famous methuselah that stabilizes after 1103 generations",
            )
        )
        self.add_pattern(
            Pattern(
                "Diehard",
                [(6, 0), (0, 1), (1, 1), (1, 2), (5, 2), (6, 2), (7, 2)],
                "Dies after exactly 130 generations",
            )
        )
        self.add_pattern(
            Pattern(
                "Acorn",
                [(1, 0), (3, 1), (0, 2), (1, 2), (4, 2), (5, 2), (6, 2)],
                "Takes 5206 generations to stabilize",
            )
        )

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern to the library."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Get a pattern by name.

        Args:
            name: Pattern name

        Returns:
            Pattern instance or None if not found
        """
        return self._patterns.get(name)

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())

    def get_patterns_by_category(self) -> Dict[str, List[str]]:
        """Get patterns organized by category.

        Returns:
            Dictionary mapping categories to pattern name lists
        """
        categories = {
            "Still Life": ["Block", "Beehive", "Loaf"],
            "Oscillators": ["Blinker", "Toad", "Beacon", "Pulsar"],
            "Spaceships": ["Glider", "Lightweight Spaceship"],
            "Methuselahs": ["R-pentomino", "Diehard", "Acorn"],
            "Custom": [],
        }

        all_builtin = set()
        for cat_patterns in categories.values():
            all_builtin.update(cat_patterns)

        for name in self._patterns:
            if name not in all_builtin:
                categories["Custom"].append(name)

        # Remove empty categories
        return {cat: patterns for cat, patterns in categories.items() if patterns}

    def save_pattern(self, pattern: Pattern, filename: Optional[str] = None) -> Path:
        """Save a pattern to disk as JSON.

        Args:
            pattern: Pattern to save
            filename: Optional filename (defaults to pattern name)

        Returns:
            Path of the written file
        """
        if filename is None:
            filename = f"{pattern.name.replace(' ', '_').lower()}.json"

        self.storage_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.storage_dir / filename
        with open(filepath, "w") as f:
            json.dump(pattern.to_dict(), f, indent=2)
        return filepath

    def load_pattern(self, filename: str) -> Pattern:
        """Load a pattern from the storage directory.

        JSON files are read as saved patterns; .txt, .cells and .rle files
        go through the pattern decoders.

        Args:
            filename: Filename to load from

        Returns:
            Loaded Pattern instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        filepath = self.storage_dir / filename

        if filepath.suffix.lower() == ".json":
            with open(filepath, "r") as f:
                data = json.load(f)
            pattern = Pattern.from_dict(data)
        else:
            pattern = Pattern.from_file(filepath)

        self.add_pattern(pattern)
        return pattern

    def load_all_patterns(self) -> int:
        """Load all patterns from the storage directory.

        Returns:
            Number of patterns loaded
        """
        if not self.storage_dir.is_dir():
            return 0

        suffixes = (".json",) + PLAINTEXT_SUFFIXES + RLE_SUFFIXES
        loaded = 0
        for filepath in sorted(self.storage_dir.iterdir()):
            if filepath.suffix.lower() not in suffixes:
                continue
            try:
                self.load_pattern(filepath.name)
                loaded += 1
            except (OSError, ValueError, KeyError) as e:
                logger.warning("Failed to load pattern from %s: %s", filepath.name, e)
        return loaded

    def save_grid_as_pattern(
        self,
        grid: Grid,
        name: str,
        description: str = "",
        filename: Optional[str] = None,
    ) -> Pattern:
        """Save current grid state as a new pattern.

        Args:
            grid: Source grid
            name: Pattern name
            description: Optional description
            filename: Optional filename for saving

        Returns:
            Created Pattern instance
        """
        pattern = Pattern.from_grid(grid, name, description)
        self.add_pattern(pattern)

        if filename is not None:
            self.save_pattern(pattern, filename)

        return pattern
