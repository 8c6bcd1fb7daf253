"""Sparse grid data structure for cellular automata."""

from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple
import numpy as np

from .coord import Coord, Neighborhood


class CellState(Enum):
    """State of a tracked cell."""

    ALIVE = "alive"
    DEAD = "dead"


class Grid:
    """Represents an unbounded 2D grid for cellular automata.

    Cells live in a dictionary keyed by coordinate. A coordinate missing
    from the dictionary is dead. Every alive cell keeps all of its neighbors
    tracked (as DEAD if not alive), since only tracked cells are examined
    when computing the next generation.
    """

    def __init__(self, neighborhood: Neighborhood = Neighborhood.MOORE) -> None:
        """Initialize an empty grid.

        Args:
            neighborhood: Neighbor policy used for counting and back-filling
        """
        self.neighborhood = neighborhood
        self.metadata: Dict[str, Any] = {}
        self._cells: Dict[Coord, CellState] = {}

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return sum(1 for state in self._cells.values() if state is CellState.ALIVE)

    @property
    def tracked_count(self) -> int:
        """Get the number of tracked cells, alive or dead."""
        return len(self._cells)

    def get(self, coord: Tuple[int, int]) -> CellState:
        """Get the state of a cell.

        Args:
            coord: Cell coordinate

        Returns:
            The tracked state, or DEAD if the cell is untracked
        """
        return self._cells.get(Coord(*coord), CellState.DEAD)

    def raw_get(self, coord: Tuple[int, int]) -> Optional[CellState]:
        """Get the tracked state of a cell, or None if it is untracked."""
        return self._cells.get(Coord(*coord))

    def is_alive(self, coord: Tuple[int, int]) -> bool:
        return self._cells.get(Coord(*coord)) is CellState.ALIVE

    def living_neighbor_count(self, coord: Tuple[int, int]) -> int:
        """Count living neighbors of a cell.

        Args:
            coord: Cell coordinate

        Returns:
            Number of living neighbors (0-8, or 0-4 for von Neumann)
        """
        cells = self._cells
        return sum(
            1
            for neighbor in Coord(*coord).neighbors(self.neighborhood)
            if cells.get(neighbor) is CellState.ALIVE
        )

    def set_alive(self, coord: Tuple[int, int]) -> None:
        """Mark a cell alive and start tracking its neighbors.

        Neighbors that are already tracked keep their state.

        Args:
            coord: Cell coordinate
        """
        coord = Coord(*coord)
        self._cells[coord] = CellState.ALIVE
        for neighbor in coord.neighbors(self.neighborhood):
            self._cells.setdefault(neighbor, CellState.DEAD)

    def set_dead(self, coord: Tuple[int, int]) -> None:
        """Stop tracking a cell, which makes it implicitly dead.

        Args:
            coord: Cell coordinate
        """
        self._cells.pop(Coord(*coord), None)

    def cells(self) -> Iterator[Tuple[Coord, CellState]]:
        """Iterate over tracked cells.

        Each call returns a new iterator, so the grid can be enumerated
        any number of times.

        Yields:
            Tuples of (coord, state) for every tracked cell
        """
        return iter(list(self._cells.items()))

    def alive_cells(self) -> Iterator[Coord]:
        """Iterate over the coordinates of living cells."""
        return iter([coord for coord, state in self._cells.items() if state is CellState.ALIVE])

    def step(self) -> "Grid":
        """Compute the next generation.

        Counts are read from this grid only; the result is a new grid and
        this one is left untouched.

        Returns:
            New Grid holding generation N+1
        """
        next_grid = Grid(self.neighborhood)
        for coord, state in self._cells.items():
            living = self.living_neighbor_count(coord)
            if living == 3 or (state is CellState.ALIVE and living == 2):
                next_grid.set_alive(coord)
        return next_grid

    def update(self) -> None:
        """Advance this grid one generation in place (build next, then swap)."""
        self._cells = self.step()._cells

    def set_neighborhood(self, neighborhood: Neighborhood) -> None:
        """Switch the neighbor policy and re-track around living cells.

        Dead entries are dropped and rebuilt from the living cells under
        the new policy.

        Args:
            neighborhood: New neighbor policy
        """
        if neighborhood is self.neighborhood:
            return
        alive = list(self.alive_cells())
        self.neighborhood = neighborhood
        self._cells = {}
        for coord in alive:
            self.set_alive(coord)

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        self._cells.clear()

    def copy(self) -> "Grid":
        """Create an independent copy of the grid."""
        other = Grid(self.neighborhood)
        other.metadata = dict(self.metadata)
        other._cells = dict(self._cells)
        return other

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y) or None if no living cells
        """
        alive = list(self.alive_cells())
        if not alive:
            return None

        xs = [coord.x for coord in alive]
        ys = [coord.y for coord in alive]
        return (min(xs), min(ys), max(xs), max(ys))

    def to_array(self, bbox: Optional[Tuple[int, int, int, int]] = None) -> np.ndarray:
        """Render a window of the grid as a dense array.

        Args:
            bbox: Window as (min_x, min_y, max_x, max_y); defaults to the
                bounding box of living cells

        Returns:
            int8 array indexed [x, y], 1 for alive cells
        """
        if bbox is None:
            bbox = self.get_bounding_box()
            if bbox is None:
                return np.zeros((0, 0), dtype=np.int8)

        min_x, min_y, max_x, max_y = bbox
        arr = np.zeros((max(max_x - min_x + 1, 0), max(max_y - min_y + 1, 0)), dtype=np.int8)
        for x, y in self.alive_cells():
            if min_x <= x <= max_x and min_y <= y <= max_y:
                arr[x - min_x, y - min_y] = 1
        return arr

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self._cells

    def __eq__(self, other: object) -> bool:
        """Check if two grids hold the same living cells."""
        if not isinstance(other, Grid):
            return False
        return self.neighborhood == other.neighborhood and set(self.alive_cells()) == set(
            other.alive_cells()
        )

    def __repr__(self) -> str:
        return f"Grid(population={self.population}, tracked={self.tracked_count})"

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        bbox = self.get_bounding_box()
        if bbox is None:
            return ""

        min_x, min_y, max_x, max_y = bbox
        result = []
        for y in range(min_y, max_y + 1):
            row = []
            for x in range(min_x, max_x + 1):
                row.append("*" if self.is_alive((x, y)) else ".")
            result.append("".join(row))
        return "\n".join(result)
