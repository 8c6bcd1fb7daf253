"""Integer coordinates on the unbounded plane."""

from enum import Enum
from typing import List, NamedTuple, Tuple


class Neighborhood(Enum):
    """Which adjacent cells count as neighbors.

    MOORE is the 8-cell neighborhood required by Conway's rules.
    VON_NEUMANN (orthogonal only) is kept as an alternate mode; it gives
    different, non-canonical dynamics.
    """

    MOORE = "moore"
    VON_NEUMANN = "von_neumann"

    @property
    def offsets(self) -> Tuple[Tuple[int, int], ...]:
        """Get the (dx, dy) deltas for this neighborhood."""
        if self is Neighborhood.VON_NEUMANN:
            return _ORTHOGONAL
        return _ORTHOGONAL + _DIAGONAL


_ORTHOGONAL = ((1, 0), (-1, 0), (0, 1), (0, -1))
_DIAGONAL = ((1, 1), (1, -1), (-1, 1), (-1, -1))


class Coord(NamedTuple):
    """A cell position. Python ints keep both axes unbounded."""

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Coord":
        """Return this coordinate translated by (dx, dy)."""
        return Coord(self.x + dx, self.y + dy)

    def neighbors(self, neighborhood: Neighborhood = Neighborhood.MOORE) -> List["Coord"]:
        """Get the adjacent coordinates.

        Args:
            neighborhood: Neighbor policy (Moore by default)

        Returns:
            List of 8 (Moore) or 4 (von Neumann) coordinates
        """
        x, y = self
        return [Coord(x + dx, y + dy) for dx, dy in neighborhood.offsets]
