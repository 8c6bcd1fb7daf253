"""Runtime settings for the simulation driver."""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .coord import Neighborhood
from .grid import Grid
from .patterns import load_grid_or_empty


@dataclass
class Settings:
    """Configuration for a simulation run."""

    file: Optional[str] = None
    updates_per_second: float = 16.0
    neighborhood: Neighborhood = Neighborhood.MOORE
    debug: bool = False
    max_generations: int = 10000

    @property
    def millis_per_update(self) -> int:
        """Minimum interval between two generation steps, in milliseconds."""
        return int(1.0 / self.updates_per_second * 1000.0)

    def validate(self) -> None:
        """Check settings for consistency.

        Raises:
            ValueError: If a setting is out of range
        """
        if self.updates_per_second <= 0:
            raise ValueError(f"updates_per_second must be positive, got {self.updates_per_second}")
        if self.max_generations < 0:
            raise ValueError(f"max_generations must be non-negative, got {self.max_generations}")

    def load_initial_grid(self) -> Grid:
        """Load the starting grid from `file`, or return an empty one."""
        if self.file is None:
            return Grid(self.neighborhood)

        grid = load_grid_or_empty(self.file)
        grid.set_neighborhood(self.neighborhood)
        return grid

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a plain dictionary."""
        data = asdict(self)
        data["neighborhood"] = self.neighborhood.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create settings from a dictionary.

        Args:
            data: Setting values; neighborhood may be given by name

        Returns:
            New validated Settings instance

        Raises:
            ValueError: If a key is unknown or a value is invalid
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        values = dict(data)
        neighborhood = values.get("neighborhood")
        if isinstance(neighborhood, str):
            try:
                values["neighborhood"] = Neighborhood(neighborhood.lower())
            except ValueError:
                available = ", ".join(n.value for n in Neighborhood)
                raise ValueError(f"Unknown neighborhood '{neighborhood}'. Available: {available}")

        settings = cls(**values)
        settings.validate()
        return settings
