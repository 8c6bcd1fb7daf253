"""Conway's Game of Life simulation driver."""

from typing import Deque, Dict, FrozenSet, Optional, Tuple
from collections import deque
import logging
import time
import numpy as np

from .coord import Coord
from .grid import Grid
from .settings import Settings

logger = logging.getLogger(__name__)


class GameOfLife:
    """Conway's Game of Life simulation engine.

    Implements the classic rules:
    - Live cell with 2-3 neighbors survives
    - Dead cell with exactly 3 neighbors becomes alive
    - All other cells die or stay dead

    The game owns its grid. Pointer edits and generation steps both go
    through it; neither is safe to call concurrently from several threads.
    """

    def __init__(self, grid: Optional[Grid] = None, settings: Optional[Settings] = None) -> None:
        """Initialize the game.

        When settings are given, their neighborhood is applied to the grid.
        Without settings, defaults are used and the grid keeps its own
        neighborhood.

        Args:
            grid: The grid to simulate (loaded from settings if omitted)
            settings: Run settings (defaults used if omitted)
        """
        if settings is None:
            settings = Settings(neighborhood=grid.neighborhood) if grid is not None else Settings()
        self.settings = settings
        self.settings.validate()
        self.grid = grid if grid is not None else self.settings.load_initial_grid()
        self.grid.set_neighborhood(self.settings.neighborhood)
        self.paused = False
        self._last_update: Optional[float] = None
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[FrozenSet[Coord]] = deque(maxlen=1000)
        self._seen_states: Dict[FrozenSet[Coord], int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        # Track initial population
        self._update_population_history()

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self._check_for_cycles()

        self.grid.update()

        self._generation += 1
        self._update_population_history()

    def tick(self, now: Optional[float] = None) -> bool:
        """Step if the update interval has elapsed since the last step.

        Args:
            now: Current time in seconds (defaults to time.monotonic())

        Returns:
            True if a generation step was taken
        """
        if self.paused:
            return False

        if now is None:
            now = time.monotonic()

        interval = self.settings.millis_per_update / 1000.0
        if self._last_update is not None and now - self._last_update < interval:
            return False

        self.step()
        self._last_update = now
        return True

    def set_alive(self, coord: Tuple[int, int]) -> None:
        """Bring a cell to life outside the normal update cycle."""
        self.grid.set_alive(coord)
        self.clear_cycle_detection()

    def set_dead(self, coord: Tuple[int, int]) -> None:
        """Kill a cell outside the normal update cycle."""
        self.grid.set_dead(coord)
        self.clear_cycle_detection()

    def _update_population_history(self) -> None:
        """Update the population history."""
        self._population_history.append(self.population)

    def _check_for_cycles(self) -> None:
        """Check if the current state has been seen before (cycle detection)."""
        if self._cycle_detected:
            return

        current_state = frozenset(self.grid.alive_cells())

        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            logger.info(
                "Cycle of length %d detected at generation %d", self._cycle_length, self._generation
            )
            return

        # Drop the oldest state before the deque evicts it
        if len(self._state_history) == self._state_history.maxlen:
            old_state = self._state_history[0]
            if self._seen_states.get(old_state) == self._generation - len(self._state_history):
                del self._seen_states[old_state]

        self._seen_states[current_state] = self._generation
        self._state_history.append(current_state)

    def reset(self, clear_grid: bool = True) -> None:
        """Reset the simulation.

        Args:
            clear_grid: Whether to clear the grid as well
        """
        if clear_grid:
            self.grid.clear()

        self._generation = 0
        self._last_update = None
        self._population_history.clear()
        self.clear_cycle_detection()

        self._update_population_history()

    def clear_cycle_detection(self) -> None:
        """Clear cycle detection state while preserving generation and population history.

        Called when the grid is edited by hand, since earlier states no
        longer predict later ones.
        """
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._seen_states.clear()
        self._state_history.clear()

    def run_until_stable(self, max_generations: Optional[int] = None) -> Tuple[int, str]:
        """Run simulation until it becomes stable or cycles.

        Args:
            max_generations: Maximum generations to run (defaults to settings)

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        if max_generations is None:
            max_generations = self.settings.max_generations

        for _ in range(max_generations):
            self.step()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                logger.debug("Population went extinct at generation %d", self._generation)
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Calculate recent population change rate.

        Args:
            window_size: Number of recent generations to consider

        Returns:
            Average population change per generation
        """
        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        changes = np.diff(recent_history)
        return float(np.mean(changes))

    def get_statistics(self) -> Dict:
        """Get comprehensive simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        bbox = self.grid.get_bounding_box()

        stats = {
            "generation": self._generation,
            "population": self.population,
            "tracked_cells": self.grid.tracked_count,
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "neighborhood": self.grid.neighborhood.value,
        }

        if bbox:
            stats["bounding_box"] = bbox
            box_width = bbox[2] - bbox[0] + 1
            box_height = bbox[3] - bbox[1] + 1
            stats["bounding_box_size"] = (box_width, box_height)
            stats["bounding_box_area"] = box_width * box_height
        else:
            stats["bounding_box"] = None
            stats["bounding_box_size"] = (0, 0)
            stats["bounding_box_area"] = 0

        return stats
