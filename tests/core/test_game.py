"""Tests for the GameOfLife class."""

import pytest

from sparselife.core.settings import Settings
from sparselife.core.coord import Neighborhood
from sparselife.core.game import GameOfLife
from sparselife.core.grid import Grid

GLIDER = [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)]


def seeded_game(cells, settings=None):
    grid = Grid()
    for cell in cells:
        grid.set_alive(cell)
    return GameOfLife(grid, settings)


class TestGameOfLife:
    """Test cases for the GameOfLife class."""

    def test_initialization(self):
        """Test game initialization."""
        grid = Grid()
        game = GameOfLife(grid)

        assert game.grid is grid
        assert game.generation == 0
        assert game.population == 0
        assert len(game.population_history) == 1
        assert not game.cycle_detected
        assert game.cycle_length == 0
        assert game.cycle_start_generation == 0
        assert not game.paused

    def test_initialization_without_grid(self):
        """Without a grid the game starts from the settings' file or empty."""
        game = GameOfLife(settings=Settings(neighborhood=Neighborhood.VON_NEUMANN))
        assert game.population == 0
        assert game.grid.neighborhood is Neighborhood.VON_NEUMANN

    def test_settings_neighborhood_applies_to_grid(self):
        """Explicit settings override the neighborhood of a passed grid."""
        grid = Grid()
        grid.set_alive((0, 0))
        game = GameOfLife(grid, Settings(neighborhood=Neighborhood.VON_NEUMANN))

        assert game.grid is grid
        assert grid.neighborhood is Neighborhood.VON_NEUMANN
        assert grid.tracked_count == 5

    def test_grid_neighborhood_kept_without_settings(self):
        game = GameOfLife(Grid(Neighborhood.VON_NEUMANN))
        assert game.grid.neighborhood is Neighborhood.VON_NEUMANN
        assert game.settings.neighborhood is Neighborhood.VON_NEUMANN

    def test_invalid_settings_rejected(self):
        with pytest.raises(ValueError):
            GameOfLife(Grid(), Settings(updates_per_second=0))

    def test_still_life_block(self):
        """Test that a block pattern is stable (still life)."""
        game = seeded_game([(4, 4), (4, 5), (5, 4), (5, 5)])

        for _ in range(5):
            game.step()

        assert game.population == 4
        assert set(game.grid.alive_cells()) == {(4, 4), (4, 5), (5, 4), (5, 5)}
        assert game.generation == 5

    def test_oscillator_blinker(self):
        """Test blinker oscillator (period 2)."""
        game = seeded_game([(0, 0), (1, 0), (2, 0)])

        game.step()
        assert set(game.grid.alive_cells()) == {(1, -1), (1, 0), (1, 1)}

        game.step()
        assert set(game.grid.alive_cells()) == {(0, 0), (1, 0), (2, 0)}

    def test_extinction(self):
        """Test pattern that goes extinct."""
        game = seeded_game([(5, 5)])

        game.step()
        assert game.population == 0
        assert game.grid.tracked_count == 0
        assert game.generation == 1

    def test_population_history(self):
        """Test population history tracking."""
        game = seeded_game([(5, 5), (5, 6), (6, 5)])

        for i in range(3):
            game.step()
            history = game.population_history
            assert len(history) == i + 2
            assert history[-1] == game.population

    def test_cycle_detection_blinker(self):
        """Blinker is detected as a period-2 cycle."""
        game = seeded_game([(0, 0), (1, 0), (2, 0)])

        generation, reason = game.run_until_stable(100)

        assert reason == "cycle"
        assert game.cycle_detected
        assert game.cycle_length == 2
        assert game.cycle_start_generation == 0
        assert generation == 3

    def test_cycle_detection_still_life(self):
        """A block is a cycle of length 1."""
        game = seeded_game([(0, 0), (1, 0), (0, 1), (1, 1)])

        generation, reason = game.run_until_stable(100)

        assert reason == "cycle"
        assert game.cycle_length == 1

    def test_run_until_extinction(self):
        game = seeded_game([(0, 0), (10, 10)])
        assert game.run_until_stable(100) == (1, "extinction")

    def test_run_until_max_generations(self):
        """A glider never repeats its exact cell set."""
        game = seeded_game(GLIDER)
        assert game.run_until_stable(20) == (20, "max_generations")
        assert not game.cycle_detected

    def test_run_uses_settings_limit(self):
        game = seeded_game(GLIDER, Settings(max_generations=8))
        assert game.run_until_stable() == (8, "max_generations")

    def test_pointer_edits_clear_cycle_detection(self):
        """Editing cells by hand resets cycle detection."""
        game = seeded_game([(0, 0), (1, 0), (2, 0)])
        game.run_until_stable(10)
        assert game.cycle_detected

        game.set_alive((20, 20))
        assert not game.cycle_detected
        assert game.grid.is_alive((20, 20))

        game.set_dead((20, 20))
        assert not game.grid.is_alive((20, 20))

    def test_tick_respects_interval(self):
        """tick() steps at most once per update interval."""
        game = seeded_game(GLIDER, Settings(updates_per_second=4))

        assert game.tick(now=10.0)
        assert game.generation == 1
        assert not game.tick(now=10.1)
        assert game.generation == 1
        assert game.tick(now=10.25)
        assert game.generation == 2

    def test_tick_paused(self):
        """A paused game ignores ticks but can still be stepped by hand."""
        game = seeded_game(GLIDER)
        game.paused = True

        assert not game.tick(now=100.0)
        assert game.generation == 0

        game.step()
        assert game.generation == 1

    def test_reset(self):
        """Test simulation reset."""
        game = seeded_game(GLIDER)
        for _ in range(3):
            game.step()

        game.reset()

        assert game.generation == 0
        assert game.population == 0
        assert game.population_history == [0]
        assert not game.cycle_detected

    def test_reset_keep_grid(self):
        game = seeded_game(GLIDER)
        game.step()
        game.reset(clear_grid=False)
        assert game.generation == 0
        assert game.population == 5

    def test_population_change_rate(self):
        """Test population change rate calculation."""
        game = seeded_game([])
        assert game.get_population_change_rate() == 0.0

        game = seeded_game([(0, 0), (1, 0), (2, 0), (3, 0)])
        game.step()
        # Row of four: both ends die, four cells are born above and below
        assert game.population == 6
        assert game.get_population_change_rate() == 2.0

    def test_statistics(self):
        """Test statistics reporting."""
        game = seeded_game(GLIDER)
        stats = game.get_statistics()

        assert stats["generation"] == 0
        assert stats["population"] == 5
        assert stats["tracked_cells"] == game.grid.tracked_count
        assert stats["bounding_box"] == (0, 0, 2, 2)
        assert stats["bounding_box_size"] == (3, 3)
        assert stats["bounding_box_area"] == 9
        assert stats["neighborhood"] == "moore"

    def test_statistics_empty(self):
        stats = seeded_game([]).get_statistics()
        assert stats["bounding_box"] is None
        assert stats["bounding_box_size"] == (0, 0)
        assert stats["bounding_box_area"] == 0
