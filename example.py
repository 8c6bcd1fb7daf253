#!/usr/bin/env python3
"""
Example usage of the sparselife package.
"""

import sys

from sparselife import GameOfLife, Grid, PatternLibrary, Settings, configure_logging


def main():
    """Demonstrate programmatic usage of the sparselife package."""
    settings = Settings(file=sys.argv[1] if len(sys.argv) > 1 else None)
    configure_logging(settings)

    if settings.file is not None:
        game = GameOfLife(settings=settings)
    else:
        # No file given: seed a glider from the built-in library
        grid = Grid()
        PatternLibrary().get_pattern("Glider").apply_to_grid(grid)
        game = GameOfLife(grid, settings)

    print("Initial state:")
    print(game.grid)
    print(f"Population: {game.population}")
    print()

    for _ in range(10):
        game.step()
        print(f"Generation {game.generation}:")
        print(game.grid)
        print(f"Population: {game.population}")

        if game.cycle_detected:
            print(f"Cycle detected! Length: {game.cycle_length}")
            break

        print()

    stats = game.get_statistics()
    print("Final statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
