"""Game logic for e-paper readers: a seeded dungeon crawler core, Tetris and 2048."""

__version__ = "0.1.0"