"""Shape Puzzle: drop every piece into the hole of the same shape."""

__version__ = "0.1.0"
