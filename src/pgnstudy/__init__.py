"""PGN study parsing: game trees with variations, comments and NAGs."""

__version__ = "0.1.0"
