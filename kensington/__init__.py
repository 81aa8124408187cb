"""Kensington: a two-player mill game on a tiling-derived board graph."""

__version__ = "0.1.0"
