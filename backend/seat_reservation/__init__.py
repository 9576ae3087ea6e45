"""Seat reservation service: row-first seat allocation behind a single-writer store."""

__version__ = "1.0.0"
