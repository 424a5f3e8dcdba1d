"""Dolby Vision RPU metadata structures and ST 2094-10 T.35 parsing."""

__version__ = "0.1.0"