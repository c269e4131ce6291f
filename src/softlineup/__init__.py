"""Lineup generation for co-ed softball rosters."""

__version__ = "0.1.0"
