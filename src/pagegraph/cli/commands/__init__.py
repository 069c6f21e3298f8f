"""CLI command implementations."""

from . import inspect, map, stats

__all__ = ["inspect", "map", "stats"]
