"""Waksman networks, selection bits, and clear-text compaction and purification circuits."""

__version__ = "0.1.0"

__all__ = ["prng", "waksman", "compaction", "network", "selection", "purification"]