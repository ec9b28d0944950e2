"""Release note watcher - detect, store and announce new feed entries."""

__version__ = "0.1.0"
