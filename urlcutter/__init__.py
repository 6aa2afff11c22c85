"""URL cutter: short base58 keys issued from a durable SQLite counter."""

__version__ = "1.0.0"
