"""WiscKey-style value log: checksummed append-only records, an in-memory key index and garbage collection."""

__version__ = "0.1.0"