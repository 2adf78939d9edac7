"""Team depth charts: ordered players per position, persisted in SQLite."""

__version__ = "0.1.0"
