"""College football sim grading and trend mining."""

__all__ = [
    "cli",
    "config",
    "constants",
    "engine",
    "exceptions",
    "ingestion",
    "models",
    "normalization",
    "ops",
    "reporting",
    "runtime",
    "sources",
    "trends",
]

__version__ = "0.1.0"
