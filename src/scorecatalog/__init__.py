"""ScoreCatalog - query API over a directory of notation files."""

__version__ = "0.1.0"
