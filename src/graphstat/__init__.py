"""graphstat - shortest paths, components and degree statistics for edge lists."""

__version__ = "0.1.0"
