"""Custom exceptions for graphstat.

All graphstat-specific exceptions inherit from GraphStatError and carry the
name of the analysis stage that raised them.
"""

from graphstat.core.constants import (
    STAGE_CONFIG,
    STAGE_DEGREE,
    STAGE_INGESTION,
    STAGE_SAMPLING,
)


class GraphStatError(Exception):
    """Base exception for graphstat errors."""

    stage: str = "analysis"


class IngestionError(GraphStatError):
    """Error while reading the edge-list input.

    Raised when the input source is missing or cannot be read.
    """

    stage = STAGE_INGESTION


class MalformedLineError(IngestionError):
    """A line that does not hold a vertex pair, in strict parsing mode.

    Attributes:
        line_number: 1-based number of the offending line.
        line: The raw line text (without trailing newline).
    """

    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed edge on line {line_number}: {line!r}")


class InsufficientVerticesError(GraphStatError):
    """Pair sampling requested from fewer than two vertices."""

    stage = STAGE_SAMPLING

    def __init__(self, vertex_count: int) -> None:
        self.vertex_count = vertex_count
        super().__init__(
            f"Cannot sample vertex pairs: graph has {vertex_count} vertices, need at least 2"
        )


class EmptyGraphError(GraphStatError):
    """Degree statistics requested for a graph with no vertices."""

    stage = STAGE_DEGREE


class ConfigError(GraphStatError):
    """Error during configuration loading.

    Raised when the config file has invalid TOML syntax, an unknown key,
    or a value of the wrong type.
    """

    stage = STAGE_CONFIG
