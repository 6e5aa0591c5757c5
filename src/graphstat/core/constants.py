"""Constants for graphstat.

Exit codes, analysis defaults, and policy values.
"""

from typing import Final

# Exit codes (following Unix conventions)
EXIT_SUCCESS: Final[int] = 0
EXIT_USER_ERROR: Final[int] = 1
EXIT_INTERNAL_ERROR: Final[int] = 2
EXIT_CONFIG_ERROR: Final[int] = 3

# Analysis defaults
DEFAULT_NUM_PAIRS: Final[int] = 1000
DEFAULT_WORKERS: Final[int] = 1

# Reported distance for pairs with no connecting path
UNREACHABLE_DISTANCE: Final[int] = -1

# A pair needs two distinct vertices
MIN_SAMPLE_VERTICES: Final[int] = 2

# Edge-list format
EDGE_FIELD_SEPARATOR: Final[str] = ","

# Average degree of an empty graph:
# - error: raise EmptyGraphError
# - nan: return float("nan")
# - zero: return 0.0
EMPTY_GRAPH_ERROR: Final[str] = "error"
EMPTY_GRAPH_NAN: Final[str] = "nan"
EMPTY_GRAPH_ZERO: Final[str] = "zero"
EMPTY_GRAPH_POLICIES: frozenset[str] = frozenset(
    {EMPTY_GRAPH_ERROR, EMPTY_GRAPH_NAN, EMPTY_GRAPH_ZERO}
)

# Output formats
FORMAT_TEXT: Final[str] = "text"
FORMAT_JSON: Final[str] = "json"
OUTPUT_FORMATS: frozenset[str] = frozenset({FORMAT_TEXT, FORMAT_JSON})

# Stage names reported in error diagnostics
STAGE_INGESTION: Final[str] = "ingestion"
STAGE_ADJACENCY: Final[str] = "adjacency"
STAGE_SAMPLING: Final[str] = "sampling"
STAGE_DISTANCES: Final[str] = "shortest paths"
STAGE_COMPONENTS: Final[str] = "components"
STAGE_DEGREE: Final[str] = "degree statistics"
STAGE_CONFIG: Final[str] = "configuration"
