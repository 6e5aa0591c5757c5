"""Degree statistics over the adjacency key set.

Only vertices present in the adjacency mapping are counted. Isolated
vertices are absent unless they were explicitly included when the mapping
was built, which biases the average upward.
"""

import math

from graphstat.core.constants import (
    EMPTY_GRAPH_ERROR,
    EMPTY_GRAPH_NAN,
    EMPTY_GRAPH_POLICIES,
    EMPTY_GRAPH_ZERO,
)
from graphstat.core.exceptions import EmptyGraphError
from graphstat.core.types import Adjacency, DegreeStats


def _check_policy(empty_policy: str) -> None:
    if empty_policy not in EMPTY_GRAPH_POLICIES:
        raise ValueError(
            f"Invalid empty-graph policy '{empty_policy}'. "
            f"Must be one of: {', '.join(sorted(EMPTY_GRAPH_POLICIES))}"
        )


def _empty_average(empty_policy: str) -> float:
    """Average degree of a graph with no vertices, per policy."""
    if empty_policy == EMPTY_GRAPH_NAN:
        return math.nan
    if empty_policy == EMPTY_GRAPH_ZERO:
        return 0.0
    raise EmptyGraphError("Cannot compute average degree of an empty graph")


def average_degree(adjacency: Adjacency, empty_policy: str = EMPTY_GRAPH_ERROR) -> float:
    """Compute the mean number of neighbors per vertex.

    Args:
        adjacency: Adjacency mapping.
        empty_policy: What an empty mapping yields: "error" raises
            EmptyGraphError, "nan" returns NaN, "zero" returns 0.0.

    Returns:
        Sum of neighbor-set sizes divided by the number of vertices.

    Raises:
        EmptyGraphError: If the mapping is empty and the policy is "error".
        ValueError: If empty_policy is not a known policy.
    """
    _check_policy(empty_policy)
    if not adjacency:
        return _empty_average(empty_policy)

    total = sum(len(neighbors) for neighbors in adjacency.values())
    return total / len(adjacency)


def degree_stats(adjacency: Adjacency, empty_policy: str = EMPTY_GRAPH_ERROR) -> DegreeStats:
    """Summarize vertex degrees.

    Args:
        adjacency: Adjacency mapping.
        empty_policy: Same as for average_degree(). With a non-error policy
            an empty mapping reports zero counts.

    Returns:
        DegreeStats with vertex count, total, min, max and average degree.

    Raises:
        EmptyGraphError: If the mapping is empty and the policy is "error".
        ValueError: If empty_policy is not a known policy.
    """
    _check_policy(empty_policy)
    if not adjacency:
        return DegreeStats(
            vertex_count=0,
            total_degree=0,
            min_degree=0,
            max_degree=0,
            average=_empty_average(empty_policy),
        )

    degrees = [len(neighbors) for neighbors in adjacency.values()]
    total = sum(degrees)
    return DegreeStats(
        vertex_count=len(degrees),
        total_degree=total,
        min_degree=min(degrees),
        max_degree=max(degrees),
        average=total / len(degrees),
    )
