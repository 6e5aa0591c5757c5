"""Connected components via iterative depth-first search.

Traversal uses an explicit stack, so long path-shaped graphs do not hit
the interpreter's recursion limit.
"""

import logging
from collections.abc import Sequence

from graphstat.core.types import Adjacency, Component, Vertex

logger = logging.getLogger(__name__)


def _collect_component(adjacency: Adjacency, start: Vertex, visited: set[Vertex]) -> Component:
    """Mark and return every unvisited vertex reachable from start."""
    component: set[Vertex] = set()
    stack = [start]

    while stack:
        vertex = stack.pop()
        if vertex in visited:
            continue
        visited.add(vertex)
        component.add(vertex)

        for neighbor in adjacency.get(vertex, ()):
            if neighbor not in visited:
                stack.append(neighbor)

    return frozenset(component)


def connected_components(adjacency: Adjacency) -> list[Component]:
    """Partition the vertices of the adjacency mapping into components.

    Start vertices are taken in ascending order, so the output order is
    reproducible: components are ordered by their smallest vertex.

    Args:
        adjacency: Symmetric adjacency mapping.

    Returns:
        Disjoint components whose union is exactly the key set.
    """
    visited: set[Vertex] = set()
    components: list[Component] = []

    for vertex in sorted(adjacency):
        if vertex not in visited:
            components.append(_collect_component(adjacency, vertex, visited))

    logger.debug("Found %d components over %d vertices", len(components), len(visited))
    return components


def largest_component(components: Sequence[Component]) -> Component:
    """Return the component with the most vertices.

    Ties go to the earliest component. Returns an empty frozenset when
    there are no components.
    """
    if not components:
        return frozenset()
    return max(components, key=len)
