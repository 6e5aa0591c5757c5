"""Adjacency construction for undirected graphs.

Every edge is inserted in both directions, so the resulting mapping is
symmetric. The mapping is returned read-only.
"""

from collections.abc import Iterable
from types import MappingProxyType

from graphstat.core.types import Adjacency, Edge, Vertex


def build_adjacency(
    edges: Iterable[Edge],
    extra_vertices: Iterable[Vertex] = (),
) -> Adjacency:
    """Build a symmetric adjacency mapping from edges.

    Vertices that appear in no edge are not created unless passed in
    extra_vertices, in which case they get an empty neighbor set. Leaving
    them out raises the average degree, so including them is opt-in.

    Args:
        edges: Undirected edges. Duplicates collapse; a self-loop (u, u)
            makes u its own neighbor.
        extra_vertices: Vertices to include even without edges.

    Returns:
        Read-only mapping from vertex to the frozenset of its neighbors.
    """
    neighbors: dict[Vertex, set[Vertex]] = {}
    for u, v in edges:
        neighbors.setdefault(u, set()).add(v)
        neighbors.setdefault(v, set()).add(u)

    for vertex in extra_vertices:
        neighbors.setdefault(vertex, set())

    return MappingProxyType({vertex: frozenset(adj) for vertex, adj in neighbors.items()})
