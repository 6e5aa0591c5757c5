"""Core data types for graphstat.

Vertices are plain non-negative integers and edges are vertex tuples.
Result types are immutable dataclasses so stages can share them freely.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from graphstat.core.constants import UNREACHABLE_DISTANCE

Vertex = int
Edge = tuple[Vertex, Vertex]
Adjacency = Mapping[Vertex, frozenset[Vertex]]
DistanceMap = dict[Vertex, int]
Component = frozenset[Vertex]


@dataclass(frozen=True)
class EdgeList:
    """Parsed edge-list input.

    Attributes:
        edges: Edges in input order, duplicates and self-loops included.
        isolated: Vertices declared on single-field lines (only collected
            when isolated vertices are enabled).
        skipped_lines: 1-based numbers of lines dropped as malformed.
    """

    edges: tuple[Edge, ...] = field(default_factory=tuple)
    isolated: tuple[Vertex, ...] = field(default_factory=tuple)
    skipped_lines: tuple[int, ...] = field(default_factory=tuple)

    @property
    def vertices(self) -> frozenset[Vertex]:
        """All vertices mentioned by at least one edge."""
        return frozenset(v for edge in self.edges for v in edge)


@dataclass(frozen=True)
class PairDistance:
    """Hop distance between one sampled pair of vertices.

    Attributes:
        source: First vertex of the pair.
        target: Second vertex of the pair.
        distance: Number of edges on a shortest path, or
            UNREACHABLE_DISTANCE when no path exists.
    """

    source: Vertex
    target: Vertex
    distance: int

    @property
    def reachable(self) -> bool:
        return self.distance != UNREACHABLE_DISTANCE


@dataclass(frozen=True)
class DegreeStats:
    """Summary of vertex degrees over the adjacency key set."""

    vertex_count: int
    total_degree: int
    min_degree: int
    max_degree: int
    average: float


@dataclass(frozen=True)
class AnalysisReport:
    """Everything one analysis run reports.

    Attributes:
        distances: Sampled pair distances in sampling order.
        components: Connected components partitioning the vertex set.
        degree: Degree summary.
        edge_count: Number of edges read (duplicates included).
        vertex_count: Number of vertices in the adjacency structure.
        skipped_lines: Number of input lines dropped as malformed.
    """

    distances: tuple[PairDistance, ...]
    components: tuple[Component, ...]
    degree: DegreeStats
    edge_count: int
    vertex_count: int
    skipped_lines: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict.

        Components are emitted as sorted lists. A NaN average is emitted
        as None since JSON has no NaN.
        """
        average = self.degree.average
        return {
            "vertex_count": self.vertex_count,
            "edge_count": self.edge_count,
            "skipped_lines": self.skipped_lines,
            "distances": [
                {"source": d.source, "target": d.target, "distance": d.distance}
                for d in self.distances
            ],
            "components": [sorted(c) for c in self.components],
            "degree": {
                "vertex_count": self.degree.vertex_count,
                "total_degree": self.degree.total_degree,
                "min_degree": self.degree.min_degree,
                "max_degree": self.degree.max_degree,
                "average": None if math.isnan(average) else average,
            },
        }
