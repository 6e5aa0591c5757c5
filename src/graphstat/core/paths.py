"""Breadth-first shortest paths on unweighted graphs.

Distances are hop counts. Each BFS only reads the adjacency mapping and
keeps its own queue and visited set, so queries can run concurrently.
"""

import logging
from collections import deque
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from graphstat.core.constants import DEFAULT_WORKERS, UNREACHABLE_DISTANCE
from graphstat.core.types import Adjacency, DistanceMap, Edge, PairDistance, Vertex

logger = logging.getLogger(__name__)

_NO_NEIGHBORS: frozenset[Vertex] = frozenset()


def bfs_distances(adjacency: Adjacency, source: Vertex) -> DistanceMap:
    """Compute hop distances from source to every reachable vertex.

    Performs level-order BFS with a FIFO queue. Each vertex is enqueued at
    most once, so the cost is linear in the size of the source's component.

    Args:
        adjacency: Symmetric adjacency mapping.
        source: Start vertex. It need not be in the mapping.

    Returns:
        Mapping from each reachable vertex to its distance. Always contains
        {source: 0}; vertices missing from the map are unreachable.
    """
    distances: DistanceMap = {source: 0}
    queue: deque[Vertex] = deque([source])

    while queue:
        current = queue.popleft()
        next_distance = distances[current] + 1

        for neighbor in adjacency.get(current, _NO_NEIGHBORS):
            if neighbor not in distances:
                distances[neighbor] = next_distance
                queue.append(neighbor)

    return distances


def distance_between(adjacency: Adjacency, source: Vertex, target: Vertex) -> int:
    """Compute the hop distance between two vertices.

    Stops expanding as soon as the target is discovered.

    Args:
        adjacency: Symmetric adjacency mapping.
        source: Start vertex.
        target: End vertex.

    Returns:
        Number of edges on a shortest path, 0 when source == target, or
        UNREACHABLE_DISTANCE when no path exists.
    """
    if source == target:
        return 0

    distances: DistanceMap = {source: 0}
    queue: deque[Vertex] = deque([source])

    while queue:
        current = queue.popleft()
        next_distance = distances[current] + 1

        for neighbor in adjacency.get(current, _NO_NEIGHBORS):
            if neighbor in distances:
                continue
            if neighbor == target:
                return next_distance
            distances[neighbor] = next_distance
            queue.append(neighbor)

    return UNREACHABLE_DISTANCE


def sampled_distances(
    adjacency: Adjacency,
    pairs: Iterable[Edge],
    workers: int = DEFAULT_WORKERS,
) -> tuple[PairDistance, ...]:
    """Compute distances for a batch of vertex pairs.

    Args:
        adjacency: Symmetric adjacency mapping (read-only).
        pairs: (source, target) pairs to query.
        workers: Number of threads. 1 runs the queries sequentially. BFS is
            pure Python, so more threads only help on a free-threaded build.

    Returns:
        One PairDistance per pair, in input order.

    Raises:
        ValueError: If workers is less than 1.
    """
    if workers < 1:
        raise ValueError("workers must be at least 1")

    pair_list = list(pairs)

    def query(pair: Edge) -> PairDistance:
        source, target = pair
        return PairDistance(source, target, distance_between(adjacency, source, target))

    if workers == 1 or len(pair_list) <= 1:
        results = tuple(query(pair) for pair in pair_list)
    else:
        logger.debug("Running %d distance queries on %d threads", len(pair_list), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = tuple(executor.map(query, pair_list))

    unreachable = sum(1 for r in results if not r.reachable)
    logger.debug("Computed %d distances (%d unreachable)", len(results), unreachable)
    return results
