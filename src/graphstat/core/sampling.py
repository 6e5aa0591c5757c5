"""Random vertex-pair sampling for distance queries."""

import logging
import random
from collections.abc import Iterable

from graphstat.core.constants import MIN_SAMPLE_VERTICES
from graphstat.core.exceptions import InsufficientVerticesError
from graphstat.core.types import Edge, Vertex

logger = logging.getLogger(__name__)


def sample_pairs(
    vertices: Iterable[Vertex],
    num_pairs: int,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> list[Edge]:
    """Draw random pairs of distinct vertices.

    Each pair is an independent draw of two different vertices, uniform
    over the vertex set. The same pair (or vertex) may come up in several
    draws.

    The population is sorted before drawing, so the same seed always gives
    the same pairs regardless of the iteration order of `vertices`.

    Args:
        vertices: The vertices to draw from. Duplicates are ignored.
        num_pairs: Number of pairs to return.
        rng: Random source to draw from. Takes precedence over seed.
        seed: Seed for a fresh random source when rng is not given.
            None seeds from system entropy.

    Returns:
        List of exactly num_pairs (a, b) tuples with a != b.

    Raises:
        ValueError: If num_pairs is negative.
        InsufficientVerticesError: If pairs are requested from fewer than
            two distinct vertices.
    """
    if num_pairs < 0:
        raise ValueError("num_pairs must be non-negative")

    if num_pairs == 0:
        return []

    population = sorted(set(vertices))
    if len(population) < MIN_SAMPLE_VERTICES:
        raise InsufficientVerticesError(len(population))

    if rng is None:
        rng = random.Random(seed)

    pairs: list[Edge] = []
    for _ in range(num_pairs):
        a, b = rng.sample(population, 2)
        pairs.append((a, b))

    logger.debug("Sampled %d pairs from %d vertices", num_pairs, len(population))
    return pairs
