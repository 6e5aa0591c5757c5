"""Analysis pipeline for graphstat.

Runs the stages of one analysis in order: adjacency construction, pair
sampling, sampled shortest paths, connected components and degree
statistics. Stages only read the adjacency mapping built in the first step.
"""

import logging
import random
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from pathlib import Path
from typing import Any

from graphstat.core.adjacency import build_adjacency
from graphstat.core.components import connected_components
from graphstat.core.config import GraphStatConfig
from graphstat.core.constants import (
    STAGE_ADJACENCY,
    STAGE_COMPONENTS,
    STAGE_DEGREE,
    STAGE_DISTANCES,
    STAGE_INGESTION,
    STAGE_SAMPLING,
)
from graphstat.core.degree import degree_stats
from graphstat.core.exceptions import GraphStatError
from graphstat.core.ingest import load_edge_list
from graphstat.core.paths import sampled_distances
from graphstat.core.sampling import sample_pairs
from graphstat.core.types import Adjacency, AnalysisReport, EdgeList

logger = logging.getLogger(__name__)

# Wraps each stage, e.g. to time it; receives the stage name
StageHook = Callable[[str], AbstractContextManager[Any]]


def _no_hook(name: str) -> AbstractContextManager[Any]:
    return nullcontext()


@contextmanager
def run_stage(name: str, hook: StageHook | None = None) -> Iterator[None]:
    """Run a block as the named stage.

    The hook is entered around the block. An exception that is not a
    GraphStatError gets the stage name attached as a `stage` attribute
    (unless it already has one) and as a note.
    """
    with (hook or _no_hook)(name):
        try:
            yield
        except GraphStatError:
            raise
        except Exception as e:
            if getattr(e, "stage", None) is None:
                e.add_note(f"graphstat stage: {name}")
                e.stage = name  # type: ignore[attr-defined]
            raise


def adjacency_for(edge_list: EdgeList, include_isolated: bool = False) -> Adjacency:
    """Build the adjacency mapping for an edge list under the isolated-vertex policy."""
    extra = edge_list.isolated if include_isolated else ()
    return build_adjacency(edge_list.edges, extra_vertices=extra)


def analyze(
    edge_list: EdgeList,
    config: GraphStatConfig,
    rng: random.Random | None = None,
    stage: StageHook | None = None,
) -> AnalysisReport:
    """Run every analysis stage over a parsed edge list.

    Args:
        edge_list: Parsed input.
        config: Settings for sampling, workers and policies.
        rng: Random source for pair sampling. Defaults to one seeded with
            config.seed.
        stage: Optional hook entered around each stage.

    Returns:
        AnalysisReport with sampled distances, components and degree stats.

    Raises:
        InsufficientVerticesError: If pairs are requested from a graph with
            fewer than two vertices.
        EmptyGraphError: If the graph is empty and the empty-graph policy
            is "error".

    Any other exception escaping a stage carries that stage's name in its
    `stage` attribute.
    """
    with run_stage(STAGE_ADJACENCY, stage):
        adjacency = adjacency_for(edge_list, config.include_isolated)
    logger.debug("Built adjacency: %d vertices, %d edges", len(adjacency), len(edge_list.edges))

    with run_stage(STAGE_SAMPLING, stage):
        if rng is None:
            rng = random.Random(config.seed)
        pairs = sample_pairs(adjacency.keys(), config.num_pairs, rng=rng)

    with run_stage(STAGE_DISTANCES, stage):
        distances = sampled_distances(adjacency, pairs, workers=config.workers)

    with run_stage(STAGE_COMPONENTS, stage):
        components = connected_components(adjacency)

    with run_stage(STAGE_DEGREE, stage):
        degree = degree_stats(adjacency, empty_policy=config.empty_graph)

    return AnalysisReport(
        distances=distances,
        components=tuple(components),
        degree=degree,
        edge_count=len(edge_list.edges),
        vertex_count=len(adjacency),
        skipped_lines=len(edge_list.skipped_lines),
    )


def load_and_analyze(
    path: Path,
    config: GraphStatConfig,
    rng: random.Random | None = None,
) -> AnalysisReport:
    """Read an edge-list file and analyze it.

    Raises:
        IngestionError: If the file cannot be read, or a line is malformed
            while skip_malformed is off.
        InsufficientVerticesError: See analyze().
        EmptyGraphError: See analyze().
    """
    with run_stage(STAGE_INGESTION):
        edge_list = load_edge_list(
            path,
            skip_malformed=config.skip_malformed,
            include_isolated=config.include_isolated,
        )
    return analyze(edge_list, config, rng=rng)
