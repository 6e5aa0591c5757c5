"""Edge-list ingestion for graphstat.

Reads comma-separated vertex pairs, one per line. Lines that do not hold
two non-negative integers are dropped (or rejected in strict mode).
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from graphstat.core.constants import EDGE_FIELD_SEPARATOR
from graphstat.core.exceptions import IngestionError, MalformedLineError
from graphstat.core.types import Edge, EdgeList, Vertex

logger = logging.getLogger(__name__)

# ASCII digits only: int() alone would also accept "1_000" and non-ASCII digits
_VERTEX_PATTERN = re.compile(r"\+?[0-9]+")


def parse_vertex(text: str) -> Vertex | None:
    """Parse one vertex identifier.

    Args:
        text: Field text, surrounding whitespace allowed.

    Returns:
        The vertex as an int, or None if the field is not a non-negative
        base-10 integer.
    """
    stripped = text.strip()
    if not _VERTEX_PATTERN.fullmatch(stripped):
        return None
    return int(stripped)


def parse_edge_line(line: str) -> Edge | None:
    """Parse a single edge record.

    The first two comma-separated fields must be vertices; any further
    fields are ignored.

    Args:
        line: Raw line text.

    Returns:
        The (u, v) edge, or None if the line is malformed.

    Examples:
        >>> parse_edge_line(" 3 , 4 ")
        (3, 4)
        >>> parse_edge_line("abc,2") is None
        True
    """
    fields = line.split(EDGE_FIELD_SEPARATOR)
    if len(fields) < 2:
        return None

    u = parse_vertex(fields[0])
    v = parse_vertex(fields[1])
    if u is None or v is None:
        return None
    return (u, v)


def read_edge_list(
    lines: Iterable[str],
    *,
    skip_malformed: bool = True,
    include_isolated: bool = False,
) -> EdgeList:
    """Parse edge records from an iterable of lines.

    Args:
        lines: Lines of text, with or without trailing newlines.
        skip_malformed: Drop lines that are not vertex pairs. When False,
            the first such line raises MalformedLineError.
        include_isolated: Treat a line holding a single vertex as an
            isolated-vertex declaration instead of a malformed line.

    Returns:
        EdgeList with the parsed edges, declared isolated vertices and the
        numbers of skipped lines.

    Raises:
        MalformedLineError: If skip_malformed is False and a line is malformed.
    """
    edges: list[Edge] = []
    isolated: list[Vertex] = []
    skipped: list[int] = []

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")

        edge = parse_edge_line(line)
        if edge is not None:
            edges.append(edge)
            continue

        if include_isolated:
            vertex = parse_vertex(line)
            if vertex is not None:
                isolated.append(vertex)
                continue

        if not skip_malformed:
            raise MalformedLineError(line_number, line)

        logger.debug("Skipping malformed line %d: %r", line_number, line)
        skipped.append(line_number)

    if skipped:
        logger.info("Skipped %d malformed lines", len(skipped))

    return EdgeList(edges=tuple(edges), isolated=tuple(isolated), skipped_lines=tuple(skipped))


def load_edge_list(
    path: Path,
    *,
    skip_malformed: bool = True,
    include_isolated: bool = False,
) -> EdgeList:
    """Read an edge-list file.

    Args:
        path: Path to a UTF-8 text file of comma-separated vertex pairs.
        skip_malformed: See read_edge_list().
        include_isolated: See read_edge_list().

    Returns:
        The parsed EdgeList.

    Raises:
        IngestionError: If the file is missing or cannot be read.
        MalformedLineError: If skip_malformed is False and a line is malformed.
    """
    logger.debug("Reading edge list from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            edge_list = read_edge_list(
                f,
                skip_malformed=skip_malformed,
                include_isolated=include_isolated,
            )
    except FileNotFoundError as e:
        raise IngestionError(f"Input file not found: {path}") from e
    except IsADirectoryError as e:
        raise IngestionError(f"Input path is a directory: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Cannot read input file {path}: {e}") from e

    logger.debug("Read %d edges from %s", len(edge_list.edges), path)
    return edge_list
