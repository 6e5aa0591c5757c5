"""Pytest configuration and shared fixtures.

Provides small reference graphs, edge-list fixture files and isolation
from the user's real configuration file.
"""

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from graphstat.core.adjacency import build_adjacency
from graphstat.core.types import Adjacency, Edge

# Fixture directory path
FIXTURES_DIR = Path(__file__).parent / "fixtures" / "edges"

PATH_EDGES: tuple[Edge, ...] = ((1, 2), (2, 3), (3, 4), (4, 5), (5, 6))
THREE_COMPONENT_EDGES: tuple[Edge, ...] = (
    (1, 2),
    (2, 3),
    (3, 1),
    (10, 11),
    (11, 12),
    (20, 21),
)


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def path_edges() -> tuple[Edge, ...]:
    """Edges of the path 1-2-3-4-5-6."""
    return PATH_EDGES


@pytest.fixture
def path_graph() -> Adjacency:
    """Adjacency of the path 1-2-3-4-5-6."""
    return build_adjacency(PATH_EDGES)


@pytest.fixture
def three_component_graph() -> Adjacency:
    """Triangle {1,2,3}, path {10,11,12} and single edge {20,21}."""
    return build_adjacency(THREE_COMPONENT_EDGES)


@pytest.fixture
def write_edges(tmp_path: Path) -> Callable[[Iterable[str]], Path]:
    """Factory writing lines to an edge-list file and returning its path."""
    counter = iter(range(1_000_000))

    def _write(lines: Iterable[str]) -> Path:
        path = tmp_path / f"edges-{next(counter)}.csv"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fixture_file() -> Callable[[str], Path]:
    """Resolve a file under tests/fixtures/edges/."""

    def _resolve(name: str) -> Path:
        path = FIXTURES_DIR / name
        assert path.exists(), f"Missing fixture file: {path}"
        return path

    return _resolve
