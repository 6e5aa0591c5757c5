"""Tests for the analysis pipeline."""

import math
import random
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest

from graphstat.core.analysis import adjacency_for, analyze, load_and_analyze, run_stage
from graphstat.core.config import GraphStatConfig
from graphstat.core.exceptions import EmptyGraphError, IngestionError, InsufficientVerticesError
from graphstat.core.ingest import read_edge_list
from graphstat.core.types import EdgeList


class TestAnalyze:
    """Tests for analyze()."""

    def test_path_graph_report(self, path_edges) -> None:
        config = GraphStatConfig(num_pairs=10, seed=1)

        report = analyze(EdgeList(edges=path_edges), config)

        assert len(report.distances) == 10
        for result in report.distances:
            assert result.distance == abs(result.source - result.target)
        assert report.components == (frozenset({1, 2, 3, 4, 5, 6}),)
        assert report.degree.average == pytest.approx(10 / 6)
        assert report.vertex_count == 6
        assert report.edge_count == 5

    def test_seed_makes_runs_reproducible(self, path_edges) -> None:
        config = GraphStatConfig(num_pairs=25, seed=123)
        edge_list = EdgeList(edges=path_edges)

        assert analyze(edge_list, config) == analyze(edge_list, config)

    def test_explicit_rng(self, path_edges) -> None:
        config = GraphStatConfig(num_pairs=5)
        edge_list = EdgeList(edges=path_edges)

        first = analyze(edge_list, config, rng=random.Random(7))
        second = analyze(edge_list, config, rng=random.Random(7))

        assert first.distances == second.distances

    def test_workers_do_not_change_results(self, path_edges) -> None:
        edge_list = EdgeList(edges=path_edges)
        single = analyze(edge_list, GraphStatConfig(num_pairs=40, seed=5, workers=1))
        threaded = analyze(edge_list, GraphStatConfig(num_pairs=40, seed=5, workers=3))

        assert single == threaded

    def test_isolated_policy(self) -> None:
        edge_list = read_edge_list(["1,2", "2,3", "5", "9"], include_isolated=True)

        excluded = analyze(edge_list, GraphStatConfig(num_pairs=0))
        included = analyze(edge_list, GraphStatConfig(num_pairs=0, include_isolated=True))

        assert excluded.degree.average == pytest.approx(4 / 3)
        assert len(excluded.components) == 1
        assert included.degree.average == pytest.approx(4 / 5)
        assert len(included.components) == 3

    def test_too_few_vertices_fails_in_sampling(self) -> None:
        with pytest.raises(InsufficientVerticesError) as exc_info:
            analyze(EdgeList(edges=((4, 4),)), GraphStatConfig(num_pairs=1))
        assert exc_info.value.stage == "sampling"

    def test_empty_graph_fails_in_degree_stage(self) -> None:
        with pytest.raises(EmptyGraphError):
            analyze(EdgeList(), GraphStatConfig(num_pairs=0))

    def test_empty_graph_with_nan_policy(self) -> None:
        report = analyze(EdgeList(), GraphStatConfig(num_pairs=0, empty_graph="nan"))

        assert report.components == ()
        assert math.isnan(report.degree.average)

    def test_stage_hook_sees_every_stage_in_order(self, path_edges) -> None:
        seen: list[str] = []

        @contextmanager
        def record(name: str) -> Iterator[None]:
            seen.append(name)
            yield

        analyze(EdgeList(edges=path_edges), GraphStatConfig(num_pairs=2, seed=0), stage=record)

        assert seen == [
            "adjacency",
            "sampling",
            "shortest paths",
            "components",
            "degree statistics",
        ]

    def test_skipped_lines_are_counted(self) -> None:
        edge_list = read_edge_list(["1,2", "junk", "2,3", ""])
        report = analyze(edge_list, GraphStatConfig(num_pairs=1, seed=0))
        assert report.skipped_lines == 2


class TestRunStage:
    """Tests for run_stage()."""

    def test_tags_unexpected_error_with_stage(self) -> None:
        with pytest.raises(RuntimeError) as exc_info:
            with run_stage("components"):
                raise RuntimeError("boom")

        assert exc_info.value.stage == "components"  # type: ignore[attr-defined]
        assert "graphstat stage: components" in exc_info.value.__notes__

    def test_keeps_innermost_stage(self) -> None:
        with pytest.raises(KeyError) as exc_info:
            with run_stage("outer"):
                with run_stage("inner"):
                    raise KeyError(1)

        assert exc_info.value.stage == "inner"  # type: ignore[attr-defined]
        assert exc_info.value.__notes__ == ["graphstat stage: inner"]

    def test_graphstat_error_keeps_its_own_stage(self) -> None:
        with pytest.raises(EmptyGraphError) as exc_info:
            with run_stage("components"):
                raise EmptyGraphError("no vertices")

        assert exc_info.value.stage == "degree statistics"
        assert not hasattr(exc_info.value, "__notes__")

    def test_hook_sees_failure(self) -> None:
        events: list[str] = []

        @contextmanager
        def record(name: str) -> Iterator[None]:
            events.append(f"start {name}")
            try:
                yield
            except MemoryError:
                events.append(f"failed {name}")
                raise

        with pytest.raises(MemoryError) as exc_info:
            with run_stage("sampling", record):
                raise MemoryError

        assert events == ["start sampling", "failed sampling"]
        assert exc_info.value.stage == "sampling"  # type: ignore[attr-defined]

    def test_analyze_tags_failing_stage(
        self, path_edges, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken(*args, **kwargs):  # type: ignore[no-untyped-def]
            raise ZeroDivisionError

        monkeypatch.setattr("graphstat.core.analysis.degree_stats", broken)

        with pytest.raises(ZeroDivisionError) as exc_info:
            analyze(EdgeList(edges=path_edges), GraphStatConfig(num_pairs=2, seed=0))

        assert exc_info.value.stage == "degree statistics"  # type: ignore[attr-defined]


class TestAdjacencyFor:
    def test_ignores_isolated_unless_enabled(self) -> None:
        edge_list = EdgeList(edges=((1, 2),), isolated=(7,))

        assert 7 not in adjacency_for(edge_list)
        assert adjacency_for(edge_list, include_isolated=True)[7] == frozenset()


class TestLoadAndAnalyze:
    def test_fixture_file(self, fixture_file) -> None:
        report = load_and_analyze(
            fixture_file("twitch_sample.csv"), GraphStatConfig(num_pairs=3, seed=0)
        )

        assert report.vertex_count == 4
        assert report.edge_count == 4
        assert report.skipped_lines == 5
        assert report.degree.average == pytest.approx(2.0)
        assert all(r.reachable for r in report.distances)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(IngestionError):
            load_and_analyze(tmp_path / "missing.csv", GraphStatConfig())
