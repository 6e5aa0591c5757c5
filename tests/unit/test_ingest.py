"""Tests for edge-list ingestion."""

from pathlib import Path

import pytest

from graphstat.core.exceptions import IngestionError, MalformedLineError
from graphstat.core.ingest import load_edge_list, parse_edge_line, parse_vertex, read_edge_list


class TestParseEdgeLine:
    """Tests for parse_edge_line()."""

    def test_plain_pair(self) -> None:
        assert parse_edge_line("3,4") == (3, 4)

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        """' 3 , 4 ' parses to (3, 4)."""
        assert parse_edge_line(" 3 , 4 ") == (3, 4)

    def test_non_numeric_field_is_rejected(self) -> None:
        assert parse_edge_line("abc,2") is None

    def test_negative_vertex_is_rejected(self) -> None:
        assert parse_edge_line("-1,5") is None

    def test_single_field_is_rejected(self) -> None:
        assert parse_edge_line("7") is None

    def test_empty_line_is_rejected(self) -> None:
        assert parse_edge_line("") is None

    def test_extra_fields_are_ignored(self) -> None:
        assert parse_edge_line("1,2,weight") == (1, 2)

    def test_self_loop_is_kept(self) -> None:
        assert parse_edge_line("5,5") == (5, 5)

    def test_underscore_digits_are_rejected(self) -> None:
        """Python int() accepts '1_000' but edge ids must be plain digits."""
        assert parse_edge_line("1_000,2") is None

    def test_float_is_rejected(self) -> None:
        assert parse_edge_line("1.5,2") is None


class TestParseVertex:
    """Tests for parse_vertex()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("0", 0), (" 42 ", 42), ("+7", 7), ("007", 7)],
    )
    def test_valid_vertices(self, text: str, expected: int) -> None:
        assert parse_vertex(text) == expected

    @pytest.mark.parametrize("text", ["", " ", "x", "-3", "٣", "1e3"])
    def test_invalid_vertices(self, text: str) -> None:
        assert parse_vertex(text) is None


class TestReadEdgeList:
    """Tests for read_edge_list()."""

    def test_malformed_line_does_not_stop_later_lines(self) -> None:
        """A bad line is dropped and the following lines are still read."""
        result = read_edge_list(["1,2\n", "abc,2\n", "3,4\n"])

        assert result.edges == ((1, 2), (3, 4))
        assert result.skipped_lines == (2,)

    def test_windows_line_endings(self) -> None:
        result = read_edge_list(["1,2\r\n", "2,3\r\n"])
        assert result.edges == ((1, 2), (2, 3))

    def test_duplicate_edges_are_preserved(self) -> None:
        result = read_edge_list(["1,2", "1,2", "2,1"])
        assert result.edges == ((1, 2), (1, 2), (2, 1))

    def test_empty_input(self) -> None:
        result = read_edge_list([])
        assert result.edges == ()
        assert result.skipped_lines == ()
        assert result.vertices == frozenset()

    def test_strict_mode_raises_with_line_number(self) -> None:
        with pytest.raises(MalformedLineError) as exc_info:
            read_edge_list(["1,2", "oops"], skip_malformed=False)

        assert exc_info.value.line_number == 2
        assert exc_info.value.line == "oops"
        assert "line 2" in str(exc_info.value)

    def test_strict_mode_accepts_clean_input(self) -> None:
        result = read_edge_list(["1,2", "2,3"], skip_malformed=False)
        assert result.edges == ((1, 2), (2, 3))

    def test_single_vertex_lines_skipped_by_default(self) -> None:
        result = read_edge_list(["1,2", "9"])
        assert result.isolated == ()
        assert result.skipped_lines == (2,)

    def test_single_vertex_lines_kept_when_isolated_enabled(self) -> None:
        result = read_edge_list(["1,2", " 9 ", "abc"], include_isolated=True)

        assert result.edges == ((1, 2),)
        assert result.isolated == (9,)
        assert result.skipped_lines == (3,)

    def test_single_vertex_line_not_malformed_in_strict_isolated_mode(self) -> None:
        result = read_edge_list(["1,2", "9"], skip_malformed=False, include_isolated=True)
        assert result.isolated == (9,)

    def test_vertices_property(self) -> None:
        result = read_edge_list(["1,2", "2,3", "7,7"])
        assert result.vertices == frozenset({1, 2, 3, 7})


class TestLoadEdgeList:
    """Tests for load_edge_list()."""

    def test_reads_fixture_file(self, fixture_file) -> None:
        result = load_edge_list(fixture_file("path.csv"))
        assert result.edges == ((1, 2), (2, 3), (3, 4), (4, 5), (5, 6))

    def test_header_and_junk_lines_are_skipped(self, fixture_file) -> None:
        """The twitch-style header and malformed records are dropped."""
        result = load_edge_list(fixture_file("twitch_sample.csv"))

        assert result.edges == (
            (98343, 141493),
            (98343, 58736),
            (58736, 140703),
            (140703, 98343),
        )
        assert result.skipped_lines == (1, 5, 6, 7, 8)

    def test_missing_file_raises_ingestion_error(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope.csv"

        with pytest.raises(IngestionError, match="not found"):
            load_edge_list(missing)

    def test_directory_raises_ingestion_error(self, tmp_path: Path) -> None:
        with pytest.raises(IngestionError):
            load_edge_list(tmp_path)

    def test_invalid_utf8_raises_ingestion_error(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.csv"
        path.write_bytes(b"1,2\n\xff\xfe\x00\n")

        with pytest.raises(IngestionError, match="Cannot read"):
            load_edge_list(path)

    def test_ingestion_error_names_stage(self, tmp_path: Path) -> None:
        with pytest.raises(IngestionError) as exc_info:
            load_edge_list(tmp_path / "missing.csv")
        assert exc_info.value.stage == "ingestion"

    def test_strict_mode_from_file(self, fixture_file) -> None:
        with pytest.raises(MalformedLineError) as exc_info:
            load_edge_list(fixture_file("twitch_sample.csv"), skip_malformed=False)
        assert exc_info.value.line_number == 1
