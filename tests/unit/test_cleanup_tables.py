#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cleanup_tables.py
"""Unit tests for split table row repair."""

import pytest

from kbconvert.cleanup.tables import (
    TableRepairContext,
    build_row,
    column_count,
    is_separator_row,
    is_table_row,
    repair_tables,
    split_fragments,
)


@pytest.mark.unit
class TestRowHelpers:
    """Tests for the row classification helpers."""

    @pytest.mark.parametrize("line", ["|---|---|", "| :--- | ---: |", "|:-:|", "  |---|  "])
    def test_separator_rows(self, line):
        """Test separator rows with and without alignment colons."""
        assert is_separator_row(line)

    @pytest.mark.parametrize("line", ["| a | b |", "|", "---", "| : |"])
    def test_non_separator_rows(self, line):
        """Test that content rows and bare rules are not separators."""
        assert not is_separator_row(line)

    def test_table_row_needs_inner_pipe(self):
        """Test that a well-formed row has at least two cells."""
        assert is_table_row("| a | b |")
        assert not is_table_row("| a |")
        assert not is_table_row("a | b")

    def test_column_count(self):
        """Test that columns are counted from the separator's pipes."""
        assert column_count("|---|---|---|") == 3
        assert column_count("|---|") == 1

    def test_split_fragments_drops_empty_pieces(self):
        """Test that pipes and blank pieces are removed."""
        assert split_fragments(["|", "Name", "| Age |", "|"]) == ["Name", "Age"]

    def test_build_row_pads(self):
        """Test padding a short row with empty cells."""
        assert build_row(["Name"], 2) == "| Name |  |"

    def test_build_row_truncates(self):
        """Test truncating a long row to the column count."""
        assert build_row(["a", "b", "c"], 2) == "| a | b |"


@pytest.mark.unit
class TestRepairTables:
    """Tests for repair_tables."""

    def test_split_header_and_body_rows(self):
        """Test rebuilding rows whose cells were each on their own line."""
        text = "|\nName\n|\n|---|---|\n|\nAlice\n|"
        assert repair_tables(text) == "| Name |  |\n|---|---|\n| Alice |  |"

    def test_well_formed_table_unchanged(self):
        """Test that an intact table passes through untouched."""
        text = "| Name | Age |\n|---|---|\n| Alice | 30 |\n| Bob | 25 |"
        assert repair_tables(text) == text

    def test_multiple_split_body_rows(self):
        """Test that a new row starts once the current row has every column."""
        text = "| A | B |\n|---|---|\n| 1\n| 2 |\n| 3\n| 4 |"
        assert repair_tables(text) == "| A | B |\n|---|---|\n| 1 | 2 |\n| 3 | 4 |"

    def test_blank_line_ends_table(self):
        """Test that text after a blank line is not merged into the table."""
        text = "| A | B |\n|---|---|\n| 1 | 2 |\n\nAfterwards"
        assert repair_tables(text) == text

    def test_heading_ends_table(self):
        """Test that a heading closes the current table."""
        text = "| A | B |\n|---|---|\n| 1\n## Next"
        assert repair_tables(text) == "| A | B |\n|---|---|\n| 1 |  |\n## Next"

    def test_pipe_line_without_separator_kept(self):
        """Test that pipe-led prose with no following separator is kept verbatim."""
        text = "| not a table\nJust text\n\nMore text"
        assert repair_tables(text) == text

    def test_fenced_code_untouched(self):
        """Test that pipes inside fenced code are never rebuilt."""
        text = "```\n|\nx\n|---|---|\n```"
        assert repair_tables(text) == text

    def test_no_tables(self):
        """Test that plain text is returned unchanged."""
        text = "First line\n\nSecond line"
        assert repair_tables(text) == text

    def test_context_counts_repaired_rows(self):
        """Test that the context reports how many rows were rebuilt."""
        ctx = TableRepairContext()
        repair_tables("|\nName\n|\n|---|---|\n|\nAlice\n|", ctx)
        assert ctx.rows_repaired == 2

    def test_empty_text(self):
        """Test repairing an empty string."""
        assert repair_tables("") == ""
