"""Tests for cell difference detection."""

from sheetrecon.engine import DiffEngine, cell_values, diff_rows, unmatched_rows
from sheetrecon.models import CellCoordinate, KeySelection


class TestDiffEngine:
    """Test comparing aligned tables."""

    def test_flags_only_differing_cell(self):
        """Test that only the changed column is reported."""
        table_a = [["Name", "Value"], ["x", "1"]]
        table_b = [["Name", "Value"], ["x", "2"]]
        result = DiffEngine().compare(table_a, table_b, {1: 1}, {0: 0, 1: 1}, KeySelection())
        assert result == frozenset({CellCoordinate(1, 1)})

    def test_follows_column_mapping(self, table_a, table_b, key_selection):
        """Test differences over renamed, reordered columns and key-matched rows."""
        result = DiffEngine().compare(
            table_a, table_b, {1: 2, 2: 3, 3: 1}, {0: 1, 1: 0, 2: 3, 3: 2}, key_selection
        )
        assert result == {CellCoordinate(1, 3), CellCoordinate(2, 0)}

    def test_key_columns_excluded(self):
        """Test that key columns are never compared even when they differ."""
        table_a = [["Date", "Size", "Note"], ["2024-01-01", "10", "a"]]
        table_b = [["Date", "Size", "Note"], ["01/01/2024", "10.0", "a"]]
        keys = KeySelection(date_a=0, size_a=1, date_b=0, size_b=1)
        result = DiffEngine().compare(table_a, table_b, {1: 1}, {0: 0, 1: 1, 2: 2}, keys)
        assert result == frozenset()

    def test_partial_key_selection_still_excluded(self):
        """Test that a configured A key column is skipped on its own."""
        table_a = [["Date", "Note"], ["2024-01-01", "a"]]
        table_b = [["Date", "Note"], ["2024-01-02", "b"]]
        result = DiffEngine().compare(
            table_a, table_b, {1: 1}, {0: 0, 1: 1}, KeySelection(date_a=0)
        )
        assert result == {CellCoordinate(1, 1)}

    def test_unmapped_columns_ignored(self):
        """Test that columns without a mapping are never flagged."""
        table_a = [["Name", "Extra"], ["x", "only in a"]]
        table_b = [["Name"], ["x"]]
        assert DiffEngine().compare(table_a, table_b, {1: 1}, {0: 0}, KeySelection()) == frozenset()

    def test_trimmed_case_sensitive_comparison(self):
        """Test that whitespace is ignored but case is not."""
        table_a = [["A", "B"], ["  same ", "Case"]]
        table_b = [["A", "B"], ["same", "case"]]
        result = DiffEngine().compare(table_a, table_b, {1: 1}, {0: 0, 1: 1}, KeySelection())
        assert result == {CellCoordinate(1, 1)}

    def test_string_form_of_numbers(self):
        """Test that 10 equals "10" but not 10.0."""
        table_a = [["A", "B"], [10, 10]]
        table_b = [["A", "B"], ["10", 10.0]]
        result = DiffEngine().compare(table_a, table_b, {1: 1}, {0: 0, 1: 1}, KeySelection())
        assert result == {CellCoordinate(1, 1)}

    def test_sparse_rows_read_as_empty(self):
        """Test that missing and None cells compare as empty strings."""
        table_a = [["A", "B", "C"], ["x"]]
        table_b = [["A", "B", "C"], ["x", None, "y"]]
        result = DiffEngine().compare(
            table_a, table_b, {1: 1}, {0: 0, 1: 1, 2: 2}, KeySelection()
        )
        assert result == {CellCoordinate(1, 2)}

    def test_out_of_bounds_rows_skipped(self):
        """Test that row pairs outside either table contribute nothing."""
        table_a = [["A"], ["x"]]
        table_b = [["A"], ["y"]]
        result = DiffEngine().compare(table_a, table_b, {1: 5, 7: 1}, {0: 0}, KeySelection())
        assert result == frozenset()

    def test_manual_mapping_may_repeat_targets(self):
        """Test that two A columns may point at the same B column."""
        table_a = [["A", "B"], ["x", "y"]]
        table_b = [["A"], ["x"]]
        result = DiffEngine().compare(table_a, table_b, {1: 1}, {0: 0, 1: 0}, KeySelection())
        assert result == {CellCoordinate(1, 1)}

    def test_empty_tables(self):
        """Test that comparing empty tables finds nothing."""
        assert DiffEngine().compare([], [["A"]], {1: 1}, {0: 0}, KeySelection()) == frozenset()

    def test_idempotent(self, table_a, table_b):
        """Test that comparing twice gives the same result."""
        engine = DiffEngine()
        args = (table_a, table_b, {1: 1, 2: 2, 3: 3}, {0: 1, 1: 0, 2: 3, 3: 2}, KeySelection())
        assert engine.compare(*args) == engine.compare(*args)


class TestDerivedFacts:
    """Test helpers derived from mappings and differences."""

    def test_unmatched_rows(self):
        """Test listing data rows without a partner."""
        table = [["A"], ["1"], ["2"], ["3"], ["4"]]
        assert unmatched_rows(table, {1: 1, 3: 2}) == [2, 4]

    def test_diff_rows_sorted_and_distinct(self):
        """Test listing rows that carry differences."""
        differences = frozenset(
            {CellCoordinate(5, 0), CellCoordinate(2, 1), CellCoordinate(5, 3)}
        )
        assert diff_rows(differences) == [2, 5]


class TestCellValues:
    """Test looking up both sides of a cell."""

    def test_matched_cell(self, table_a, table_b):
        """Test values of a matched and mapped cell."""
        values = cell_values(table_a, table_b, {1: 2}, {3: 2}, 1, 3)
        assert values.value_a == "100"
        assert values.value_b == "101"
        assert values.matched is True
        assert values.mapped_col == 2

    def test_unmatched_row(self, table_a, table_b):
        """Test that an unmatched row reports no partner."""
        values = cell_values(table_a, table_b, {}, {0: 1}, 4, 0)
        assert values.value_a == "delta"
        assert values.value_b == "(unmatched)"
        assert values.matched is False

    def test_unmapped_column(self, table_a, table_b):
        """Test that an unmapped column has an empty B value."""
        values = cell_values(table_a, table_b, {1: 1}, {}, 1, 0)
        assert values.value_b == ""
        assert values.mapped_col is None

    def test_marks_differences(self, table_a, table_b):
        """Test that the difference flag follows the difference set."""
        differences = frozenset({CellCoordinate(1, 3)})
        values = cell_values(table_a, table_b, {1: 2}, {3: 2}, 1, 3, differences)
        assert values.is_different is True
