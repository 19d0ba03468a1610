"""Tests for edit distance."""

import pytest

from sheetrecon.engine import edit_distance


class TestEditDistance:
    """Test the Levenshtein distance."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
            ("date", "date", 0),
            ("date", "data", 1),
        ],
    )
    def test_known_distances(self, a, b, expected):
        """Test distances for well-known pairs."""
        assert edit_distance(a, b) == expected

    @pytest.mark.parametrize(
        "a,b",
        [("kitten", "sitting"), ("Name", "Item Name"), ("", "x"), ("size", "price")],
    )
    def test_symmetric(self, a, b):
        """Test that distance does not depend on argument order."""
        assert edit_distance(a, b) == edit_distance(b, a)

    @pytest.mark.parametrize("a,b", [("a", "abcdef"), ("price", "unit price"), ("", "abc")])
    def test_at_least_length_difference(self, a, b):
        """Test that distance is at least the difference in lengths."""
        assert edit_distance(a, b) >= abs(len(a) - len(b))

    def test_zero_only_for_identical_strings(self):
        """Test that only identical strings are at distance zero."""
        assert edit_distance("Size", "Size") == 0
        assert edit_distance("Size", "size") == 1
