"""Stepping through rows that carry differences."""

from typing import Optional

from ..models import DifferenceSet
from .differ import diff_rows


class DiffNavigator:
    """Cycles forwards and backwards over the rows of a difference set."""

    def __init__(self, differences: DifferenceSet = frozenset()):
        self.rows: list[int] = diff_rows(differences)
        self.position = 0

    def reset(self, differences: DifferenceSet) -> None:
        """Start over on a new difference set."""
        self.rows = diff_rows(differences)
        self.position = 0

    @property
    def current(self) -> Optional[int]:
        if not self.rows:
            return None
        return self.rows[self.position]

    def next(self) -> Optional[int]:
        """Advance to the next row, wrapping to the first."""
        if not self.rows:
            return None
        self.position = (self.position + 1) % len(self.rows)
        return self.rows[self.position]

    def previous(self) -> Optional[int]:
        """Step back to the previous row, wrapping to the last."""
        if not self.rows:
            return None
        self.position = len(self.rows) - 1 if self.position == 0 else self.position - 1
        return self.rows[self.position]
