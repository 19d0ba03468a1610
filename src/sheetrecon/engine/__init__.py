"""Column matching, row matching and cell diffing engine."""

from .distance import edit_distance
from .similarity import similarity, normalize
from .columns import ColumnMatcher, GreedyStrategy, OptimalStrategy, MatchingStrategy, get_strategy
from .rows import RowMatcher, DuplicateKeyPolicy
from .differ import DiffEngine, cell_values, diff_rows, unmatched_rows
from .navigation import DiffNavigator
from .session import ReconciliationSession

__all__ = [
    "edit_distance",
    "similarity",
    "normalize",
    "ColumnMatcher",
    "GreedyStrategy",
    "OptimalStrategy",
    "MatchingStrategy",
    "get_strategy",
    "RowMatcher",
    "DuplicateKeyPolicy",
    "DiffEngine",
    "cell_values",
    "diff_rows",
    "unmatched_rows",
    "DiffNavigator",
    "ReconciliationSession",
]
