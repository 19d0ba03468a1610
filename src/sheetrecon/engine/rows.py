"""Row alignment between two tables."""

import logging
from enum import Enum

from ..errors import DuplicateKeyError
from ..models import KeySelection, RowMapping, Table, cell_text

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "|"


class DuplicateKeyPolicy(str, Enum):
    """What to do when two comparison rows share a composite key."""

    LAST = "last"  # later row overwrites the earlier one
    FIRST = "first"  # earlier row is kept
    ERROR = "error"  # raise DuplicateKeyError


class RowMatcher:
    """
    Derives a row mapping between the data rows of two tables.

    With all four key columns configured, rows are matched on the composite
    key date + separator + size. Otherwise row i of A is matched to row i
    of B.
    """

    def __init__(
        self,
        separator: str = KEY_SEPARATOR,
        duplicate_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.LAST,
    ):
        self.separator = separator
        self.duplicate_policy = DuplicateKeyPolicy(duplicate_policy)

    def match(self, table_a: Table, table_b: Table, keys: KeySelection) -> RowMapping:
        if not table_a or not table_b:
            return {}

        if keys.is_complete:
            matches = self.match_by_key(table_a, table_b, keys)
            mode = "key"
        else:
            matches = self.match_by_position(table_a, table_b)
            mode = "positional"

        logger.info(f"Matched {len(matches)} rows ({mode} matching)")
        return matches

    def composite_key(self, date: str, size: str) -> str:
        return f"{date}{self.separator}{size}"

    def build_key_index(self, table: Table, date_col: int, size_col: int) -> dict[str, int]:
        """Map composite keys to data row indices, skipping incomplete keys."""
        index: dict[str, int] = {}
        for row_index in range(1, len(table)):
            row = table[row_index] or []
            date = cell_text(row, date_col)
            size = cell_text(row, size_col)
            if not date or not size:
                continue

            key = self.composite_key(date, size)
            if key in index:
                if self.duplicate_policy == DuplicateKeyPolicy.ERROR:
                    raise DuplicateKeyError(key, index[key], row_index)
                logger.debug(f"Duplicate key '{key}' in rows {index[key]} and {row_index}")
                if self.duplicate_policy == DuplicateKeyPolicy.FIRST:
                    continue
            index[key] = row_index
        return index

    def match_by_key(self, table_a: Table, table_b: Table, keys: KeySelection) -> RowMapping:
        lookup = self.build_key_index(table_b, keys.date_b, keys.size_b)

        matches: RowMapping = {}
        for row_index in range(1, len(table_a)):
            row = table_a[row_index] or []
            date = cell_text(row, keys.date_a)
            size = cell_text(row, keys.size_a)
            if not date or not size:
                continue

            key = self.composite_key(date, size)
            if key in lookup:
                matches[row_index] = lookup[key]
        return matches

    def match_by_position(self, table_a: Table, table_b: Table) -> RowMapping:
        last_row = min(len(table_a) - 1, len(table_b) - 1)
        return {row: row for row in range(1, last_row + 1)}
