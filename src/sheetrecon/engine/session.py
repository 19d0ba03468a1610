"""Reconciliation session holding both tables and their derived alignments."""

import logging
from typing import Any, Callable, Optional, Sequence

from ..config import Settings
from ..errors import InvalidColumnError
from ..models import (
    CellValues,
    ColumnMapping,
    ColumnPair,
    ComparisonSummary,
    DifferenceSet,
    KeyKind,
    KeySelection,
    RowMapping,
    Side,
    Table,
    headers,
)
from .columns import ColumnMatcher, get_strategy
from .differ import DiffEngine, cell_values, diff_rows, unmatched_rows
from .navigation import DiffNavigator
from .rows import RowMatcher

logger = logging.getLogger(__name__)


def _snapshot(table: Optional[Table]) -> list[list[Any]]:
    """Copy a table so later edits by the caller cannot leak in."""
    if not table:
        return []
    return [list(row) if row is not None else [] for row in table]


class ReconciliationSession:
    """
    Explicit state for one two-table comparison.

    Inputs are the two tables, the key column selection and an optional
    manual column mapping. Each input carries a revision number; the column
    and row mappings are recomputed only when a revision they depend on
    changes. The difference set is only replaced by compare().
    """

    def __init__(
        self,
        column_matcher: Optional[ColumnMatcher] = None,
        row_matcher: Optional[RowMatcher] = None,
        diff_engine: Optional[DiffEngine] = None,
    ):
        self.column_matcher = column_matcher or ColumnMatcher()
        self.row_matcher = row_matcher or RowMatcher()
        self.diff_engine = diff_engine or DiffEngine()

        self._tables: dict[Side, list[list[Any]]] = {Side.A: [], Side.B: []}
        self._sheet_names: dict[Side, list[str]] = {Side.A: [], Side.B: []}
        self._keys = KeySelection()
        self._manual_mapping: Optional[ColumnMapping] = None

        self._revisions = {"tables": 0, "keys": 0}
        self._derived: dict[str, tuple[tuple, Any]] = {}

        self._differences: DifferenceSet = frozenset()
        self.navigator = DiffNavigator()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReconciliationSession":
        """Build a session with matchers configured from application settings."""
        return cls(
            column_matcher=ColumnMatcher(
                threshold=settings.similarity_threshold,
                strategy=get_strategy(settings.match_strategy),
            ),
            row_matcher=RowMatcher(
                separator=settings.key_separator,
                duplicate_policy=settings.duplicate_key_policy,
            ),
        )

    def _derive(self, name: str, depends_on: Sequence[str], compute: Callable[[], Any]) -> Any:
        versions = tuple(self._revisions[dep] for dep in depends_on)
        cached = self._derived.get(name)
        if cached is not None and cached[0] == versions:
            return cached[1]
        value = compute()
        self._derived[name] = (versions, value)
        return value

    def _bump(self, name: str) -> None:
        self._revisions[name] += 1

    # Tables

    def load_table(
        self,
        side: Side,
        table: Table,
        sheet_names: Optional[Sequence[str]] = None,
    ) -> None:
        """Replace one table wholesale. Any manual column mapping is discarded."""
        side = Side(side)
        self._tables[side] = _snapshot(table)
        self._sheet_names[side] = list(sheet_names or [])
        self._manual_mapping = None
        self._bump("tables")
        logger.info(
            f"Loaded table {side.value.upper()}: {len(self._tables[side])} rows "
            f"({len(headers(self._tables[side]))} columns)"
        )

    def table(self, side: Side) -> list[list[Any]]:
        return self._tables[Side(side)]

    def headers(self, side: Side) -> list[str]:
        return headers(self._tables[Side(side)])

    def sheet_names(self, side: Side) -> list[str]:
        return list(self._sheet_names[Side(side)])

    @property
    def is_loaded(self) -> bool:
        return bool(self._tables[Side.A]) and bool(self._tables[Side.B])

    # Column mapping

    @property
    def auto_column_mapping(self) -> ColumnMapping:
        def compute() -> ColumnMapping:
            if not self.is_loaded:
                return {}
            return self.column_matcher.match(
                self._tables[Side.A][0] or [], self._tables[Side.B][0] or []
            )

        return dict(self._derive("auto_column_mapping", ["tables"], compute))

    @property
    def column_mapping(self) -> ColumnMapping:
        """The manual mapping when one exists, otherwise the automatic one."""
        if self._manual_mapping is not None:
            return dict(self._manual_mapping)
        return self.auto_column_mapping

    @property
    def has_manual_mapping(self) -> bool:
        return self._manual_mapping is not None

    def set_manual_mapping(self, mapping: ColumnMapping) -> None:
        """Replace the automatic mapping. Duplicate targets are allowed."""
        self._manual_mapping = {int(a): int(b) for a, b in mapping.items()}
        logger.info(f"Manual column mapping set ({len(self._manual_mapping)} columns)")

    def set_column_target(self, column_a: int, column_b: Optional[int]) -> None:
        """Point one A column at a B column (or at nothing) in a manual copy of the mapping."""
        self._check_column(Side.A, column_a)
        if column_b is not None:
            self._check_column(Side.B, column_b)

        mapping = self.column_mapping
        if column_b is None:
            mapping.pop(column_a, None)
        else:
            mapping[column_a] = column_b
        self._manual_mapping = mapping
        logger.debug(f"Column {column_a} mapped to {column_b}")

    def clear_manual_mapping(self) -> None:
        """Go back to automatic matching."""
        self._manual_mapping = None
        logger.info("Manual column mapping cleared")

    def column_pairs(self) -> list[ColumnPair]:
        """The effective column mapping with header text and scores."""
        headers_a = self.headers(Side.A)
        headers_b = self.headers(Side.B)
        pairs = []
        for column_a, column_b in sorted(self.column_mapping.items()):
            header_a = headers_a[column_a] if 0 <= column_a < len(headers_a) else ""
            header_b = headers_b[column_b] if 0 <= column_b < len(headers_b) else ""
            pairs.append(
                ColumnPair(
                    column_a=column_a,
                    column_b=column_b,
                    header_a=header_a,
                    header_b=header_b,
                    score=self.column_matcher.score(header_a, header_b),
                )
            )
        return pairs

    # Key columns

    @property
    def key_selection(self) -> KeySelection:
        return self._keys.model_copy()

    @property
    def has_key_columns(self) -> bool:
        return self._keys.is_complete

    def set_key_column(self, side: Side, kind: KeyKind, index: Optional[int]) -> None:
        side = Side(side)
        kind = KeyKind(kind)
        if index is not None:
            self._check_column(side, index)
        setattr(self._keys, f"{kind.value}_{side.value}", index)
        self._bump("keys")
        logger.debug(f"Key column {kind.value} for table {side.value.upper()} set to {index}")

    def set_date_column(self, side: Side, index: Optional[int]) -> None:
        self.set_key_column(side, KeyKind.DATE, index)

    def set_size_column(self, side: Side, index: Optional[int]) -> None:
        self.set_key_column(side, KeyKind.SIZE, index)

    def set_key_selection(self, keys: KeySelection) -> None:
        for side in Side:
            for kind in KeyKind:
                index = keys.column_for(side, kind)
                if index is not None:
                    self._check_column(side, index)
        self._keys = keys.model_copy()
        self._bump("keys")

    def _check_column(self, side: Side, index: int) -> None:
        count = len(self.headers(side))
        if not 0 <= index < count:
            raise InvalidColumnError(
                f"Column {index} is out of range for table {Side(side).value.upper()} "
                f"({count} columns)"
            )

    # Rows

    @property
    def row_mapping(self) -> RowMapping:
        def compute() -> RowMapping:
            return self.row_matcher.match(
                self._tables[Side.A], self._tables[Side.B], self._keys
            )

        return dict(self._derive("row_mapping", ["tables", "keys"], compute))

    @property
    def unmatched_rows(self) -> list[int]:
        return unmatched_rows(self._tables[Side.A], self.row_mapping)

    # Differences

    @property
    def differences(self) -> DifferenceSet:
        return self._differences

    @property
    def diff_rows(self) -> list[int]:
        return diff_rows(self._differences)

    @property
    def can_compare(self) -> bool:
        return self.is_loaded and bool(self.row_mapping) and bool(self.column_mapping)

    def compare(self) -> DifferenceSet:
        """
        Recompute the difference set from the current inputs.

        Does nothing when a table is empty or either mapping is empty; the
        previous difference set is kept in that case.
        """
        if not self.can_compare:
            logger.info("Compare skipped: tables or mappings are empty")
            return self._differences

        self._differences = self.diff_engine.compare(
            self._tables[Side.A],
            self._tables[Side.B],
            self.row_mapping,
            self.column_mapping,
            self._keys,
        )
        self.navigator.reset(self._differences)
        return self._differences

    def cell_values(self, row: int, col: int) -> CellValues:
        return cell_values(
            self._tables[Side.A],
            self._tables[Side.B],
            self.row_mapping,
            self.column_mapping,
            row,
            col,
            self._differences,
        )

    def summary(self) -> ComparisonSummary:
        return ComparisonSummary(
            matched_columns=len(self.column_mapping),
            matched_rows=len(self.row_mapping),
            unmatched_rows=self.unmatched_rows,
            difference_count=len(self._differences),
            diff_rows=self.diff_rows,
            key_based=self.has_key_columns,
        )
