"""Cell-level difference detection over aligned tables."""

import logging

from ..models import (
    CellCoordinate,
    CellValues,
    ColumnMapping,
    DifferenceSet,
    KeySelection,
    RowMapping,
    Table,
    cell_text,
)

logger = logging.getLogger(__name__)

UNMATCHED_TEXT = "(unmatched)"


class DiffEngine:
    """Compares the cells of matched rows through a column mapping."""

    def compare(
        self,
        table_a: Table,
        table_b: Table,
        row_mapping: RowMapping,
        column_mapping: ColumnMapping,
        keys: KeySelection,
    ) -> DifferenceSet:
        """
        Collect the A coordinates whose trimmed text differs from the aligned B cell.

        Key columns and unmapped columns are never compared. Rows whose
        partner lies outside table B are skipped.
        """
        if not table_a or not table_b:
            return frozenset()

        header_count = len(table_a[0] or [])
        excluded = keys.excluded_columns()
        differences: set[CellCoordinate] = set()

        for row_a, row_b in row_mapping.items():
            if not 1 <= row_a < len(table_a) or not 1 <= row_b < len(table_b):
                continue
            cells_a = table_a[row_a] or []
            cells_b = table_b[row_b] or []

            for col_a in range(header_count):
                if col_a in excluded:
                    continue
                col_b = column_mapping.get(col_a)
                if col_b is None:
                    continue

                if cell_text(cells_a, col_a) != cell_text(cells_b, col_b):
                    differences.add(CellCoordinate(row_a, col_a))

        logger.info(
            f"Compared {len(row_mapping)} rows across {len(column_mapping)} columns: "
            f"{len(differences)} difference(s)"
        )
        return frozenset(differences)


def unmatched_rows(table_a: Table, row_mapping: RowMapping) -> list[int]:
    """Data rows of A that have no partner in B."""
    return [row for row in range(1, len(table_a)) if row not in row_mapping]


def diff_rows(differences: DifferenceSet) -> list[int]:
    """Sorted A rows that carry at least one difference."""
    return sorted({coord.row for coord in differences})


def cell_values(
    table_a: Table,
    table_b: Table,
    row_mapping: RowMapping,
    column_mapping: ColumnMapping,
    row: int,
    col: int,
    differences: DifferenceSet = frozenset(),
) -> CellValues:
    """Raw text of an A cell next to the B cell it is aligned with."""
    cells_a = table_a[row] if 0 <= row < len(table_a) else None
    value_a = ""
    if cells_a and 0 <= col < len(cells_a) and cells_a[col] is not None:
        value_a = str(cells_a[col])
    is_different = CellCoordinate(row, col) in differences

    row_b = row_mapping.get(row)
    if row_b is None or not 0 <= row_b < len(table_b):
        return CellValues(
            row=row,
            col=col,
            value_a=value_a,
            value_b=UNMATCHED_TEXT,
            matched=False,
            is_different=is_different,
        )

    cells_b = table_b[row_b] or []
    col_b = column_mapping.get(col)
    value_b = ""
    if col_b is not None and 0 <= col_b < len(cells_b) and cells_b[col_b] is not None:
        value_b = str(cells_b[col_b])

    return CellValues(
        row=row,
        col=col,
        value_a=value_a,
        value_b=value_b,
        mapped_col=col_b,
        is_different=is_different,
    )
