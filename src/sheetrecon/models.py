"""Data models shared by the reconciliation engine and its callers."""

from enum import Enum
from typing import NamedTuple, Optional, Sequence, Union

from pydantic import BaseModel, Field

# A cell is a string, a number, or absent.
Cell = Union[str, int, float, None]
Row = Sequence[Cell]
# Row 0 is the header row; rows 1..N are data rows.
Table = Sequence[Row]

ColumnMapping = dict[int, int]
RowMapping = dict[int, int]


class Side(str, Enum):
    """Which of the two tables an operation refers to."""

    A = "a"  # source table, differences are reported in its coordinates
    B = "b"  # comparison table


class KeyKind(str, Enum):
    """Kind of key column used to build the composite row key."""

    DATE = "date"
    SIZE = "size"


class CellCoordinate(NamedTuple):
    """A (row, column) position in table A."""

    row: int
    col: int


DifferenceSet = frozenset[CellCoordinate]


def cell_text(row: Optional[Row], index: Optional[int]) -> str:
    """Return the trimmed string form of a cell, with absent cells as ''."""
    if row is None or index is None or index < 0 or index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    return str(value).strip()


def headers(table: Table) -> list[str]:
    """Return the header row of a table as strings."""
    if not table:
        return []
    return ["" if value is None else str(value) for value in (table[0] or [])]


def data_row_count(table: Table) -> int:
    """Number of data rows below the header."""
    return max(len(table) - 1, 0)


class KeySelection(BaseModel):
    """Optional date and size key columns for each table.

    Key-based row matching is only used when all four indices are set.
    """

    date_a: Optional[int] = None
    size_a: Optional[int] = None
    date_b: Optional[int] = None
    size_b: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.date_a, self.size_a, self.date_b, self.size_b)

    def excluded_columns(self) -> set[int]:
        """Table A columns that are never compared."""
        return {index for index in (self.date_a, self.size_a) if index is not None}

    def column_for(self, side: Side, kind: KeyKind) -> Optional[int]:
        return getattr(self, f"{kind.value}_{side.value}")


class CellValues(BaseModel):
    """Values of an A cell and its aligned B cell, as text."""

    row: int
    col: int
    value_a: str
    value_b: str
    matched: bool = True
    mapped_col: Optional[int] = None
    is_different: bool = False


class ColumnPair(BaseModel):
    """A single entry of a column mapping with header text."""

    column_a: int
    column_b: int
    header_a: str
    header_b: str
    score: Optional[float] = None


class ComparisonSummary(BaseModel):
    """Summary of the last comparison run."""

    matched_columns: int = 0
    matched_rows: int = 0
    unmatched_rows: list[int] = Field(default_factory=list)
    difference_count: int = 0
    diff_rows: list[int] = Field(default_factory=list)
    key_based: bool = False
