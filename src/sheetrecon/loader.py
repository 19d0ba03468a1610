"""Reading source files into tables.

Supports CSV (a single sheet) and JSON, either a bare list of rows or
{"sheets": {"<name>": [[...], ...], ...}}. Only the first sheet is used.
"""

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any, Union

from .config import settings
from .errors import TableLoadError
from .models import Cell

logger = logging.getLogger(__name__)

INT_PATTERN = re.compile(r"^[+-]?\d+$")
FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?$")

DEFAULT_SHEET_NAME = "Sheet1"


def parse_cell(text: str) -> Cell:
    """Convert CSV text to a number where the number renders back to the same text."""
    stripped = text.strip()
    if not stripped:
        return None
    # Only lossless conversions, so "007", "10.50" and "1.5E3" stay text
    if INT_PATTERN.match(stripped) and str(int(stripped)) == stripped:
        return int(stripped)
    if FLOAT_PATTERN.match(stripped) and str(float(stripped)) == stripped:
        return float(stripped)
    return text


def _validate_rows(path: str, rows: Any) -> list[list[Cell]]:
    if not isinstance(rows, list):
        raise TableLoadError(path, "expected a list of rows")

    table: list[list[Cell]] = []
    for index, row in enumerate(rows):
        if row is None:
            table.append([])
            continue
        if not isinstance(row, list):
            raise TableLoadError(path, f"row {index} is not a list")
        for value in row:
            if value is not None and not isinstance(value, (str, int, float)):
                raise TableLoadError(path, f"row {index} has an unsupported cell: {value!r}")
        table.append(list(row))
    return table


def load_csv(path: Union[str, Path], encoding: str = None) -> tuple[list[str], list[list[Cell]]]:
    """Read a CSV file as a single-sheet table."""
    encoding = encoding or settings.csv_encoding
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            rows = [[parse_cell(value) for value in row] for row in csv.reader(f)]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise TableLoadError(str(path), str(e)) from e

    return [Path(path).stem or DEFAULT_SHEET_NAME], rows


def load_json(path: Union[str, Path]) -> tuple[list[str], list[list[Cell]]]:
    """Read a JSON file holding one table or several named sheets."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TableLoadError(str(path), str(e)) from e

    if isinstance(data, dict):
        sheets = data.get("sheets")
        if not isinstance(sheets, dict) or not sheets:
            raise TableLoadError(str(path), "expected a non-empty 'sheets' object")
        sheet_names = [str(name) for name in sheets]
        return sheet_names, _validate_rows(str(path), sheets[sheet_names[0]])

    return [DEFAULT_SHEET_NAME], _validate_rows(str(path), data)


def load_table(path: Union[str, Path]) -> tuple[list[str], list[list[Cell]]]:
    """
    Load the first sheet of a source file.

    Returns:
        Tuple of (sheet names, table)

    Raises:
        TableLoadError: if the file is missing, unreadable or malformed
    """
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        sheet_names, table = load_json(path)
    elif suffix in (".csv", ".txt"):
        sheet_names, table = load_csv(path)
    else:
        raise TableLoadError(str(path), f"unsupported file type '{suffix or '(none)'}'")

    logger.info(f"Loaded {path}: sheet '{sheet_names[0]}' with {len(table)} rows")
    return sheet_names, table
