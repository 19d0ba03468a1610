"""Exceptions raised by SheetRecon."""


class ReconciliationError(Exception):
    """Base class for reconciliation errors."""

    pass


class TableLoadError(ReconciliationError):
    """Exception raised when a source file cannot be read into a table."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load table from '{path}': {reason}")


class DuplicateKeyError(ReconciliationError):
    """Exception raised when two comparison rows share a composite key.

    Only raised under the 'error' duplicate key policy.
    """

    def __init__(self, key: str, first_row: int, second_row: int):
        self.key = key
        self.first_row = first_row
        self.second_row = second_row
        super().__init__(
            f"Composite key '{key}' appears in rows {first_row} and {second_row}"
        )


class InvalidColumnError(ReconciliationError):
    """Exception raised when a column index is outside a table's header row."""

    pass
