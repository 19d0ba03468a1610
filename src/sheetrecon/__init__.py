"""SheetRecon - reconcile two spreadsheet tables cell by cell."""

__version__ = "0.1.0"
