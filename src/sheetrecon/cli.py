"""Command-line interface for SheetRecon."""

import argparse
import json
import logging
import sys

import uvicorn

from .config import settings
from .engine import ColumnMatcher, ReconciliationSession, RowMatcher, get_strategy
from .errors import ReconciliationError
from .loader import load_table
from .models import Side


def configure_logging(level: str = None):
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=settings.log_file,
    )


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="SheetRecon - Reconcile two spreadsheet tables cell by cell"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: from LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare two table files")
    compare_parser.add_argument("file_a", help="Source table (CSV or JSON)")
    compare_parser.add_argument("file_b", help="Comparison table (CSV or JSON)")
    compare_parser.add_argument("--date-a", type=int, help="Date key column of table A (0-based)")
    compare_parser.add_argument("--size-a", type=int, help="Size key column of table A (0-based)")
    compare_parser.add_argument("--date-b", type=int, help="Date key column of table B (0-based)")
    compare_parser.add_argument("--size-b", type=int, help="Size key column of table B (0-based)")
    compare_parser.add_argument(
        "--strategy",
        choices=["greedy", "optimal"],
        default=settings.match_strategy,
        help="Column matching strategy",
    )
    compare_parser.add_argument(
        "--threshold",
        type=float,
        default=settings.similarity_threshold,
        help="Minimum header similarity to accept a column match",
    )
    compare_parser.add_argument(
        "--duplicate-keys",
        choices=["last", "first", "error"],
        default=settings.duplicate_key_policy,
        help="How to resolve comparison rows sharing a composite key",
    )
    compare_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "compare":
        sys.exit(run_compare(args))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetrecon.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def build_session(args) -> ReconciliationSession:
    """Load both files and apply the key columns given on the command line."""
    session = ReconciliationSession(
        column_matcher=ColumnMatcher(
            threshold=args.threshold, strategy=get_strategy(args.strategy)
        ),
        row_matcher=RowMatcher(
            separator=settings.key_separator, duplicate_policy=args.duplicate_keys
        ),
    )

    for side, path in ((Side.A, args.file_a), (Side.B, args.file_b)):
        sheet_names, table = load_table(path)
        session.load_table(side, table, sheet_names)

    session.set_date_column(Side.A, args.date_a)
    session.set_size_column(Side.A, args.size_a)
    session.set_date_column(Side.B, args.date_b)
    session.set_size_column(Side.B, args.size_b)
    return session


def run_compare(args) -> int:
    """Compare two files and print the result. Returns the exit code."""
    try:
        session = build_session(args)
        differences = session.compare()
    except ReconciliationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    cells = [session.cell_values(row, col) for row, col in sorted(differences)]

    if args.json:
        payload = {
            "column_mapping": [pair.model_dump() for pair in session.column_pairs()],
            "row_mapping": session.row_mapping,
            "summary": session.summary().model_dump(),
            "differences": [cell.model_dump() for cell in cells],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 1 if differences else 0

    summary = session.summary()
    print("Column mapping")
    print("=" * 40)
    for pair in session.column_pairs():
        print(f"  [{pair.column_a}] {pair.header_a} -> [{pair.column_b}] {pair.header_b}")
    print()
    mode = "key" if summary.key_based else "positional"
    print(f"Matched rows: {summary.matched_rows} ({mode} matching)")
    if summary.unmatched_rows:
        print(f"Unmatched rows: {', '.join(str(row) for row in summary.unmatched_rows)}")
    print(f"Differences: {summary.difference_count} in {len(summary.diff_rows)} row(s)")

    headers_a = session.headers(Side.A)
    for cell in cells:
        header = headers_a[cell.col] if cell.col < len(headers_a) else str(cell.col)
        print(f"  row {cell.row}, {header}: {cell.value_a!r} != {cell.value_b!r}")

    return 1 if differences else 0


if __name__ == "__main__":
    main()
