"""
Set up the spreadsheet tables.

Without --apply, prints the four tables and their header rows so they can be
created by hand. With --apply, clears the configured Google Sheets and writes
the header rows (all existing rows are lost).

Usage:
    python scripts/setup_sheets.py
    python scripts/setup_sheets.py --apply --yes
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.client import SHEET_NAMES, create_sheets_client, load_settings
from repositories.sheet_table import SHEET_HEADERS, Workbook, write_headers


def print_layout() -> None:
    print("=" * 60)
    print("VYAPAR PRO - SPREADSHEET LAYOUT")
    print("=" * 60)
    for index, name in enumerate(SHEET_NAMES, start=1):
        print(f"{index}. vyapar-{name}")
        print(f"   Headers: {' | '.join(SHEET_HEADERS[name])}")
    print("-" * 60)
    print("Set VYAPAR_SPREADSHEET_IDS to products=<id>,customers=<id>,sales=<id>,settings=<id>")
    print("(the id is the part of the sheet URL between /d/ and /edit)")
    print("=" * 60)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Print or apply the Vyapar Pro spreadsheet layout",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Clear the configured Google Sheets and write the header rows",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before clearing the sheets",
    )
    args = parser.parse_args()

    print_layout()
    if not args.apply:
        return 0

    if not args.yes:
        answer = input("This clears ALL rows in the four sheets. Continue? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return 1

    settings = load_settings()
    try:
        workbook = Workbook.from_gspread(create_sheets_client(settings), settings.spreadsheet_ids)
    except RuntimeError as e:
        print(f"[FAIL] {e}")
        return 1

    write_headers(workbook)
    print("[OK] Header rows written to all four sheets.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
