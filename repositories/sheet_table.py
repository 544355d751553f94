"""
Spreadsheet tables.

Each entity lives in its own sheet: the first row holds the column headers,
every following row is one entity. Rows and columns are 1-based, as in the
spreadsheet UI. Two implementations share the `SheetTable` surface:

- `InMemorySheet`: a list of rows, for local serving and tests
- `GspreadSheet`: a Google Sheets worksheet reached through gspread

`Workbook` bundles the four tables (products, customers, sales, settings).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from repositories.client import SHEET_NAMES
from repositories.records import (
    CUSTOMER_COLUMNS,
    PRODUCT_COLUMNS,
    SALE_COLUMNS,
    SETTINGS_COLUMNS,
)

SHEET_HEADERS: Dict[str, List[str]] = {
    "products": PRODUCT_COLUMNS,
    "customers": CUSTOMER_COLUMNS,
    "sales": SALE_COLUMNS,
    "settings": SETTINGS_COLUMNS,
}


class SheetTable(Protocol):
    def get_values(self) -> List[List[Any]]:
        ...

    def append_row(self, values: Sequence[Any]) -> None:
        ...

    def set_values(self, row: int, column: int, values: Sequence[Any]) -> None:
        ...

    def delete_row(self, row: int) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemorySheet:
    """Sheet kept as a list of rows. Row 1 is the header row."""

    def __init__(self, header: Optional[Sequence[Any]] = None) -> None:
        self._rows: List[List[Any]] = [list(header)] if header else []

    def get_values(self) -> List[List[Any]]:
        return [list(row) for row in self._rows]

    def append_row(self, values: Sequence[Any]) -> None:
        self._rows.append(list(values))

    def set_values(self, row: int, column: int, values: Sequence[Any]) -> None:
        if row < 1 or row > len(self._rows):
            raise IndexError(f"Row {row} is outside the sheet (1..{len(self._rows)})")
        if column < 1:
            raise IndexError("Columns start at 1")

        target = self._rows[row - 1]
        end = column - 1 + len(values)
        if len(target) < end:
            target.extend([None] * (end - len(target)))
        target[column - 1:end] = list(values)

    def delete_row(self, row: int) -> None:
        if row < 1 or row > len(self._rows):
            raise IndexError(f"Row {row} is outside the sheet (1..{len(self._rows)})")
        del self._rows[row - 1]

    def clear(self) -> None:
        self._rows = []


class GspreadSheet:
    """
    Google Sheets worksheet.

    Cells are written RAW so that ISO timestamps and the JSON item lists are
    stored as text rather than reinterpreted by the spreadsheet.
    """

    def __init__(self, worksheet: Any) -> None:
        self._ws = worksheet

    def get_values(self) -> List[List[Any]]:
        return self._ws.get_all_values()

    def append_row(self, values: Sequence[Any]) -> None:
        self._ws.append_row(list(values), value_input_option="RAW")

    def set_values(self, row: int, column: int, values: Sequence[Any]) -> None:
        from gspread.utils import rowcol_to_a1

        start = rowcol_to_a1(row, column)
        end = rowcol_to_a1(row, column + len(values) - 1)
        self._ws.update(
            values=[list(values)],
            range_name=f"{start}:{end}",
            value_input_option="RAW",
        )

    def delete_row(self, row: int) -> None:
        self._ws.delete_rows(row)

    def clear(self) -> None:
        self._ws.clear()


@dataclass
class Workbook:
    """The four tables the endpoint works on."""

    products: SheetTable
    customers: SheetTable
    sales: SheetTable
    settings: SheetTable

    def table(self, name: str) -> SheetTable:
        if name not in SHEET_NAMES:
            raise KeyError(f"Unknown sheet: {name}")
        return getattr(self, name)

    @classmethod
    def in_memory(cls) -> "Workbook":
        """Empty workbook with the header rows in place."""
        return cls(**{name: InMemorySheet(SHEET_HEADERS[name]) for name in SHEET_NAMES})

    @classmethod
    def from_gspread(cls, client: Any, spreadsheet_ids: Mapping[str, str]) -> "Workbook":
        """
        Open one spreadsheet per table and use its first worksheet.

        Raises:
            RuntimeError: if an id is missing for any of the four tables
        """
        missing = [name for name in SHEET_NAMES if not spreadsheet_ids.get(name)]
        if missing:
            raise RuntimeError(
                "Missing spreadsheet ids for: "
                + ", ".join(missing)
                + ". Set VYAPAR_SPREADSHEET_IDS to products=<id>,customers=<id>,sales=<id>,settings=<id>."
            )
        return cls(**{
            name: GspreadSheet(client.open_by_key(spreadsheet_ids[name]).sheet1)
            for name in SHEET_NAMES
        })


def write_headers(workbook: Workbook) -> None:
    """Clear every table and write its header row."""
    for name in SHEET_NAMES:
        table = workbook.table(name)
        table.clear()
        table.append_row(SHEET_HEADERS[name])


__all__ = [
    "GspreadSheet",
    "InMemorySheet",
    "SHEET_HEADERS",
    "SheetTable",
    "Workbook",
    "write_headers",
]
