"""
Spreadsheet backend for the endpoint server.

Applies the action vocabulary to the workbook tables: one row per entity,
header row first, sale items stored as JSON text in one cell. Answers carry
exactly the record shapes the mock store produces, so a client cannot tell
the two apart except by persistence.

Writes follow the spreadsheet layout:
- updateProduct rewrites columns 2-5 (name, category, price, stock) and 7
  (updated_date)
- updateCustomer rewrites columns 2-4 (name, phone, email)
- addSale appends the sale, then rewrites the buyer's columns 5-6
  (total_purchases, last_purchase)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from domain.actions import Action
from domain.aggregates import PurchaseAttribution, attribute_sale
from domain.sale import SaleRecord
from domain.time import IdGenerator, utc_now
from repositories.action_store import (
    SYNC_COLLECTIONS,
    ActionDispatcher,
    Handler,
    parse_sync_rows,
)
from repositories.records import (
    Record,
    customer_to_record,
    encode_items,
    new_customer,
    new_product,
    new_sale,
    product_to_record,
    record_to_customer,
    record_to_product,
    record_to_sale,
    sale_to_record,
    to_decimal,
    to_int,
)
from repositories.sheet_table import SHEET_HEADERS, SheetTable, Workbook

logger = logging.getLogger(__name__)

_CODECS: Dict[str, Tuple[Callable[[Mapping[str, Any]], Any], Callable[[Any], Record]]] = {
    "products": (record_to_product, product_to_record),
    "customers": (record_to_customer, customer_to_record),
    "sales": (record_to_sale, sale_to_record),
}


def _rows_as_records(values: List[List[Any]]) -> List[Record]:
    """Map every data row onto the header row, skipping blank rows."""
    if len(values) <= 1:
        return []
    header = [str(h) for h in values[0]]
    records = []
    for row in values[1:]:
        if not any(cell not in (None, "") for cell in row):
            continue
        padded = list(row) + [None] * (len(header) - len(row))
        records.append(dict(zip(header, padded)))
    return records


def _find_row(values: List[List[Any]], entity_id: Any) -> Optional[int]:
    """1-based sheet row holding `entity_id` in column A, never the header row."""
    wanted = str(entity_id) if entity_id is not None else None
    for index, row in enumerate(values):
        if index == 0 or not row:
            continue
        if str(row[0]) == wanted:
            return index + 1
    return None


def _cells(record: Mapping[str, Any], columns: Sequence[str]) -> List[Any]:
    cells = []
    for column in columns:
        value = record.get(column)
        if column == "items":
            value = encode_items(value or [])
        cells.append(value)
    return cells


class SheetBackend(ActionDispatcher):
    """
    Action handlers over a `Workbook`.

    Args:
        workbook: the four tables to work on
        id_generator: callable minting new entity ids
        clock: callable returning the current UTC time
    """

    store_name = "sheet backend"

    def __init__(
        self,
        workbook: Workbook,
        *,
        id_generator: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.workbook = workbook
        self._new_id = id_generator or IdGenerator()
        self._now = clock
        super().__init__()

    def _handler_table(self) -> Dict[Action, Handler]:
        return {
            Action.GET_PRODUCTS: lambda data: self._get("products"),
            Action.ADD_PRODUCT: self._add_product,
            Action.UPDATE_PRODUCT: self._update_product,
            Action.DELETE_PRODUCT: lambda data: self._delete("products", "Product", data),
            Action.GET_CUSTOMERS: lambda data: self._get("customers"),
            Action.ADD_CUSTOMER: self._add_customer,
            Action.UPDATE_CUSTOMER: self._update_customer,
            Action.DELETE_CUSTOMER: lambda data: self._delete("customers", "Customer", data),
            Action.GET_SALES: lambda data: self._get("sales"),
            Action.ADD_SALE: self._add_sale,
            Action.SYNC_ALL: self._sync_all,
        }

    # ------------------------------------------------------------------
    # Shared operations
    # ------------------------------------------------------------------

    def _get(self, name: str) -> Record:
        """Read a table; rows that cannot be parsed are logged and skipped."""
        parse, render = _CODECS[name]
        records = []
        for row in _rows_as_records(self.workbook.table(name).get_values()):
            try:
                records.append(render(parse(row)))
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning(
                    f"Skipping unreadable {name} row {row.get('id')!r}: {e}",
                    extra={"sheet": name, "row_id": row.get("id")},
                )
        return {name: records}

    def _append(self, name: str, record: Mapping[str, Any]) -> None:
        self.workbook.table(name).append_row(_cells(record, SHEET_HEADERS[name]))

    def _delete(self, name: str, label: str, data: Mapping[str, Any]) -> Record:
        table = self.workbook.table(name)
        row = _find_row(table.get_values(), data.get("id"))
        if row is None:
            return {"error": f"{label} not found"}
        table.delete_row(row)
        return {"message": f"{label} deleted successfully"}

    def _locate(self, table: SheetTable, entity_id: Any) -> Tuple[Optional[int], Optional[Record]]:
        values = table.get_values()
        row = _find_row(values, entity_id)
        if row is None:
            return None, None
        header = [str(h) for h in values[0]]
        cells = list(values[row - 1]) + [None] * len(header)
        return row, dict(zip(header, cells))

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def _add_product(self, data: Mapping[str, Any]) -> Record:
        product = new_product(data, self._new_id(), self._now())
        self._append("products", product_to_record(product))
        return {"id": product.product_id, "message": "Product added successfully"}

    def _update_product(self, data: Mapping[str, Any]) -> Record:
        table = self.workbook.products
        row, current = self._locate(table, data.get("id"))
        if row is None:
            return {"error": "Product not found"}

        updated = record_to_product(current).with_details(
            name=str(data.get("name") or ""),
            category=str(data.get("category") or ""),
            price=to_decimal(data.get("price")),
            stock=to_int(data.get("stock")),
            updated_at=self._now(),
        )
        record = product_to_record(updated)
        table.set_values(row, 2, [record["name"], record["category"], record["price"], record["stock"]])
        table.set_values(row, 7, [record["updated_date"]])
        return {"message": "Product updated successfully"}

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def _add_customer(self, data: Mapping[str, Any]) -> Record:
        customer = new_customer(data, self._new_id(), self._now())
        self._append("customers", customer_to_record(customer))
        return {"id": customer.customer_id, "message": "Customer added successfully"}

    def _update_customer(self, data: Mapping[str, Any]) -> Record:
        table = self.workbook.customers
        row, current = self._locate(table, data.get("id"))
        if row is None:
            return {"error": "Customer not found"}

        email = data.get("email")
        updated = record_to_customer(current).with_contact(
            name=str(data.get("name") or ""),
            phone=str(data.get("phone") or ""),
            email=str(email) if email else None,
        )
        record = customer_to_record(updated)
        table.set_values(row, 2, [record["name"], record["phone"], record["email"]])
        return {"message": "Customer updated successfully"}

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def _add_sale(self, data: Mapping[str, Any]) -> Record:
        sale = new_sale(data, self._new_id(), self._now())
        self._append("sales", sale_to_record(sale))

        attribution = self._attribute(sale)
        result: Record = {"id": sale.sale_id, "message": "Sale added successfully"}
        if attribution.warning:
            result["warning"] = attribution.warning
        return result

    def _attribute(self, sale: SaleRecord) -> PurchaseAttribution:
        table = self.workbook.customers
        row, current = self._locate(table, sale.customer_id)
        customer = record_to_customer(current) if current is not None else None

        attribution = attribute_sale(customer, sale)
        if attribution.applied and row is not None:
            record = customer_to_record(attribution.customer)
            table.set_values(row, 5, [record["total_purchases"], record["last_purchase"]])
        else:
            logger.warning(
                attribution.warning,
                extra={
                    "sale_id": sale.sale_id,
                    "customer_id": sale.customer_id,
                    "amount": str(sale.total),
                },
            )
        return attribution

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def _sync_all(self, data: Mapping[str, Any]) -> Record:
        """
        Clear and rewrite every table whose collection is in the bag.

        Rows keep their ids, timestamps and totals; sales are imported without
        touching customer totals. Tables not named in the bag are untouched.
        Every supplied collection is parsed before any table is cleared.
        """
        now = self._now()
        pending: Dict[str, List[Record]] = {}
        for name in SYNC_COLLECTIONS:
            parse, render = _CODECS[name]
            entities = parse_sync_rows(data, name, parse, now)
            if entities is not None:
                pending[name] = [render(entity) for entity in entities]

        for name, records in pending.items():
            table = self.workbook.table(name)
            table.clear()
            table.append_row(SHEET_HEADERS[name])
            for record in records:
                table.append_row(_cells(record, SHEET_HEADERS[name]))
            logger.info(f"Synced {len(records)} {name}")

        return {"message": "All data synced successfully"}


__all__ = ["SheetBackend"]
