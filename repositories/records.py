"""
Wire records for products, customers and sales.

Every store exchanges the same JSON-shaped records: the spreadsheet column
headers are the field names, money travels as JSON numbers and timestamps as
ISO-8601 UTC strings. This module converts between those records and the
domain entities. It does not enforce business rules.

Column layout (first row of each sheet):
- products:  id, name, category, price, stock, created_date, updated_date
- customers: id, name, phone, email, total_purchases, last_purchase, created_date
- sales:     id, invoice_number, customer_id, customer_name, items, subtotal,
             tax, total, status, date, created_date
- settings:  key, value, description
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

from domain.customer import Customer
from domain.product import Product
from domain.sale import LineItem, SaleRecord, SaleStatus
from domain.time import (
    parse_calendar_date,
    parse_optional_utc_datetime,
    to_iso_utc,
)

PRODUCT_COLUMNS: List[str] = [
    "id", "name", "category", "price", "stock", "created_date", "updated_date",
]
CUSTOMER_COLUMNS: List[str] = [
    "id", "name", "phone", "email", "total_purchases", "last_purchase", "created_date",
]
SALE_COLUMNS: List[str] = [
    "id", "invoice_number", "customer_id", "customer_name", "items",
    "subtotal", "tax", "total", "status", "date", "created_date",
]
SETTINGS_COLUMNS: List[str] = ["key", "value", "description"]

Record = Dict[str, Any]


def to_decimal(value: Any) -> Decimal:
    """Read a money cell; blanks count as zero."""
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(Decimal(str(value)))


def money_out(value: Decimal) -> Union[int, float]:
    """Render a Decimal as a JSON number (whole amounts stay integers)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def product_to_record(product: Product) -> Record:
    return {
        "id": product.product_id,
        "name": product.name,
        "category": product.category,
        "price": money_out(product.price),
        "stock": product.stock,
        "created_date": to_iso_utc(product.created_at, name="created_at"),
        "updated_date": to_iso_utc(product.updated_at, name="updated_at"),
    }


def record_to_product(row: Mapping[str, Any]) -> Product:
    """
    A blank created_date falls back to updated_date; a row with neither
    raises ValueError.
    """
    updated = parse_optional_utc_datetime(row.get("updated_date"))
    created_at = parse_optional_utc_datetime(row.get("created_date")) or updated
    if created_at is None:
        raise ValueError(f"Product {row.get('id')!r} has no created_date")
    return Product(
        product_id=_text(row["id"]),
        name=_text(row.get("name")),
        category=_text(row.get("category")),
        price=to_decimal(row.get("price")),
        stock=to_int(row.get("stock")),
        created_at=created_at,
        updated_at=updated or created_at,
    )


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

def customer_to_record(customer: Customer) -> Record:
    return {
        "id": customer.customer_id,
        "name": customer.name,
        "phone": customer.phone,
        "email": customer.email,
        "total_purchases": money_out(customer.total_purchases),
        "last_purchase": (
            customer.last_purchase_date.isoformat()
            if customer.last_purchase_date is not None
            else None
        ),
        "created_date": (
            to_iso_utc(customer.created_at, name="created_at")
            if customer.created_at is not None
            else None
        ),
    }


def record_to_customer(row: Mapping[str, Any]) -> Customer:
    last_purchase = row.get("last_purchase")
    return Customer(
        customer_id=_text(row["id"]),
        name=_text(row.get("name")),
        phone=_text(row.get("phone")),
        email=_optional_text(row.get("email")),
        total_purchases=to_decimal(row.get("total_purchases")),
        last_purchase_date=(
            parse_calendar_date(last_purchase) if last_purchase not in (None, "") else None
        ),
        created_at=parse_optional_utc_datetime(row.get("created_date")),
    )


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------

def line_item_to_record(item: LineItem) -> Record:
    return {
        "product_id": item.product_id,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "price": money_out(item.price),
        "total": money_out(item.total),
    }


def record_to_line_item(row: Mapping[str, Any]) -> LineItem:
    return LineItem(
        product_id=_optional_text(row.get("product_id")),
        product_name=_text(row.get("product_name")),
        quantity=to_int(row.get("quantity")),
        price=to_decimal(row.get("price")),
    )


def decode_items(value: Any) -> List[Record]:
    """
    Sales keep their items as JSON text in a single sheet cell.

    Accepts an already-decoded list, JSON text, or a blank cell.
    """
    if isinstance(value, list):
        return [dict(item) for item in value]
    if isinstance(value, str) and value.strip():
        decoded = json.loads(value)
        if isinstance(decoded, list):
            return decoded
    return []


def encode_items(items: List[Record]) -> str:
    return json.dumps(items)


def sale_to_record(sale: SaleRecord) -> Record:
    return {
        "id": sale.sale_id,
        "invoice_number": sale.invoice_number,
        "customer_id": sale.customer_id,
        "customer_name": sale.customer_name,
        "items": [line_item_to_record(item) for item in sale.items],
        "subtotal": money_out(sale.subtotal),
        "tax": money_out(sale.tax),
        "total": money_out(sale.total),
        "status": sale.status.value,
        "date": sale.date.isoformat(),
        "created_date": (
            to_iso_utc(sale.created_at, name="created_at")
            if sale.created_at is not None
            else None
        ),
    }


def record_to_sale(row: Mapping[str, Any]) -> SaleRecord:
    """A blank sale date falls back to the day of created_date."""
    created_at = parse_optional_utc_datetime(row.get("created_date"))
    day = row.get("date")
    if day in (None, ""):
        if created_at is None:
            raise ValueError(f"Sale {row.get('id')!r} has no date")
        day = created_at.date()
    return SaleRecord(
        sale_id=_text(row["id"]),
        invoice_number=_text(row.get("invoice_number")),
        customer_id=_text(row.get("customer_id")),
        customer_name=_text(row.get("customer_name")),
        items=tuple(record_to_line_item(item) for item in decode_items(row.get("items"))),
        subtotal=to_decimal(row.get("subtotal")),
        tax=to_decimal(row.get("tax")),
        total=to_decimal(row.get("total")),
        status=SaleStatus(row.get("status") or SaleStatus.COMPLETED.value),
        date=parse_calendar_date(day),
        created_at=created_at,
    )


# ---------------------------------------------------------------------------
# New entities from add* payloads
# ---------------------------------------------------------------------------

def new_product(data: Mapping[str, Any], product_id: str, now: datetime) -> Product:
    return Product(
        product_id=product_id,
        name=_text(data.get("name")),
        category=_text(data.get("category")),
        price=to_decimal(data.get("price")),
        stock=to_int(data.get("stock")),
        created_at=now,
        updated_at=now,
    )


def new_customer(data: Mapping[str, Any], customer_id: str, now: datetime) -> Customer:
    """New customers start with no purchases, whatever the payload says."""
    return Customer(
        customer_id=customer_id,
        name=_text(data.get("name")),
        phone=_text(data.get("phone")),
        email=_optional_text(data.get("email")),
        created_at=now,
    )


def new_sale(data: Mapping[str, Any], sale_id: str, now: datetime) -> SaleRecord:
    return record_to_sale(
        {
            **data,
            "id": sale_id,
            "date": data.get("date") or now.date().isoformat(),
            "created_date": to_iso_utc(now, name="created_at"),
        }
    )


def with_created_date(row: Mapping[str, Any], now: datetime) -> Record:
    """Fill a missing created_date so that imported rows always parse."""
    record = dict(row)
    if not record.get("created_date"):
        record["created_date"] = to_iso_utc(now, name="created_at")
    return record


__all__ = [
    "CUSTOMER_COLUMNS",
    "PRODUCT_COLUMNS",
    "SALE_COLUMNS",
    "SETTINGS_COLUMNS",
    "Record",
    "customer_to_record",
    "decode_items",
    "encode_items",
    "line_item_to_record",
    "money_out",
    "new_customer",
    "new_product",
    "new_sale",
    "product_to_record",
    "record_to_customer",
    "record_to_line_item",
    "record_to_product",
    "record_to_sale",
    "sale_to_record",
    "to_decimal",
    "to_int",
    "with_created_date",
]
