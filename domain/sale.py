"""
Domain: Sales (invoices) and their line items.

Contract excerpts relevant here:
- Sales are create-only. There is no update or delete of a recorded sale.
- `customer_name`, `product_name` and the line `price` are snapshots taken at
  sale time and are never synchronized with later customer/product edits.
- The `date` of a sale is a calendar date, not a timestamp.

Totals are carried as recorded; computing them from line items lives in
`domain.invoice`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .time import require_utc_timestamp


class SaleStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One invoice line.

    Quantities of zero or below are accepted and give a zero or negative
    line total.
    """

    product_name: str
    quantity: int
    price: Decimal
    product_id: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable record of a completed (or pending) invoice.

    Captures:
    - Who bought (customer_id + customer_name snapshot)
    - What was sold (items, with name/price snapshots)
    - What was charged (subtotal, tax, total)
    - When (calendar `date`, plus `created_at` for the row)
    """

    sale_id: str
    invoice_number: str
    customer_id: str
    customer_name: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: SaleStatus
    date: date
    items: Tuple[LineItem, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    @property
    def quantity_sold(self) -> int:
        return sum(item.quantity for item in self.items)
