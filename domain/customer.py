"""
Domain: Customers.

A customer's `total_purchases` and `last_purchase_date` are accumulated by the
sale flow, one increment per recorded sale. They are not recomputed from the
sales table, so editing sales outside that flow makes them drift; see
`services.report_service.recompute_customer_totals`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Customer:
    """Customer account with its accumulated purchase totals."""

    customer_id: str
    name: str
    phone: str
    email: Optional[str] = None

    # Accumulated by recorded sales
    total_purchases: Decimal = Decimal("0")
    last_purchase_date: Optional[date] = None

    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate timestamps are UTC-aware."""
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    def with_contact(self, name: str, phone: str, email: Optional[str]) -> "Customer":
        """Return a copy with the editable contact fields replaced."""
        return replace(self, name=name, phone=phone, email=email)

    def record_purchase(self, amount: Decimal, on: date) -> "Customer":
        """Return a copy with one sale added to the running totals."""
        return replace(
            self,
            total_purchases=self.total_purchases + amount,
            last_purchase_date=on,
        )

    def has_purchased(self) -> bool:
        return self.last_purchase_date is not None
