"""
Domain: cross-entity aggregate maintenance (pure).

Recording a sale adds its total to the buyer's `total_purchases` and moves
their `last_purchase_date` to the sale date. This is the only operation that
keeps an invariant across two entities, and it is not idempotent: applying
it twice for one sale double-counts revenue. Callers invoke it exactly once
per recorded sale.

A sale whose customer does not exist is tolerated (the sale still stands),
but the returned attribution says so, so that callers can surface it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .customer import Customer
from .sale import SaleRecord


@dataclass(frozen=True, slots=True)
class PurchaseAttribution:
    """
    Outcome of attributing one sale to its customer.

    applied: True when the customer was found and updated
    customer: the updated customer (None when not applied)
    """
    customer_id: str
    amount: Decimal
    applied: bool
    customer: Optional[Customer] = None

    @property
    def warning(self) -> Optional[str]:
        if self.applied:
            return None
        return (
            f"Customer {self.customer_id} not found; "
            f"sale total {self.amount} was not added to any customer"
        )


def attribute_sale(customer: Optional[Customer], sale: SaleRecord) -> PurchaseAttribution:
    """
    Apply the customer aggregate update for one sale.

    Args:
        customer: the customer referenced by `sale.customer_id`, or None if
            the lookup found nothing
        sale: the sale being recorded

    Returns:
        PurchaseAttribution; `customer` holds the updated copy when applied
    """
    if customer is None:
        return PurchaseAttribution(
            customer_id=sale.customer_id,
            amount=sale.total,
            applied=False,
        )

    return PurchaseAttribution(
        customer_id=sale.customer_id,
        amount=sale.total,
        applied=True,
        customer=customer.record_purchase(sale.total, sale.date),
    )


__all__ = ["PurchaseAttribution", "attribute_sale"]
