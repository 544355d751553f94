"""
Domain: Invoice arithmetic (pure).

Rules:
- subtotal = sum(quantity * price) over the line items, exact Decimal.
- tax = subtotal * 18% (GST), rounded half-up to paise (2 places).
- total = subtotal + tax.

The rate is fixed; there is no per-product or per-customer tax.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .sale import LineItem

TAX_RATE = Decimal("0.18")
_PAISE = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class InvoiceTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def compute_tax(subtotal: Decimal) -> Decimal:
    return (subtotal * TAX_RATE).quantize(_PAISE, rounding=ROUND_HALF_UP)


def compute_invoice_totals(items: Iterable[LineItem]) -> InvoiceTotals:
    """
    Compute subtotal, tax and total for a sequence of line items.

    Example:
        compute_invoice_totals([
            LineItem("HD CCTV Camera", 2, Decimal("100")),
            LineItem("CCTV Cable (100m)", 1, Decimal("50")),
        ])
        # InvoiceTotals(subtotal=Decimal('250'), tax=Decimal('45.00'), total=Decimal('295.00'))
    """
    subtotal = Decimal("0")
    for item in items:
        subtotal += item.total

    tax = compute_tax(subtotal)
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


__all__ = ["TAX_RATE", "InvoiceTotals", "compute_invoice_totals", "compute_tax"]
