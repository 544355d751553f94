"""
Invoice builder.

Turns a customer and a cart into the `addSale` payload:
- invoice number from the millisecond clock
- customer name, product names and prices captured as snapshots
- subtotal / tax / total from `domain.invoice`
- status `completed`, dated today
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from domain.customer import Customer
from domain.invoice import InvoiceTotals, compute_invoice_totals
from domain.product import Product
from domain.sale import LineItem, SaleStatus
from domain.time import new_invoice_number
from repositories.records import Record, line_item_to_record, money_out

UNKNOWN_PRODUCT = "Unknown Product"


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One line in the cart.

    price: overrides the catalogue price when given
    """
    product_id: str
    quantity: int
    price: Optional[Decimal] = None


@dataclass(frozen=True, slots=True)
class InvoiceDraft:
    """A priced invoice ready to be sent as an addSale payload."""
    invoice_number: str
    customer: Customer
    items: List[LineItem]
    totals: InvoiceTotals
    status: SaleStatus
    date: date

    def to_payload(self) -> Record:
        return {
            "invoice_number": self.invoice_number,
            "customer_id": self.customer.customer_id,
            "customer_name": self.customer.name,
            "items": [line_item_to_record(item) for item in self.items],
            "subtotal": money_out(self.totals.subtotal),
            "tax": money_out(self.totals.tax),
            "total": money_out(self.totals.total),
            "status": self.status.value,
            "date": self.date.isoformat(),
        }


def build_invoice(
    customer: Customer,
    catalogue: Iterable[Product],
    cart: Iterable[CartLine],
    today: Optional[date] = None,
    clock: Callable[[], float] = time.time,
) -> InvoiceDraft:
    """
    Price a cart for a customer.

    Args:
        customer: the buyer
        catalogue: products to resolve names and default prices from
        cart: the lines to invoice; product ids missing from the catalogue
            are invoiced as "Unknown Product" at the given (or zero) price
        today: invoice date (default: local today)

    Returns:
        InvoiceDraft

    Raises:
        ValueError: if the cart is empty

    Example:
        draft = build_invoice(customer, products, [CartLine("1", 2), CartLine("3", 1)])
        api.add_sale(draft.to_payload())
    """
    products: Dict[str, Product] = {product.product_id: product for product in catalogue}

    items: List[LineItem] = []
    for line in cart:
        product = products.get(line.product_id)
        if line.price is not None:
            price = line.price
        elif product is not None:
            price = product.price
        else:
            price = Decimal("0")

        items.append(LineItem(
            product_id=line.product_id,
            product_name=product.name if product is not None else UNKNOWN_PRODUCT,
            quantity=line.quantity,
            price=price,
        ))

    if not items:
        raise ValueError("An invoice needs at least one item")

    return InvoiceDraft(
        invoice_number=new_invoice_number(clock),
        customer=customer,
        items=items,
        totals=compute_invoice_totals(items),
        status=SaleStatus.COMPLETED,
        date=today or date.today(),
    )


__all__ = ["CartLine", "InvoiceDraft", "UNKNOWN_PRODUCT", "build_invoice"]
