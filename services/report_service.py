"""
Report aggregates and list filters for the dashboard, inventory, customers,
reports and sales-history views.

Pure functions over already-loaded collections; nothing here talks to a
store. Money is summed in Decimal.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from domain.customer import Customer
from domain.product import Product
from domain.sale import SaleRecord, SaleStatus


@dataclass(frozen=True, slots=True)
class DailySales:
    """One calendar day of sales."""
    day: date
    revenue: Decimal
    orders: int
    customers: int  # distinct customer ids


@dataclass(frozen=True, slots=True)
class ProductPerformance:
    name: str
    quantity_sold: int
    revenue: Decimal


@dataclass(frozen=True, slots=True)
class CustomerPerformance:
    name: str
    purchases: Decimal
    orders: int


@dataclass(frozen=True, slots=True)
class CustomerTotalCheck:
    """
    Stored vs. recomputed lifetime total for one customer.

    drift: stored - recomputed (zero when the running total is consistent)
    """
    customer_id: str
    stored_total: Decimal
    recomputed_total: Decimal

    @property
    def drift(self) -> Decimal:
        return self.stored_total - self.recomputed_total

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0


def total_revenue(sales: Iterable[SaleRecord]) -> Decimal:
    return sum((sale.total for sale in sales), Decimal("0"))


def revenue_on(sales: Iterable[SaleRecord], day: date) -> Decimal:
    return total_revenue(sale for sale in sales if sale.date == day)


def average_order_value(sales: Sequence[SaleRecord]) -> Decimal:
    if not sales:
        return Decimal("0")
    return total_revenue(sales) / len(sales)


def daily_sales(sales: Sequence[SaleRecord], today: date, days: int = 7) -> List[DailySales]:
    """
    Per-day revenue, order count and distinct customers for the last `days`
    calendar days ending with `today`, oldest first. Days without sales are
    included with zeros.
    """
    rows: List[DailySales] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_sales = [sale for sale in sales if sale.date == day]
        rows.append(DailySales(
            day=day,
            revenue=total_revenue(day_sales),
            orders=len(day_sales),
            customers=len({sale.customer_id for sale in day_sales}),
        ))
    return rows


def best_day(daily: Sequence[DailySales]) -> Optional[DailySales]:
    """The day with the highest revenue; the earliest one wins ties."""
    if not daily:
        return None
    best = daily[0]
    for row in daily[1:]:
        if row.revenue > best.revenue:
            best = row
    return best


def top_products(sales: Iterable[SaleRecord], limit: int = 5) -> List[ProductPerformance]:
    """
    Products ranked by revenue, grouped by the product name captured on the
    invoice line (so renamed products are counted under their old name).
    """
    quantities: Dict[str, int] = {}
    revenue: Dict[str, Decimal] = {}
    for sale in sales:
        for item in sale.items:
            quantities[item.product_name] = quantities.get(item.product_name, 0) + item.quantity
            revenue[item.product_name] = revenue.get(item.product_name, Decimal("0")) + item.total

    ranked = sorted(revenue, key=lambda name: revenue[name], reverse=True)
    return [
        ProductPerformance(name=name, quantity_sold=quantities[name], revenue=revenue[name])
        for name in ranked[:limit]
    ]


def top_customers(sales: Iterable[SaleRecord], limit: int = 5) -> List[CustomerPerformance]:
    """Customers ranked by purchases, grouped by the name on the invoice."""
    purchases: Dict[str, Decimal] = {}
    orders: Dict[str, int] = {}
    for sale in sales:
        purchases[sale.customer_name] = purchases.get(sale.customer_name, Decimal("0")) + sale.total
        orders[sale.customer_name] = orders.get(sale.customer_name, 0) + 1

    ranked = sorted(purchases, key=lambda name: purchases[name], reverse=True)
    return [
        CustomerPerformance(name=name, purchases=purchases[name], orders=orders[name])
        for name in ranked[:limit]
    ]


def recent_sales(sales: Iterable[SaleRecord], limit: int = 5) -> List[SaleRecord]:
    return sorted(sales, key=lambda sale: sale.date, reverse=True)[:limit]


def low_stock(products: Iterable[Product], threshold: int = 10, limit: int = 5) -> List[Product]:
    return [product for product in products if product.is_low_stock(threshold)][:limit]


def status_counts(sales: Iterable[SaleRecord]) -> Dict[SaleStatus, int]:
    counts = Counter(sale.status for sale in sales)
    return {status: counts.get(status, 0) for status in SaleStatus}


# ---------------------------------------------------------------------------
# List filters and summary cards
# ---------------------------------------------------------------------------

def filter_sales(
    sales: Iterable[SaleRecord],
    search: str = "",
    status: Optional[SaleStatus] = None,
    day: Optional[date] = None,
) -> List[SaleRecord]:
    """
    Sales-history filter. `search` matches the customer name or the invoice
    number, case-insensitively; status and day must match exactly when given.
    """
    needle = search.lower()
    return [
        sale for sale in sales
        if (needle in sale.customer_name.lower() or needle in sale.invoice_number.lower())
        and (status is None or sale.status == status)
        and (day is None or sale.date == day)
    ]


def filter_products(
    products: Iterable[Product],
    search: str = "",
    category: Optional[str] = None,
) -> List[Product]:
    needle = search.lower()
    return [
        product for product in products
        if needle in product.name.lower()
        and (category is None or product.category == category)
    ]


def stock_value(products: Iterable[Product]) -> Decimal:
    return sum((product.price * product.stock for product in products), Decimal("0"))


def in_stock_count(products: Iterable[Product]) -> int:
    return sum(1 for product in products if product.stock > 0)


def filter_customers(customers: Iterable[Customer], search: str = "") -> List[Customer]:
    """Name and email match case-insensitively; the phone number matches as typed."""
    needle = search.lower()
    return [
        customer for customer in customers
        if needle in customer.name.lower()
        or search in customer.phone
        or needle in (customer.email or "").lower()
    ]


def total_customer_purchases(customers: Iterable[Customer]) -> Decimal:
    return sum((customer.total_purchases for customer in customers), Decimal("0"))


def active_customer_count(customers: Iterable[Customer]) -> int:
    """Customers with any recorded purchases."""
    return sum(1 for customer in customers if customer.total_purchases > 0)


def average_per_active_customer(customers: Sequence[Customer]) -> Decimal:
    """Total purchases over active customers; an empty book divides by one."""
    return total_customer_purchases(customers) / max(active_customer_count(customers), 1)


def recompute_customer_totals(
    customers: Iterable[Customer],
    sales: Iterable[SaleRecord],
) -> List[CustomerTotalCheck]:
    """
    Compare each customer's running `total_purchases` with the sum of their
    recorded sales. Sales referencing unknown customers are ignored.
    """
    totals: Dict[str, Decimal] = {}
    for sale in sales:
        totals[sale.customer_id] = totals.get(sale.customer_id, Decimal("0")) + sale.total

    return [
        CustomerTotalCheck(
            customer_id=customer.customer_id,
            stored_total=customer.total_purchases,
            recomputed_total=totals.get(customer.customer_id, Decimal("0")),
        )
        for customer in customers
    ]


__all__ = [
    "CustomerPerformance",
    "CustomerTotalCheck",
    "DailySales",
    "ProductPerformance",
    "active_customer_count",
    "average_order_value",
    "average_per_active_customer",
    "best_day",
    "daily_sales",
    "filter_customers",
    "filter_products",
    "filter_sales",
    "in_stock_count",
    "low_stock",
    "recent_sales",
    "recompute_customer_totals",
    "revenue_on",
    "status_counts",
    "stock_value",
    "top_customers",
    "top_products",
    "total_customer_purchases",
    "total_revenue",
]
