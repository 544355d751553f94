"""
Print the dashboard and report figures.

Fetches all collections through the API facade (remote, falling back to the
mock store), caches them locally, and prints the same aggregates the
dashboard and reports pages show.

Usage:
    python scripts/show_report.py
    python scripts/show_report.py --days 30 --top 10
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.client import load_settings
from services.api_facade import ApiFacade
from services.report_service import (
    active_customer_count,
    average_order_value,
    average_per_active_customer,
    best_day,
    daily_sales,
    in_stock_count,
    low_stock,
    recompute_customer_totals,
    revenue_on,
    status_counts,
    stock_value,
    top_customers,
    top_products,
    total_customer_purchases,
    total_revenue,
)
from services.sync_service import LocalCache, SyncService


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Print Vyapar Pro sales reports")
    parser.add_argument("--days", type=int, default=7, help="Days in the daily table (default: 7)")
    parser.add_argument("--top", type=int, default=5, help="Rows in the top-N tables (default: 5)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    with ApiFacade.from_settings(settings) as api:
        sync = SyncService(api, LocalCache(settings.cache_dir))
        products, customers, sales = sync.fetch_all().to_entities()
    today = date.today()

    print("=" * 60)
    print("DASHBOARD")
    print("=" * 60)
    print(f"Total sales:        ₹{total_revenue(sales):.2f}")
    print(f"Today's sales:      ₹{revenue_on(sales, today):.2f}")
    print(f"Products:           {len(products)}")
    print(f"Customers:          {len(customers)}")
    print(f"Average order:      ₹{average_order_value(sales):.2f}")
    for status, count in status_counts(sales).items():
        print(f"{status.value.capitalize() + ' sales:':<20}{count}")

    print(f"In stock:           {in_stock_count(products)}")
    print(f"Stock value:        ₹{stock_value(products):.2f}")
    print(f"Active customers:   {active_customer_count(customers)}")
    print(f"Customer purchases: ₹{total_customer_purchases(customers):.2f}")
    print(f"Avg. per customer:  ₹{average_per_active_customer(customers):.2f}")

    print("\nLow stock:")
    for product in low_stock(products):
        print(f"  {product.name}: {product.stock} left")

    print("\n" + "-" * 60)
    print(f"LAST {args.days} DAYS")
    print("-" * 60)
    daily = daily_sales(sales, today, days=args.days)
    for row in daily:
        print(f"{row.day.isoformat()}  ₹{row.revenue:>12.2f}  {row.orders:>3} orders  {row.customers:>3} customers")
    top_day = best_day(daily)
    if top_day is not None and top_day.revenue > 0:
        print(f"Best day: {top_day.day.isoformat()} (₹{top_day.revenue:.2f})")

    print("\nTop products:")
    for row in top_products(sales, limit=args.top):
        print(f"  {row.name}: {row.quantity_sold} sold, ₹{row.revenue:.2f}")

    print("\nTop customers:")
    for row in top_customers(sales, limit=args.top):
        print(f"  {row.name}: {row.orders} orders, ₹{row.purchases:.2f}")

    drifted = [check for check in recompute_customer_totals(customers, sales) if not check.is_consistent]
    if drifted:
        print("\nCustomer totals out of line with recorded sales:")
        for check in drifted:
            print(f"  {check.customer_id}: stored ₹{check.stored_total:.2f}, sales ₹{check.recomputed_total:.2f}")

    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
