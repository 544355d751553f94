"""
Tests for `domain/invoice.py` and `services/invoice_service.py`.

Covers contract rules:
- subtotal = sum(quantity * price); tax = 18% rounded half-up to 0.01; total = subtotal + tax.
- Non-positive quantities are not rejected.
- The invoice builder snapshots names and prices and produces an addSale payload.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from domain.customer import Customer
from domain.invoice import TAX_RATE, compute_invoice_totals, compute_tax
from domain.product import Product
from domain.sale import LineItem, SaleStatus
from services.invoice_service import UNKNOWN_PRODUCT, CartLine, build_invoice

CREATED = datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_two_items_give_the_documented_totals() -> None:
    totals = compute_invoice_totals([
        LineItem("HD CCTV Camera", 2, Decimal("100")),
        LineItem("CCTV Cable (100m)", 1, Decimal("50")),
    ])

    assert totals.subtotal == Decimal("250")
    assert totals.tax == Decimal("45.00")
    assert totals.total == Decimal("295.00")


def test_tax_rounds_half_up_to_paise() -> None:
    assert TAX_RATE == Decimal("0.18")
    # 0.25 * 0.18 = 0.045
    assert compute_tax(Decimal("0.25")) == Decimal("0.05")
    # 10.01 * 0.18 = 1.8018
    assert compute_tax(Decimal("10.01")) == Decimal("1.80")


def test_empty_and_negative_lines_are_not_rejected() -> None:
    assert compute_invoice_totals([]).total == Decimal("0.00")

    totals = compute_invoice_totals([
        LineItem("Dome Camera", 1, Decimal("1800")),
        LineItem("Dome Camera (return)", -1, Decimal("1800")),
        LineItem("Freebie", 0, Decimal("99")),
    ])
    assert totals.subtotal == Decimal("0")
    assert totals.tax == Decimal("0.00")


def _customer() -> Customer:
    return Customer(customer_id="2", name="Priya Home Security", phone="9876543211")


def _catalogue() -> list:
    return [
        Product("1", "HD CCTV Camera", "Cameras", Decimal("100"), 25, CREATED, CREATED),
        Product("3", "CCTV Cable (100m)", "Cables", Decimal("50"), 50, CREATED, CREATED),
    ]


def test_build_invoice_prices_the_cart_from_the_catalogue() -> None:
    draft = build_invoice(
        _customer(),
        _catalogue(),
        [CartLine("1", 2), CartLine("3", 1)],
        today=date(2025, 1, 10),
        clock=lambda: 1736510400.5,
    )

    assert draft.invoice_number == "INV-400500"
    assert draft.status == SaleStatus.COMPLETED
    assert [item.product_name for item in draft.items] == ["HD CCTV Camera", "CCTV Cable (100m)"]
    assert draft.totals.total == Decimal("295.00")

    payload = draft.to_payload()
    assert payload["customer_id"] == "2"
    assert payload["customer_name"] == "Priya Home Security"
    assert payload["subtotal"] == 250
    assert payload["tax"] == 45
    assert payload["total"] == 295
    assert payload["status"] == "completed"
    assert payload["date"] == "2025-01-10"
    assert payload["items"][0] == {
        "product_id": "1",
        "product_name": "HD CCTV Camera",
        "quantity": 2,
        "price": 100,
        "total": 200,
    }


def test_build_invoice_price_override_and_unknown_product() -> None:
    draft = build_invoice(
        _customer(),
        _catalogue(),
        [CartLine("1", 1, price=Decimal("90.50")), CartLine("99", 3)],
        today=date(2025, 1, 10),
    )

    assert draft.items[0].price == Decimal("90.50")
    assert draft.items[1].product_name == UNKNOWN_PRODUCT
    assert draft.items[1].price == Decimal("0")
    assert draft.to_payload()["subtotal"] == 90.5


def test_build_invoice_rejects_empty_cart() -> None:
    with pytest.raises(ValueError):
        build_invoice(_customer(), _catalogue(), [])
