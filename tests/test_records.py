"""
Tests for `repositories/records.py`, `domain/time.py` and `domain/actions.py`.

Covers contract rules:
- Money travels as JSON numbers; whole amounts stay integers.
- Sale items may arrive as a list, JSON text (spreadsheet cell) or a blank cell.
- Timestamps are parsed to UTC; plain dates read as midnight UTC.
- A blank creation or sale date falls back to the row's other timestamp.
- Entity ids from one generator are strictly increasing.
- Every store must answer the whole action vocabulary.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.actions import Action, require_complete_handlers
from domain.sale import SaleStatus
from domain.time import (
    IdGenerator,
    new_invoice_number,
    parse_calendar_date,
    parse_utc_datetime,
    to_iso_utc,
)
from repositories.records import (
    decode_items,
    money_out,
    new_customer,
    new_sale,
    record_to_customer,
    record_to_product,
    record_to_sale,
    to_decimal,
    to_int,
    with_created_date,
)

NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)


def test_money_out_keeps_whole_amounts_integral() -> None:
    assert money_out(Decimal("295.00")) == 295
    assert isinstance(money_out(Decimal("295.00")), int)
    assert money_out(Decimal("12.50")) == 12.5


def test_blank_cells_read_as_zero() -> None:
    assert to_decimal("") == Decimal("0")
    assert to_decimal(None) == Decimal("0")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_int("12") == 12
    assert to_int("") == 0


def test_decode_items_accepts_list_json_text_and_blank() -> None:
    items = [{"product_name": "Dome Camera", "quantity": 2, "price": 1800, "total": 3600}]

    assert decode_items(items) == items
    assert decode_items(json.dumps(items)) == items
    assert decode_items("") == []
    assert decode_items(None) == []


def test_record_to_sale_reads_spreadsheet_cells() -> None:
    sale = record_to_sale({
        "id": 1736510400000,
        "invoice_number": "INV-400000",
        "customer_id": 2,
        "customer_name": "Priya Home Security",
        "items": '[{"product_name": "Dome Camera", "quantity": 2, "price": 1800, "total": 3600}]',
        "subtotal": "3600",
        "tax": "648",
        "total": "4248",
        "status": "",
        "date": "2025-01-10T00:00:00.000Z",
        "created_date": "2025-01-10T12:00:00.000Z",
    })

    assert sale.sale_id == "1736510400000"
    assert sale.customer_id == "2"
    assert sale.status == SaleStatus.COMPLETED
    assert sale.date == date(2025, 1, 10)
    assert sale.items[0].total == Decimal("3600")
    assert sale.quantity_sold == 2
    assert sale.created_at == NOW


def test_blank_dates_fall_back_to_the_other_timestamp() -> None:
    product = record_to_product({"id": "9", "name": "Siren", "price": 650, "stock": 7,
                                 "created_date": "", "updated_date": "2025-01-10T12:00:00Z"})
    sale = record_to_sale({"id": "s-1", "total": 118, "date": "", "created_date": "2025-01-10T12:00:00Z"})

    assert product.created_at == product.updated_at == NOW
    assert sale.date == date(2025, 1, 10)


def test_rows_without_any_date_are_rejected() -> None:
    with pytest.raises(ValueError, match="no created_date"):
        record_to_product({"id": "9", "name": "Siren", "price": 650, "stock": 7})
    with pytest.raises(ValueError, match="no date"):
        record_to_sale({"id": "s-1", "total": 118, "date": ""})


def test_new_customer_starts_without_purchases() -> None:
    customer = new_customer(
        {"name": "Neha Traders", "phone": "9000000000", "total_purchases": 999, "email": ""},
        "42",
        NOW,
    )

    assert customer.total_purchases == Decimal("0")
    assert customer.last_purchase_date is None
    assert customer.email is None
    assert customer.created_at == NOW


def test_new_sale_defaults_date_to_today() -> None:
    sale = new_sale({"customer_id": "1", "total": 100}, "7", NOW)

    assert sale.sale_id == "7"
    assert sale.date == date(2025, 1, 10)
    assert sale.created_at == NOW


def test_with_created_date_fills_only_missing_values() -> None:
    assert with_created_date({"id": "1"}, NOW)["created_date"] == to_iso_utc(NOW)
    assert with_created_date({"id": "1", "created_date": "2024-01-01"}, NOW)["created_date"] == "2024-01-01"


def test_record_to_customer_reads_timestamp_last_purchase() -> None:
    customer = record_to_customer({
        "id": "1",
        "name": "Rahul Security Systems",
        "phone": "9876543210",
        "email": "rahul@security.com",
        "total_purchases": 25000,
        "last_purchase": "2024-01-15T10:30:00.000Z",
        "created_date": "2024-01-01",
    })

    assert customer.last_purchase_date == date(2024, 1, 15)
    assert customer.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_utc_datetime_normalizes_offsets() -> None:
    assert parse_utc_datetime("2025-01-10T17:30:00+05:30") == NOW
    assert parse_utc_datetime("2025-01-10T12:00:00Z") == NOW
    assert parse_utc_datetime("2025-01-10T12:00:00") == NOW
    assert parse_calendar_date("2025-01-10") == date(2025, 1, 10)

    with pytest.raises(TypeError):
        parse_utc_datetime(12345)


def test_to_iso_utc_rejects_other_offsets() -> None:
    with pytest.raises(ValueError):
        to_iso_utc(datetime(2025, 1, 10, tzinfo=timezone(timedelta(hours=5, minutes=30))))


def test_id_generator_is_strictly_increasing_on_a_stalled_clock() -> None:
    new_id = IdGenerator(clock=lambda: 1736510400.0)

    ids = [new_id() for _ in range(3)]

    assert ids == ["1736510400000", "1736510400001", "1736510400002"]


def test_invoice_number_uses_last_six_clock_digits() -> None:
    assert new_invoice_number(lambda: 1736510400.5) == "INV-400500"


def test_action_parse_and_read_flags() -> None:
    assert Action.parse("getSales") is Action.GET_SALES
    assert Action.parse("dropTables") is None
    assert Action.parse(None) is None
    assert Action.GET_PRODUCTS.is_read
    assert not Action.SYNC_ALL.is_read


def test_incomplete_handler_table_fails_fast() -> None:
    handlers = {action: (lambda data: {}) for action in Action if action != Action.SYNC_ALL}

    with pytest.raises(RuntimeError, match="syncAll"):
        require_complete_handlers("PartialStore", handlers)
