"""
Tests for `domain/validation.py`.

Covers contract rules:
- Required sale fields and at least one item.
- Item rules: product id/name, quantity range, positive price.
- Below 4 units an item must carry exactly zero discount.
- Problems are collected, not fail-fast, and never raised.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from domain.sale import Sale
from domain.sale_item import SaleItem
from domain.validation import validate_sale, validate_sale_item

CREATED = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _raw_item(quantity: int = 3, discount: str = "0", unit_price: str = "10.00", **overrides) -> SaleItem:
    fields = dict(
        item_id=UUID(int=101),
        product_id=UUID(int=201),
        product_name="Beer",
        quantity=quantity,
        unit_price=Decimal(unit_price),
        discount_percentage=Decimal(discount),
    )
    fields.update(overrides)
    return SaleItem(**fields)


def _valid_sale() -> Sale:
    sale = Sale.create(
        sale_id=UUID(int=1),
        sale_number="SALE-20250101-ABCDEF12",
        customer_id=UUID(int=2),
        customer_name="Jane Doe",
        branch_id=UUID(int=3),
        branch_name="Downtown",
        created_at=CREATED,
    )
    sale, _ = sale.add_item(
        item_id=UUID(int=101),
        product_id=UUID(int=201),
        product_name="Beer",
        quantity=5,
        unit_price=Decimal("10.00"),
        updated_at=CREATED,
    )
    return sale


def test_valid_sale_passes() -> None:
    result = _valid_sale().validate()

    assert result.is_valid is True
    assert result.errors == ()


def test_item_below_four_units_with_discount_fails() -> None:
    """Verify quantity 3 with a nonzero discount is rejected."""

    result = validate_sale_item(_raw_item(quantity=3, discount="0.10"))

    assert result.is_valid is False
    assert [e.field for e in result.errors] == ["discount_percentage"]
    assert result.messages() == ["Purchases below 4 items cannot have a discount"]


def test_item_below_four_units_without_discount_passes() -> None:
    assert validate_sale_item(_raw_item(quantity=3, discount="0")).is_valid is True


def test_item_collects_every_problem() -> None:
    item = _raw_item(quantity=0, unit_price="0", product_name=" ", product_id=UUID(int=0))

    fields = [e.field for e in validate_sale_item(item).errors]

    assert fields == ["product_id", "product_name", "quantity", "unit_price"]


def test_item_over_twenty_units_fails() -> None:
    result = validate_sale_item(_raw_item(quantity=21, discount="0.20"))

    assert result.messages() == ["Cannot sell more than 20 identical items"]


def test_sale_without_items_fails() -> None:
    sale = Sale.create(
        sale_id=UUID(int=1),
        sale_number="SALE-20250101-ABCDEF12",
        customer_id=UUID(int=2),
        customer_name="Jane Doe",
        branch_id=UUID(int=3),
        branch_name="Downtown",
        created_at=CREATED,
    )

    result = sale.validate()

    assert result.is_valid is False
    assert result.messages() == ["Sale must have at least one item"]


def test_sale_collects_header_and_item_problems() -> None:
    """Verify blank header fields and invalid items are all reported together."""

    sale = Sale(
        sale_id=UUID(int=1),
        sale_number="",
        sale_date=CREATED,
        customer_id=UUID(int=0),
        customer_name="",
        branch_id=UUID(int=0),
        branch_name="  ",
        created_at=CREATED,
        items=(_raw_item(quantity=2, discount="0.10"),),
    )

    result = validate_sale(sale)

    assert [e.field for e in result.errors] == [
        "sale_number",
        "customer_id",
        "customer_name",
        "branch_id",
        "branch_name",
        "items[0].discount_percentage",
    ]

