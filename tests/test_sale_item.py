"""
Tests for `domain/sale_item.py`.

Covers contract rules:
- Creation rejects quantity <= 0, quantity > 20 and unit_price <= 0.
- Discount and totals are derived from quantity on creation and on change.
- Cancelled items have zero totals and can no longer change quantity.
- Transitions return new instances; the original is unchanged.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from decimal import Decimal
from uuid import UUID

import pytest

from domain.exceptions import InvalidArgumentError, InvalidStateError
from domain.sale_item import SaleItem

ITEM_ID = UUID("00000000-0000-0000-0000-000000000101")
PRODUCT_ID = UUID("00000000-0000-0000-0000-000000000201")


def _item(quantity: int = 5, unit_price: Decimal = Decimal("10.00")) -> SaleItem:
    return SaleItem.create(
        item_id=ITEM_ID,
        product_id=PRODUCT_ID,
        product_name="Beer",
        quantity=quantity,
        unit_price=unit_price,
    )


def test_create_applies_discount_and_totals() -> None:
    """Verify 5 units at 10.00 get 10% off: 50.00 - 5.00 = 45.00."""

    item = _item(quantity=5)

    assert item.discount_percentage == Decimal("0.10")
    assert item.discount_amount == Decimal("5.00")
    assert item.total_amount == Decimal("45.00")
    assert item.is_cancelled is False


def test_create_without_discount_below_four_units() -> None:
    item = _item(quantity=3, unit_price=Decimal("2.50"))

    assert item.discount_percentage == 0
    assert item.discount_amount == 0
    assert item.total_amount == Decimal("7.50")


@pytest.mark.parametrize("quantity", [0, -1, 21])
def test_create_rejects_quantity_out_of_range(quantity: int) -> None:
    """Verify quantities outside [1, 20] raise InvalidArgumentError."""

    with pytest.raises(InvalidArgumentError) as exc_info:
        _item(quantity=quantity)

    assert exc_info.value.field == "quantity"


@pytest.mark.parametrize("unit_price", [Decimal("0"), Decimal("-1.00")])
def test_create_rejects_non_positive_unit_price(unit_price: Decimal) -> None:
    with pytest.raises(InvalidArgumentError):
        _item(unit_price=unit_price)


def test_with_quantity_reapplies_discount_and_keeps_original() -> None:
    """Verify changing 5 -> 12 units moves the line to the 20% tier."""

    item = _item(quantity=5)
    updated = item.with_quantity(12)

    assert item.quantity == 5
    assert item.total_amount == Decimal("45.00")

    assert updated.quantity == 12
    assert updated.discount_percentage == Decimal("0.20")
    assert updated.discount_amount == Decimal("24.00")
    assert updated.total_amount == Decimal("96.00")
    assert updated.item_id == item.item_id


@pytest.mark.parametrize("quantity", [0, -3, 21])
def test_with_quantity_rejects_out_of_range(quantity: int) -> None:
    with pytest.raises(InvalidArgumentError):
        _item().with_quantity(quantity)


def test_cancelled_zeroes_totals() -> None:
    cancelled = _item(quantity=10).cancelled()

    assert cancelled.is_cancelled is True
    assert cancelled.total_amount == 0
    assert cancelled.discount_amount == 0
    assert cancelled.quantity == 10


def test_cancelled_item_cannot_change_quantity() -> None:
    """Verify a cancelled line rejects quantity changes with InvalidStateError."""

    with pytest.raises(InvalidStateError):
        _item().cancelled().with_quantity(2)


def test_cancelling_twice_is_harmless() -> None:
    once = _item().cancelled()

    assert once.cancelled() == once


def test_sale_item_is_immutable() -> None:
    item = _item()

    with pytest.raises(FrozenInstanceError):
        item.quantity = 7  # type: ignore[misc]
