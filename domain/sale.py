"""
Domain: Sale aggregate.

A Sale owns an ordered sequence of SaleItems and is the only entry point for
changing them.

Invariants implemented here:
- total_amount == sum(item.total_amount for active items) after every
  transition; a cancelled sale has total_amount == 0 and every item cancelled.
- Cancellation is terminal (Active -> Cancelled). Once cancelled, items can no
  longer be added, re-quantified or individually cancelled.
- A product appears at most once among active items: adding a product that
  already has an active line merges the quantities into that line.
- Items are only ever appended; cancelling marks, it never removes.

This module contains only pure domain entities: no I/O, no clock, no random
ids. Ids and timestamps are passed explicitly, and every transition returns a
new Sale.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple
from uuid import UUID

from .discount import MAX_QUANTITY_PER_PRODUCT
from .exceptions import InvalidArgumentError, InvalidStateError, NotFoundError
from .sale_item import ZERO, SaleItem
from .time import require_utc_timestamp
from .validation import ValidationResult, validate_sale


def generate_sale_number(sold_at: datetime, suffix: UUID) -> str:
    """
    Build a human-facing sale number: SALE-YYYYMMDD-XXXXXXXX.

    The suffix is the first 8 hex characters of `suffix`, upper-cased.
    """

    return f"SALE-{sold_at:%Y%m%d}-{suffix.hex[:8].upper()}"


def _active_total(items: Iterable[SaleItem]) -> Decimal:
    return sum((item.total_amount for item in items if not item.is_cancelled), ZERO)


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable snapshot of a sale transaction.

    Customer and branch are denormalized references fixed at creation.
    `updated_at` is None until the first transition after creation.
    """

    sale_id: UUID
    sale_number: str
    sale_date: datetime
    customer_id: UUID
    customer_name: str
    branch_id: UUID
    branch_name: str
    created_at: datetime
    items: Tuple[SaleItem, ...] = ()
    total_amount: Decimal = ZERO
    is_cancelled: bool = False
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("sale_date", self.sale_date)
        require_utc_timestamp("created_at", self.created_at)
        if self.updated_at is not None:
            require_utc_timestamp("updated_at", self.updated_at)
        # Accept any sequence from rehydration; expose a tuple.
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @staticmethod
    def create(
        *,
        sale_id: UUID,
        sale_number: str,
        customer_id: UUID,
        customer_name: str,
        branch_id: UUID,
        branch_name: str,
        created_at: datetime,
    ) -> "Sale":
        """
        Open a new, empty, active sale.

        No argument validation happens here; run `validate()` before persisting.
        """

        return Sale(
            sale_id=sale_id,
            sale_number=sale_number,
            sale_date=created_at,
            customer_id=customer_id,
            customer_name=customer_name,
            branch_id=branch_id,
            branch_name=branch_name,
            created_at=created_at,
        )

    @property
    def active_items(self) -> Tuple[SaleItem, ...]:
        return tuple(item for item in self.items if not item.is_cancelled)

    def get_item(self, item_id: UUID) -> SaleItem:
        """Look up any item (active or cancelled) by id."""

        for item in self.items:
            if item.item_id == item_id:
                return item
        raise NotFoundError("Item", item_id)

    def add_item(
        self,
        *,
        item_id: UUID,
        product_id: UUID,
        product_name: str,
        quantity: int,
        unit_price: Decimal,
        updated_at: datetime,
    ) -> tuple["Sale", SaleItem]:
        """
        Add a product line, or merge into the active line for the same product.

        `item_id` is only used when a new line is appended.

        Returns:
            (updated Sale, the affected SaleItem)

        Raises:
            InvalidStateError: sale is cancelled, or a new line exceeds 20 units
            InvalidArgumentError: quantity <= 0, merged quantity > 20, price <= 0
        """

        require_utc_timestamp("updated_at", updated_at)
        if self.is_cancelled:
            raise InvalidStateError("Cannot add items to a cancelled sale")
        if quantity <= 0:
            raise InvalidArgumentError("Quantity must be greater than zero", "quantity")

        existing = next(
            (item for item in self.items if item.product_id == product_id and not item.is_cancelled),
            None,
        )
        if existing is not None:
            merged = existing.with_quantity(existing.quantity + quantity)
            return self._with_item_replaced(merged, updated_at), merged

        if quantity > MAX_QUANTITY_PER_PRODUCT:
            raise InvalidStateError(
                f"Cannot sell more than {MAX_QUANTITY_PER_PRODUCT} identical items"
            )

        item = SaleItem.create(
            item_id=item_id,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
        )
        return self._with_items(self.items + (item,), updated_at), item

    def update_item_quantity(self, item_id: UUID, quantity: int, *, updated_at: datetime) -> "Sale":
        """
        Change the quantity of an existing item.

        Raises:
            InvalidStateError: sale or item is cancelled
            NotFoundError: no item with `item_id` in this sale
            InvalidArgumentError: quantity outside [1, 20]
        """

        require_utc_timestamp("updated_at", updated_at)
        if self.is_cancelled:
            raise InvalidStateError("Cannot update items in a cancelled sale")

        item = self.get_item(item_id)
        return self._with_item_replaced(item.with_quantity(quantity), updated_at)

    def cancel_item(self, item_id: UUID, *, updated_at: datetime) -> "Sale":
        """
        Cancel a single line. The sale stays active even with no active lines left.

        Raises:
            InvalidStateError: sale is already cancelled
            NotFoundError: no item with `item_id` in this sale
        """

        require_utc_timestamp("updated_at", updated_at)
        if self.is_cancelled:
            raise InvalidStateError("Cannot cancel items in an already cancelled sale")

        item = self.get_item(item_id)
        return self._with_item_replaced(item.cancelled(), updated_at)

    def cancel(self, *, updated_at: datetime) -> "Sale":
        """Cancel the whole sale and every item. A cancelled sale is returned as-is."""

        require_utc_timestamp("updated_at", updated_at)
        if self.is_cancelled:
            return self

        return replace(
            self,
            items=tuple(item.cancelled() for item in self.items),
            total_amount=ZERO,
            is_cancelled=True,
            updated_at=updated_at,
        )

    def validate(self) -> ValidationResult:
        """Run the structural validator over this snapshot. Never raises."""

        return validate_sale(self)

    def _with_item_replaced(self, updated: SaleItem, updated_at: datetime) -> "Sale":
        items = tuple(updated if item.item_id == updated.item_id else item for item in self.items)
        return self._with_items(items, updated_at)

    def _with_items(self, items: Tuple[SaleItem, ...], updated_at: datetime) -> "Sale":
        return replace(
            self,
            items=items,
            total_amount=_active_total(items),
            updated_at=updated_at,
        )


__all__ = [
    "Sale",
    "generate_sale_number",
]
