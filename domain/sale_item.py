"""
Domain: Sale line items.

A SaleItem is one product line within a Sale. It owns its quantity-driven
discount and its own total:

  discount_amount = unit_price * quantity * discount_percentage
  total_amount    = unit_price * quantity - discount_amount

Invariants:
- 1 <= quantity <= 20 for every item built through `SaleItem.create` or
  `with_quantity`.
- unit_price > 0.
- Cancellation is terminal: a cancelled item has zero total and zero discount
  and can no longer change quantity.

This type models immutability by returning a new instance for every
transition. Items are created only by `Sale.add_item`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from uuid import UUID

from .discount import MAX_QUANTITY_PER_PRODUCT, discount_for
from .exceptions import InvalidArgumentError, InvalidStateError

ZERO = Decimal("0")


def _require_valid_quantity(quantity: int, field: str = "quantity") -> None:
    if quantity <= 0:
        raise InvalidArgumentError("Quantity must be greater than zero", field)
    if quantity > MAX_QUANTITY_PER_PRODUCT:
        raise InvalidArgumentError(
            f"Cannot sell more than {MAX_QUANTITY_PER_PRODUCT} identical items", field
        )


@dataclass(frozen=True, slots=True)
class SaleItem:
    """
    Immutable product line of a sale.

    The plain constructor performs no checks so persisted rows can be
    rehydrated as-is; `domain.validation.validate_sale_item` is the structural
    gate for such instances.
    """

    item_id: UUID
    product_id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    discount_percentage: Decimal = ZERO
    discount_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    is_cancelled: bool = False

    @staticmethod
    def create(
        *,
        item_id: UUID,
        product_id: UUID,
        product_name: str,
        quantity: int,
        unit_price: Decimal,
    ) -> "SaleItem":
        """
        Build a new active line with discount and totals applied.

        Raises:
            InvalidArgumentError: quantity outside [1, 20] or unit_price <= 0
        """

        _require_valid_quantity(quantity)
        if unit_price <= 0:
            raise InvalidArgumentError("Unit price must be greater than zero", "unit_price")

        return SaleItem(
            item_id=item_id,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
        )._priced()

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_quantity(self, new_quantity: int) -> "SaleItem":
        """
        Return a new SaleItem with `new_quantity`, discount re-applied.

        Raises:
            InvalidStateError: the item is cancelled
            InvalidArgumentError: new_quantity outside [1, 20]
        """

        if self.is_cancelled:
            raise InvalidStateError("Cannot update a cancelled item")
        _require_valid_quantity(new_quantity, "new_quantity")

        return replace(self, quantity=new_quantity)._priced()

    def cancelled(self) -> "SaleItem":
        """Return a cancelled copy. Cancelling a cancelled item is harmless."""

        return replace(
            self,
            is_cancelled=True,
            total_amount=ZERO,
            discount_amount=ZERO,
        )

    def _priced(self) -> "SaleItem":
        percentage = discount_for(self.quantity)
        discount_amount = self.subtotal * percentage
        return replace(
            self,
            discount_percentage=percentage,
            discount_amount=discount_amount,
            total_amount=self.subtotal - discount_amount,
        )


__all__ = [
    "SaleItem",
]
