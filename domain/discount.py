"""
Domain: Quantity-based discount tiers.

Tiers are defined strictly as:
  - quantity ∈ [ 1,  3 ] -> 0%
  - quantity ∈ [ 4,  9 ] -> 10%
  - quantity ∈ [10, 20 ] -> 20%

Callers validate the quantity range before asking for a discount; this module
has no error conditions.
"""

from __future__ import annotations

from decimal import Decimal

MAX_QUANTITY_PER_PRODUCT: int = 20

NO_DISCOUNT = Decimal("0.00")
TEN_PERCENT = Decimal("0.10")
TWENTY_PERCENT = Decimal("0.20")


def discount_for(quantity: int) -> Decimal:
    """Resolve the discount percentage (as a fraction) for a line quantity."""

    if 10 <= quantity <= MAX_QUANTITY_PER_PRODUCT:
        return TWENTY_PERCENT
    if quantity >= 4:
        return TEN_PERCENT
    return NO_DISCOUNT


__all__ = [
    "MAX_QUANTITY_PER_PRODUCT",
    "discount_for",
]
