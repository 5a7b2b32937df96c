"""
Domain: Structural validation of sales and sale items.

This is a pre-persistence gate, independent of the transition guards in
`domain.sale` and `domain.sale_item`. Failures are collected (not fail-fast)
and returned as data; nothing here raises for an invalid sale.

Sale rules:
- sale_number, customer_id, customer_name, branch_id, branch_name are non-empty.
- The sale has at least one item, and every item is valid.

Sale item rules:
- product_id and product_name are non-empty.
- 1 <= quantity <= 20 and unit_price > 0.
- Purchases below 4 items cannot carry a discount.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple
from uuid import UUID

from .discount import MAX_QUANTITY_PER_PRODUCT

if TYPE_CHECKING:
    from .sale import Sale
    from .sale_item import SaleItem

_NIL_UUID = UUID(int=0)


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """One field-level problem."""

    field: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    errors: Tuple[ValidationErrorDetail, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages(self) -> List[str]:
        return [error.message for error in self.errors]


def _is_blank(value: Optional[object]) -> bool:
    if value is None:
        return True
    if isinstance(value, UUID):
        return value == _NIL_UUID
    if isinstance(value, str):
        return not value.strip()
    return False


def _sale_item_errors(item: "SaleItem", prefix: str = "") -> List[ValidationErrorDetail]:
    errors: List[ValidationErrorDetail] = []

    if _is_blank(item.product_id):
        errors.append(ValidationErrorDetail(f"{prefix}product_id", "Product ID is required"))
    if _is_blank(item.product_name):
        errors.append(ValidationErrorDetail(f"{prefix}product_name", "Product name is required"))

    if item.quantity <= 0:
        errors.append(ValidationErrorDetail(f"{prefix}quantity", "Quantity must be greater than zero"))
    elif item.quantity > MAX_QUANTITY_PER_PRODUCT:
        errors.append(
            ValidationErrorDetail(
                f"{prefix}quantity",
                f"Cannot sell more than {MAX_QUANTITY_PER_PRODUCT} identical items",
            )
        )

    if item.unit_price <= 0:
        errors.append(ValidationErrorDetail(f"{prefix}unit_price", "Unit price must be greater than zero"))

    if item.quantity < 4 and item.discount_percentage != 0:
        errors.append(
            ValidationErrorDetail(
                f"{prefix}discount_percentage",
                "Purchases below 4 items cannot have a discount",
            )
        )

    return errors


def validate_sale_item(item: "SaleItem") -> ValidationResult:
    return ValidationResult(errors=tuple(_sale_item_errors(item)))


def validate_sale(sale: "Sale") -> ValidationResult:
    """Collect every structural problem of a sale and its items."""

    errors: List[ValidationErrorDetail] = []

    required = (
        ("sale_number", sale.sale_number, "Sale number is required"),
        ("customer_id", sale.customer_id, "Customer ID is required"),
        ("customer_name", sale.customer_name, "Customer name is required"),
        ("branch_id", sale.branch_id, "Branch ID is required"),
        ("branch_name", sale.branch_name, "Branch name is required"),
    )
    for field, value, message in required:
        if _is_blank(value):
            errors.append(ValidationErrorDetail(field, message))

    if not sale.items:
        errors.append(ValidationErrorDetail("items", "Sale must have at least one item"))

    for index, item in enumerate(sale.items):
        errors.extend(_sale_item_errors(item, prefix=f"items[{index}]."))

    return ValidationResult(errors=tuple(errors))


__all__ = [
    "ValidationErrorDetail",
    "ValidationResult",
    "validate_sale",
    "validate_sale_item",
]
