"""
Sale commands and their request-shape validators.

These checks run before a sale is loaded or built; a command that fails them
never reaches the aggregate. Problems are collected, not fail-fast.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from domain.discount import MAX_QUANTITY_PER_PRODUCT
from domain.validation import ValidationErrorDetail, ValidationResult

_NIL_UUID = UUID(int=0)


@dataclass(frozen=True, slots=True)
class SaleItemCommand:
    """
    One requested line.

    item_id: set to re-quantify an existing line (update only); None adds a line.
    """
    product_id: Optional[UUID]
    product_name: str
    quantity: int
    unit_price: Decimal
    item_id: Optional[UUID] = None


@dataclass(frozen=True, slots=True)
class CreateSaleCommand:
    customer_id: Optional[UUID]
    customer_name: str
    branch_id: Optional[UUID]
    branch_name: str
    items: List[SaleItemCommand] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UpdateSaleCommand:
    sale_id: Optional[UUID]
    items: List[SaleItemCommand] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CancelSaleItemCommand:
    sale_id: Optional[UUID]
    item_id: Optional[UUID]


def _missing_id(value: Optional[UUID]) -> bool:
    return value is None or value == _NIL_UUID


def _missing_text(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _item_errors(item: SaleItemCommand, prefix: str) -> List[ValidationErrorDetail]:
    errors: List[ValidationErrorDetail] = []

    if _missing_id(item.product_id):
        errors.append(ValidationErrorDetail(f"{prefix}product_id", "Product ID is required"))
    if _missing_text(item.product_name):
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

    return errors


def _items_errors(items: List[SaleItemCommand]) -> List[ValidationErrorDetail]:
    if not items:
        return [ValidationErrorDetail("items", "At least one item is required")]

    errors: List[ValidationErrorDetail] = []
    for index, item in enumerate(items):
        errors.extend(_item_errors(item, prefix=f"items[{index}]."))
    return errors


def validate_create_sale(command: CreateSaleCommand) -> ValidationResult:
    errors: List[ValidationErrorDetail] = []

    if _missing_id(command.customer_id):
        errors.append(ValidationErrorDetail("customer_id", "Customer ID is required"))
    if _missing_text(command.customer_name):
        errors.append(ValidationErrorDetail("customer_name", "Customer name is required"))
    if _missing_id(command.branch_id):
        errors.append(ValidationErrorDetail("branch_id", "Branch ID is required"))
    if _missing_text(command.branch_name):
        errors.append(ValidationErrorDetail("branch_name", "Branch name is required"))

    errors.extend(_items_errors(command.items))
    return ValidationResult(errors=tuple(errors))


def validate_update_sale(command: UpdateSaleCommand) -> ValidationResult:
    errors: List[ValidationErrorDetail] = []

    if _missing_id(command.sale_id):
        errors.append(ValidationErrorDetail("sale_id", "Sale ID is required"))

    errors.extend(_items_errors(command.items))
    return ValidationResult(errors=tuple(errors))


def validate_cancel_sale_item(command: CancelSaleItemCommand) -> ValidationResult:
    errors: List[ValidationErrorDetail] = []

    if _missing_id(command.sale_id):
        errors.append(ValidationErrorDetail("sale_id", "Sale ID is required"))
    if _missing_id(command.item_id):
        errors.append(ValidationErrorDetail("item_id", "Item ID is required"))

    return ValidationResult(errors=tuple(errors))


__all__ = [
    "CancelSaleItemCommand",
    "CreateSaleCommand",
    "SaleItemCommand",
    "UpdateSaleCommand",
    "validate_cancel_sale_item",
    "validate_create_sale",
    "validate_update_sale",
]
