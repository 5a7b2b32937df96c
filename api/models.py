"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Business-rule checks (quantity range, prices, required names) are left to the
sale service so that every problem is reported together.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.sale import Sale
from domain.sale_item import SaleItem
from services.sale_service import SaleSummary


# ============================================================================
# Request Models
# ============================================================================

class SaleItemRequest(BaseModel):
    """Single product line in a create request."""
    product_id: Optional[UUID] = Field(None, description="Product being sold")
    product_name: str = Field("", description="Product name (denormalized)")
    quantity: int = Field(..., description="Units sold, 1 to 20 per product")
    unit_price: Decimal = Field(..., description="Price per unit, greater than zero")


class UpdateSaleItemRequest(SaleItemRequest):
    """Line in an update request. Set item_id to change an existing line's quantity."""
    item_id: Optional[UUID] = Field(None, description="Existing sale item to re-quantify")


class CreateSaleRequest(BaseModel):
    """Request to register a sale."""
    customer_id: Optional[UUID] = None
    customer_name: str = ""
    branch_id: Optional[UUID] = None
    branch_name: str = ""
    items: List[SaleItemRequest] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "123e4567-e89b-12d3-a456-426614174000",
                "customer_name": "Jane Doe",
                "branch_id": "123e4567-e89b-12d3-a456-426614174001",
                "branch_name": "Downtown",
                "items": [
                    {
                        "product_id": "123e4567-e89b-12d3-a456-426614174002",
                        "product_name": "Beer",
                        "quantity": 5,
                        "unit_price": "10.00"
                    }
                ]
            }
        }


class UpdateSaleRequest(BaseModel):
    """Request to add lines to, or change quantities on, an existing sale."""
    items: List[UpdateSaleItemRequest] = Field(default_factory=list)


# ============================================================================
# Response Models
# ============================================================================

class SaleItemResponse(BaseModel):
    item_id: UUID
    product_id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    is_cancelled: bool

    @staticmethod
    def of(item: SaleItem) -> "SaleItemResponse":
        return SaleItemResponse(
            item_id=item.item_id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount_percentage=item.discount_percentage,
            discount_amount=item.discount_amount,
            total_amount=item.total_amount,
            is_cancelled=item.is_cancelled,
        )


class SaleResponse(BaseModel):
    """Full sale with every item (active and cancelled)."""
    sale_id: UUID
    sale_number: str
    sale_date: datetime
    customer_id: UUID
    customer_name: str
    branch_id: UUID
    branch_name: str
    total_amount: Decimal
    is_cancelled: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[SaleItemResponse]

    @staticmethod
    def of(sale: Sale) -> "SaleResponse":
        return SaleResponse(
            sale_id=sale.sale_id,
            sale_number=sale.sale_number,
            sale_date=sale.sale_date,
            customer_id=sale.customer_id,
            customer_name=sale.customer_name,
            branch_id=sale.branch_id,
            branch_name=sale.branch_name,
            total_amount=sale.total_amount,
            is_cancelled=sale.is_cancelled,
            created_at=sale.created_at,
            updated_at=sale.updated_at,
            items=[SaleItemResponse.of(item) for item in sale.items],
        )


class SaleSummaryResponse(BaseModel):
    """Sale listing entry; item_count counts active items only."""
    sale_id: UUID
    sale_number: str
    sale_date: datetime
    customer_id: UUID
    customer_name: str
    branch_id: UUID
    branch_name: str
    total_amount: Decimal
    is_cancelled: bool
    item_count: int

    @staticmethod
    def of(summary: SaleSummary) -> "SaleSummaryResponse":
        return SaleSummaryResponse(
            sale_id=summary.sale_id,
            sale_number=summary.sale_number,
            sale_date=summary.sale_date,
            customer_id=summary.customer_id,
            customer_name=summary.customer_name,
            branch_id=summary.branch_id,
            branch_name=summary.branch_name,
            total_amount=summary.total_amount,
            is_cancelled=summary.is_cancelled,
            item_count=summary.item_count,
        )


class SaleListResponse(BaseModel):
    sales: List[SaleSummaryResponse]
    total_count: int


class CreateSaleResponse(BaseModel):
    sale_id: UUID
    sale_number: str
    total_amount: Decimal

    class Config:
        json_schema_extra = {
            "example": {
                "sale_id": "123e4567-e89b-12d3-a456-426614174003",
                "sale_number": "SALE-20250101-1A2B3C4D",
                "total_amount": "45.00"
            }
        }


class UpdateSaleResponse(BaseModel):
    sale_id: UUID
    sale_number: str
    total_amount: Decimal


class CancelSaleResponse(BaseModel):
    success: bool
    sale_id: UUID
    sale_number: str


class CancelSaleItemResponse(BaseModel):
    success: bool
    sale_id: UUID
    item_id: UUID
    updated_sale_total: Decimal


# ============================================================================
# Error Models
# ============================================================================

class ValidationErrorResponse(BaseModel):
    """One field-level validation problem."""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int
    errors: List[ValidationErrorResponse] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Validation failed",
                "detail": "Quantity must be greater than zero",
                "status_code": 400,
                "errors": [
                    {"field": "items[0].quantity", "message": "Quantity must be greater than zero"}
                ]
            }
        }
