"""
Sales API Endpoints.

Endpoints for registering, modifying, cancelling and browsing sales.

Error mapping:
- validation problems and invalid values -> 400
- unknown sale or item -> 404
- operation forbidden by the sale's state -> 409
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_sale_service
from api.models import (
    CancelSaleItemResponse,
    CancelSaleResponse,
    CreateSaleRequest,
    CreateSaleResponse,
    SaleListResponse,
    SaleResponse,
    SaleSummaryResponse,
    UpdateSaleRequest,
    UpdateSaleResponse,
)
from domain.exceptions import InvalidArgumentError, InvalidStateError, NotFoundError
from services.commands import (
    CancelSaleItemCommand,
    CreateSaleCommand,
    SaleItemCommand,
    UpdateSaleCommand,
)
from services.sale_service import SaleService, SaleValidationError

router = APIRouter()


def _to_http_exception(exc: Exception, action: str) -> HTTPException:
    if isinstance(exc, SaleValidationError):
        return HTTPException(
            status_code=400,
            detail={
                "error": "Validation failed",
                "errors": [{"field": e.field, "message": e.message} for e in exc.errors],
            },
        )
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidStateError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=f"Failed to {action}: {str(exc)}")


@router.post(
    "/sales",
    response_model=CreateSaleResponse,
    status_code=201,
    summary="Register Sale",
    description="Register a sale with its items. Repeated products are merged into one line."
)
def create_sale(request: CreateSaleRequest, service: SaleService = Depends(get_sale_service)):
    """
    Register a new sale.

    **Discount tiers (per product line):**
    - 1 to 3 units: no discount
    - 4 to 9 units: 10%
    - 10 to 20 units: 20%

    More than 20 units of one product is rejected.
    """
    command = CreateSaleCommand(
        customer_id=request.customer_id,
        customer_name=request.customer_name,
        branch_id=request.branch_id,
        branch_name=request.branch_name,
        items=[
            SaleItemCommand(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in request.items
        ],
    )
    try:
        result = service.create_sale(command)
    except Exception as e:
        raise _to_http_exception(e, "create sale")

    return CreateSaleResponse(
        sale_id=result.sale_id,
        sale_number=result.sale_number,
        total_amount=result.total_amount,
    )


@router.get(
    "/sales",
    response_model=SaleListResponse,
    summary="List Sales"
)
def list_sales(service: SaleService = Depends(get_sale_service)):
    try:
        summaries = service.list_sales()
    except Exception as e:
        raise _to_http_exception(e, "list sales")

    return SaleListResponse(
        sales=[SaleSummaryResponse.of(summary) for summary in summaries],
        total_count=len(summaries),
    )


@router.get(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Get Sale"
)
def get_sale(sale_id: UUID, service: SaleService = Depends(get_sale_service)):
    try:
        sale = service.get_sale(sale_id)
    except Exception as e:
        raise _to_http_exception(e, "get sale")

    return SaleResponse.of(sale)


@router.put(
    "/sales/{sale_id}",
    response_model=UpdateSaleResponse,
    summary="Modify Sale",
    description="Add new lines, or change the quantity of existing lines by item_id."
)
def update_sale(
    sale_id: UUID,
    request: UpdateSaleRequest,
    service: SaleService = Depends(get_sale_service),
):
    command = UpdateSaleCommand(
        sale_id=sale_id,
        items=[
            SaleItemCommand(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                item_id=item.item_id,
            )
            for item in request.items
        ],
    )
    try:
        result = service.update_sale(command)
    except Exception as e:
        raise _to_http_exception(e, "update sale")

    return UpdateSaleResponse(
        sale_id=result.sale_id,
        sale_number=result.sale_number,
        total_amount=result.total_amount,
    )


@router.post(
    "/sales/{sale_id}/cancel",
    response_model=CancelSaleResponse,
    summary="Cancel Sale"
)
def cancel_sale(sale_id: UUID, service: SaleService = Depends(get_sale_service)):
    """Cancel a sale and all of its items. Cancelling twice is not an error."""
    try:
        result = service.cancel_sale(sale_id)
    except Exception as e:
        raise _to_http_exception(e, "cancel sale")

    return CancelSaleResponse(
        success=result.success,
        sale_id=result.sale_id,
        sale_number=result.sale_number,
    )


@router.post(
    "/sales/{sale_id}/items/{item_id}/cancel",
    response_model=CancelSaleItemResponse,
    summary="Cancel Sale Item"
)
def cancel_sale_item(
    sale_id: UUID,
    item_id: UUID,
    service: SaleService = Depends(get_sale_service),
):
    try:
        result = service.cancel_sale_item(CancelSaleItemCommand(sale_id=sale_id, item_id=item_id))
    except Exception as e:
        raise _to_http_exception(e, "cancel sale item")

    return CancelSaleItemResponse(
        success=result.success,
        sale_id=result.sale_id,
        item_id=result.item_id,
        updated_sale_total=result.updated_sale_total,
    )
