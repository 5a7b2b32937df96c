"""
Sale service for handling sale requests.

Handles:
- Command validation before any sale is touched
- Loading / building the Sale aggregate and applying transitions
- Structural validation before persistence (rejects the request on failure)
- Post-commit event publication (a failed publish never undoes the save)

Clock and id generation are injected so the domain stays deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID, uuid4

from domain.events import (
    ItemCancelled,
    SaleCancelled,
    SaleEvent,
    SaleModified,
    SaleRegistered,
)
from domain.exceptions import InvalidStateError, NotFoundError
from domain.sale import Sale, generate_sale_number
from domain.time import utc_now
from domain.validation import ValidationErrorDetail, ValidationResult
from repositories.sale_repository import SaleRepository
from services.commands import (
    CancelSaleItemCommand,
    CreateSaleCommand,
    UpdateSaleCommand,
    validate_cancel_sale_item,
    validate_create_sale,
    validate_update_sale,
)
from services.event_handlers import EventSink, LoggingEventSink

logger = logging.getLogger(__name__)


class SaleValidationError(Exception):
    """Raised when a request is rejected by command or sale validation."""

    def __init__(self, errors: Sequence[ValidationErrorDetail]) -> None:
        self.errors: Tuple[ValidationErrorDetail, ...] = tuple(errors)
        super().__init__(", ".join(error.message for error in self.errors))


@dataclass(frozen=True, slots=True)
class CreateSaleResult:
    sale_id: UUID
    sale_number: str
    total_amount: Decimal
    events: Tuple[SaleEvent, ...] = ()


@dataclass(frozen=True, slots=True)
class UpdateSaleResult:
    sale_id: UUID
    sale_number: str
    total_amount: Decimal
    events: Tuple[SaleEvent, ...] = ()


@dataclass(frozen=True, slots=True)
class CancelSaleResult:
    success: bool
    sale_id: UUID
    sale_number: str
    events: Tuple[SaleEvent, ...] = ()


@dataclass(frozen=True, slots=True)
class CancelSaleItemResult:
    success: bool
    sale_id: UUID
    item_id: UUID
    updated_sale_total: Decimal
    events: Tuple[SaleEvent, ...] = ()


@dataclass(frozen=True, slots=True)
class SaleSummary:
    """
    Listing view of a sale.

    item_count counts active (non-cancelled) items only.
    """
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
    def of(sale: Sale) -> "SaleSummary":
        return SaleSummary(
            sale_id=sale.sale_id,
            sale_number=sale.sale_number,
            sale_date=sale.sale_date,
            customer_id=sale.customer_id,
            customer_name=sale.customer_name,
            branch_id=sale.branch_id,
            branch_name=sale.branch_name,
            total_amount=sale.total_amount,
            is_cancelled=sale.is_cancelled,
            item_count=len(sale.active_items),
        )


def _require_valid(result: ValidationResult, what: str) -> None:
    if not result.is_valid:
        logger.warning("Rejected %s: %s", what, "; ".join(result.messages()))
        raise SaleValidationError(result.errors)


class SaleService:
    """
    Orchestrates one load-mutate-validate-save-publish cycle per request.

    Example:
        service = SaleService(InMemorySaleRepository())
        result = service.create_sale(CreateSaleCommand(...))
        print(f"Created {result.sale_number} totalling {result.total_amount}")
    """

    def __init__(
        self,
        repository: SaleRepository,
        event_sink: Optional[EventSink] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._repository = repository
        self._event_sink = event_sink if event_sink is not None else LoggingEventSink()
        self._clock = clock
        self._id_factory = id_factory

    def _publish(self, events: Iterable[SaleEvent]) -> None:
        for event in events:
            try:
                self._event_sink.publish(event)
            except Exception:
                # Already persisted; publication is observational only.
                logger.exception("Failed to publish sale event %r", event)

    def _load(self, sale_id: UUID) -> Sale:
        sale = self._repository.get_by_id(sale_id)
        if sale is None:
            raise NotFoundError("Sale", sale_id)
        return sale

    def create_sale(self, command: CreateSaleCommand) -> CreateSaleResult:
        """
        Register a new sale with its items.

        Items for the same product are merged into one line.

        Raises:
            SaleValidationError: command or resulting sale is invalid
            InvalidArgumentError / InvalidStateError: an item transition failed
        """
        _require_valid(validate_create_sale(command), "create sale command")

        now = self._clock()
        sale_id = self._id_factory()
        sale = Sale.create(
            sale_id=sale_id,
            sale_number=generate_sale_number(now, self._id_factory()),
            customer_id=command.customer_id,
            customer_name=command.customer_name,
            branch_id=command.branch_id,
            branch_name=command.branch_name,
            created_at=now,
        )

        for item in command.items:
            sale, _ = sale.add_item(
                item_id=self._id_factory(),
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                updated_at=now,
            )

        _require_valid(sale.validate(), f"sale {sale.sale_number}")

        created = self._repository.create(sale)
        events: Tuple[SaleEvent, ...] = (SaleRegistered(sale_id=created.sale_id),)
        self._publish(events)

        return CreateSaleResult(
            sale_id=created.sale_id,
            sale_number=created.sale_number,
            total_amount=created.total_amount,
            events=events,
        )

    def update_sale(self, command: UpdateSaleCommand) -> UpdateSaleResult:
        """
        Add lines (no item_id) or change quantities (item_id set) on a sale.

        Raises:
            SaleValidationError: command or resulting sale is invalid
            NotFoundError: sale or referenced item does not exist
            InvalidStateError: sale is cancelled
        """
        _require_valid(validate_update_sale(command), "update sale command")

        sale = self._load(command.sale_id)
        if sale.is_cancelled:
            raise InvalidStateError("Cannot update a cancelled sale")

        now = self._clock()
        for item in command.items:
            if item.item_id is not None:
                sale = sale.update_item_quantity(item.item_id, item.quantity, updated_at=now)
            else:
                sale, _ = sale.add_item(
                    item_id=self._id_factory(),
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    updated_at=now,
                )

        _require_valid(sale.validate(), f"sale {sale.sale_number}")

        updated = self._repository.update(sale)
        events: Tuple[SaleEvent, ...] = (SaleModified(sale_id=updated.sale_id),)
        self._publish(events)

        return UpdateSaleResult(
            sale_id=updated.sale_id,
            sale_number=updated.sale_number,
            total_amount=updated.total_amount,
            events=events,
        )

    def cancel_sale(self, sale_id: UUID) -> CancelSaleResult:
        """Cancel a sale. Cancelling an already cancelled sale succeeds without changes."""
        sale = self._load(sale_id)
        if sale.is_cancelled:
            return CancelSaleResult(success=True, sale_id=sale.sale_id, sale_number=sale.sale_number)

        updated = self._repository.update(sale.cancel(updated_at=self._clock()))
        events: Tuple[SaleEvent, ...] = (SaleCancelled(sale_id=updated.sale_id),)
        self._publish(events)

        return CancelSaleResult(
            success=True,
            sale_id=updated.sale_id,
            sale_number=updated.sale_number,
            events=events,
        )

    def cancel_sale_item(self, command: CancelSaleItemCommand) -> CancelSaleItemResult:
        _require_valid(validate_cancel_sale_item(command), "cancel sale item command")

        sale = self._load(command.sale_id)
        if sale.is_cancelled:
            raise InvalidStateError("Cannot modify a cancelled sale")

        updated = self._repository.update(sale.cancel_item(command.item_id, updated_at=self._clock()))
        events: Tuple[SaleEvent, ...] = (
            ItemCancelled(sale_id=updated.sale_id, item_id=command.item_id),
        )
        self._publish(events)

        return CancelSaleItemResult(
            success=True,
            sale_id=updated.sale_id,
            item_id=command.item_id,
            updated_sale_total=updated.total_amount,
            events=events,
        )

    def get_sale(self, sale_id: UUID) -> Sale:
        return self._load(sale_id)

    def list_sales(self) -> List[SaleSummary]:
        return [SaleSummary.of(sale) for sale in self._repository.get_all()]


__all__ = [
    "CancelSaleItemResult",
    "CancelSaleResult",
    "CreateSaleResult",
    "SaleService",
    "SaleSummary",
    "SaleValidationError",
    "UpdateSaleResult",
]
