"""
Domain-level exceptions for sales.

Raised by Sale and SaleItem transitions and propagated unchanged to callers.
Expected structural validation failures are NOT exceptions here; see
`domain.validation.ValidationResult`.
"""

from __future__ import annotations

from typing import Any, Optional


class SaleDomainError(Exception):
    """Base exception for all sale domain errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details = details or {}


class InvalidArgumentError(SaleDomainError, ValueError):
    """A single field value violates a local constraint (quantity, price)."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message, details={"field": field})
        self.field = field


class InvalidStateError(SaleDomainError):
    """The sale or item is in a state that forbids the requested operation."""


class NotFoundError(SaleDomainError, LookupError):
    """A referenced sale or sale item does not exist."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
