"""
Sale repository contract and in-memory implementation.

Repositories only load and store fully-hydrated Sale graphs (sale plus every
item). They do not enforce business rules, and they make no ordering
guarantee between two callers that loaded the same sale: the last `update`
wins.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol
from uuid import UUID

from domain.exceptions import NotFoundError
from domain.sale import Sale


class SaleRepository(Protocol):
    """Persistence operations the sale service relies on."""

    def get_by_id(self, sale_id: UUID) -> Optional[Sale]:
        """Return the sale with all of its items, or None if unknown."""
        ...

    def create(self, sale: Sale) -> Sale:
        ...

    def update(self, sale: Sale) -> Sale:
        """Replace the stored graph for `sale.sale_id`."""
        ...

    def get_all(self) -> List[Sale]:
        ...


class InMemorySaleRepository:
    """
    Dict-backed repository.

    Sales are immutable snapshots, so storing and returning the same objects
    is safe. Insertion order is preserved by `get_all`.
    """

    def __init__(self) -> None:
        self._sales: Dict[UUID, Sale] = {}

    def get_by_id(self, sale_id: UUID) -> Optional[Sale]:
        return self._sales.get(sale_id)

    def create(self, sale: Sale) -> Sale:
        if sale.sale_id in self._sales:
            raise RuntimeError(f"Failed to create sale: {sale.sale_id} already exists")
        self._sales[sale.sale_id] = sale
        return sale

    def update(self, sale: Sale) -> Sale:
        if sale.sale_id not in self._sales:
            raise NotFoundError("Sale", sale.sale_id)
        self._sales[sale.sale_id] = sale
        return sale

    def get_all(self) -> List[Sale]:
        return list(self._sales.values())


__all__ = [
    "InMemorySaleRepository",
    "SaleRepository",
]
