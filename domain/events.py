"""
Domain: Sale notifications.

Observational records published after a change has been persisted. Nothing in
the domain depends on who (if anyone) receives them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from uuid import UUID


@dataclass(frozen=True, slots=True)
class SaleRegistered:
    sale_id: UUID


@dataclass(frozen=True, slots=True)
class SaleModified:
    sale_id: UUID


@dataclass(frozen=True, slots=True)
class SaleCancelled:
    sale_id: UUID


@dataclass(frozen=True, slots=True)
class ItemCancelled:
    sale_id: UUID
    item_id: UUID


SaleEvent = Union[SaleRegistered, SaleModified, SaleCancelled, ItemCancelled]


__all__ = [
    "ItemCancelled",
    "SaleCancelled",
    "SaleEvent",
    "SaleModified",
    "SaleRegistered",
]
