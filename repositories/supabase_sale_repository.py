"""
Sale repository (Supabase persistence).

Stores a Sale graph in two tables:
- `sales`: one row per sale (header and totals)
- `sale_items`: one row per item, with `position` preserving insertion order

This module provides *only* persistence. Items are never deleted, so saving a
sale upserts every item row.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence
from uuid import UUID

from domain.exceptions import NotFoundError
from domain.sale import Sale
from domain.sale_item import SaleItem
from domain.time import require_utc_timestamp

# Supabase table names.
# Keep these aligned with your database schema.
_SALES_TABLE: str = "sales"
_SALE_ITEMS_TABLE: str = "sale_items"


def _to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _sale_to_row(sale: Sale) -> dict[str, Any]:
    return {
        "sale_id": str(sale.sale_id),
        "sale_number": sale.sale_number,
        "sale_date_utc": _to_iso_utc(sale.sale_date, name="sale_date"),
        "customer_id": str(sale.customer_id),
        "customer_name": sale.customer_name,
        "branch_id": str(sale.branch_id),
        "branch_name": sale.branch_name,
        "total_amount": str(sale.total_amount),
        "is_cancelled": sale.is_cancelled,
        "created_at_utc": _to_iso_utc(sale.created_at, name="created_at"),
        "updated_at_utc": (
            _to_iso_utc(sale.updated_at, name="updated_at") if sale.updated_at else None
        ),
    }


def _item_to_row(sale_id: UUID, position: int, item: SaleItem) -> dict[str, Any]:
    return {
        "item_id": str(item.item_id),
        "sale_id": str(sale_id),
        "position": position,
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": str(item.unit_price),
        "discount_percentage": str(item.discount_percentage),
        "discount_amount": str(item.discount_amount),
        "total_amount": str(item.total_amount),
        "is_cancelled": item.is_cancelled,
    }


def _row_to_item(row: Mapping[str, Any]) -> SaleItem:
    """Convert a Supabase row into a SaleItem."""

    return SaleItem(
        item_id=UUID(str(row["item_id"])),
        product_id=UUID(str(row["product_id"])),
        product_name=str(row["product_name"]),
        quantity=int(row["quantity"]),
        unit_price=Decimal(str(row["unit_price"])),
        discount_percentage=Decimal(str(row["discount_percentage"])),
        discount_amount=Decimal(str(row["discount_amount"])),
        total_amount=Decimal(str(row["total_amount"])),
        is_cancelled=bool(row.get("is_cancelled", False)),
    )


def _row_to_sale(row: Mapping[str, Any], item_rows: Sequence[Mapping[str, Any]]) -> Sale:
    """Convert a sale row plus its item rows into a Sale graph."""

    ordered = sorted(item_rows, key=lambda r: int(r["position"]))
    return Sale(
        sale_id=UUID(str(row["sale_id"])),
        sale_number=str(row["sale_number"]),
        sale_date=_parse_utc_datetime(row["sale_date_utc"]),
        customer_id=UUID(str(row["customer_id"])),
        customer_name=str(row["customer_name"]),
        branch_id=UUID(str(row["branch_id"])),
        branch_name=str(row["branch_name"]),
        created_at=_parse_utc_datetime(row["created_at_utc"]),
        items=tuple(_row_to_item(r) for r in ordered),
        total_amount=Decimal(str(row["total_amount"])),
        is_cancelled=bool(row.get("is_cancelled", False)),
        updated_at=_parse_utc_datetime(row["updated_at_utc"]) if row.get("updated_at_utc") else None,
    )


def _rows(response: Any, action: str) -> List[Mapping[str, Any]]:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return getattr(response, "data", None) or []


class SupabaseSaleRepository:
    """SaleRepository backed by Supabase tables."""

    def __init__(self, client: Any = None) -> None:
        if client is None:
            from repositories.client import get_supabase_client

            client = get_supabase_client()
        self._client = client

    def _item_rows(self, sale: Sale) -> List[dict[str, Any]]:
        return [_item_to_row(sale.sale_id, position, item) for position, item in enumerate(sale.items)]

    def _save_items(self, sale: Sale, action: str) -> None:
        rows = self._item_rows(sale)
        if not rows:
            return
        response = self._client.table(_SALE_ITEMS_TABLE).upsert(rows).execute()
        _rows(response, action)

    def get_by_id(self, sale_id: UUID) -> Optional[Sale]:
        response = (
            self._client.table(_SALES_TABLE)
            .select("*")
            .eq("sale_id", str(sale_id))
            .limit(1)
            .execute()
        )
        rows = _rows(response, "get sale")
        if not rows:
            return None

        item_response = (
            self._client.table(_SALE_ITEMS_TABLE)
            .select("*")
            .eq("sale_id", str(sale_id))
            .execute()
        )
        return _row_to_sale(rows[0], _rows(item_response, "get sale items"))

    def create(self, sale: Sale) -> Sale:
        response = self._client.table(_SALES_TABLE).insert(_sale_to_row(sale)).execute()
        _rows(response, "create sale")
        self._save_items(sale, "create sale items")
        return sale

    def update(self, sale: Sale) -> Sale:
        response = (
            self._client.table(_SALES_TABLE)
            .update(_sale_to_row(sale))
            .eq("sale_id", str(sale.sale_id))
            .execute()
        )
        if not _rows(response, "update sale"):
            raise NotFoundError("Sale", sale.sale_id)
        self._save_items(sale, "update sale items")
        return sale

    def get_all(self) -> List[Sale]:
        response = self._client.table(_SALES_TABLE).select("*").order("created_at_utc").execute()
        sale_rows = _rows(response, "list sales")
        if not sale_rows:
            return []

        sale_ids = [str(row["sale_id"]) for row in sale_rows]
        item_response = (
            self._client.table(_SALE_ITEMS_TABLE)
            .select("*")
            .in_("sale_id", sale_ids)
            .execute()
        )

        items_by_sale: Dict[str, List[Mapping[str, Any]]] = {sale_id: [] for sale_id in sale_ids}
        for item_row in _rows(item_response, "list sale items"):
            items_by_sale.setdefault(str(item_row["sale_id"]), []).append(item_row)

        return [_row_to_sale(row, items_by_sale[str(row["sale_id"])]) for row in sale_rows]


__all__ = [
    "SupabaseSaleRepository",
]
