"""
Tests for `api/routers/sales.py`.

Exercises the HTTP surface against an in-memory repository and checks the
error mapping (400 validation, 404 unknown, 409 cancelled).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_sale_service
from api.main import app
from repositories.sale_repository import InMemorySaleRepository
from services.event_handlers import RecordingEventSink
from services.sale_service import SaleService

BEER = "00000000-0000-0000-0000-000000000201"
SODA = "00000000-0000-0000-0000-000000000202"


@pytest.fixture
def client() -> Iterator[TestClient]:
    service = SaleService(InMemorySaleRepository(), RecordingEventSink())
    app.dependency_overrides[get_sale_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create_payload(*items: dict) -> dict:
    return {
        "customer_id": "00000000-0000-0000-0000-000000000002",
        "customer_name": "Jane Doe",
        "branch_id": "00000000-0000-0000-0000-000000000003",
        "branch_name": "Downtown",
        "items": list(items),
    }


def _line(product_id: str = BEER, quantity: int = 5, unit_price: str = "10.00") -> dict:
    return {
        "product_id": product_id,
        "product_name": "Beer" if product_id == BEER else "Soda",
        "quantity": quantity,
        "unit_price": unit_price,
    }


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_and_get_sale(client: TestClient) -> None:
    created = client.post("/api/v1/sales", json=_create_payload(_line(quantity=5)))

    assert created.status_code == 201
    body = created.json()
    assert Decimal(body["total_amount"]) == Decimal("45.00")

    fetched = client.get(f"/api/v1/sales/{body['sale_id']}")

    assert fetched.status_code == 200
    sale = fetched.json()
    assert sale["sale_number"] == body["sale_number"]
    assert len(sale["items"]) == 1
    assert Decimal(sale["items"][0]["discount_percentage"]) == Decimal("0.10")


def test_create_invalid_sale_reports_every_problem(client: TestClient) -> None:
    payload = _create_payload(_line(quantity=0, unit_price="0"))
    payload["customer_name"] = ""

    response = client.post("/api/v1/sales", json=payload)

    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["detail"]["errors"]]
    assert fields == ["customer_name", "items[0].quantity", "items[0].unit_price"]


def test_update_sale_merges_same_product(client: TestClient) -> None:
    sale_id = client.post("/api/v1/sales", json=_create_payload(_line(quantity=5))).json()["sale_id"]

    response = client.put(f"/api/v1/sales/{sale_id}", json={"items": [_line(quantity=6)]})

    assert response.status_code == 200
    assert Decimal(response.json()["total_amount"]) == Decimal("88.00")


def test_cancel_item_then_sale(client: TestClient) -> None:
    sale_id = client.post(
        "/api/v1/sales",
        json=_create_payload(_line(quantity=5), _line(SODA, 1, "2.00")),
    ).json()["sale_id"]
    item_id = client.get(f"/api/v1/sales/{sale_id}").json()["items"][0]["item_id"]

    cancelled_item = client.post(f"/api/v1/sales/{sale_id}/items/{item_id}/cancel")
    assert cancelled_item.status_code == 200
    assert Decimal(cancelled_item.json()["updated_sale_total"]) == Decimal("2.00")

    cancelled = client.post(f"/api/v1/sales/{sale_id}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["success"] is True

    listing = client.get("/api/v1/sales").json()
    assert listing["total_count"] == 1
    assert listing["sales"][0]["is_cancelled"] is True
    assert listing["sales"][0]["item_count"] == 0


def test_update_cancelled_sale_is_conflict(client: TestClient) -> None:
    sale_id = client.post("/api/v1/sales", json=_create_payload(_line())).json()["sale_id"]
    client.post(f"/api/v1/sales/{sale_id}/cancel")

    response = client.put(f"/api/v1/sales/{sale_id}", json={"items": [_line(quantity=1)]})

    assert response.status_code == 409


def test_unknown_sale_and_item_are_not_found(client: TestClient) -> None:
    missing = str(UUID(int=999))
    assert client.get(f"/api/v1/sales/{missing}").status_code == 404

    sale_id = client.post("/api/v1/sales", json=_create_payload(_line())).json()["sale_id"]
    response = client.post(f"/api/v1/sales/{sale_id}/items/{missing}/cancel")

    assert response.status_code == 404


def test_repository_backend_defaults_to_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    from api.dependencies import _build_repository

    monkeypatch.delenv("SALES_REPOSITORY", raising=False)

    assert isinstance(_build_repository(), InMemorySaleRepository)


def test_unknown_repository_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    from api.dependencies import _build_repository

    monkeypatch.setenv("SALES_REPOSITORY", "sqlite")

    with pytest.raises(RuntimeError, match="Unsupported SALES_REPOSITORY"):
        _build_repository()
