from __future__ import annotations

import json
from typing import Any

import pytest
from fastapi.testclient import TestClient

from menu_api.menu import MenuStore


def test_index_lists_endpoints(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Menu API Server"
    assert "POST /api/menu" in data["endpoints"]


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_menu_items(client: TestClient) -> None:
    response = client.get("/api/menu")

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data] == [1, 2, 3, 4, 5, 6]
    assert data[1]["price"] == 11.5
    assert data[5]["available"] is False


def test_get_menu_item(client: TestClient) -> None:
    response = client.get("/api/menu/4")

    assert response.status_code == 200
    assert response.json()["name"] == "Chocolate Lava Cake"


def test_get_missing_menu_item(client: TestClient) -> None:
    response = client.get("/api/menu/99")

    assert response.status_code == 404
    assert response.json() == {"message": "Menu item not found"}


def test_non_numeric_id_is_not_found(client: TestClient) -> None:
    response = client.get("/api/menu/abc")

    assert response.status_code == 404
    assert response.json() == {"message": "Menu item not found"}


@pytest.mark.parametrize("raw_id", ["0_6", " 6", "+6", "\u0666", "6.0", "-6"])
def test_non_canonical_id_is_not_found(client: TestClient, raw_id: str) -> None:
    response = client.get(f"/api/menu/{raw_id}")

    assert response.status_code == 404
    assert response.json() == {"message": "Menu item not found"}


def test_delete_with_non_canonical_id_keeps_item(client: TestClient, store: MenuStore) -> None:
    response = client.delete("/api/menu/0_6")

    assert response.status_code == 404
    assert store.get(6).name == "Fish and Chips"


def test_create_menu_item(client: TestClient, iced_tea: dict[str, Any]) -> None:
    response = client.post("/api/menu", json=iced_tea)

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 7
    assert data["available"] is True
    assert data["price"] == 3.5

    assert client.get("/api/menu/7").json() == data


def test_create_with_invalid_payload(client: TestClient, store: MenuStore) -> None:
    payload = {
        "name": "ab",
        "description": "short",
        "price": -1,
        "category": "snack",
        "ingredients": [],
    }

    response = client.post("/api/menu", json=payload)

    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation failed"
    assert len(data["errors"]) == 5
    assert data["errors"][0] == {
        "field": "name",
        "message": "Name must be at least 3 characters",
        "value": "ab",
    }
    assert len(store) == 6


def test_create_with_malformed_json(client: TestClient) -> None:
    response = client.post(
        "/api/menu",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert len(response.json()["errors"]) == 8


def test_create_with_array_body(client: TestClient) -> None:
    response = client.post("/api/menu", json=[1, 2, 3])

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_create_with_deeply_nested_body(client: TestClient, store: MenuStore) -> None:
    response = client.post(
        "/api/menu",
        content=("[" * 100000 + "]" * 100000).encode(),
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
    assert len(store) == 6


def test_create_with_price_too_large_for_float(client: TestClient, iced_tea: dict[str, Any]) -> None:
    body = json.dumps({**iced_tea, "price": 0}).replace(
        '"price": 0', '"price": ' + "9" * 400
    )

    response = client.post(
        "/api/menu", content=body.encode(), headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert [error["message"] for error in errors] == ["Price must be a number greater than 0"]


def test_create_reuses_id_after_deleting_newest(client: TestClient, iced_tea: dict[str, Any]) -> None:
    assert client.delete("/api/menu/6").status_code == 200

    response = client.post("/api/menu", json=iced_tea)

    assert response.status_code == 201
    assert response.json()["id"] == 6


def test_update_menu_item(client: TestClient, iced_tea: dict[str, Any]) -> None:
    response = client.put("/api/menu/3", json={**iced_tea, "available": False})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 3
    assert data["name"] == "Iced Tea"
    assert data["available"] is False

    ids = [item["id"] for item in client.get("/api/menu").json()]
    assert ids == [1, 2, 3, 4, 5, 6]


def test_update_missing_menu_item(client: TestClient, iced_tea: dict[str, Any]) -> None:
    response = client.put("/api/menu/99", json=iced_tea)

    assert response.status_code == 404
    assert response.json() == {"message": "Menu item not found"}


def test_update_with_invalid_payload(client: TestClient, store: MenuStore) -> None:
    before = store.get(2)

    response = client.put("/api/menu/2", json={"name": "Salad"})

    assert response.status_code == 400
    assert store.get(2) == before


def test_update_validates_before_lookup(client: TestClient) -> None:
    response = client.put("/api/menu/99", json={})

    assert response.status_code == 400


def test_delete_menu_item(client: TestClient) -> None:
    response = client.delete("/api/menu/1")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Menu item deleted"
    assert data["item"]["name"] == "Classic Burger"
    assert client.get("/api/menu/1").status_code == 404


def test_delete_missing_menu_item(client: TestClient) -> None:
    response = client.delete("/api/menu/99")

    assert response.status_code == 404


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/api/menu", headers={"x-request-id": "req-123"})

    assert response.headers["x-request-id"] == "req-123"


def test_request_id_is_generated(client: TestClient) -> None:
    response = client.get("/health")

    assert len(response.headers["x-request-id"]) > 0
