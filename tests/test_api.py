"""Tests for API endpoints"""
from unittest.mock import AsyncMock, patch

import pytest

from telecart.config import get_settings

CARTS = "/api/v1/carts"


def _add(client, cart_id, product_id, quantity=1):
    return client.post(f"{CARTS}/{cart_id}/items", json={"productId": product_id, "quantity": quantity})


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "telecom-cart"
    assert body["uptime"] >= 0


# ==================== CARTS ====================

def test_create_cart(client):
    response = client.post(CARTS)
    assert response.status_code == 201

    body = response.json()
    assert body["data"]["id"].startswith("cart_")
    assert body["data"]["items"] == []
    assert body["data"]["total"] == 0
    assert body["meta"]["version"] == "v1"
    assert body["meta"]["requestId"]
    assert body["meta"]["timestamp"]


def test_get_cart(client, cart_id):
    response = client.get(f"{CARTS}/{cart_id}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == cart_id


def test_get_unknown_cart(client):
    response = client.get(f"{CARTS}/cart_missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Cart with ID 'cart_missing' does not exist"


def test_add_items_totals(client, cart_id):
    _add(client, cart_id, "phone_iphone15")
    response = _add(client, cart_id, "addon_insurance")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [i["productId"] for i in data["items"]] == ["phone_iphone15", "addon_insurance"]
    assert data["items"][0]["productType"] == "PHONE"
    assert data["items"][0]["unitPrice"] == 1399.99
    assert data["subtotal"] == 1411.99
    assert data["tax"] == 183.56
    assert data["total"] == 1595.55


def test_add_accepts_snake_case(client, cart_id):
    response = client.post(f"{CARTS}/{cart_id}/items", json={"product_id": "plan_5gb", "quantity": 1})
    assert response.status_code == 200


@pytest.mark.parametrize("body", [
    {"productId": "addon_insurance", "quantity": 0},
    {"productId": "addon_insurance", "quantity": 11},
    {"productId": "addon_insurance", "quantity": "2"},
    {"productId": "addon_insurance", "quantity": 1.5},
    {"productId": "   ", "quantity": 1},
    {"quantity": 1},
    {"productId": "addon_insurance"},
])
def test_add_invalid_body(client, cart_id, body):
    response = client.post(f"{CARTS}/{cart_id}/items", json=body)
    assert response.status_code == 422


def test_quantity_limit_from_settings(client, cart_id, monkeypatch):
    monkeypatch.setenv("MAX_QUANTITY_PER_ITEM", "3")
    get_settings.cache_clear()

    assert _add(client, cart_id, "addon_insurance", 4).status_code == 422
    assert _add(client, cart_id, "addon_insurance", 3).status_code == 200


def test_add_unknown_product(client, cart_id):
    response = _add(client, cart_id, "phone_nokia")
    assert response.status_code == 404
    assert response.json()["detail"] == "Product with ID 'phone_nokia' does not exist"


def test_add_to_unknown_cart(client):
    assert _add(client, "cart_missing", "addon_insurance").status_code == 404


def test_second_phone_conflict(client, cart_id):
    _add(client, cart_id, "phone_iphone15")
    response = _add(client, cart_id, "phone_samsung_s24")

    assert response.status_code == 409
    assert response.json()["detail"] == "Only one phone is allowed per cart"
    items = client.get(f"{CARTS}/{cart_id}").json()["data"]["items"]
    assert len(items) == 1


def test_update_item(client, cart_id):
    item_id = _add(client, cart_id, "addon_earbuds").json()["data"]["items"][0]["id"]

    response = client.patch(f"{CARTS}/{cart_id}/items/{item_id}", json={"quantity": 3})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["items"][0]["quantity"] == 3
    assert data["items"][0]["totalPrice"] == 599.97
    assert data["subtotal"] == 599.97


def test_update_invalid_quantity(client, cart_id):
    item_id = _add(client, cart_id, "addon_earbuds").json()["data"]["items"][0]["id"]
    response = client.patch(f"{CARTS}/{cart_id}/items/{item_id}", json={"quantity": 0})
    assert response.status_code == 422


def test_update_unknown_item(client, cart_id):
    response = client.patch(f"{CARTS}/{cart_id}/items/item_missing", json={"quantity": 2})
    assert response.status_code == 404
    assert response.json()["detail"] == "Item with ID 'item_missing' does not exist"


def test_remove_item(client, cart_id):
    _add(client, cart_id, "phone_iphone15")
    item_id = _add(client, cart_id, "addon_insurance").json()["data"]["items"][1]["id"]

    response = client.delete(f"{CARTS}/{cart_id}/items/{item_id}")

    assert response.status_code == 200
    assert [i["productId"] for i in response.json()["data"]["items"]] == ["phone_iphone15"]


def test_remove_unknown_item(client, cart_id):
    response = client.delete(f"{CARTS}/{cart_id}/items/item_missing")
    assert response.status_code == 404


def test_clear_cart(client, cart_id):
    _add(client, cart_id, "phone_iphone15")
    _add(client, cart_id, "plan_unlimited")

    response = client.delete(f"{CARTS}/{cart_id}/items")

    assert response.status_code == 200
    assert response.json()["data"]["items"] == []
    assert response.json()["data"]["total"] == 0


def test_validate_plan_only(client, cart_id):
    _add(client, cart_id, "plan_unlimited")

    response = client.get(f"{CARTS}/{cart_id}/validate")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "valid": False,
        "errors": ["Cart contains plans but no phone. Plans require a phone."],
    }


def test_validate_unknown_cart(client):
    assert client.get(f"{CARTS}/cart_missing/validate").status_code == 404


def test_cart_survives_context_expiry(client, manager, cart_id):
    _add(client, cart_id, "phone_iphone15")
    before = _add(client, cart_id, "addon_insurance").json()["data"]

    manager.expire_cart_context(cart_id)
    response = client.get(f"{CARTS}/{cart_id}")

    assert response.status_code == 200
    after = response.json()["data"]
    assert [i["productId"] for i in after["items"]] == ["phone_iphone15", "addon_insurance"]
    assert after["total"] == before["total"]


def test_unexpected_error_is_500(client, manager, cart_id):
    with patch.object(manager, "get_cart", AsyncMock(side_effect=RuntimeError("boom"))):
        response = client.get(f"{CARTS}/{cart_id}")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"


# ==================== REQUEST ID ====================

def test_request_id_echoed(client):
    response = client.post(CARTS, headers={"X-Request-ID": "req-abc-123"})

    assert response.headers["X-Request-ID"] == "req-abc-123"
    assert response.json()["meta"]["requestId"] == "req-abc-123"


def test_request_id_generated(client):
    response = client.get("/api/health")
    assert len(response.headers["X-Request-ID"]) == 36


# ==================== PRODUCTS ====================

def test_get_products(client):
    response = client.get("/api/v1/products")
    assert response.status_code == 200

    products = response.json()["data"]
    assert len(products) == 6
    by_id = {p["id"]: p for p in products}
    assert by_id["plan_unlimited"]["requiresPhone"] is True
    assert "requiresPhone" not in by_id["phone_iphone15"]
    assert by_id["addon_earbuds"]["price"] == 199.99


def test_get_product_by_id(client):
    response = client.get("/api/v1/products/phone_samsung_s24")
    assert response.status_code == 200
    assert response.json()["data"]["type"] == "PHONE"


def test_get_unknown_product(client):
    response = client.get("/api/v1/products/phone_nokia")
    assert response.status_code == 404
    assert response.json()["detail"] == "Product with ID 'phone_nokia' does not exist"


# ==================== CRON ====================

def test_cron_without_secret_configured(client, monkeypatch):
    monkeypatch.delenv("CRON_SECRET", raising=False)
    get_settings.cache_clear()

    response = client.get("/api/cron/sweep-contexts")
    assert response.status_code == 500


def test_cron_wrong_secret(client, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    get_settings.cache_clear()

    response = client.get("/api/cron/sweep-contexts", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401


def test_cron_sweeps_expired_contexts(client, manager, cart_id, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    get_settings.cache_clear()
    manager.expire_cart_context(cart_id)

    response = client.get("/api/cron/sweep-contexts", headers={"Authorization": "Bearer s3cret"})

    assert response.status_code == 200
    assert response.json() == {"swept": 1}
    assert client.get(f"{CARTS}/{cart_id}").status_code == 200
