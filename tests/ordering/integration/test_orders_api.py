import uuid
from decimal import Decimal

import httpx
import pytest

from orders_service.dependencies.depend import get_product_lookup_client

pytestmark = pytest.mark.anyio


async def _create_product(catalog_client, sku, price):
    resp = await catalog_client.post(
        "/products",
        json={
            "name": f"Product {sku}",
            "description": "Product used by order tests",
            "price": price,
            "quantity": 100,
            "sku": sku,
        },
    )
    assert resp.status_code == 201
    return resp.json()


def _order_payload(items, email="jane@example.com", status=None):
    payload = {
        "customer_name": "Jane Doe",
        "customer_email": email,
        "shipping_address": "1 Main Street, Springfield",
        "items": items,
    }
    if status is not None:
        payload["status"] = status
    return payload


class TestCreateOrderApi:
    async def test_order_round_trip(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "LAPTOP-001", "999.99")

        resp = await orders_client.post(
            "/orders",
            json=_order_payload([{"product_id": product["id"], "quantity": 1, "unit_price": "999.99"}]),
        )
        assert resp.status_code == 201
        created = resp.json()
        assert created["status"] == "PENDING"
        assert Decimal(created["total_price"]) == Decimal("999.99")

        resp = await orders_client.get(f"/orders/{created['id']}")
        assert resp.status_code == 200
        fetched = resp.json()
        assert Decimal(fetched["total_price"]) == Decimal("999.99")
        assert len(fetched["items"]) == 1
        item = fetched["items"][0]
        assert item["product_id"] == product["id"]
        assert item["quantity"] == 1
        assert Decimal(item["unit_price"]) == Decimal("999.99")
        assert Decimal(item["total_price"]) == Decimal("999.99")

    async def test_multiple_items_keep_order_and_total(self, orders_client, catalog_client):
        first = await _create_product(catalog_client, "SKU-A", "100.00")
        second = await _create_product(catalog_client, "SKU-B", "50.00")

        resp = await orders_client.post(
            "/orders",
            json=_order_payload(
                [
                    {"product_id": first["id"], "quantity": 2},
                    {"product_id": second["id"], "quantity": 3},
                ]
            ),
        )
        assert resp.status_code == 201
        created = resp.json()
        assert Decimal(created["total_price"]) == Decimal("350.00")

        fetched = (await orders_client.get(f"/orders/{created['id']}")).json()
        assert [i["product_id"] for i in fetched["items"]] == [first["id"], second["id"]]

    async def test_price_is_captured_at_creation(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "MUG-001", "12.00")
        created = (
            await orders_client.post(
                "/orders",
                json=_order_payload([{"product_id": product["id"], "quantity": 2}]),
            )
        ).json()

        resp = await catalog_client.put(
            f"/products/{product['id']}",
            json={
                "name": product["name"],
                "description": product["description"],
                "price": "20.00",
                "quantity": 100,
            },
        )
        assert resp.status_code == 200

        fetched = (await orders_client.get(f"/orders/{created['id']}")).json()
        assert Decimal(fetched["items"][0]["unit_price"]) == Decimal("12.00")
        assert Decimal(fetched["total_price"]) == Decimal("24.00")

    async def test_empty_order_returns_400(self, orders_client):
        resp = await orders_client.post("/orders", json=_order_payload([]))

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Order must contain at least one item"
        assert (await orders_client.get("/orders")).json() == []

    async def test_oversized_quantity_returns_400(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "BULK-001", "1.00")

        resp = await orders_client.post(
            "/orders",
            json=_order_payload([{"product_id": product["id"], "quantity": 10**12}]),
        )

        assert resp.status_code == 400
        assert (await orders_client.get("/orders")).json() == []

    async def test_total_over_money_limit_returns_400(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "YACHT-001", "99999999.99")

        resp = await orders_client.post(
            "/orders",
            json=_order_payload([{"product_id": product["id"], "quantity": 2}]),
        )

        assert resp.status_code == 400
        assert "exceeds" in resp.json()["detail"]
        assert (await orders_client.get("/orders")).json() == []

    async def test_invalid_customer_data_returns_400(self, orders_client):
        payload = _order_payload([{"product_id": str(uuid.uuid4()), "quantity": 1}], email="not-an-email")

        resp = await orders_client.post("/orders", json=payload)

        assert resp.status_code == 400

    async def test_unknown_product_returns_409_and_stores_nothing(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "REAL-001", "5.00")
        missing_id = str(uuid.uuid4())

        resp = await orders_client.post(
            "/orders",
            json=_order_payload(
                [
                    {"product_id": product["id"], "quantity": 1},
                    {"product_id": missing_id, "quantity": 1},
                ]
            ),
        )

        assert resp.status_code == 409
        assert missing_id in resp.json()["detail"]
        assert (await orders_client.get("/orders")).json() == []

    async def test_unreachable_catalog_returns_409(self, orders_asgi, orders_client, lookup_client_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        orders_asgi.dependency_overrides[get_product_lookup_client] = lambda: lookup_client_factory(
            httpx.MockTransport(handler)
        )

        resp = await orders_client.post(
            "/orders",
            json=_order_payload([{"product_id": str(uuid.uuid4()), "quantity": 1}]),
        )

        assert resp.status_code == 409
        assert (await orders_client.get("/orders")).json() == []


class TestOrderQueriesApi:
    async def test_missing_order_returns_404(self, orders_client):
        resp = await orders_client.get(f"/orders/{uuid.uuid4()}")

        assert resp.status_code == 404

    async def test_find_by_customer_email(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "PEN-001", "1.50")
        item = [{"product_id": product["id"], "quantity": 1}]
        await orders_client.post("/orders", json=_order_payload(item, email="jane@example.com"))
        await orders_client.post("/orders", json=_order_payload(item, email="jane@example.com"))
        await orders_client.post("/orders", json=_order_payload(item, email="john@example.com"))

        resp = await orders_client.get("/orders/customer/jane@example.com")
        assert resp.status_code == 200
        orders = resp.json()
        assert len(orders) == 2
        assert {o["customer_email"] for o in orders} == {"jane@example.com"}

        resp = await orders_client.get("/orders/customer/nobody@example.com")
        assert resp.json() == []

    async def test_find_by_mixed_case_email(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "PEN-003", "1.50")
        item = [{"product_id": product["id"], "quantity": 1}]
        created = (await orders_client.post("/orders", json=_order_payload(item, email="Jane@Example.COM"))).json()

        resp = await orders_client.get("/orders/customer/Jane@Example.COM")
        assert resp.status_code == 200
        assert [o["id"] for o in resp.json()] == [created["id"]]

        resp = await orders_client.get(f"/orders/customer/{created['customer_email']}")
        assert [o["id"] for o in resp.json()] == [created["id"]]

    async def test_find_by_malformed_email_returns_empty_list(self, orders_client):
        resp = await orders_client.get("/orders/customer/not-an-email")

        assert resp.status_code == 200
        assert resp.json() == []

    async def test_find_by_status(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "PEN-002", "1.50")
        item = [{"product_id": product["id"], "quantity": 1}]
        await orders_client.post("/orders", json=_order_payload(item))
        await orders_client.post("/orders", json=_order_payload(item, status="CONFIRMED"))

        resp = await orders_client.get("/orders/status/CONFIRMED")
        assert resp.status_code == 200
        orders = resp.json()
        assert len(orders) == 1
        assert orders[0]["status"] == "CONFIRMED"
        assert len(orders[0]["items"]) == 1

        assert (await orders_client.get("/orders/status/SHIPPED")).json() == []
        assert len((await orders_client.get("/orders")).json()) == 2

    async def test_unknown_status_returns_400(self, orders_client):
        resp = await orders_client.get("/orders/status/LOST")

        assert resp.status_code == 400


class TestUpdateAndDeleteOrderApi:
    async def test_update_changes_status_but_not_items(self, orders_client, catalog_client):
        product = await _create_product(catalog_client, "BOOK-001", "30.00")
        created = (
            await orders_client.post(
                "/orders",
                json=_order_payload([{"product_id": product["id"], "quantity": 2}]),
            )
        ).json()

        resp = await orders_client.put(
            f"/orders/{created['id']}",
            json={
                "customer_name": "Jane Smith",
                "customer_email": "jane.smith@example.com",
                "shipping_address": "77 New Avenue, Capital City",
                "status": "SHIPPED",
            },
        )
        assert resp.status_code == 200
        updated = resp.json()
        assert updated["status"] == "SHIPPED"
        assert updated["customer_name"] == "Jane Smith"

        fetched = (await orders_client.get(f"/orders/{created['id']}")).json()
        assert fetched["status"] == "SHIPPED"
        assert fetched["customer_email"] == "jane.smith@example.com"
        assert Decimal(fetched["total_price"]) == Decimal("60.00")
        assert [i["id"] for i in fetched["items"]] == [i["id"] for i in created["items"]]

    async def test_update_missing_order_returns_404(self, orders_client):
        resp = await orders_client.put(
            f"/orders/{uuid.uuid4()}",
            json={
                "customer_name": "Jane Smith",
                "customer_email": "jane.smith@example.com",
                "shipping_address": "77 New Avenue, Capital City",
                "status": "CANCELLED",
            },
        )

        assert resp.status_code == 404

    async def test_delete_removes_order_and_items(self, orders_client, catalog_client, orders_sessions):
        from sqlalchemy import func, select

        from orders_service.models import OrderItem

        product = await _create_product(catalog_client, "LAMP-001", "45.00")
        created = (
            await orders_client.post(
                "/orders",
                json=_order_payload([{"product_id": product["id"], "quantity": 1}]),
            )
        ).json()

        resp = await orders_client.delete(f"/orders/{created['id']}")
        assert resp.status_code == 204

        assert (await orders_client.get(f"/orders/{created['id']}")).status_code == 404
        assert (await orders_client.delete(f"/orders/{created['id']}")).status_code == 404

        async with orders_sessions() as session:
            remaining = await session.scalar(select(func.count()).select_from(OrderItem))
        assert remaining == 0


async def test_health_and_metrics(orders_client):
    resp = await orders_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "UP", "message": "Order Service is running"}

    resp = await orders_client.get("/metrics")
    assert resp.status_code == 200
    assert "orders_http_requests_total" in resp.text
