"""End-to-end API flow against a real SQLite ledger."""

import pytest
from httpx import AsyncClient

from invoiceflow.application.services import shutdown_services


@pytest.fixture
async def live_api(client: AsyncClient, ledger_db):
    yield client
    await shutdown_services()


async def _create_product(client: AsyncClient) -> str:
    response = await client.post(
        "/api/products",
        json={"name": "Urea 45kg", "gst": 5, "stock": 50, "purchase_price": 250, "min_stock": 10},
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestLedgerFlow:
    async def test_sale_moves_stock_and_records_customer(self, live_api: AsyncClient):
        product_id = await _create_product(live_api)

        response = await live_api.post(
            "/api/invoices",
            json={
                "customer_name": "Ram Lal",
                "customer_phone": "9876543210",
                "items": [{"product_id": product_id, "price": 300, "quantity": 2}],
            },
        )

        assert response.status_code == 201
        invoice = response.json()
        assert invoice["invoice_no"] == "INV-0001"
        assert invoice["items"][0]["cost_price"] == 250.0

        product = (await live_api.get(f"/api/products/{product_id}")).json()
        assert product["stock"] == 48

        customers = (await live_api.get("/api/customers")).json()["parties"]
        assert [c["key"] for c in customers] == ["9876543210"]

    async def test_delete_restores_stock(self, live_api: AsyncClient):
        product_id = await _create_product(live_api)
        created = await live_api.post(
            "/api/invoices",
            json={
                "customer_name": "Walk-in",
                "items": [{"product_id": product_id, "price": 300, "quantity": 5}],
            },
        )

        response = await live_api.delete(f"/api/invoices/{created.json()['id']}")

        assert response.status_code == 200
        product = (await live_api.get(f"/api/products/{product_id}")).json()
        assert product["stock"] == 50

    async def test_unknown_product_leaves_no_invoice(self, live_api: AsyncClient):
        response = await live_api.post(
            "/api/invoices",
            json={
                "customer_name": "Ram Lal",
                "items": [{"product_id": "ghost", "price": 10, "quantity": 1}],
            },
        )

        assert response.status_code == 404
        assert (await live_api.get("/api/invoices")).json()["total"] == 0

    async def test_purchase_creates_product(self, live_api: AsyncClient):
        response = await live_api.post(
            "/api/purchases",
            json={
                "supplier_name": "Kisan Traders",
                "items": [{"name": "Potash 50kg", "rate_incl": 900, "quantity": 4}],
            },
        )

        assert response.status_code == 201
        new_id = response.json()["items"][0]["product_id"]
        product = (await live_api.get(f"/api/products/{new_id}")).json()
        assert product["stock"] == 4
        assert product["category"] == "Fertilizer"
        assert product["purchase_price"] == 900.0

    @pytest.mark.parametrize("echo_snapshots", [True, False])
    async def test_edit_after_product_change_keeps_line_snapshots(
        self, live_api: AsyncClient, echo_snapshots: bool
    ):
        product_id = await _create_product(live_api)
        created = (
            await live_api.post(
                "/api/invoices",
                json={
                    "customer_name": "Ram Lal",
                    "items": [{"product_id": product_id, "price": 300, "quantity": 2}],
                },
            )
        ).json()
        await live_api.patch(
            f"/api/products/{product_id}",
            json={"name": "Urea Gold", "purchase_price": 400, "gst": 12},
        )

        if echo_snapshots:
            items = [
                {key: item[key] for key in ("product_id", "name", "unit", "gst", "cost_price", "price")}
                | {"quantity": 3}
                for item in created["items"]
            ]
        else:
            items = [{"product_id": product_id, "price": 300, "quantity": 3}]
        response = await live_api.put(
            f"/api/invoices/{created['id']}",
            json={"customer_name": "Ram Lal", "items": items},
        )

        assert response.status_code == 200
        stored = (await live_api.get(f"/api/invoices/{created['id']}")).json()
        line = stored["items"][0]
        assert line["name"] == "Urea 45kg"
        assert line["gst"] == 5.0
        assert line["cost_price"] == 250.0
        product = (await live_api.get(f"/api/products/{product_id}")).json()
        assert product["stock"] == 47

    async def test_purchase_without_gst_keeps_product_rate(self, live_api: AsyncClient):
        response = await live_api.post(
            "/api/products",
            json={"name": "Zinc Sulphate", "gst": 18, "purchase_price": 118},
        )
        product_id = response.json()["id"]

        response = await live_api.post(
            "/api/purchases",
            json={
                "supplier_name": "Kisan Traders",
                "items": [
                    {"product_id": product_id, "name": "Zinc Sulphate", "rate_incl": 236, "quantity": 2}
                ],
            },
        )

        assert response.status_code == 201
        assert response.json()["items"][0]["gst"] == 18.0
        product = (await live_api.get(f"/api/products/{product_id}")).json()
        assert product["gst"] == 18.0
        assert product["purchase_price"] == 236.0
        assert product["stock"] == 2
