"""API tests for purchase endpoints."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from invoiceflow.api.dependencies import get_documents, get_purchases_store
from invoiceflow.api.main import app
from invoiceflow.core.exceptions import PurchaseNotFoundError
from invoiceflow.core.services import DocumentLifecycleManager

PURCHASE_BODY = {
    "supplier_name": "Kisan Traders",
    "reference_no": "BILL-77",
    "items": [
        {"product_id": "prod-urea", "name": "Urea 45kg", "rate_incl": 105, "quantity": 10},
        {"name": "Potash 50kg", "rate_incl": "900", "quantity": 4, "gst": 12},
    ],
}


@pytest.fixture
def mock_documents(sample_purchase):
    documents = AsyncMock(spec=DocumentLifecycleManager)
    documents.create_purchase.return_value = sample_purchase
    documents.update_purchase.return_value = sample_purchase
    documents.delete_purchase.return_value = sample_purchase
    app.dependency_overrides[get_documents] = lambda: documents
    return documents


class TestPurchasesAPI:
    async def test_create_purchase(self, client: AsyncClient, mock_documents):
        response = await client.post("/api/purchases", json=PURCHASE_BODY)

        assert response.status_code == 201
        assert response.json()["purchase_no"] == "PUR-123456"
        entity = mock_documents.create_purchase.await_args.args[0]
        existing, new = entity.items
        assert existing.product_id == "prod-urea"
        assert existing.gst is None
        assert new.product_id is None
        assert new.gst == Decimal("12")

    async def test_list_purchases(self, client: AsyncClient, sample_purchase):
        store = AsyncMock()
        store.list_purchases.return_value = [sample_purchase]
        app.dependency_overrides[get_purchases_store] = lambda: store

        response = await client.get("/api/purchases")

        assert response.status_code == 200
        assert response.json()["total"] == 1
        store.list_purchases.assert_awaited_once_with(None, None)

    async def test_delete_missing_purchase(self, client: AsyncClient, mock_documents):
        mock_documents.delete_purchase.side_effect = PurchaseNotFoundError(5)

        response = await client.delete("/api/purchases/5")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PURCHASE_NOT_FOUND"


class TestRecomputeRatesAPI:
    async def test_gst_edit_keeps_exclusive_rate(self, client: AsyncClient):
        response = await client.post(
            "/api/purchases/rates",
            json={"quantity": 10, "gst": 5, "rate_incl": 105, "changed": "gst", "value": 12},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["rate_excl"] == 100.0
        assert data["rate_incl"] == 112.0
        assert data["line_total"] == 1120.0

    async def test_line_total_edit(self, client: AsyncClient):
        response = await client.post(
            "/api/purchases/rates",
            json={
                "quantity": 4,
                "gst": 5,
                "rate_incl": 105,
                "changed": "line_total",
                "value": 840,
            },
        )

        assert response.status_code == 200
        assert response.json()["rate_incl"] == 210.0
        assert response.json()["line_total"] == 840.0

    async def test_negative_value_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/purchases/rates",
            json={"quantity": 1, "gst": 5, "rate_incl": 105, "changed": "rate_incl", "value": -1},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_unknown_field_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/purchases/rates", json={"changed": "discount", "value": 1}
        )

        assert response.status_code == 422
