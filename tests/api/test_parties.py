"""API tests for the customer and supplier directories."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from invoiceflow.api.dependencies import get_directory, get_parties_store
from invoiceflow.api.main import app
from invoiceflow.core.entities import Customer, PartyKind, Supplier
from invoiceflow.core.exceptions import PartyNotFoundError
from invoiceflow.core.services import DirectoryService


@pytest.fixture
def mock_directory():
    service = AsyncMock(spec=DirectoryService)
    service.upsert.return_value = Customer(key="9876543210", name="Ram Lal", phone="9876543210")
    service.update.return_value = Customer(key="9876543210", name="Ram Lal", address="Mill Road")
    app.dependency_overrides[get_directory] = lambda: service
    return service


class TestDirectoryAPI:
    async def test_list_suppliers(self, client: AsyncClient):
        store = AsyncMock()
        store.list_parties.return_value = [Supplier(key="kisan_traders", name="Kisan Traders")]
        app.dependency_overrides[get_parties_store] = lambda: store

        response = await client.get("/api/suppliers")

        assert response.status_code == 200
        assert response.json()["parties"][0]["key"] == "kisan_traders"
        store.list_parties.assert_awaited_once_with(PartyKind.SUPPLIER)

    async def test_upsert_customer(self, client: AsyncClient, mock_directory):
        response = await client.put(
            "/api/customers", json={"name": "Ram Lal", "phone": "9876543210"}
        )

        assert response.status_code == 200
        assert response.json()["key"] == "9876543210"
        mock_directory.upsert.assert_awaited_once_with(
            PartyKind.CUSTOMER, "Ram Lal", "9876543210", None
        )

    async def test_patch_sends_only_set_fields(self, client: AsyncClient, mock_directory):
        response = await client.patch(
            "/api/customers/9876543210", json={"address": "Mill Road"}
        )

        assert response.status_code == 200
        mock_directory.update.assert_awaited_once_with(
            PartyKind.CUSTOMER, "9876543210", {"address": "Mill Road"}
        )

    async def test_patch_missing_customer(self, client: AsyncClient, mock_directory):
        mock_directory.update.side_effect = PartyNotFoundError("customer", "nobody")

        response = await client.patch("/api/customers/nobody", json={"name": "X"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "CUSTOMER_NOT_FOUND"

    async def test_delete_supplier(self, client: AsyncClient, mock_directory):
        response = await client.delete("/api/suppliers/kisan_traders")

        assert response.status_code == 204
        mock_directory.delete.assert_awaited_once_with(PartyKind.SUPPLIER, "kisan_traders")
