"""Pytest fixtures for SQLite storage tests."""

from decimal import Decimal

import pytest

from invoiceflow.core.entities import Product
from invoiceflow.core.services import DocumentLifecycleManager, InventoryService
from invoiceflow.infrastructure.storage.sqlite import (
    SQLiteInvoiceStore,
    SQLiteLedgerUnitOfWork,
    SQLitePartyStore,
    SQLiteProductStore,
    SQLitePurchaseStore,
)


@pytest.fixture
def unit_of_work(ledger_db) -> SQLiteLedgerUnitOfWork:
    return SQLiteLedgerUnitOfWork()


@pytest.fixture
def lifecycle(unit_of_work, dispatcher) -> DocumentLifecycleManager:
    return DocumentLifecycleManager(unit_of_work, dispatcher)


@pytest.fixture
def inventory(unit_of_work, dispatcher) -> InventoryService:
    return InventoryService(unit_of_work, dispatcher)


@pytest.fixture
def product_store(ledger_db) -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
def invoice_store(ledger_db) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore()


@pytest.fixture
def purchase_store(ledger_db) -> SQLitePurchaseStore:
    return SQLitePurchaseStore()


@pytest.fixture
def party_store(ledger_db) -> SQLitePartyStore:
    return SQLitePartyStore()


@pytest.fixture
async def urea(inventory) -> Product:
    return await inventory.create_product(
        Product(
            id="urea",
            name="Urea 45kg",
            gst=Decimal("5"),
            stock=50,
            purchase_price=Decimal("250"),
            min_stock=10,
        )
    )


@pytest.fixture
async def dap(inventory) -> Product:
    return await inventory.create_product(
        Product(
            id="dap",
            name="DAP 50kg",
            gst=Decimal("5"),
            stock=20,
            purchase_price=Decimal("1200"),
            min_stock=5,
        )
    )
