"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from invoiceflow.application.services import reset_services
from invoiceflow.config import get_settings, reset_settings
from invoiceflow.config.settings import Settings
from invoiceflow.core.entities import (
    Invoice,
    PaymentMode,
    Product,
    Purchase,
    PurchaseItem,
    SaleItem,
)
from invoiceflow.core.entities.backup import BackupRecord
from invoiceflow.core.interfaces.backup import IBackupDispatcher


class RecordingDispatcher(IBackupDispatcher):
    """Collects dispatched backup records instead of sending them."""

    def __init__(self) -> None:
        self.records: list[BackupRecord] = []

    def dispatch(self, record: BackupRecord) -> None:
        self.records.append(record)

    async def drain(self) -> None:
        return None

    @property
    def types(self) -> list[str]:
        return [record.type.value for record in self.records]


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Settings, None, None]:
    """Point every test at its own data directory with backup disabled."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "3")
    monkeypatch.setenv("STORAGE_BUSY_TIMEOUT", "5000")
    monkeypatch.delenv("BACKUP_SCRIPT_URL", raising=False)
    reset_settings()
    reset_services()
    yield get_settings()
    reset_services()
    reset_settings()


@pytest.fixture
async def ledger_db(isolated_settings: Settings) -> AsyncGenerator[Path, None]:
    """Migrated database behind the global pool, closed afterwards."""
    from invoiceflow.infrastructure.storage.sqlite import close_pool
    from invoiceflow.infrastructure.storage.sqlite.migrations import initialize_database

    await initialize_database(create_backup_before=False)
    yield isolated_settings.storage.db_path
    await close_pool()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def sample_product() -> Product:
    now = datetime(2024, 3, 1, 10, 0)
    return Product(
        id="prod-urea",
        name="Urea 45kg",
        category="Fertilizer",
        unit="Bag",
        gst=Decimal("5"),
        stock=50,
        purchase_price=Decimal("250"),
        min_stock=10,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_invoice() -> Invoice:
    now = datetime(2024, 3, 5, 12, 30)
    return Invoice(
        id=1,
        invoice_no="INV-0001",
        invoice_date=date(2024, 3, 5),
        customer_name="Ram Lal",
        customer_phone="9876543210",
        customer_address="Village Road",
        items=[
            SaleItem(
                product_id="prod-urea",
                name="Urea 45kg",
                unit="Bag",
                gst=Decimal("5"),
                cost_price=Decimal("250"),
                price=Decimal("300"),
                quantity=2,
            )
        ],
        discount=Decimal("0"),
        payment_mode=PaymentMode.UPI,
        total_amount=Decimal("600"),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_purchase() -> Purchase:
    now = datetime(2024, 3, 2, 9, 0)
    return Purchase(
        id=1,
        purchase_no="PUR-123456",
        purchase_date=date(2024, 3, 2),
        supplier_name="Kisan Traders",
        supplier_phone="9000000001",
        reference_no="BILL-77",
        items=[
            PurchaseItem(
                product_id="prod-urea",
                name="Urea 45kg",
                unit="Bag",
                gst=Decimal("5"),
                rate_incl=Decimal("105"),
                quantity=10,
            )
        ],
        total_amount=Decimal("1050"),
        created_at=now,
        updated_at=now,
    )
