"""
Sync Backup Use Case.

Replays the whole ledger to the backup webhook: customers, suppliers,
products, purchases, then invoices. Records are sent one at a time with a
pause in between so the webhook is not rate limited. A record that fails
is logged and counted; the sync carries on.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from invoiceflow.application.dto.responses import SyncBackupResponse
from invoiceflow.config import get_logger, get_settings
from invoiceflow.core.entities.backup import BackupEventType, BackupRecord
from invoiceflow.core.entities.party import PartyKind
from invoiceflow.core.interfaces.backup import IBackupReplicator
from invoiceflow.core.interfaces.stores import (
    IInvoiceStore,
    IPartyStore,
    IProductStore,
    IPurchaseStore,
)

logger = get_logger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass
class SyncBackupResult:
    """Records sent per collection."""

    counts: dict[str, int] = field(default_factory=dict)
    failed: int = 0

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class SyncBackupUseCase:
    """Full replay of the ledger to the backup replicator."""

    def __init__(
        self,
        replicator: IBackupReplicator | None = None,
        product_store: IProductStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        purchase_store: IPurchaseStore | None = None,
        party_store: IPartyStore | None = None,
        delay: float | None = None,
    ):
        settings = get_settings()
        self._replicator = replicator
        self._product_store = product_store
        self._invoice_store = invoice_store
        self._purchase_store = purchase_store
        self._party_store = party_store
        self._delay = settings.backup.sync_delay if delay is None else delay
        self._currency = settings.shop.currency

    async def _resolve(self) -> None:
        from invoiceflow.infrastructure.storage.sqlite import (
            get_invoice_store,
            get_party_store,
            get_product_store,
            get_purchase_store,
        )

        if self._replicator is None:
            from invoiceflow.infrastructure.backup import HttpBackupReplicator

            self._replicator = HttpBackupReplicator()
        if self._product_store is None:
            self._product_store = await get_product_store()
        if self._invoice_store is None:
            self._invoice_store = await get_invoice_store()
        if self._purchase_store is None:
            self._purchase_store = await get_purchase_store()
        if self._party_store is None:
            self._party_store = await get_party_store()

    async def execute(self, progress: ProgressCallback | None = None) -> SyncBackupResult:
        """Replay every collection in order and return per-collection counts."""
        await self._resolve()
        notify = progress or (lambda _message: None)
        result = SyncBackupResult()

        logger.info("backup_sync_started")

        notify("Fetching Customers...")
        customers = await self._party_store.list_parties(PartyKind.CUSTOMER)
        await self._send(
            "customers", "Customer",
            [BackupRecord.for_party(c, BackupEventType.CUSTOMER) for c in customers],
            result, notify,
        )

        notify("Fetching Suppliers...")
        suppliers = await self._party_store.list_parties(PartyKind.SUPPLIER)
        await self._send(
            "suppliers", "Supplier",
            [BackupRecord.for_party(s, BackupEventType.SUPPLIER) for s in suppliers],
            result, notify,
        )

        notify("Fetching Inventory...")
        products = await self._product_store.list_products()
        await self._send(
            "products", "Product",
            [
                BackupRecord.for_product(p, BackupEventType.PRODUCT, replay=True)
                for p in products
            ],
            result, notify,
        )

        notify("Fetching Purchases...")
        purchases = await self._purchase_store.list_purchases()
        await self._send(
            "purchases", "Purchase",
            [
                BackupRecord.for_purchase(p, BackupEventType.PURCHASE, self._currency)
                for p in purchases
            ],
            result, notify,
        )

        notify("Fetching Sales...")
        invoices = await self._invoice_store.list_invoices()
        await self._send(
            "invoices", "Invoice",
            [
                BackupRecord.for_invoice(i, BackupEventType.SALE, self._currency)
                for i in invoices
            ],
            result, notify,
        )

        notify("Backup Complete!")
        logger.info(
            "backup_sync_complete", sent=result.total, failed=result.failed, **result.counts
        )
        return result

    async def _send(
        self,
        collection: str,
        label: str,
        records: list[BackupRecord],
        result: SyncBackupResult,
        notify: ProgressCallback,
    ) -> None:
        sent = 0
        for index, record in enumerate(records, 1):
            notify(f"Backing up {label} {index}/{len(records)}")
            try:
                await self._replicator.replicate(record)
                sent += 1
            except Exception as e:
                result.failed += 1
                logger.error(
                    "backup_replication_failed",
                    type=record.type.value,
                    id=record.id,
                    error=str(e),
                )
            if self._delay:
                await asyncio.sleep(self._delay)
        result.counts[collection] = sent

    @staticmethod
    def to_response(result: SyncBackupResult) -> SyncBackupResponse:
        return SyncBackupResponse(**result.counts, failed=result.failed, total=result.total)
