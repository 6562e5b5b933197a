"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases and API dependencies
import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from invoiceflow.core.services import (
    DirectoryService,
    DocumentLifecycleManager,
    InventoryService,
    ReportingAggregator,
)

if TYPE_CHECKING:
    from invoiceflow.core.interfaces import (
        IBackupDispatcher,
        IChangeFeed,
        ILedgerUnitOfWork,
    )
    from invoiceflow.infrastructure.backup import BackupDispatcher
    from invoiceflow.infrastructure.notifications import InProcessChangeFeed


# Singleton instances
_change_feed: "InProcessChangeFeed | None" = None
_backup_dispatcher: "BackupDispatcher | None" = None
_unit_of_work: "ILedgerUnitOfWork | None" = None
_lifecycle_manager: DocumentLifecycleManager | None = None
_inventory_service: InventoryService | None = None
_directory_service: DirectoryService | None = None
_reporting_aggregator: ReportingAggregator | None = None


async def get_change_feed() -> "IChangeFeed":
    """Get or create the in-process change feed over the read stores."""
    global _change_feed

    if _change_feed is None:
        from invoiceflow.infrastructure.notifications import InProcessChangeFeed
        from invoiceflow.infrastructure.storage.sqlite import (
            get_invoice_store,
            get_party_store,
            get_product_store,
            get_purchase_store,
        )

        _change_feed = InProcessChangeFeed.from_stores(
            products=await get_product_store(),
            invoices=await get_invoice_store(),
            purchases=await get_purchase_store(),
            parties=await get_party_store(),
        )
    return _change_feed


def get_backup_dispatcher() -> "IBackupDispatcher":
    """Get or create the fire-and-forget backup dispatcher."""
    global _backup_dispatcher

    if _backup_dispatcher is None:
        from invoiceflow.infrastructure.backup import (
            BackupDispatcher,
            HttpBackupReplicator,
        )

        _backup_dispatcher = BackupDispatcher(HttpBackupReplicator())
    return _backup_dispatcher


async def get_unit_of_work() -> "ILedgerUnitOfWork":
    """Get or create the SQLite unit of work, publishing to the change feed."""
    global _unit_of_work

    if _unit_of_work is None:
        from invoiceflow.infrastructure.storage.sqlite import SQLiteLedgerUnitOfWork

        _unit_of_work = SQLiteLedgerUnitOfWork(change_feed=await get_change_feed())
    return _unit_of_work


async def get_lifecycle_manager(
    unit_of_work: "ILedgerUnitOfWork | None" = None,
    dispatcher: "IBackupDispatcher | None" = None,
) -> DocumentLifecycleManager:
    """
    Get or create DocumentLifecycleManager instance.

    Overrides produce a fresh, uncached instance.
    """
    global _lifecycle_manager

    if unit_of_work is not None or dispatcher is not None:
        return DocumentLifecycleManager(
            unit_of_work or await get_unit_of_work(),
            dispatcher or get_backup_dispatcher(),
        )

    if _lifecycle_manager is None:
        _lifecycle_manager = DocumentLifecycleManager(
            await get_unit_of_work(), get_backup_dispatcher()
        )
    return _lifecycle_manager


async def get_inventory_service() -> InventoryService:
    """Get or create InventoryService instance."""
    global _inventory_service

    if _inventory_service is None:
        _inventory_service = InventoryService(
            await get_unit_of_work(), get_backup_dispatcher()
        )
    return _inventory_service


async def get_directory_service() -> DirectoryService:
    """Get or create DirectoryService instance."""
    global _directory_service

    if _directory_service is None:
        _directory_service = DirectoryService(
            await get_unit_of_work(), get_backup_dispatcher()
        )
    return _directory_service


async def get_reporting_aggregator() -> ReportingAggregator:
    """Get or create ReportingAggregator instance over the read stores."""
    global _reporting_aggregator

    if _reporting_aggregator is None:
        from invoiceflow.infrastructure.storage.sqlite import (
            get_invoice_store,
            get_product_store,
            get_purchase_store,
        )

        _reporting_aggregator = ReportingAggregator(
            product_store=await get_product_store(),
            invoice_store=await get_invoice_store(),
            purchase_store=await get_purchase_store(),
        )
    return _reporting_aggregator


async def shutdown_services() -> None:
    """Wait for pending feed updates and backups. Called once on application shutdown."""
    if _unit_of_work is not None:
        await _unit_of_work.drain()
    if _backup_dispatcher is not None:
        await _backup_dispatcher.drain()


def reset_services() -> None:
    """Reset all singleton instances (for testing)."""
    global _change_feed, _backup_dispatcher, _unit_of_work
    global _lifecycle_manager, _inventory_service, _directory_service
    global _reporting_aggregator

    _change_feed = None
    _backup_dispatcher = None
    _unit_of_work = None
    _lifecycle_manager = None
    _inventory_service = None
    _directory_service = None
    _reporting_aggregator = None
