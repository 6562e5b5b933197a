"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests swap any of these
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from invoiceflow.application.services import (
    get_directory_service,
    get_inventory_service,
    get_lifecycle_manager,
)
from invoiceflow.application.use_cases import (
    ExportSalesUseCase,
    GenerateReportUseCase,
    InventorySnapshotUseCase,
    RenderDocumentUseCase,
)
from invoiceflow.config import Settings, get_settings
from invoiceflow.core.services import (
    DirectoryService,
    DocumentLifecycleManager,
    InventoryService,
)
from invoiceflow.infrastructure.storage.sqlite import (
    SQLiteInvoiceStore,
    SQLitePartyStore,
    SQLiteProductStore,
    SQLitePurchaseStore,
    get_invoice_store,
    get_party_store,
    get_product_store,
    get_purchase_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_documents() -> DocumentLifecycleManager:
    """Get document lifecycle manager."""
    return await get_lifecycle_manager()


async def get_inventory() -> InventoryService:
    """Get inventory service."""
    return await get_inventory_service()


async def get_directory() -> DirectoryService:
    """Get directory service."""
    return await get_directory_service()


# Store dependencies
async def get_products_store() -> SQLiteProductStore:
    """Get product store."""
    return await get_product_store()


async def get_invoices_store() -> SQLiteInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


async def get_purchases_store() -> SQLitePurchaseStore:
    """Get purchase store."""
    return await get_purchase_store()


async def get_parties_store() -> SQLitePartyStore:
    """Get directory store."""
    return await get_party_store()


# Use case dependencies
def get_generate_report_use_case() -> GenerateReportUseCase:
    """Get sales report use case."""
    return GenerateReportUseCase()


def get_inventory_snapshot_use_case() -> InventorySnapshotUseCase:
    """Get inventory snapshot use case."""
    return InventorySnapshotUseCase()


def get_render_document_use_case() -> RenderDocumentUseCase:
    """Get document PDF use case."""
    return RenderDocumentUseCase()


def get_export_sales_use_case() -> ExportSalesUseCase:
    """Get sales export use case."""
    return ExportSalesUseCase()
