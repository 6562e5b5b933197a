"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases over the read stores and renderers
3. Providing factory functions for dependency injection

Ledger writes go through the core services built by the factories.
"""

from invoiceflow.application.services import (
    get_backup_dispatcher,
    get_change_feed,
    get_directory_service,
    get_inventory_service,
    get_lifecycle_manager,
    get_reporting_aggregator,
    get_unit_of_work,
    reset_services,
    shutdown_services,
)
from invoiceflow.application.use_cases import (
    ExportSalesUseCase,
    GenerateReportUseCase,
    InventorySnapshotUseCase,
    RenderDocumentUseCase,
    SyncBackupUseCase,
)

__all__ = [
    # Use Cases
    "GenerateReportUseCase",
    "InventorySnapshotUseCase",
    "RenderDocumentUseCase",
    "ExportSalesUseCase",
    "SyncBackupUseCase",
    # Service factories
    "get_change_feed",
    "get_backup_dispatcher",
    "get_unit_of_work",
    "get_lifecycle_manager",
    "get_inventory_service",
    "get_directory_service",
    "get_reporting_aggregator",
    "shutdown_services",
    "reset_services",
]
