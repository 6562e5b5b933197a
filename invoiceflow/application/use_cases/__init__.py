"""Application use cases."""

from invoiceflow.application.use_cases.export_sales import (
    ExportSalesUseCase,
    SalesExportResult,
)
from invoiceflow.application.use_cases.generate_report import (
    GenerateReportUseCase,
    InventorySnapshotUseCase,
    SalesReportResult,
)
from invoiceflow.application.use_cases.render_document import (
    DocumentPdfResult,
    RenderDocumentUseCase,
)
from invoiceflow.application.use_cases.sync_backup import (
    SyncBackupResult,
    SyncBackupUseCase,
)

__all__ = [
    "GenerateReportUseCase",
    "SalesReportResult",
    "InventorySnapshotUseCase",
    "RenderDocumentUseCase",
    "DocumentPdfResult",
    "ExportSalesUseCase",
    "SalesExportResult",
    "SyncBackupUseCase",
    "SyncBackupResult",
]
