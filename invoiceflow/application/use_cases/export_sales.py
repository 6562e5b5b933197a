"""Export Sales Use Case: the filtered invoice list as a downloadable file."""

from dataclasses import dataclass
from datetime import date

from invoiceflow.config import get_logger
from invoiceflow.core.exceptions import ValidationError
from invoiceflow.core.interfaces.stores import IInvoiceStore
from invoiceflow.infrastructure.export.sales_csv import CsvSalesExporter, IReportExporter

logger = get_logger(__name__)


@dataclass
class SalesExportResult:
    """Rendered export body and its download metadata."""

    content: str
    media_type: str
    file_name: str
    row_count: int


class ExportSalesUseCase:
    """Export invoices dated within a range."""

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        exporter: IReportExporter | None = None,
    ):
        self._invoice_store = invoice_store
        self._exporter = exporter or CsvSalesExporter()

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from invoiceflow.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(
        self, start: date | None = None, end: date | None = None
    ) -> SalesExportResult:
        if start and end and start > end:
            raise ValidationError("start", "start date is after end date", start)

        store = await self._get_invoice_store()
        invoices = await store.list_invoices(start, end)
        content = self._exporter.export_invoices(invoices)

        stamp = f"{start or 'all'}_{end or 'all'}"
        logger.info("sales_exported", rows=len(invoices), start=str(start), end=str(end))
        return SalesExportResult(
            content=content,
            media_type=self._exporter.media_type,
            file_name=f"Sales_Report_{stamp}.{self._exporter.extension}",
            row_count=len(invoices),
        )
