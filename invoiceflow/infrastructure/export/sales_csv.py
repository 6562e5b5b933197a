"""Tabular export of the filtered invoice list."""

import csv
import io
from abc import ABC, abstractmethod
from collections.abc import Iterable

from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.services.pricing import round_money

SALES_COLUMNS = [
    "Invoice ID",
    "Date",
    "Customer",
    "Items Count",
    "Gross Amount",
    "Discount",
    "Total Amount (Incl)",
    "Payment Mode",
]


class IReportExporter(ABC):
    """Interface for invoice list exporters."""

    media_type: str
    extension: str

    @abstractmethod
    def export_invoices(self, invoices: Iterable[Invoice]) -> str:
        """Render invoices as a document body."""
        ...


class CsvSalesExporter(IReportExporter):
    """One CSV row per invoice, money rounded to two places."""

    media_type = "text/csv"
    extension = "csv"

    def export_invoices(self, invoices: Iterable[Invoice]) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(SALES_COLUMNS)
        for inv in invoices:
            writer.writerow([
                inv.invoice_no or inv.id,
                inv.invoice_date.isoformat(),
                inv.customer_name,
                len(inv.items),
                round_money(inv.gross_amount),
                round_money(inv.discount),
                # Already net of discount
                round_money(inv.total_amount),
                inv.payment_mode.value,
            ])
        return output.getvalue()
