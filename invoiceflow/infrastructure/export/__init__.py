"""Report export infrastructure."""

from invoiceflow.infrastructure.export.sales_csv import (
    SALES_COLUMNS,
    CsvSalesExporter,
    IReportExporter,
)

__all__ = ["SALES_COLUMNS", "CsvSalesExporter", "IReportExporter"]
