"""Unit tests for reporting, export and document use cases."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from invoiceflow.application.use_cases.export_sales import ExportSalesUseCase
from invoiceflow.application.use_cases.generate_report import (
    GenerateReportUseCase,
    InventorySnapshotUseCase,
)
from invoiceflow.application.use_cases.render_document import RenderDocumentUseCase
from invoiceflow.core.exceptions import (
    InvoiceNotFoundError,
    PurchaseNotFoundError,
    ValidationError,
)
from invoiceflow.core.services.reporting import (
    InventorySnapshot,
    ProductSales,
    ReportingAggregator,
    SalesSummary,
)


@pytest.fixture
def aggregator():
    agg = AsyncMock(spec=ReportingAggregator)
    agg.sales_summary.return_value = SalesSummary(
        start=date(2024, 3, 1),
        end=date(2024, 3, 31),
        invoice_count=2,
        total_sales=Decimal("354"),
        gst_collected=Decimal("54.004"),
        cost_of_goods_sold=Decimal("250"),
        net_profit=Decimal("104"),
        payment_modes={"Cash": Decimal("236"), "UPI": Decimal("118")},
        top_products=[ProductSales("Urea", 2)],
    )
    agg.inventory.return_value = InventorySnapshot(
        product_count=3,
        stock_value=Decimal("1234.555"),
        low_stock_count=1,
        expiring_soon_count=0,
    )
    return agg


class TestGenerateReportUseCase:
    async def test_execute_and_respond(self, aggregator):
        uc = GenerateReportUseCase(aggregator=aggregator)

        result = await uc.execute(date(2024, 3, 1), date(2024, 3, 31), 3)
        response = uc.to_response(result)

        aggregator.sales_summary.assert_awaited_once_with(date(2024, 3, 1), date(2024, 3, 31), 3)
        assert response.total_sales == 354.0
        assert response.gst_collected == 54.0
        assert response.payment_modes == {"Cash": 236.0, "UPI": 118.0}
        assert response.top_products[0].name == "Urea"

    async def test_inverted_range_rejected(self, aggregator):
        with pytest.raises(ValidationError):
            await GenerateReportUseCase(aggregator=aggregator).execute(
                date(2024, 4, 1), date(2024, 3, 1)
            )
        aggregator.sales_summary.assert_not_awaited()


class TestInventorySnapshotUseCase:
    async def test_rounds_stock_value(self, aggregator):
        uc = InventorySnapshotUseCase(aggregator=aggregator)

        response = uc.to_response(await uc.execute())

        assert response.product_count == 3
        assert response.stock_value == 1234.56


class TestExportSalesUseCase:
    async def test_builds_file_name(self, sample_invoice):
        store = AsyncMock()
        store.list_invoices.return_value = [sample_invoice]

        result = await ExportSalesUseCase(invoice_store=store).execute(date(2024, 3, 1), None)

        assert result.file_name == "Sales_Report_2024-03-01_all.csv"
        assert result.media_type == "text/csv"
        assert result.row_count == 1
        assert "INV-0001" in result.content

    async def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            await ExportSalesUseCase(invoice_store=AsyncMock()).execute(
                date(2024, 4, 1), date(2024, 3, 1)
            )


class TestRenderDocumentUseCase:
    async def test_invoice_pdf(self, sample_invoice):
        store = AsyncMock()
        store.get_invoice.return_value = sample_invoice
        renderer = Mock()
        renderer.render_invoice.return_value = b"%PDF-1.4 fake"

        uc = RenderDocumentUseCase(invoice_store=store, renderer=renderer)
        result = await uc.execute_invoice(1)

        assert result.file_name == "Invoice_INV-0001.pdf"
        assert result.file_size == len(b"%PDF-1.4 fake")
        assert uc.to_response(result).kind == "invoice"

    async def test_missing_invoice(self):
        store = AsyncMock()
        store.get_invoice.return_value = None

        with pytest.raises(InvoiceNotFoundError):
            await RenderDocumentUseCase(invoice_store=store, renderer=Mock()).execute_invoice(9)

    async def test_purchase_pdf_uses_real_renderer(self, sample_purchase):
        store = AsyncMock()
        store.get_purchase.return_value = sample_purchase

        result = await RenderDocumentUseCase(purchase_store=store).execute_purchase(1)

        assert result.pdf_bytes.startswith(b"%PDF")
        assert result.file_name == "Purchase_PUR-123456.pdf"

    async def test_missing_purchase(self):
        store = AsyncMock()
        store.get_purchase.return_value = None

        with pytest.raises(PurchaseNotFoundError):
            await RenderDocumentUseCase(purchase_store=store, renderer=Mock()).execute_purchase(9)
