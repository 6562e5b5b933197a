"""API tests for reporting endpoints."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from invoiceflow.api.dependencies import (
    get_export_sales_use_case,
    get_generate_report_use_case,
    get_inventory_snapshot_use_case,
)
from invoiceflow.api.main import app
from invoiceflow.application.use_cases import (
    ExportSalesUseCase,
    GenerateReportUseCase,
    InventorySnapshotUseCase,
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
        invoice_count=1,
        purchase_count=1,
        total_sales=Decimal("600"),
        total_purchases=Decimal("1050"),
        gst_collected=Decimal("28.5714"),
        cost_of_goods_sold=Decimal("500"),
        net_profit=Decimal("100"),
        payment_modes={"UPI": Decimal("600")},
        top_products=[ProductSales("Urea 45kg", 2)],
    )
    agg.inventory.return_value = InventorySnapshot(
        product_count=1, stock_value=Decimal("12500"), low_stock_count=0, expiring_soon_count=0
    )
    return agg


class TestReportsAPI:
    async def test_summary(self, client: AsyncClient, aggregator):
        app.dependency_overrides[get_generate_report_use_case] = lambda: GenerateReportUseCase(
            aggregator=aggregator
        )

        response = await client.get(
            "/api/reports/summary", params={"start": "2024-03-01", "end": "2024-03-31", "top": 3}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["gst_collected"] == 28.57
        assert data["total_purchases"] == 1050.0
        assert data["top_products"] == [{"name": "Urea 45kg", "quantity": 2}]
        aggregator.sales_summary.assert_awaited_once_with(
            date(2024, 3, 1), date(2024, 3, 31), 3
        )

    async def test_summary_inverted_range(self, client: AsyncClient, aggregator):
        app.dependency_overrides[get_generate_report_use_case] = lambda: GenerateReportUseCase(
            aggregator=aggregator
        )

        response = await client.get(
            "/api/reports/summary", params={"start": "2024-04-01", "end": "2024-03-01"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_sales_csv(self, client: AsyncClient, sample_invoice):
        store = AsyncMock()
        store.list_invoices.return_value = [sample_invoice]
        app.dependency_overrides[get_export_sales_use_case] = lambda: ExportSalesUseCase(
            invoice_store=store
        )

        response = await client.get("/api/reports/sales.csv", params={"start": "2024-03-01"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "Sales_Report_2024-03-01_all.csv" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0].startswith("Invoice ID,Date,Customer")
        assert lines[1].startswith("INV-0001,2024-03-05,Ram Lal")

    async def test_inventory(self, client: AsyncClient, aggregator):
        app.dependency_overrides[get_inventory_snapshot_use_case] = (
            lambda: InventorySnapshotUseCase(aggregator=aggregator)
        )

        response = await client.get("/api/reports/inventory")

        assert response.status_code == 200
        assert response.json() == {
            "product_count": 1,
            "stock_value": 12500.0,
            "low_stock_count": 0,
            "expiring_soon_count": 0,
        }
