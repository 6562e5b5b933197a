"""
Generate Report Use Cases.

Sales summary for a date range and the dashboard inventory snapshot.
"""

from dataclasses import dataclass
from datetime import date

from invoiceflow.application.dto.responses import (
    InventorySnapshotResponse,
    ProductSalesResponse,
    SalesSummaryResponse,
    money,
)
from invoiceflow.config import get_logger
from invoiceflow.core.exceptions import ValidationError
from invoiceflow.core.services.reporting import (
    InventorySnapshot,
    ReportingAggregator,
    SalesSummary,
)

logger = get_logger(__name__)


@dataclass
class SalesReportResult:
    """Result of a sales report."""

    summary: SalesSummary


class GenerateReportUseCase:
    """
    Use case for the sales summary report.

    Flow:
    1. Validate the date range
    2. Load committed invoices, purchases and products
    3. Roll them up
    """

    def __init__(self, aggregator: ReportingAggregator | None = None):
        self._aggregator = aggregator

    async def _get_aggregator(self) -> ReportingAggregator:
        if self._aggregator is None:
            from invoiceflow.application.services import get_reporting_aggregator

            self._aggregator = await get_reporting_aggregator()
        return self._aggregator

    async def execute(
        self,
        start: date | None = None,
        end: date | None = None,
        top_n: int | None = None,
    ) -> SalesReportResult:
        """
        Summarize sales and purchases dated within ``[start, end]``.

        Raises:
            ValidationError: If start is after end.
        """
        if start and end and start > end:
            raise ValidationError("start", "start date is after end date", start)

        aggregator = await self._get_aggregator()
        summary = await aggregator.sales_summary(start, end, top_n)
        return SalesReportResult(summary=summary)

    @staticmethod
    def to_response(result: SalesReportResult) -> SalesSummaryResponse:
        """Convert result to API response."""
        s = result.summary
        return SalesSummaryResponse(
            start=s.start,
            end=s.end,
            invoice_count=s.invoice_count,
            purchase_count=s.purchase_count,
            total_sales=money(s.total_sales),
            total_purchases=money(s.total_purchases),
            gst_collected=money(s.gst_collected),
            cost_of_goods_sold=money(s.cost_of_goods_sold),
            net_profit=money(s.net_profit),
            payment_modes={mode: money(v) for mode, v in s.payment_modes.items()},
            top_products=[
                ProductSalesResponse(name=p.name, quantity=p.quantity)
                for p in s.top_products
            ],
        )


class InventorySnapshotUseCase:
    """Dashboard counts over the current product catalogue."""

    def __init__(self, aggregator: ReportingAggregator | None = None):
        self._aggregator = aggregator

    async def _get_aggregator(self) -> ReportingAggregator:
        if self._aggregator is None:
            from invoiceflow.application.services import get_reporting_aggregator

            self._aggregator = await get_reporting_aggregator()
        return self._aggregator

    async def execute(self, today: date | None = None) -> InventorySnapshot:
        aggregator = await self._get_aggregator()
        snapshot = await aggregator.inventory(today)
        logger.debug(
            "inventory_snapshot",
            products=snapshot.product_count,
            low_stock=snapshot.low_stock_count,
        )
        return snapshot

    @staticmethod
    def to_response(result: InventorySnapshot) -> InventorySnapshotResponse:
        return InventorySnapshotResponse(
            product_count=result.product_count,
            stock_value=money(result.stock_value),
            low_stock_count=result.low_stock_count,
            expiring_soon_count=result.expiring_soon_count,
        )
