"""Reporting endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from invoiceflow.api.dependencies import (
    get_export_sales_use_case,
    get_generate_report_use_case,
    get_inventory_snapshot_use_case,
)
from invoiceflow.application.dto.responses import (
    ErrorResponse,
    InventorySnapshotResponse,
    SalesSummaryResponse,
)
from invoiceflow.application.use_cases import (
    ExportSalesUseCase,
    GenerateReportUseCase,
    InventorySnapshotUseCase,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get(
    "/summary",
    response_model=SalesSummaryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def sales_summary(
    start: date | None = Query(default=None, description="Inclusive start date"),
    end: date | None = Query(default=None, description="Inclusive end date"),
    top: int | None = Query(default=None, ge=1, le=50, description="Top products"),
    use_case: GenerateReportUseCase = Depends(get_generate_report_use_case),
) -> SalesSummaryResponse:
    """Sales, purchases, GST, COGS, profit and best sellers for a date range."""
    result = await use_case.execute(start, end, top)
    return use_case.to_response(result)


@router.get("/sales.csv", responses={400: {"model": ErrorResponse}})
async def export_sales(
    start: date | None = Query(default=None, description="Inclusive start date"),
    end: date | None = Query(default=None, description="Inclusive end date"),
    use_case: ExportSalesUseCase = Depends(get_export_sales_use_case),
) -> StreamingResponse:
    """Download the filtered invoice list as CSV."""
    result = await use_case.execute(start, end)
    return StreamingResponse(
        iter([result.content]),
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
    )


@router.get("/inventory", response_model=InventorySnapshotResponse)
async def inventory_snapshot(
    use_case: InventorySnapshotUseCase = Depends(get_inventory_snapshot_use_case),
) -> InventorySnapshotResponse:
    """Dashboard counts: products, stock value, low stock, expiring soon."""
    return use_case.to_response(await use_case.execute())
