"""Purchase endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from invoiceflow.api.dependencies import (
    get_documents,
    get_purchases_store,
    get_render_document_use_case,
)
from invoiceflow.application.dto.requests import PurchaseRequest, RecomputeRatesRequest
from invoiceflow.application.dto.responses import (
    ErrorResponse,
    PurchaseListResponse,
    PurchaseResponse,
    RateLineResponse,
)
from invoiceflow.application.use_cases.render_document import RenderDocumentUseCase
from invoiceflow.core.exceptions import PurchaseNotFoundError
from invoiceflow.core.interfaces.stores import IPurchaseStore
from invoiceflow.core.services import DocumentLifecycleManager, RateLine, recompute

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.get("", response_model=PurchaseListResponse)
async def list_purchases(
    date_from: date | None = Query(default=None, description="Inclusive start date"),
    date_to: date | None = Query(default=None, description="Inclusive end date"),
    store: IPurchaseStore = Depends(get_purchases_store),
) -> PurchaseListResponse:
    """List purchases, newest first."""
    purchases = await store.list_purchases(date_from, date_to)
    return PurchaseListResponse(
        purchases=[PurchaseResponse.from_entity(p) for p in purchases],
        total=len(purchases),
    )


@router.post(
    "/rates",
    response_model=RateLineResponse,
    responses={400: {"model": ErrorResponse}},
)
async def recompute_rates(request: RecomputeRatesRequest) -> RateLineResponse:
    """Recompute a purchase line after the user edited one of its fields."""
    line = RateLine.from_rate_incl(request.rate_incl, request.gst, request.quantity)
    return RateLineResponse.from_line(recompute(line, request.changed, request.value))


@router.post(
    "",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Unknown product on a line"},
        409: {"model": ErrorResponse},
    },
)
async def create_purchase(
    request: PurchaseRequest,
    documents: DocumentLifecycleManager = Depends(get_documents),
) -> PurchaseResponse:
    """Save a purchase, add its items to stock and record the supplier."""
    purchase = await documents.create_purchase(request.to_entity())
    return PurchaseResponse.from_entity(purchase)


@router.get(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase(
    purchase_id: int,
    store: IPurchaseStore = Depends(get_purchases_store),
) -> PurchaseResponse:
    """Get a purchase by ID."""
    purchase = await store.get_purchase(purchase_id)
    if purchase is None:
        raise PurchaseNotFoundError(purchase_id)
    return PurchaseResponse.from_entity(purchase)


@router.put(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_purchase(
    purchase_id: int,
    request: PurchaseRequest,
    documents: DocumentLifecycleManager = Depends(get_documents),
) -> PurchaseResponse:
    """Replace a purchase body and move stock by the difference."""
    purchase = await documents.update_purchase(purchase_id, request.to_entity())
    return PurchaseResponse.from_entity(purchase)


@router.delete(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_purchase(
    purchase_id: int,
    documents: DocumentLifecycleManager = Depends(get_documents),
) -> PurchaseResponse:
    """Delete a purchase and take its items back out of stock."""
    purchase = await documents.delete_purchase(purchase_id)
    return PurchaseResponse.from_entity(purchase)


@router.get(
    "/{purchase_id}/pdf",
    responses={
        404: {"model": ErrorResponse, "description": "Purchase not found"},
    },
)
async def get_purchase_pdf(
    purchase_id: int,
    use_case: RenderDocumentUseCase = Depends(get_render_document_use_case),
) -> Response:
    """Generate and download a purchase record PDF."""
    result = await use_case.execute_purchase(purchase_id)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{result.file_name}"',
        },
    )
