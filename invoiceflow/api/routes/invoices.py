"""Sales invoice endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from invoiceflow.api.dependencies import (
    get_documents,
    get_invoices_store,
    get_render_document_use_case,
)
from invoiceflow.application.dto.requests import InvoiceRequest
from invoiceflow.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
)
from invoiceflow.application.use_cases.render_document import RenderDocumentUseCase
from invoiceflow.core.exceptions import InvoiceNotFoundError
from invoiceflow.core.interfaces.stores import IInvoiceStore
from invoiceflow.core.services import DocumentLifecycleManager

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    date_from: date | None = Query(default=None, description="Inclusive start date"),
    date_to: date | None = Query(default=None, description="Inclusive end date"),
    store: IInvoiceStore = Depends(get_invoices_store),
) -> InvoiceListResponse:
    """List invoices, newest first."""
    invoices = await store.list_invoices(date_from, date_to)
    return InvoiceListResponse(
        invoices=[InvoiceResponse.from_entity(inv) for inv in invoices],
        total=len(invoices),
    )


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Unknown product on a line"},
        409: {"model": ErrorResponse},
    },
)
async def create_invoice(
    request: InvoiceRequest,
    documents: DocumentLifecycleManager = Depends(get_documents),
) -> InvoiceResponse:
    """Save an invoice, take its items out of stock and record the customer."""
    invoice = await documents.create_invoice(request.to_entity())
    return InvoiceResponse.from_entity(invoice)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    store: IInvoiceStore = Depends(get_invoices_store),
) -> InvoiceResponse:
    """Get an invoice by ID."""
    invoice = await store.get_invoice(invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return InvoiceResponse.from_entity(invoice)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_invoice(
    invoice_id: int,
    request: InvoiceRequest,
    documents: DocumentLifecycleManager = Depends(get_documents),
) -> InvoiceResponse:
    """Replace an invoice body and move stock by the difference."""
    invoice = await documents.update_invoice(invoice_id, request.to_entity())
    return InvoiceResponse.from_entity(invoice)


@router.delete(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_invoice(
    invoice_id: int,
    documents: DocumentLifecycleManager = Depends(get_documents),
) -> InvoiceResponse:
    """Delete an invoice and return its items to stock."""
    invoice = await documents.delete_invoice(invoice_id)
    return InvoiceResponse.from_entity(invoice)


@router.get(
    "/{invoice_id}/pdf",
    responses={
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def get_invoice_pdf(
    invoice_id: int,
    use_case: RenderDocumentUseCase = Depends(get_render_document_use_case),
) -> Response:
    """Generate and download a PDF for an invoice."""
    result = await use_case.execute_invoice(invoice_id)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{result.file_name}"',
        },
    )
