"""
Render Document Use Case.

Generates a PDF from a saved invoice or purchase.
"""

from dataclasses import dataclass

from invoiceflow.application.dto.responses import DocumentPdfResponse
from invoiceflow.config import get_logger
from invoiceflow.core.exceptions import InvoiceNotFoundError, PurchaseNotFoundError
from invoiceflow.core.interfaces.stores import IInvoiceStore, IPurchaseStore
from invoiceflow.infrastructure.pdf.document_renderer import (
    Fpdf2DocumentRenderer,
    IDocumentRenderer,
)

logger = get_logger(__name__)


@dataclass
class DocumentPdfResult:
    """Result of document PDF generation."""

    pdf_bytes: bytes
    document_id: int
    kind: str
    file_name: str
    file_size: int


class RenderDocumentUseCase:
    """
    Use case for generating invoice and purchase PDFs.

    Flow:
    1. Load the committed document from its store
    2. Render PDF via the document renderer
    3. Return PDF bytes and metadata
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        purchase_store: IPurchaseStore | None = None,
        renderer: IDocumentRenderer | None = None,
    ):
        self._invoice_store = invoice_store
        self._purchase_store = purchase_store
        self._renderer = renderer or Fpdf2DocumentRenderer()

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from invoiceflow.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_purchase_store(self) -> IPurchaseStore:
        if self._purchase_store is None:
            from invoiceflow.infrastructure.storage.sqlite import get_purchase_store

            self._purchase_store = await get_purchase_store()
        return self._purchase_store

    async def execute_invoice(self, invoice_id: int) -> DocumentPdfResult:
        """
        Generate an invoice PDF.

        Raises:
            InvoiceNotFoundError: If the invoice does not exist.
        """
        store = await self._get_invoice_store()
        invoice = await store.get_invoice(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        pdf_bytes = self._renderer.render_invoice(invoice)
        return self._result(
            pdf_bytes, invoice_id, "invoice", f"Invoice_{invoice.invoice_no}.pdf"
        )

    async def execute_purchase(self, purchase_id: int) -> DocumentPdfResult:
        """
        Generate a purchase record PDF.

        Raises:
            PurchaseNotFoundError: If the purchase does not exist.
        """
        store = await self._get_purchase_store()
        purchase = await store.get_purchase(purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(purchase_id)

        pdf_bytes = self._renderer.render_purchase(purchase)
        return self._result(
            pdf_bytes, purchase_id, "purchase", f"Purchase_{purchase.purchase_no}.pdf"
        )

    @staticmethod
    def _result(
        pdf_bytes: bytes, document_id: int, kind: str, file_name: str
    ) -> DocumentPdfResult:
        logger.info(
            "document_pdf_rendered",
            kind=kind,
            document_id=document_id,
            file_size=len(pdf_bytes),
        )
        return DocumentPdfResult(
            pdf_bytes=pdf_bytes,
            document_id=document_id,
            kind=kind,
            file_name=file_name,
            file_size=len(pdf_bytes),
        )

    @staticmethod
    def to_response(result: DocumentPdfResult) -> DocumentPdfResponse:
        """Convert result to API response."""
        return DocumentPdfResponse(
            document_id=result.document_id,
            kind=result.kind,
            file_name=result.file_name,
            file_size=result.file_size,
        )
