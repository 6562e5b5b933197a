"""PDF rendering infrastructure."""

from invoiceflow.infrastructure.pdf.document_renderer import (
    Fpdf2DocumentRenderer,
    IDocumentRenderer,
)

__all__ = ["Fpdf2DocumentRenderer", "IDocumentRenderer"]
