"""
Invoice and purchase PDF renderer using fpdf2.

Renders a finalized document (totals already computed at save time) under
the shop profile header. Pure presentation: reads the document, never the
ledger.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from invoiceflow.config.settings import ShopSettings, get_settings
from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.purchase import Purchase
from invoiceflow.core.services.pricing import (
    aggregate_lines,
    decompose_line,
    round_money,
)

# Brand green
_ACCENT = (45, 106, 79)


def _safe_text(text: str | None) -> str:
    """Core PDF fonts are latin-1 only; replace anything else with '?'."""
    return (text or "").encode("latin-1", errors="replace").decode("latin-1")


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class IDocumentRenderer(ABC):
    """Interface for invoice/purchase document renderers."""

    @abstractmethod
    def render_invoice(self, invoice: Invoice) -> bytes:
        """Render a saved invoice into PDF bytes."""
        ...

    @abstractmethod
    def render_purchase(self, purchase: Purchase) -> bytes:
        """Render a saved purchase into PDF bytes."""
        ...


# ---------------------------------------------------------------------------
# FPDF subclass with footer
# ---------------------------------------------------------------------------


class _ShopPdf(FPDF):
    """FPDF subclass that prints the closing lines on every page."""

    def __init__(self, shop: ShopSettings) -> None:
        super().__init__()
        self._shop = shop
        self._generated = datetime.now().strftime("%Y-%m-%d %H:%M")

    def footer(self) -> None:
        self.set_y(-20)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(
            0, 4, "This is a computer generated document.", align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        self.cell(
            0, 4, _safe_text(f"Thank you for shopping with {self._shop.name}"),
            align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        self.cell(
            0, 4, f"Page {self.page_no()} of {{nb}} | {self._generated}", align="C",
        )
        self.set_text_color(0, 0, 0)


# ---------------------------------------------------------------------------
# Concrete renderer
# ---------------------------------------------------------------------------


class Fpdf2DocumentRenderer(IDocumentRenderer):
    """Renders invoices and purchase records with fpdf2."""

    def __init__(self, shop: ShopSettings | None = None) -> None:
        self._shop = shop or get_settings().shop

    def _money(self, value: Decimal) -> str:
        return f"{self._shop.currency} {round_money(value):,.2f}"

    def _new_pdf(self) -> FPDF:
        pdf = _ShopPdf(self._shop)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=25)
        pdf.add_page()
        self._render_shop_header(pdf)
        return pdf

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_invoice(self, invoice: Invoice) -> bytes:
        pdf = self._new_pdf()

        pdf.set_font("Helvetica", "B", 11)
        pdf.cell(95, 7, f"Invoice No: {_safe_text(invoice.invoice_no)}")
        pdf.cell(
            0, 7, f"Date: {invoice.invoice_date.strftime('%d/%m/%Y')}", align="R",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(3)
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 7, "BILL TO:", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 11)
        pdf.cell(
            0, 6, f"Name: {_safe_text(invoice.customer_name) or 'N/A'}",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        if invoice.customer_phone:
            pdf.cell(
                0, 6, f"Phone: {_safe_text(invoice.customer_phone)}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        if invoice.customer_address:
            pdf.cell(
                0, 6, f"Address: {_safe_text(invoice.customer_address)}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.cell(
            0, 6, f"Payment: {invoice.payment_mode.value}",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(4)

        rows = []
        for item in invoice.items:
            part = decompose_line(item.price, item.quantity, item.gst)
            rows.append((
                item.name or item.product_id,
                f"{item.quantity} {item.unit or ''}".strip(),
                part.base_amount / item.quantity,
                item.gst or Decimal("0"),
                part.tax_amount,
                part.line_total,
            ))
        self._render_table(pdf, rows)

        totals = aggregate_lines(
            ((i.price, i.quantity, i.gst) for i in invoice.items), invoice.discount
        )
        # The stored total is authoritative; the split is for display only.
        self._render_totals(
            pdf, totals.base_amount, totals.tax_amount, invoice.discount,
            invoice.total_amount,
        )
        return bytes(pdf.output())

    def render_purchase(self, purchase: Purchase) -> bytes:
        pdf = self._new_pdf()

        pdf.set_font("Helvetica", "B", 14)
        pdf.set_text_color(*_ACCENT)
        pdf.cell(
            0, 8, "PURCHASE RECORD", align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_text_color(0, 0, 0)
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(95, 6, f"Purchase No: {_safe_text(purchase.purchase_no)}")
        pdf.cell(
            0, 6, f"Bill No: {_safe_text(purchase.reference_no) or 'N/A'}", align="R",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.cell(95, 6, f"Date: {purchase.purchase_date.strftime('%d/%m/%Y')}")
        pdf.cell(
            0, 6, f"Supplier: {_safe_text(purchase.supplier_name) or 'Unknown'}",
            align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(4)

        rows = [
            (
                item.name,
                f"{item.quantity} {item.unit or ''}".strip(),
                item.rate_excl,
                item.gst,
                item.line_total - item.line_total_excl,
                item.line_total,
            )
            for item in purchase.items
        ]
        self._render_table(pdf, rows)

        base = sum((i.line_total_excl for i in purchase.items), Decimal("0"))
        self._render_totals(
            pdf, base, purchase.total_amount - base, Decimal("0"),
            purchase.total_amount,
        )
        return bytes(pdf.output())

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_shop_header(self, pdf: FPDF) -> None:
        pdf.set_font("Helvetica", "B", 20)
        pdf.set_text_color(*_ACCENT)
        pdf.cell(
            0, 10, _safe_text(self._shop.name.upper()), align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(80, 80, 80)
        for line in (
            self._shop.tagline,
            self._shop.address,
            f"Phone: {self._shop.contact}",
        ):
            pdf.cell(
                0, 5, _safe_text(line), align="C",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.set_text_color(0, 0, 0)

        y = pdf.get_y() + 2
        pdf.set_draw_color(*_ACCENT)
        pdf.set_line_width(0.5)
        pdf.line(10, y, 200, y)
        pdf.set_draw_color(0, 0, 0)
        pdf.set_line_width(0.2)
        pdf.ln(6)

    def _render_table(self, pdf: FPDF, rows: list[tuple]) -> None:
        """Rows of (name, qty label, rate excl, gst %, gst amount, total incl)."""
        col_widths = [10, 62, 22, 26, 16, 24, 30]
        headers = ["#", "Item Name", "Qty", "Rate (Excl)", "GST %", "GST Amt", "Total"]

        pdf.set_font("Helvetica", "B", 9)
        pdf.set_fill_color(*_ACCENT)
        pdf.set_text_color(255, 255, 255)
        for width, header in zip(col_widths, headers):
            pdf.cell(width, 7, header, border=1, fill=True, align="C")
        pdf.ln()
        pdf.set_text_color(0, 0, 0)

        pdf.set_font("Helvetica", "", 8)
        for idx, (name, qty, rate, gst, gst_amount, total) in enumerate(rows, 1):
            fill = idx % 2 == 0
            if fill:
                pdf.set_fill_color(240, 240, 240)
            pdf.cell(col_widths[0], 6, str(idx), border=1, align="C", fill=fill)
            pdf.cell(col_widths[1], 6, _safe_text(name)[:40], border=1, fill=fill)
            pdf.cell(col_widths[2], 6, _safe_text(qty), border=1, align="C", fill=fill)
            pdf.cell(col_widths[3], 6, self._money(rate), border=1, align="R", fill=fill)
            pdf.cell(col_widths[4], 6, f"{gst:g}%", border=1, align="C", fill=fill)
            pdf.cell(col_widths[5], 6, self._money(gst_amount), border=1, align="R", fill=fill)
            pdf.cell(col_widths[6], 6, self._money(total), border=1, align="R", fill=fill)
            pdf.ln()
        pdf.ln(4)

    def _render_totals(
        self,
        pdf: FPDF,
        base: Decimal,
        tax: Decimal,
        discount: Decimal,
        payable: Decimal,
    ) -> None:
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(140, 6, "Subtotal (Excl. Tax):", align="R")
        pdf.cell(0, 6, self._money(base), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.cell(140, 6, "Total GST Content:", align="R")
        pdf.cell(0, 6, self._money(tax), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if discount > 0:
            pdf.cell(140, 6, "Discount:", align="R")
            pdf.set_text_color(220, 38, 38)
            pdf.cell(
                0, 6, f"-{self._money(discount)}", align="R",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
            pdf.set_text_color(0, 0, 0)

        pdf.set_font("Helvetica", "B", 12)
        pdf.set_text_color(*_ACCENT)
        pdf.cell(140, 8, "Grand Total:", align="R")
        pdf.cell(0, 8, self._money(payable), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(0, 0, 0)
