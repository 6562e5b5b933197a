"""
Tax-inclusive pricing arithmetic.

Prices are GST-inclusive; base and tax portions are recovered by division.
Every function here works on unrounded Decimals. Call ``round_money`` only
when a value leaves the system (API response, PDF, CSV).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from invoiceflow.core.entities.invoice import Invoice, SaleItem

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce a possibly missing numeric value to Decimal, treating junk as zero."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return ZERO


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineBreakdown:
    """A tax-inclusive amount split into base and tax."""

    line_total: Decimal
    base_amount: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    """Per-document totals, summed line by line."""

    gross: Decimal
    base_amount: Decimal
    tax_amount: Decimal
    discount: Decimal
    final_total: Decimal


def split_inclusive(line_total: Any, gst: Any) -> LineBreakdown:
    """Split a tax-inclusive amount at the given GST percentage."""
    total = to_decimal(line_total)
    base = total / (1 + to_decimal(gst) / HUNDRED)
    return LineBreakdown(line_total=total, base_amount=base, tax_amount=total - base)


def decompose_line(price: Any, quantity: Any, gst: Any) -> LineBreakdown:
    """
    Decompose one line.

    >>> b = decompose_line(118, 2, 18)
    >>> round_money(b.base_amount), round_money(b.tax_amount)
    (Decimal('200.00'), Decimal('36.00'))
    """
    return split_inclusive(to_decimal(price) * to_decimal(quantity), gst)


def aggregate_lines(
    lines: Iterable[tuple[Any, Any, Any]], discount: Any = ZERO
) -> DocumentTotals:
    """
    Total a collection of ``(price, quantity, gst)`` lines.

    Each component is summed independently so lines at different GST rates
    never get decomposed from a blended total.
    """
    gross = base = tax = ZERO
    for price, quantity, gst in lines:
        part = decompose_line(price, quantity, gst)
        gross += part.line_total
        base += part.base_amount
        tax += part.tax_amount

    discount = to_decimal(discount)
    return DocumentTotals(
        gross=gross,
        base_amount=base,
        tax_amount=tax,
        discount=discount,
        final_total=gross - discount,
    )


def invoice_totals(invoice: Invoice) -> DocumentTotals:
    return aggregate_lines(
        ((item.price, item.quantity, item.gst) for item in invoice.items),
        invoice.discount,
    )


def unit_cost(item: SaleItem, current_purchase_price: Any = None) -> Decimal:
    """Cost snapshot of a sold line, else the product's current purchase price.

    The fallback only matters for lines saved without a snapshot and
    reflects today's cost rather than the historical one.
    """
    if item.cost_price is not None:
        return item.cost_price
    return to_decimal(current_purchase_price)


def line_profit(item: SaleItem, current_purchase_price: Any = None) -> Decimal:
    return (item.price - unit_cost(item, current_purchase_price)) * item.quantity
