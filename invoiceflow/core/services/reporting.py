"""
Reporting aggregator.

Read-only rollups over committed invoices, purchases and products. All
sums stay unrounded; presentation rounds.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from invoiceflow.config import get_logger, get_settings
from invoiceflow.core.entities.invoice import Invoice, PaymentMode
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase
from invoiceflow.core.interfaces.stores import (
    IInvoiceStore,
    IProductStore,
    IPurchaseStore,
)
from invoiceflow.core.services.pricing import ZERO, decompose_line, to_decimal, unit_cost

logger = get_logger(__name__)


@dataclass
class ProductSales:
    """Quantity sold under one item name."""

    name: str
    quantity: int


@dataclass
class SalesSummary:
    """Rollup of a date range."""

    start: date | None
    end: date | None
    invoice_count: int = 0
    purchase_count: int = 0
    total_sales: Decimal = ZERO
    total_purchases: Decimal = ZERO
    gst_collected: Decimal = ZERO
    cost_of_goods_sold: Decimal = ZERO
    net_profit: Decimal = ZERO
    payment_modes: dict[str, Decimal] = field(default_factory=dict)
    top_products: list[ProductSales] = field(default_factory=list)


@dataclass
class InventorySnapshot:
    """Dashboard view of stock on hand."""

    product_count: int
    stock_value: Decimal
    low_stock_count: int
    expiring_soon_count: int


def in_range(day: date, start: date | None, end: date | None) -> bool:
    """Inclusive calendar-date range check; an open bound matches everything."""
    return (start is None or day >= start) and (end is None or day <= end)


def summarize(
    invoices: Iterable[Invoice],
    purchases: Iterable[Purchase],
    products: Iterable[Product],
    start: date | None = None,
    end: date | None = None,
    top_n: int = 5,
) -> SalesSummary:
    """
    Roll up the documents dated within ``[start, end]``.

    COGS uses each line's cost snapshot and falls back to the product's
    current purchase price for lines saved without one. Top products are
    ranked by quantity under the line's item name; ties keep first-seen
    order.
    """
    current_cost = {p.id: p.purchase_price for p in products}
    summary = SalesSummary(start=start, end=end)
    sold: dict[str, int] = {}

    for invoice in invoices:
        if not in_range(invoice.invoice_date, start, end):
            continue
        summary.invoice_count += 1
        total = to_decimal(invoice.total_amount)
        summary.total_sales += total

        mode = (invoice.payment_mode or PaymentMode.CASH).value
        summary.payment_modes[mode] = summary.payment_modes.get(mode, ZERO) + total

        for item in invoice.items:
            summary.gst_collected += decompose_line(
                item.price, item.quantity, item.gst
            ).tax_amount
            summary.cost_of_goods_sold += (
                unit_cost(item, current_cost.get(item.product_id)) * item.quantity
            )
            name = item.name or item.product_id
            sold[name] = sold.get(name, 0) + item.quantity

    for purchase in purchases:
        if not in_range(purchase.purchase_date, start, end):
            continue
        summary.purchase_count += 1
        summary.total_purchases += to_decimal(purchase.total_amount)

    summary.net_profit = summary.total_sales - summary.cost_of_goods_sold
    # sorted() is stable, so equal quantities keep first-seen order
    ranked = sorted(sold.items(), key=lambda entry: entry[1], reverse=True)
    summary.top_products = [ProductSales(name, qty) for name, qty in ranked[:top_n]]
    return summary


def inventory_snapshot(
    products: Iterable[Product],
    today: date | None = None,
    expiry_window_days: int = 30,
) -> InventorySnapshot:
    """Counts for the dashboard. Expiring means after today and within the window."""
    today = today or date.today()
    horizon = today + timedelta(days=expiry_window_days)
    products = list(products)
    return InventorySnapshot(
        product_count=len(products),
        stock_value=sum((p.stock_value for p in products), ZERO),
        low_stock_count=sum(1 for p in products if p.is_low_stock),
        expiring_soon_count=sum(
            1
            for p in products
            if p.expiry_date is not None and today < p.expiry_date <= horizon
        ),
    )


class ReportingAggregator:
    """Loads committed state from the read stores and rolls it up."""

    def __init__(
        self,
        product_store: IProductStore,
        invoice_store: IInvoiceStore,
        purchase_store: IPurchaseStore,
    ) -> None:
        self._products = product_store
        self._invoices = invoice_store
        self._purchases = purchase_store

    async def sales_summary(
        self,
        start: date | None = None,
        end: date | None = None,
        top_n: int | None = None,
    ) -> SalesSummary:
        top_n = top_n if top_n is not None else get_settings().ledger.top_products
        invoices = await self._invoices.list_invoices(start, end)
        purchases = await self._purchases.list_purchases(start, end)
        products = await self._products.list_products()

        summary = summarize(invoices, purchases, products, start, end, top_n)
        logger.info(
            "sales_summary_computed",
            start=str(start),
            end=str(end),
            invoices=summary.invoice_count,
            purchases=summary.purchase_count,
        )
        return summary

    async def filtered_invoices(
        self, start: date | None = None, end: date | None = None
    ) -> list[Invoice]:
        return await self._invoices.list_invoices(start, end)

    async def inventory(self, today: date | None = None) -> InventorySnapshot:
        products = await self._products.list_products()
        return inventory_snapshot(
            products, today, get_settings().ledger.expiry_window_days
        )
