"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
Money leaves the system here, rounded to two places.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.party import Party
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase
from invoiceflow.core.services.pricing import invoice_totals, round_money
from invoiceflow.core.services.purchase_rates import RateLine


def money(value: Decimal) -> float:
    return float(round_money(value))


# --- Products ---


class ProductResponse(BaseModel):
    """Product response DTO."""

    id: str
    name: str
    category: str
    unit: str
    gst: float
    stock: int
    purchase_price: float
    min_stock: int
    expiry_date: date | None = None
    is_low_stock: bool
    stock_value: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            unit=product.unit,
            gst=float(product.gst),
            stock=product.stock,
            purchase_price=money(product.purchase_price),
            min_stock=product.min_stock,
            expiry_date=product.expiry_date,
            is_low_stock=product.is_low_stock,
            stock_value=money(product.stock_value),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    """List of products."""

    products: list[ProductResponse]
    total: int


# --- Invoices ---


class SaleItemResponse(BaseModel):
    """Line item in invoice response."""

    product_id: str
    name: str | None = None
    unit: str | None = None
    gst: float | None = None
    cost_price: float | None = None
    price: float = Field(..., description="Tax-inclusive selling price")
    quantity: int
    line_total: float


class InvoiceResponse(BaseModel):
    """Invoice response DTO with the base/GST split of its lines."""

    id: int
    invoice_no: str
    invoice_date: date
    customer_name: str
    customer_phone: str | None = None
    customer_address: str | None = None
    items: list[SaleItemResponse]
    payment_mode: str
    gross_amount: float
    subtotal_excl: float = Field(..., description="Sum of tax-exclusive line amounts")
    gst_amount: float = Field(..., description="GST contained in the gross amount")
    discount: float
    total_amount: float = Field(..., description="Payable amount after discount")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceResponse":
        totals = invoice_totals(invoice)
        return cls(
            id=invoice.id or 0,
            invoice_no=invoice.invoice_no or "",
            invoice_date=invoice.invoice_date,
            customer_name=invoice.customer_name,
            customer_phone=invoice.customer_phone,
            customer_address=invoice.customer_address,
            items=[
                SaleItemResponse(
                    product_id=item.product_id,
                    name=item.name,
                    unit=item.unit,
                    gst=float(item.gst) if item.gst is not None else None,
                    cost_price=(
                        money(item.cost_price) if item.cost_price is not None else None
                    ),
                    price=money(item.price),
                    quantity=item.quantity,
                    line_total=money(item.line_total),
                )
                for item in invoice.items
            ],
            payment_mode=invoice.payment_mode.value,
            gross_amount=money(totals.gross),
            subtotal_excl=money(totals.base_amount),
            gst_amount=money(totals.tax_amount),
            discount=money(invoice.discount),
            total_amount=money(invoice.total_amount),
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )


class InvoiceListResponse(BaseModel):
    """List of invoices."""

    invoices: list[InvoiceResponse]
    total: int


# --- Purchases ---


class PurchaseItemResponse(BaseModel):
    """Line item in purchase response."""

    product_id: str | None = None
    name: str
    category: str | None = None
    unit: str | None = None
    gst: float
    rate_excl: float
    rate_incl: float
    quantity: int
    line_total_excl: float
    line_total: float


class PurchaseResponse(BaseModel):
    """Purchase response DTO."""

    id: int
    purchase_no: str
    purchase_date: date
    supplier_name: str
    supplier_phone: str | None = None
    supplier_address: str | None = None
    reference_no: str | None = None
    items: list[PurchaseItemResponse]
    total_amount: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, purchase: Purchase) -> "PurchaseResponse":
        return cls(
            id=purchase.id or 0,
            purchase_no=purchase.purchase_no or "",
            purchase_date=purchase.purchase_date,
            supplier_name=purchase.supplier_name,
            supplier_phone=purchase.supplier_phone,
            supplier_address=purchase.supplier_address,
            reference_no=purchase.reference_no,
            items=[
                PurchaseItemResponse(
                    product_id=item.product_id,
                    name=item.name,
                    category=item.category,
                    unit=item.unit,
                    gst=float(item.gst),
                    rate_excl=money(item.rate_excl),
                    rate_incl=money(item.rate_incl),
                    quantity=item.quantity,
                    line_total_excl=money(item.line_total_excl),
                    line_total=money(item.line_total),
                )
                for item in purchase.items
            ],
            total_amount=money(purchase.total_amount),
            created_at=purchase.created_at,
            updated_at=purchase.updated_at,
        )


class PurchaseListResponse(BaseModel):
    """List of purchases."""

    purchases: list[PurchaseResponse]
    total: int


class RateLineResponse(BaseModel):
    """A purchase line after recomputation."""

    quantity: float
    gst: float
    rate_excl: float
    rate_incl: float
    line_total_excl: float
    line_total: float

    @classmethod
    def from_line(cls, line: RateLine) -> "RateLineResponse":
        return cls(
            quantity=float(line.quantity),
            gst=float(line.gst),
            rate_excl=money(line.rate_excl),
            rate_incl=money(line.rate_incl),
            line_total_excl=money(line.line_total_excl),
            line_total=money(line.line_total),
        )


# --- Directory ---


class PartyResponse(BaseModel):
    """Customer or supplier directory record."""

    key: str
    name: str
    phone: str | None = None
    address: str | None = None
    last_visit: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, party: Party) -> "PartyResponse":
        return cls(**party.model_dump(include=set(cls.model_fields)))


class PartyListResponse(BaseModel):
    """List of directory records."""

    parties: list[PartyResponse]
    total: int


# --- Reports ---


class ProductSalesResponse(BaseModel):
    """Quantity sold under one item name."""

    name: str
    quantity: int


class SalesSummaryResponse(BaseModel):
    """Sales/purchase rollup for a date range."""

    start: date | None = None
    end: date | None = None
    invoice_count: int
    purchase_count: int
    total_sales: float
    total_purchases: float
    gst_collected: float
    cost_of_goods_sold: float
    net_profit: float
    payment_modes: dict[str, float]
    top_products: list[ProductSalesResponse]


class InventorySnapshotResponse(BaseModel):
    """Dashboard stock figures."""

    product_count: int
    stock_value: float
    low_stock_count: int
    expiring_soon_count: int


class DocumentPdfResponse(BaseModel):
    """Metadata of a rendered document."""

    document_id: int
    kind: str
    file_name: str
    file_size: int


class SyncBackupResponse(BaseModel):
    """Counts of records replayed by a full backup sync."""

    customers: int = 0
    suppliers: int = 0
    products: int = 0
    purchases: int = 0
    invoices: int = 0
    failed: int = 0
    total: int = 0


# --- System ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = "unknown"
    backup_configured: bool = False


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
