"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from invoiceflow.core.entities.invoice import Invoice, PaymentMode, SaleItem
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase, PurchaseItem
from invoiceflow.core.services.purchase_rates import RateField

# --- Products ---


class CreateProductRequest(BaseModel):
    """Request to add a product to the catalogue."""

    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(default="General", description="Product category")
    unit: str = Field(default="Pcs", description="Unit of measure")
    gst: Decimal = Field(default=Decimal("0"), ge=0, le=28, description="GST %")
    stock: int = Field(default=0, description="Opening stock")
    purchase_price: Decimal = Field(
        default=Decimal("0"), ge=0, description="Tax-inclusive purchase price"
    )
    min_stock: int = Field(default=0, ge=0, description="Low-stock threshold")
    expiry_date: date | None = Field(default=None, description="Expiry date")

    def to_entity(self) -> Product:
        return Product(**self.model_dump())


class UpdateProductRequest(BaseModel):
    """Partial product edit. Only the fields sent are changed.

    Sending ``stock`` is a manual stock correction.
    """

    name: str | None = Field(default=None, min_length=1)
    category: str | None = None
    unit: str | None = None
    gst: Decimal | None = Field(default=None, ge=0, le=28)
    stock: int | None = None
    purchase_price: Decimal | None = Field(default=None, ge=0)
    min_stock: int | None = Field(default=None, ge=0)
    expiry_date: date | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# --- Invoices ---


class SaleItemRequest(BaseModel):
    """A single line on a sales invoice."""

    product_id: str = Field(..., description="Product ID")
    name: str | None = Field(default=None, description="Item name (defaults to product)")
    unit: str | None = Field(default=None, description="Unit (defaults to product)")
    gst: Decimal | None = Field(default=None, ge=0, le=28, description="GST %")
    cost_price: Decimal | None = Field(
        default=None, ge=0, description="Unit cost snapshot (kept on edit)"
    )
    price: Decimal = Field(..., ge=0, description="Tax-inclusive selling price")
    quantity: int = Field(..., gt=0, description="Quantity sold")


class InvoiceRequest(BaseModel):
    """Request to create or replace a sales invoice."""

    customer_name: str = Field(..., description="Customer name")
    customer_phone: str | None = Field(default=None, description="Customer phone")
    customer_address: str | None = Field(default=None, description="Customer address")
    invoice_date: date | None = Field(
        default=None, description="Invoice date (defaults to today, kept on edit)"
    )
    items: list[SaleItemRequest] = Field(..., description="Line items")
    discount: Decimal = Field(default=Decimal("0"), ge=0, description="Flat discount")
    payment_mode: PaymentMode = Field(default=PaymentMode.CASH)

    def to_entity(self) -> Invoice:
        data: dict[str, Any] = {
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone or None,
            "customer_address": self.customer_address or None,
            "items": [SaleItem(**item.model_dump()) for item in self.items],
            "discount": self.discount,
            "payment_mode": self.payment_mode,
        }
        # Leave the date unset so an edit keeps the stored one
        if self.invoice_date is not None:
            data["invoice_date"] = self.invoice_date
        return Invoice(**data)


# --- Purchases ---


class PurchaseItemRequest(BaseModel):
    """A purchase line. Omit product_id to create a new product."""

    product_id: str | None = Field(default=None, description="Existing product ID")
    name: str = Field(..., min_length=1, description="Item name")
    category: str | None = Field(default=None, description="Category for new products")
    unit: str | None = Field(default=None, description="Unit for new products")
    gst: Decimal | None = Field(default=None, ge=0, le=28, description="GST %")
    rate_incl: Decimal = Field(..., ge=0, description="Tax-inclusive rate")
    quantity: int = Field(..., gt=0, description="Quantity received")

    def to_entity(self) -> PurchaseItem:
        # An omitted GST is resolved from the product when the purchase is saved
        return PurchaseItem(**self.model_dump())


class PurchaseRequest(BaseModel):
    """Request to create or replace a purchase."""

    supplier_name: str = Field(..., description="Supplier name")
    supplier_phone: str | None = Field(default=None, description="Supplier phone")
    supplier_address: str | None = Field(default=None, description="Supplier address")
    reference_no: str | None = Field(default=None, description="Supplier bill number")
    purchase_date: date | None = Field(
        default=None, description="Purchase date (defaults to today, kept on edit)"
    )
    items: list[PurchaseItemRequest] = Field(..., description="Line items")

    def to_entity(self) -> Purchase:
        data: dict[str, Any] = {
            "supplier_name": self.supplier_name,
            "supplier_phone": self.supplier_phone or None,
            "supplier_address": self.supplier_address or None,
            "reference_no": self.reference_no or None,
            "items": [item.to_entity() for item in self.items],
        }
        if self.purchase_date is not None:
            data["purchase_date"] = self.purchase_date
        return Purchase(**data)


class RecomputeRatesRequest(BaseModel):
    """A purchase line plus the one field the user just edited."""

    quantity: Decimal = Field(default=Decimal("1"), description="Current quantity")
    gst: Decimal = Field(default=Decimal("0"), description="Current GST %")
    rate_incl: Decimal = Field(default=Decimal("0"), description="Current rate incl. tax")
    changed: RateField = Field(..., description="Field the user edited")
    value: Decimal = Field(..., description="New value of the edited field")


# --- Directory ---


class UpsertPartyRequest(BaseModel):
    """Create or refresh a customer/supplier by derived key."""

    name: str = Field(..., description="Party name")
    phone: str | None = Field(default=None, description="Phone number")
    address: str | None = Field(default=None, description="Address")


class UpdatePartyRequest(BaseModel):
    """Partial directory edit. The key does not change."""

    name: str | None = None
    phone: str | None = None
    address: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
