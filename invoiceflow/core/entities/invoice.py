"""Sales invoice domain entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class PaymentMode(str, Enum):
    """How an invoice was settled."""

    CASH = "Cash"
    CREDIT = "Credit"
    UPI = "UPI"


class SaleItem(BaseModel):
    """A single line on a sales invoice.

    name, unit, gst and cost_price are snapshots of the product at the time
    of sale. Left empty by the caller, they are filled from the product
    inside the saving transaction and never corrected afterwards.
    """

    product_id: str
    name: str | None = None
    unit: str | None = None
    gst: Decimal | None = Field(default=None, ge=0, le=28)
    cost_price: Decimal | None = Field(default=None, ge=0)
    price: Decimal = Field(ge=0)  # tax-inclusive selling price
    quantity: int = Field(gt=0)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Invoice(BaseModel):
    """A sales invoice with a denormalized customer snapshot."""

    id: int | None = None
    invoice_no: str | None = None  # assigned on first save, e.g. INV-0001
    invoice_date: date = Field(default_factory=date.today)
    customer_name: str = ""
    customer_phone: str | None = None
    customer_address: str | None = None
    items: list[SaleItem] = Field(default_factory=list)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_mode: PaymentMode = PaymentMode.CASH
    total_amount: Decimal = Decimal("0")  # cached at save time
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def gross_amount(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def product_ids(self) -> set[str]:
        return {item.product_id for item in self.items}
