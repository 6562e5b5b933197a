"""Purchase (stock inbound) domain entities."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

HUNDRED = Decimal("100")


class PurchaseItem(BaseModel):
    """A purchase line.

    A line without ``product_id`` names a product that does not exist yet;
    saving the purchase creates it. The tax-inclusive rate is the stored
    master value, the tax-exclusive forms are derived from it.
    """

    product_id: str | None = None
    name: str = Field(min_length=1)
    category: str | None = None
    unit: str | None = None
    gst: Decimal | None = Field(default=None, ge=0, le=28)  # None until resolved on save
    rate_incl: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)

    @computed_field
    @property
    def rate_excl(self) -> Decimal:
        return self.rate_incl / (1 + (self.gst or 0) / HUNDRED)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.rate_incl * self.quantity

    @computed_field
    @property
    def line_total_excl(self) -> Decimal:
        return self.rate_excl * self.quantity

    @property
    def is_new_product(self) -> bool:
        return self.product_id is None


class Purchase(BaseModel):
    """A supplier purchase entry."""

    id: int | None = None
    purchase_no: str | None = None  # time-derived, e.g. PUR-482913
    purchase_date: date = Field(default_factory=date.today)
    supplier_name: str = ""
    supplier_phone: str | None = None
    supplier_address: str | None = None
    reference_no: str | None = None  # supplier's bill number
    items: list[PurchaseItem] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0")  # cached at save time
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
