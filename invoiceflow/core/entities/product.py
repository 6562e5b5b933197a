"""Product domain entity."""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class Product(BaseModel):
    """A stocked product.

    ``stock`` is the running total maintained by the stock ledger. It may go
    negative after a correction; nothing in the domain model floors it.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(min_length=1)
    category: str = "General"
    unit: str = "Pcs"
    gst: Decimal = Field(default=Decimal("0"), ge=0, le=28)
    stock: int = 0
    purchase_price: Decimal = Field(default=Decimal("0"), ge=0)  # tax-inclusive
    min_stock: int = 0
    expiry_date: date | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def stock_value(self) -> Decimal:
        """Value of stock on hand at the current purchase price."""
        return self.purchase_price * self.stock
