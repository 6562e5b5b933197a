"""Customer and supplier directory entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class PartyKind(str, Enum):
    """Which directory a party lives in."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"


def party_key(name: str, phone: str | None = None) -> str:
    """Derive the directory merge key for a party.

    The phone number wins when present; otherwise the name with whitespace
    runs collapsed to ``_`` and lower-cased.

    >>> party_key("Ram  Lal", None)
    'ram_lal'
    >>> party_key("Ram Lal", " 98765 ")
    '98765'
    """
    if phone and phone.strip():
        return phone.strip()
    return "_".join(name.split()).lower()


class Party(BaseModel):
    """A directory record keyed by its derived identity."""

    key: str
    name: str
    phone: str | None = None
    address: str | None = None
    last_visit: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Customer(Party):
    """A customer from the sales side."""

    pass


class Supplier(Party):
    """A supplier from the purchase side."""

    pass
