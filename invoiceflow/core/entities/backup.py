"""Flattened records sent to the spreadsheet backup."""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.party import Party
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase


class BackupEventType(str, Enum):
    """Kinds of record the backup sheet understands."""

    SALE = "SALE"
    SALE_UPDATE = "SALE_UPDATE"
    DELETE_SALE = "DELETE_SALE"
    PURCHASE = "PURCHASE"
    PURCHASE_UPDATE = "PURCHASE_UPDATE"
    DELETE_PURCHASE = "DELETE_PURCHASE"
    PRODUCT = "PRODUCT"
    PRODUCT_UPDATE = "PRODUCT_UPDATE"
    PRODUCT_DELETE = "PRODUCT_DELETE"
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"


def summarize_items(lines: list[tuple[str, int, Any]], currency: str) -> str:
    """Render lines as ``"Urea (2 x Rs.266)"`` joined by commas."""
    return ", ".join(
        f"{name} ({quantity} x {currency}{price})" for name, quantity, price in lines
    )


class BackupRecord(BaseModel):
    """One row for the backup sheet.

    Serialised with camelCase keys: ``partyName``, ``referenceNo``,
    ``rawItems``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: BackupEventType
    date: str = Field(default_factory=lambda: date.today().isoformat())
    id: str = "N/A"
    party_name: str = "Unknown"
    phone: str = ""
    address: str = ""
    reference_no: str = ""
    total: float = 0.0
    items: str = ""
    raw_items: list[dict[str, Any]] | None = None

    def payload(self) -> dict[str, Any]:
        """JSON-ready body for the backup webhook."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def for_invoice(
        cls,
        invoice: Invoice,
        event_type: BackupEventType = BackupEventType.SALE,
        currency: str = "Rs.",
    ) -> "BackupRecord":
        return cls(
            type=event_type,
            date=invoice.invoice_date.isoformat(),
            id=str(invoice.id) if invoice.id is not None else "N/A",
            party_name=invoice.customer_name or "Unknown",
            phone=invoice.customer_phone or "",
            address=invoice.customer_address or "",
            reference_no=invoice.invoice_no or "",
            total=float(invoice.total_amount),
            items=summarize_items(
                [(i.name or i.product_id, i.quantity, i.price) for i in invoice.items],
                currency,
            ),
            raw_items=[i.model_dump(mode="json") for i in invoice.items],
        )

    @classmethod
    def for_purchase(
        cls,
        purchase: Purchase,
        event_type: BackupEventType = BackupEventType.PURCHASE,
        currency: str = "Rs.",
    ) -> "BackupRecord":
        return cls(
            type=event_type,
            date=purchase.purchase_date.isoformat(),
            id=purchase.purchase_no or "N/A",
            party_name=purchase.supplier_name or "Unknown",
            phone=purchase.supplier_phone or "",
            address=purchase.supplier_address or "",
            reference_no=purchase.reference_no or "",
            total=float(purchase.total_amount),
            items=summarize_items(
                [(i.name, i.quantity, i.rate_incl) for i in purchase.items], currency
            ),
            raw_items=[i.model_dump(mode="json") for i in purchase.items],
        )

    @classmethod
    def for_product(
        cls,
        product: Product,
        event_type: BackupEventType = BackupEventType.PRODUCT,
        replay: bool = False,
    ) -> "BackupRecord":
        """
        Product row for the sheet.

        Live events carry the product name in partyName. A full-sync replay
        puts the category there instead and the name in referenceNo.
        """
        return cls(
            type=event_type,
            date=product.updated_at.date().isoformat(),
            id=product.id,
            party_name=product.category if replay else product.name,
            reference_no=product.name if replay else "",
            total=float(product.purchase_price),
            items=f"stock={product.stock} {product.unit}",
            raw_items=[],
        )

    @classmethod
    def for_party(cls, party: Party, event_type: BackupEventType) -> "BackupRecord":
        return cls(
            type=event_type,
            date=party.updated_at.date().isoformat(),
            id=party.key,
            party_name=party.name or "Unknown",
            phone=party.phone or "",
            address=party.address or "",
        )

    @classmethod
    def for_deletion(cls, event_type: BackupEventType, doc_id: str) -> "BackupRecord":
        return cls(type=event_type, id=doc_id)
