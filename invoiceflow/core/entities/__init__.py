"""Core domain entities."""

from invoiceflow.core.entities.backup import (
    BackupEventType,
    BackupRecord,
    summarize_items,
)
from invoiceflow.core.entities.invoice import (
    Invoice,
    PaymentMode,
    SaleItem,
)
from invoiceflow.core.entities.party import (
    Customer,
    Party,
    PartyKind,
    Supplier,
    party_key,
)
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import (
    Purchase,
    PurchaseItem,
)

__all__ = [
    # Inventory
    "Product",
    # Sales
    "Invoice",
    "SaleItem",
    "PaymentMode",
    # Purchases
    "Purchase",
    "PurchaseItem",
    # Directory
    "Party",
    "PartyKind",
    "Customer",
    "Supplier",
    "party_key",
    # Backup
    "BackupEventType",
    "BackupRecord",
    "summarize_items",
]
