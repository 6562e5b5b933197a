"""SQLite storage implementations."""

from invoiceflow.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_snapshot,
    get_transaction,
)
from invoiceflow.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from invoiceflow.infrastructure.storage.sqlite.party_store import SQLitePartyStore
from invoiceflow.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from invoiceflow.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseStore
from invoiceflow.infrastructure.storage.sqlite.ledger_session import (  # noqa: I001
    SQLiteLedgerSession,
    SQLiteLedgerUnitOfWork,
)

# Singleton instances
_product_store: SQLiteProductStore | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_purchase_store: SQLitePurchaseStore | None = None
_party_store: SQLitePartyStore | None = None


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_purchase_store() -> SQLitePurchaseStore:
    """Get singleton purchase store instance."""
    global _purchase_store
    if _purchase_store is None:
        _purchase_store = SQLitePurchaseStore()
    return _purchase_store


async def get_party_store() -> SQLitePartyStore:
    """Get singleton directory store instance."""
    global _party_store
    if _party_store is None:
        _party_store = SQLitePartyStore()
    return _party_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_snapshot",
    "get_transaction",
    # Ledger
    "SQLiteLedgerSession",
    "SQLiteLedgerUnitOfWork",
    # Read stores
    "SQLiteProductStore",
    "SQLiteInvoiceStore",
    "SQLitePurchaseStore",
    "SQLitePartyStore",
    "get_product_store",
    "get_invoice_store",
    "get_purchase_store",
    "get_party_store",
]
