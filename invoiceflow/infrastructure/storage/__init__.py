"""Storage infrastructure implementations."""

from invoiceflow.infrastructure.storage.sqlite import (
    SQLiteInvoiceStore,
    SQLiteLedgerUnitOfWork,
    SQLitePartyStore,
    SQLiteProductStore,
    SQLitePurchaseStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # Ledger
    "SQLiteLedgerUnitOfWork",
    # Read stores
    "SQLiteProductStore",
    "SQLiteInvoiceStore",
    "SQLitePurchaseStore",
    "SQLitePartyStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
