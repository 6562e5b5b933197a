"""Core interfaces (ports) for dependency injection."""

from invoiceflow.core.interfaces.backup import IBackupDispatcher, IBackupReplicator
from invoiceflow.core.interfaces.change_feed import (
    Collection,
    IChangeFeed,
    SnapshotCallback,
)
from invoiceflow.core.interfaces.ledger import ILedgerSession, ILedgerUnitOfWork
from invoiceflow.core.interfaces.stores import (
    IInvoiceStore,
    IPartyStore,
    IProductStore,
    IPurchaseStore,
)

__all__ = [
    # Ledger
    "ILedgerSession",
    "ILedgerUnitOfWork",
    # Read side
    "IProductStore",
    "IInvoiceStore",
    "IPurchaseStore",
    "IPartyStore",
    # Subscriptions
    "Collection",
    "IChangeFeed",
    "SnapshotCallback",
    # Backup
    "IBackupReplicator",
    "IBackupDispatcher",
]
