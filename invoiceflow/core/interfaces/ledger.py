"""Abstract interface for transactional ledger access."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.party import Party, PartyKind
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase


class ILedgerSession(ABC):
    """
    Read-modify-write access to the ledger inside one transaction.

    Everything done through a session commits together or not at all.
    Reads inside the session observe the session's own writes and are
    isolated from every other writer until commit.
    """

    # Collection names written through this session ("products", ...)
    touched: set[str]

    # Products
    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        pass

    @abstractmethod
    async def insert_product(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def save_product(self, product: Product) -> Product:
        """Overwrite every field of an existing product."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: str) -> bool:
        pass

    @abstractmethod
    async def adjust_stock(self, product_id: str, delta: int) -> int | None:
        """Add a signed delta to a product's stock.

        Returns the new stock, or None when the product does not exist.
        """
        pass

    # Counters
    @abstractmethod
    async def next_sequence(self, name: str) -> int:
        """Increment and return the named counter, starting at 1."""
        pass

    # Invoices
    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        pass

    @abstractmethod
    async def insert_invoice(self, invoice: Invoice) -> Invoice:
        """Persist a new invoice and return it with its id set."""
        pass

    @abstractmethod
    async def replace_invoice(self, invoice: Invoice) -> Invoice:
        pass

    @abstractmethod
    async def delete_invoice(self, invoice_id: int) -> bool:
        pass

    # Purchases
    @abstractmethod
    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        pass

    @abstractmethod
    async def insert_purchase(self, purchase: Purchase) -> Purchase:
        pass

    @abstractmethod
    async def replace_purchase(self, purchase: Purchase) -> Purchase:
        pass

    @abstractmethod
    async def delete_purchase(self, purchase_id: int) -> bool:
        pass

    # Directory
    @abstractmethod
    async def get_party(self, kind: PartyKind, key: str) -> Party | None:
        pass

    @abstractmethod
    async def save_party(self, kind: PartyKind, party: Party) -> Party:
        """Insert or overwrite the party stored under ``party.key``."""
        pass

    @abstractmethod
    async def delete_party(self, kind: PartyKind, key: str) -> bool:
        pass


class ILedgerUnitOfWork(ABC):
    """Opens ledger sessions.

    ``session()`` commits when the block exits normally and rolls back on
    any exception, cancellation included. Collections touched by a
    committed session are announced to the change feed after commit,
    without holding up the caller.
    """

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[ILedgerSession]:
        pass

    async def drain(self) -> None:
        """Wait for change announcements still in flight."""
        return None
