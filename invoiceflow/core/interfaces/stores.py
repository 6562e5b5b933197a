"""Abstract interfaces for read-side ledger queries.

These run outside any write transaction and only ever see committed state.
"""

from abc import ABC, abstractmethod
from datetime import date

from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.party import Party, PartyKind
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase


class IProductStore(ABC):
    """Interface for product queries."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """List all products ordered by name."""
        pass

    @abstractmethod
    async def list_low_stock(self) -> list[Product]:
        """List products whose stock is at or below their minimum."""
        pass


class IInvoiceStore(ABC):
    """Interface for invoice queries."""

    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        """Get invoice by ID with its items."""
        pass

    @abstractmethod
    async def list_invoices(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> list[Invoice]:
        """List invoices, newest first, optionally within an inclusive date range."""
        pass


class IPurchaseStore(ABC):
    """Interface for purchase queries."""

    @abstractmethod
    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        """Get purchase by ID with its items."""
        pass

    @abstractmethod
    async def list_purchases(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> list[Purchase]:
        """List purchases, newest first, optionally within an inclusive date range."""
        pass


class IPartyStore(ABC):
    """Interface for customer and supplier queries."""

    @abstractmethod
    async def get_party(self, kind: PartyKind, key: str) -> Party | None:
        pass

    @abstractmethod
    async def list_parties(self, kind: PartyKind) -> list[Party]:
        pass
