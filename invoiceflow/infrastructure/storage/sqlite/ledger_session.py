"""
SQLite ledger session and unit of work.

A session wraps one pooled connection inside ``BEGIN IMMEDIATE``. Because
SQLite admits a single writer, every session is serialised against every
other: the stock, counter and document rows a session reads cannot be
changed underneath it before it commits.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from invoiceflow.config import get_logger
from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.party import Party, PartyKind
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase
from invoiceflow.core.exceptions import (
    DatabaseError,
    InvoiceNotFoundError,
    PurchaseNotFoundError,
)
from invoiceflow.core.interfaces.change_feed import Collection, IChangeFeed
from invoiceflow.core.interfaces.ledger import ILedgerSession, ILedgerUnitOfWork
from invoiceflow.infrastructure.storage.sqlite import (
    invoice_store,
    party_store,
    product_store,
    purchase_store,
)
from invoiceflow.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool

logger = get_logger(__name__)

_PARTY_COLLECTIONS = {
    PartyKind.CUSTOMER: Collection.CUSTOMERS,
    PartyKind.SUPPLIER: Collection.SUPPLIERS,
}


class SQLiteLedgerSession(ILedgerSession):
    """Ledger operations on a connection that is already inside a transaction."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn
        self.touched: set[str] = set()

    # Products
    async def get_product(self, product_id: str) -> Product | None:
        return await product_store.fetch_product(self._conn, product_id)

    async def insert_product(self, product: Product) -> Product:
        self.touched.add(Collection.PRODUCTS.value)
        return await product_store.insert_product(self._conn, product)

    async def save_product(self, product: Product) -> Product:
        self.touched.add(Collection.PRODUCTS.value)
        if not await product_store.update_product(self._conn, product):
            raise DatabaseError("save_product", f"no product row {product.id}")
        return product

    async def delete_product(self, product_id: str) -> bool:
        self.touched.add(Collection.PRODUCTS.value)
        return await product_store.delete_product(self._conn, product_id)

    async def adjust_stock(self, product_id: str, delta: int) -> int | None:
        self.touched.add(Collection.PRODUCTS.value)
        return await product_store.add_to_stock(self._conn, product_id, delta)

    # Counters
    async def next_sequence(self, name: str) -> int:
        await self._conn.execute(
            """
            INSERT INTO counters (name, value) VALUES (?, 1)
            ON CONFLICT(name) DO UPDATE SET value = value + 1
            """,
            (name,),
        )
        cursor = await self._conn.execute(
            "SELECT value FROM counters WHERE name = ?", (name,)
        )
        row = await cursor.fetchone()
        return row["value"]

    # Invoices
    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        return await invoice_store.fetch_invoice(self._conn, invoice_id)

    async def insert_invoice(self, invoice: Invoice) -> Invoice:
        self.touched.add(Collection.INVOICES.value)
        return await invoice_store.insert_invoice(self._conn, invoice)

    async def replace_invoice(self, invoice: Invoice) -> Invoice:
        self.touched.add(Collection.INVOICES.value)
        if not await invoice_store.replace_invoice(self._conn, invoice):
            raise InvoiceNotFoundError(invoice.id)
        return invoice

    async def delete_invoice(self, invoice_id: int) -> bool:
        self.touched.add(Collection.INVOICES.value)
        return await invoice_store.delete_invoice(self._conn, invoice_id)

    # Purchases
    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        return await purchase_store.fetch_purchase(self._conn, purchase_id)

    async def insert_purchase(self, purchase: Purchase) -> Purchase:
        self.touched.add(Collection.PURCHASES.value)
        return await purchase_store.insert_purchase(self._conn, purchase)

    async def replace_purchase(self, purchase: Purchase) -> Purchase:
        self.touched.add(Collection.PURCHASES.value)
        if not await purchase_store.replace_purchase(self._conn, purchase):
            raise PurchaseNotFoundError(purchase.id)
        return purchase

    async def delete_purchase(self, purchase_id: int) -> bool:
        self.touched.add(Collection.PURCHASES.value)
        return await purchase_store.delete_purchase(self._conn, purchase_id)

    # Directory
    async def get_party(self, kind: PartyKind, key: str) -> Party | None:
        return await party_store.fetch_party(self._conn, kind, key)

    async def save_party(self, kind: PartyKind, party: Party) -> Party:
        self.touched.add(_PARTY_COLLECTIONS[kind].value)
        return await party_store.upsert_party(self._conn, kind, party)

    async def delete_party(self, kind: PartyKind, key: str) -> bool:
        self.touched.add(_PARTY_COLLECTIONS[kind].value)
        return await party_store.delete_party(self._conn, kind, key)


class SQLiteLedgerUnitOfWork(ILedgerUnitOfWork):
    """Opens ledger sessions on the connection pool and announces commits."""

    def __init__(
        self,
        pool: ConnectionPool | None = None,
        change_feed: IChangeFeed | None = None,
    ) -> None:
        self._pool = pool
        self._change_feed = change_feed
        # Strong references so pending publishes are not garbage collected
        self._publishing: set[asyncio.Task] = set()

    async def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            self._pool = await get_pool()
        return self._pool

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SQLiteLedgerSession]:
        pool = await self._get_pool()
        async with pool.transaction() as conn:
            session = SQLiteLedgerSession(conn)
            yield session

        # Only reached after COMMIT succeeded
        if session.touched and self._change_feed is not None:
            self._announce(sorted(session.touched))

    def _announce(self, collections: list[Collection]) -> None:
        """Publish on a detached task so a slow subscriber never holds up the writer."""
        task = asyncio.get_running_loop().create_task(
            self._change_feed.publish(collections), name="ledger-publish"
        )
        self._publishing.add(task)
        task.add_done_callback(self._publishing.discard)

    async def drain(self) -> None:
        if self._publishing:
            await asyncio.gather(*list(self._publishing), return_exceptions=True)
