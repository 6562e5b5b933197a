"""
In-process change feed.

Subscribers receive the full committed snapshot of a collection when they
subscribe and again after every commit that touched it. Snapshots are
loaded through the read stores, so they only ever contain committed rows.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from invoiceflow.config import get_logger
from invoiceflow.core.entities.party import PartyKind
from invoiceflow.core.interfaces.change_feed import Collection, IChangeFeed, SnapshotCallback
from invoiceflow.core.interfaces.stores import (
    IInvoiceStore,
    IPartyStore,
    IProductStore,
    IPurchaseStore,
)

logger = get_logger(__name__)

SnapshotLoader = Callable[[], Awaitable[list[Any]]]


class InProcessChangeFeed(IChangeFeed):
    """Fan-out of committed snapshots to in-process subscribers."""

    def __init__(self, loaders: dict[Collection, SnapshotLoader]) -> None:
        self._loaders = loaders
        self._subscribers: dict[Collection, list[SnapshotCallback]] = {
            collection: [] for collection in Collection
        }
        self._lock = asyncio.Lock()

    @classmethod
    def from_stores(
        cls,
        products: IProductStore,
        invoices: IInvoiceStore,
        purchases: IPurchaseStore,
        parties: IPartyStore,
    ) -> "InProcessChangeFeed":
        return cls(
            {
                Collection.PRODUCTS: products.list_products,
                Collection.INVOICES: invoices.list_invoices,
                Collection.PURCHASES: purchases.list_purchases,
                Collection.CUSTOMERS: lambda: parties.list_parties(PartyKind.CUSTOMER),
                Collection.SUPPLIERS: lambda: parties.list_parties(PartyKind.SUPPLIER),
            }
        )

    def subscriber_count(self, collection: Collection) -> int:
        return len(self._subscribers[collection])

    async def subscribe(
        self, collection: Collection, callback: SnapshotCallback
    ) -> Callable[[], None]:
        collection = Collection(collection)
        self._subscribers[collection].append(callback)
        logger.debug("feed_subscribed", collection=collection.value)

        snapshot = await self._load(collection)
        if snapshot is not None:
            await self._deliver(collection, callback, snapshot)

        def unsubscribe() -> None:
            if callback in self._subscribers[collection]:
                self._subscribers[collection].remove(callback)
                logger.debug("feed_unsubscribed", collection=collection.value)

        return unsubscribe

    async def publish(self, collections: Iterable[Collection | str]) -> None:
        # Serialised so subscribers see snapshots in commit order
        async with self._lock:
            for name in collections:
                collection = Collection(name)
                subscribers = list(self._subscribers[collection])
                if not subscribers:
                    continue
                snapshot = await self._load(collection)
                if snapshot is None:
                    continue
                for callback in subscribers:
                    await self._deliver(collection, callback, snapshot)

    async def _load(self, collection: Collection) -> list[Any] | None:
        try:
            return await self._loaders[collection]()
        except Exception as e:
            logger.error(
                "feed_snapshot_failed", collection=collection.value, error=str(e)
            )
            return None

    @staticmethod
    async def _deliver(
        collection: Collection, callback: SnapshotCallback, snapshot: list[Any]
    ) -> None:
        try:
            result = callback(list(snapshot))
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "feed_subscriber_failed", collection=collection.value, error=str(e)
            )
