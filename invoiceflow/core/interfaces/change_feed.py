"""Abstract interface for live collection subscriptions."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Any


class Collection(str, Enum):
    """Collections a client can subscribe to."""

    PRODUCTS = "products"
    INVOICES = "invoices"
    PURCHASES = "purchases"
    CUSTOMERS = "customers"
    SUPPLIERS = "suppliers"


# Receives the full committed snapshot of one collection
SnapshotCallback = Callable[[list[Any]], Awaitable[None] | None]


class IChangeFeed(ABC):
    """Pushes committed collection snapshots to subscribers."""

    @abstractmethod
    async def subscribe(
        self, collection: Collection, callback: SnapshotCallback
    ) -> Callable[[], None]:
        """Register a callback and deliver the current snapshot to it.

        Returns a function that removes the subscription.
        """
        pass

    @abstractmethod
    async def publish(self, collections: Iterable[Collection | str]) -> None:
        """Deliver fresh snapshots of the given collections after a commit."""
        pass
