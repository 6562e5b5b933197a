"""Live subscription infrastructure."""

from invoiceflow.infrastructure.notifications.change_feed import InProcessChangeFeed

__all__ = ["InProcessChangeFeed"]
