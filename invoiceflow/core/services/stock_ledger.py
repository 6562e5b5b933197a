"""
Stock ledger engine.

The only code that changes ``Product.stock`` in response to documents.
It works through a caller-owned ledger session, so the stock changes for
a document commit or roll back together with the document itself.

Invoice lines take stock out, purchase lines put it back in. An edit is
reconciled as the net per-product difference between the old and new
lines; a delete reverses the document's full effect. Stock is allowed to
go negative.
"""

from collections.abc import Iterable, Mapping

from invoiceflow.config import get_logger
from invoiceflow.core.entities.invoice import SaleItem
from invoiceflow.core.entities.purchase import PurchaseItem
from invoiceflow.core.exceptions import ProductNotFoundError
from invoiceflow.core.interfaces.ledger import ILedgerSession

logger = get_logger(__name__)

StockDeltas = dict[str, int]


def sale_deltas(items: Iterable[SaleItem]) -> StockDeltas:
    """Signed stock change an invoice's lines cause, per product."""
    deltas: StockDeltas = {}
    for item in items:
        deltas[item.product_id] = deltas.get(item.product_id, 0) - item.quantity
    return deltas


def purchase_deltas(items: Iterable[PurchaseItem]) -> StockDeltas:
    """Signed stock change a purchase's lines cause, per product.

    Lines still waiting for their product to be created are skipped.
    """
    deltas: StockDeltas = {}
    for item in items:
        if item.product_id is None:
            continue
        deltas[item.product_id] = deltas.get(item.product_id, 0) + item.quantity
    return deltas


def net_change(old: Mapping[str, int], new: Mapping[str, int]) -> StockDeltas:
    """Undo ``old`` and apply ``new`` as one delta per product, zeros dropped."""
    net: StockDeltas = {}
    for product_id in list(old) + [p for p in new if p not in old]:
        delta = new.get(product_id, 0) - old.get(product_id, 0)
        if delta:
            net[product_id] = delta
    return net


class StockLedger:
    """Applies stock deltas through one ledger session."""

    def __init__(self, session: ILedgerSession) -> None:
        self._session = session

    async def apply(
        self,
        deltas: Mapping[str, int],
        reference: str | None = None,
        required: Iterable[str] | None = None,
    ) -> dict[str, int]:
        """
        Apply deltas and return the resulting stock per product.

        Args:
            deltas: Signed change per product id.
            reference: Document number, for the log.
            required: Product ids that must exist. Defaults to all of them.
                A missing required product aborts the caller's transaction;
                any other missing product is logged and skipped.

        Raises:
            ProductNotFoundError: If a required product does not exist.
        """
        required_ids = set(deltas) if required is None else set(required)
        result: dict[str, int] = {}

        for product_id, delta in deltas.items():
            if delta == 0:
                continue

            stock = await self._session.adjust_stock(product_id, delta)
            if stock is None:
                if product_id in required_ids:
                    raise ProductNotFoundError(product_id)
                # The product was deleted after the document was saved.
                logger.warning(
                    "orphan_stock_reversal_skipped",
                    product_id=product_id,
                    delta=delta,
                    reference=reference,
                )
                continue

            logger.debug(
                "stock_adjusted",
                product_id=product_id,
                delta=delta,
                stock=stock,
                reference=reference,
            )
            if stock < 0:
                logger.warning(
                    "stock_went_negative",
                    product_id=product_id,
                    stock=stock,
                    reference=reference,
                )
            result[product_id] = stock

        return result

    async def reverse(
        self, deltas: Mapping[str, int], reference: str | None = None
    ) -> dict[str, int]:
        """Undo a document's effect. Products deleted since are skipped."""
        return await self.apply(
            {product_id: -delta for product_id, delta in deltas.items()},
            reference=reference,
            required=(),
        )

    async def reconcile(
        self,
        old: Mapping[str, int],
        new: Mapping[str, int],
        reference: str | None = None,
    ) -> dict[str, int]:
        """
        Move stock from a document's old lines to its new lines.

        Identical old and new lines produce no writes at all. Products that
        appear in the new lines must exist; products only in the old lines
        may have been deleted and are skipped.
        """
        return await self.apply(
            net_change(old, new), reference=reference, required=set(new)
        )
