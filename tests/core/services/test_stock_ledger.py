"""Tests for stock delta computation and application."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from invoiceflow.core.entities import PurchaseItem, SaleItem
from invoiceflow.core.exceptions import ProductNotFoundError
from invoiceflow.core.services.stock_ledger import (
    StockLedger,
    net_change,
    purchase_deltas,
    sale_deltas,
)


def _sale(product_id: str, quantity: int) -> SaleItem:
    return SaleItem(product_id=product_id, price=Decimal("10"), quantity=quantity)


class TestDeltas:
    def test_sale_deltas_group_repeated_products(self):
        deltas = sale_deltas([_sale("a", 2), _sale("b", 1), _sale("a", 3)])
        assert deltas == {"a": -5, "b": -1}

    def test_purchase_deltas_skip_unresolved_lines(self):
        items = [
            PurchaseItem(product_id="a", name="A", rate_incl=Decimal("1"), quantity=4),
            PurchaseItem(name="New", rate_incl=Decimal("1"), quantity=9),
        ]
        assert purchase_deltas(items) == {"a": 4}

    def test_net_change_drops_zeros(self):
        assert net_change({"a": -2, "b": -1}, {"a": -2, "c": -4}) == {"b": 1, "c": -4}

    def test_identical_lines_net_to_nothing(self):
        assert net_change({"a": -3}, {"a": -3}) == {}


class TestStockLedger:
    @pytest.fixture
    def session(self):
        session = AsyncMock()
        session.adjust_stock.side_effect = lambda product_id, delta: 10 + delta
        return session

    async def test_apply_returns_new_stock(self, session):
        result = await StockLedger(session).apply({"a": -3, "b": 5}, reference="INV-0001")

        assert result == {"a": 7, "b": 15}
        assert session.adjust_stock.await_count == 2

    async def test_apply_skips_zero_delta(self, session):
        await StockLedger(session).apply({"a": 0})
        session.adjust_stock.assert_not_awaited()

    async def test_missing_required_product_raises(self, session):
        session.adjust_stock.side_effect = None
        session.adjust_stock.return_value = None

        with pytest.raises(ProductNotFoundError):
            await StockLedger(session).apply({"ghost": -1})

    async def test_reverse_skips_deleted_products(self):
        session = AsyncMock()
        session.adjust_stock.side_effect = lambda product_id, delta: (
            None if product_id == "gone" else 20 + delta
        )

        result = await StockLedger(session).reverse({"gone": -2, "a": -1})

        assert result == {"a": 21}

    async def test_negative_stock_is_allowed(self):
        session = AsyncMock()
        session.adjust_stock.return_value = -4

        result = await StockLedger(session).apply({"a": -10})
        assert result == {"a": -4}

    async def test_reconcile_requires_new_products_only(self):
        session = AsyncMock()
        session.adjust_stock.side_effect = lambda product_id, delta: (
            None if product_id == "old" else 5
        )

        # "old" only appears in the previous lines and was deleted since
        result = await StockLedger(session).reconcile({"old": -2}, {"new": -1})
        assert result == {"new": 5}

        session.adjust_stock.side_effect = lambda product_id, delta: None
        with pytest.raises(ProductNotFoundError):
            await StockLedger(session).reconcile({}, {"missing": -1})

    async def test_reconcile_identical_lines_writes_nothing(self, session):
        await StockLedger(session).reconcile({"a": -2}, {"a": -2})
        session.adjust_stock.assert_not_awaited()
