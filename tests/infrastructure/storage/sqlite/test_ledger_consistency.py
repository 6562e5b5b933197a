"""Integration tests: documents and stock stay consistent on a real database."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from invoiceflow.core.entities import Invoice, PartyKind, Purchase, PurchaseItem, SaleItem
from invoiceflow.core.exceptions import (
    InvoiceNotFoundError,
    ProductNotFoundError,
    PurchaseNotFoundError,
)


def _sale(product_id: str, quantity: int, price: str = "300") -> SaleItem:
    return SaleItem(product_id=product_id, price=Decimal(price), quantity=quantity)


def _invoice(*items: SaleItem, customer: str = "Ram Lal", phone: str | None = None, **kwargs) -> Invoice:
    return Invoice(customer_name=customer, customer_phone=phone, items=list(items), **kwargs)


async def _stock(product_store, product_id: str) -> int:
    product = await product_store.get_product(product_id)
    return product.stock


class TestInvoiceStock:
    async def test_create_then_delete_restores_stock(self, lifecycle, product_store, urea):
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 4)))
        assert await _stock(product_store, "urea") == 46

        await lifecycle.delete_invoice(saved.id)
        assert await _stock(product_store, "urea") == 50

    async def test_identical_edit_leaves_stock(self, lifecycle, product_store, urea):
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 4)))

        await lifecycle.update_invoice(saved.id, _invoice(_sale("urea", 4)))

        assert await _stock(product_store, "urea") == 46

    async def test_edit_moves_stock_between_products(
        self, lifecycle, product_store, invoice_store, urea, dap
    ):
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 4), _sale("dap", 1)))

        updated = await lifecycle.update_invoice(
            saved.id, _invoice(_sale("urea", 1), _sale("dap", 3))
        )

        assert await _stock(product_store, "urea") == 49
        assert await _stock(product_store, "dap") == 17
        assert updated.invoice_no == saved.invoice_no
        stored = await invoice_store.get_invoice(saved.id)
        assert [(i.product_id, i.quantity) for i in stored.items] == [("urea", 1), ("dap", 3)]

    async def test_cost_snapshot_survives_price_change(
        self, lifecycle, inventory, invoice_store, urea
    ):
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 1)))
        await inventory.update_product("urea", {"purchase_price": Decimal("999")})

        stored = await invoice_store.get_invoice(saved.id)
        assert stored.items[0].cost_price == Decimal("250")
        assert stored.items[0].name == "Urea 45kg"

    async def test_unknown_product_rolls_back_everything(
        self, lifecycle, product_store, invoice_store, party_store, urea
    ):
        # A full snapshot gets the ghost line past snapshot filling, so the
        # failure happens after the counter and the urea stock were touched.
        ghost = SaleItem(
            product_id="ghost",
            name="Ghost",
            unit="Pcs",
            gst=Decimal("0"),
            cost_price=Decimal("0"),
            price=Decimal("10"),
            quantity=1,
        )
        with pytest.raises(ProductNotFoundError):
            await lifecycle.create_invoice(_invoice(_sale("urea", 2), ghost))

        assert await _stock(product_store, "urea") == 50
        assert await invoice_store.list_invoices() == []
        assert await party_store.list_parties(PartyKind.CUSTOMER) == []

        # the counter did not advance
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 1)))
        assert saved.invoice_no == "INV-0001"

    async def test_missing_invoice_changes_nothing(
        self, lifecycle, product_store, dispatcher, urea
    ):
        with pytest.raises(InvoiceNotFoundError):
            await lifecycle.update_invoice(404, _invoice(_sale("urea", 5)))
        with pytest.raises(InvoiceNotFoundError):
            await lifecycle.delete_invoice(404)

        assert await _stock(product_store, "urea") == 50
        assert "SALE_UPDATE" not in dispatcher.types
        assert "DELETE_SALE" not in dispatcher.types

    async def test_deleted_product_is_skipped_on_reversal(
        self, lifecycle, inventory, product_store, urea, dap
    ):
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 2), _sale("dap", 1)))
        await inventory.delete_product("dap")

        await lifecycle.delete_invoice(saved.id)

        assert await _stock(product_store, "urea") == 50
        assert await product_store.get_product("dap") is None

    async def test_date_kept_when_not_supplied(self, lifecycle, invoice_store, urea):
        saved = await lifecycle.create_invoice(
            _invoice(_sale("urea", 1), invoice_date=date(2024, 1, 15))
        )

        await lifecycle.update_invoice(saved.id, _invoice(_sale("urea", 1)))

        stored = await invoice_store.get_invoice(saved.id)
        assert stored.invoice_date == date(2024, 1, 15)


class TestInvoiceNumbering:
    async def test_concurrent_creations_get_distinct_numbers(
        self, lifecycle, product_store, urea
    ):
        results = await asyncio.gather(
            *(lifecycle.create_invoice(_invoice(_sale("urea", 1))) for _ in range(3))
        )

        assert sorted(r.invoice_no for r in results) == ["INV-0001", "INV-0002", "INV-0003"]
        assert await _stock(product_store, "urea") == 47

    async def test_numbers_are_not_reused_after_delete(self, lifecycle, urea):
        first = await lifecycle.create_invoice(_invoice(_sale("urea", 1)))
        await lifecycle.delete_invoice(first.id)

        second = await lifecycle.create_invoice(_invoice(_sale("urea", 1)))

        assert second.invoice_no == "INV-0002"


class TestPurchaseStock:
    async def test_purchase_adds_stock_and_refreshes_cost(self, lifecycle, product_store, urea):
        await lifecycle.create_purchase(
            Purchase(
                supplier_name="Kisan Traders",
                items=[PurchaseItem(product_id="urea", name="Urea 45kg", gst=Decimal("5"),
                                    rate_incl=Decimal("262.50"), quantity=10)],
            )
        )

        product = await product_store.get_product("urea")
        assert product.stock == 60
        assert product.purchase_price == Decimal("262.50")

    async def test_delete_purchase_after_sale_goes_negative(
        self, lifecycle, product_store, inventory
    ):
        purchase = await lifecycle.create_purchase(
            Purchase(
                supplier_name="Kisan Traders",
                items=[PurchaseItem(name="Zinc Sulphate", gst=Decimal("12"),
                                    rate_incl=Decimal("112"), quantity=10)],
            )
        )
        product_id = purchase.items[0].product_id
        assert await _stock(product_store, product_id) == 10

        await lifecycle.create_invoice(_invoice(_sale(product_id, 8, "150")))
        await lifecycle.delete_purchase(purchase.id)

        assert await _stock(product_store, product_id) == -8

    async def test_new_product_created_with_defaults(self, lifecycle, product_store, purchase_store):
        purchase = await lifecycle.create_purchase(
            Purchase(
                supplier_name="Kisan Traders",
                items=[PurchaseItem(name="Potash", rate_incl=Decimal("105"), quantity=4)],
            )
        )

        product = await product_store.get_product(purchase.items[0].product_id)
        assert product.name == "Potash"
        assert product.stock == 4
        assert product.category == "Fertilizer"
        assert product.unit == "Bag"
        assert product.min_stock == 10

        stored = await purchase_store.get_purchase(purchase.id)
        assert stored.items[0].product_id == product.id

    async def test_edit_purchase_reconciles(self, lifecycle, product_store, urea):
        item = PurchaseItem(product_id="urea", name="Urea 45kg", rate_incl=Decimal("250"), quantity=10)
        purchase = await lifecycle.create_purchase(Purchase(supplier_name="K", items=[item]))

        await lifecycle.update_purchase(
            purchase.id,
            Purchase(supplier_name="K", items=[item.model_copy(update={"quantity": 4})]),
        )

        assert await _stock(product_store, "urea") == 54

    async def test_missing_purchase(self, lifecycle, urea):
        with pytest.raises(PurchaseNotFoundError):
            await lifecycle.delete_purchase(12345)


class TestDirectoryRefresh:
    async def test_repeat_customer_is_merged(self, lifecycle, party_store, urea):
        await lifecycle.create_invoice(
            _invoice(_sale("urea", 1), phone="98765", customer_address="Old Road")
        )
        await lifecycle.create_invoice(
            _invoice(_sale("urea", 1), phone="98765", customer_address="New Road")
        )

        customers = await party_store.list_parties(PartyKind.CUSTOMER)

        assert len(customers) == 1
        assert customers[0].key == "98765"
        assert customers[0].address == "New Road"

    async def test_supplier_recorded_from_purchase(self, lifecycle, party_store, urea):
        await lifecycle.create_purchase(
            Purchase(
                supplier_name="Kisan Traders",
                items=[PurchaseItem(product_id="urea", name="Urea", rate_incl=Decimal("1"), quantity=1)],
            )
        )

        suppliers = await party_store.list_parties(PartyKind.SUPPLIER)
        assert [s.key for s in suppliers] == ["kisan_traders"]


class TestBackupDispatch:
    async def test_records_follow_commits(self, lifecycle, dispatcher, urea):
        saved = await lifecycle.create_invoice(_invoice(_sale("urea", 1)))
        await lifecycle.update_invoice(saved.id, _invoice(_sale("urea", 2)))
        await lifecycle.delete_invoice(saved.id)

        assert dispatcher.types[-3:] == ["SALE", "SALE_UPDATE", "DELETE_SALE"]
        assert dispatcher.records[-3].reference_no == "INV-0001"
