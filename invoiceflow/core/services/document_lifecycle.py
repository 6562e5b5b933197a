"""
Document lifecycle manager.

Creates, edits and deletes invoices and purchases. Each operation runs
in one ledger session: the document write, every stock delta, the
invoice counter and the party directory refresh commit together or not at
all. Backup replication is dispatched only after a successful commit and
never holds up or fails the operation.
"""

import time
from datetime import datetime
from decimal import Decimal

from invoiceflow.config import get_logger, get_settings
from invoiceflow.config.settings import LedgerSettings
from invoiceflow.core.entities.backup import BackupEventType, BackupRecord
from invoiceflow.core.entities.invoice import Invoice, SaleItem
from invoiceflow.core.entities.product import Product
from invoiceflow.core.entities.purchase import Purchase, PurchaseItem
from invoiceflow.core.exceptions import (
    InvoiceNotFoundError,
    ProductNotFoundError,
    PurchaseNotFoundError,
    ValidationError,
)
from invoiceflow.core.interfaces.backup import IBackupDispatcher
from invoiceflow.core.interfaces.ledger import ILedgerSession, ILedgerUnitOfWork
from invoiceflow.core.services.directory import DirectoryResolver
from invoiceflow.core.services.pricing import invoice_totals
from invoiceflow.core.services.stock_ledger import (
    StockLedger,
    purchase_deltas,
    sale_deltas,
)

logger = get_logger(__name__)

INVOICE_SEQUENCE = "invoice"


class DocumentLifecycleManager:
    """Transactional create/update/delete for invoices and purchases."""

    def __init__(
        self,
        unit_of_work: ILedgerUnitOfWork,
        dispatcher: IBackupDispatcher | None = None,
        ledger_settings: LedgerSettings | None = None,
        currency: str | None = None,
    ) -> None:
        settings = get_settings()
        self._uow = unit_of_work
        self._dispatcher = dispatcher
        self._ledger = ledger_settings or settings.ledger
        self._currency = currency or settings.shop.currency

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """
        Save a new invoice and take its items out of stock.

        The invoice number comes from a counter incremented inside the same
        transaction, so concurrent creations get distinct, gapless numbers.

        Raises:
            ValidationError: Missing customer name or no items.
            ProductNotFoundError: A line references an unknown product.
        """
        self._validate_invoice(invoice)
        now = datetime.now()

        async with self._uow.session() as session:
            draft = invoice.model_copy(deep=True)
            await self._fill_sale_snapshots(session, draft.items)

            number = await session.next_sequence(INVOICE_SEQUENCE)
            draft.id = None
            draft.invoice_no = self.format_invoice_no(number)
            draft.total_amount = invoice_totals(draft).final_total
            draft.created_at = now
            draft.updated_at = now

            await StockLedger(session).apply(
                sale_deltas(draft.items), reference=draft.invoice_no
            )
            saved = await session.insert_invoice(draft)
            await DirectoryResolver(session).record_customer(saved)

        logger.info(
            "invoice_created",
            invoice_id=saved.id,
            invoice_no=saved.invoice_no,
            items=len(saved.items),
            total=str(saved.total_amount),
        )
        self._replicate(
            BackupRecord.for_invoice(saved, BackupEventType.SALE, self._currency)
        )
        return saved

    async def update_invoice(self, invoice_id: int, invoice: Invoice) -> Invoice:
        """
        Replace an invoice's body and move stock from its old lines to its new ones.

        The invoice number and creation time are kept. When the caller did
        not set ``invoice_date`` the stored date is kept too. Line snapshots
        (name, unit, GST, cost) left unset keep the values stored for the
        same product, so a later product edit never rewrites them.

        Raises:
            ValidationError: Missing customer name or no items.
            InvoiceNotFoundError: The invoice was deleted meanwhile.
            ProductNotFoundError: A new line references an unknown product.
        """
        self._validate_invoice(invoice)

        async with self._uow.session() as session:
            current = await session.get_invoice(invoice_id)
            if current is None:
                raise InvoiceNotFoundError(invoice_id)

            draft = invoice.model_copy(deep=True)
            self._carry_sale_snapshots(current.items, draft.items)
            await self._fill_sale_snapshots(session, draft.items)

            draft.id = current.id
            draft.invoice_no = current.invoice_no
            draft.created_at = current.created_at
            draft.updated_at = datetime.now()
            if "invoice_date" not in invoice.model_fields_set:
                draft.invoice_date = current.invoice_date
            draft.total_amount = invoice_totals(draft).final_total

            await StockLedger(session).reconcile(
                sale_deltas(current.items),
                sale_deltas(draft.items),
                reference=current.invoice_no,
            )
            saved = await session.replace_invoice(draft)
            await DirectoryResolver(session).record_customer(saved)

        logger.info(
            "invoice_updated",
            invoice_id=saved.id,
            invoice_no=saved.invoice_no,
            total=str(saved.total_amount),
        )
        self._replicate(
            BackupRecord.for_invoice(saved, BackupEventType.SALE_UPDATE, self._currency)
        )
        return saved

    async def delete_invoice(self, invoice_id: int) -> Invoice:
        """
        Delete an invoice and return its items to stock.

        Returns the deleted invoice.

        Raises:
            InvoiceNotFoundError: The invoice does not exist.
        """
        async with self._uow.session() as session:
            current = await session.get_invoice(invoice_id)
            if current is None:
                raise InvoiceNotFoundError(invoice_id)

            await StockLedger(session).reverse(
                sale_deltas(current.items), reference=current.invoice_no
            )
            await session.delete_invoice(invoice_id)

        logger.info(
            "invoice_deleted", invoice_id=invoice_id, invoice_no=current.invoice_no
        )
        self._replicate(
            BackupRecord.for_deletion(
                BackupEventType.DELETE_SALE, current.invoice_no or str(invoice_id)
            )
        )
        return current

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    async def create_purchase(self, purchase: Purchase) -> Purchase:
        """
        Save a new purchase and add its items to stock.

        Lines without a product id create their product in the same
        transaction; the new id is written back onto the line so later
        edits and deletes move that product's stock too. Lines for existing
        products refresh the product's purchase price and GST.

        Raises:
            ValidationError: Missing supplier name or no items.
            ProductNotFoundError: A line references an unknown product.
        """
        self._validate_purchase(purchase)
        now = datetime.now()

        async with self._uow.session() as session:
            draft = purchase.model_copy(deep=True)
            draft.id = None
            draft.purchase_no = self.make_purchase_no()
            draft.created_at = now
            draft.updated_at = now

            await self._resolve_purchase_products(session, draft.items)
            draft.total_amount = sum(
                (item.line_total for item in draft.items), Decimal("0")
            )

            await StockLedger(session).apply(
                purchase_deltas(draft.items), reference=draft.purchase_no
            )
            saved = await session.insert_purchase(draft)
            await DirectoryResolver(session).record_supplier(saved)

        logger.info(
            "purchase_created",
            purchase_id=saved.id,
            purchase_no=saved.purchase_no,
            items=len(saved.items),
            total=str(saved.total_amount),
        )
        self._replicate(
            BackupRecord.for_purchase(saved, BackupEventType.PURCHASE, self._currency)
        )
        return saved

    async def update_purchase(self, purchase_id: int, purchase: Purchase) -> Purchase:
        """
        Replace a purchase's body and reconcile stock.

        Raises:
            ValidationError: Missing supplier name or no items.
            PurchaseNotFoundError: The purchase was deleted meanwhile.
            ProductNotFoundError: A new line references an unknown product.
        """
        self._validate_purchase(purchase)

        async with self._uow.session() as session:
            current = await session.get_purchase(purchase_id)
            if current is None:
                raise PurchaseNotFoundError(purchase_id)

            draft = purchase.model_copy(deep=True)
            draft.id = current.id
            draft.purchase_no = current.purchase_no
            draft.created_at = current.created_at
            draft.updated_at = datetime.now()
            if "purchase_date" not in purchase.model_fields_set:
                draft.purchase_date = current.purchase_date

            await self._resolve_purchase_products(session, draft.items)
            draft.total_amount = sum(
                (item.line_total for item in draft.items), Decimal("0")
            )

            await StockLedger(session).reconcile(
                purchase_deltas(current.items),
                purchase_deltas(draft.items),
                reference=current.purchase_no,
            )
            saved = await session.replace_purchase(draft)
            await DirectoryResolver(session).record_supplier(saved)

        logger.info(
            "purchase_updated",
            purchase_id=saved.id,
            purchase_no=saved.purchase_no,
            total=str(saved.total_amount),
        )
        self._replicate(
            BackupRecord.for_purchase(
                saved, BackupEventType.PURCHASE_UPDATE, self._currency
            )
        )
        return saved

    async def delete_purchase(self, purchase_id: int) -> Purchase:
        """
        Delete a purchase and take its items back out of stock.

        Stock may go negative if the goods were already sold.

        Raises:
            PurchaseNotFoundError: The purchase does not exist.
        """
        async with self._uow.session() as session:
            current = await session.get_purchase(purchase_id)
            if current is None:
                raise PurchaseNotFoundError(purchase_id)

            await StockLedger(session).reverse(
                purchase_deltas(current.items), reference=current.purchase_no
            )
            await session.delete_purchase(purchase_id)

        logger.info(
            "purchase_deleted",
            purchase_id=purchase_id,
            purchase_no=current.purchase_no,
        )
        self._replicate(
            BackupRecord.for_deletion(
                BackupEventType.DELETE_PURCHASE, current.purchase_no or str(purchase_id)
            )
        )
        return current

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def format_invoice_no(self, number: int) -> str:
        return f"{self._ledger.invoice_prefix}{number:0{self._ledger.invoice_number_width}d}"

    def make_purchase_no(self) -> str:
        """Time-derived purchase number: prefix plus the last 6 digits of epoch ms."""
        return f"{self._ledger.purchase_prefix}{int(time.time() * 1000) % 1_000_000:06d}"

    @staticmethod
    def _validate_invoice(invoice: Invoice) -> None:
        if not invoice.customer_name or not invoice.customer_name.strip():
            raise ValidationError("customer_name", "customer name is required")
        if not invoice.items:
            raise ValidationError("items", "invoice needs at least one item")
        if invoice.discount > invoice.gross_amount:
            raise ValidationError(
                "discount", "discount exceeds the invoice total", invoice.discount
            )

    @staticmethod
    def _validate_purchase(purchase: Purchase) -> None:
        if not purchase.supplier_name or not purchase.supplier_name.strip():
            raise ValidationError("supplier_name", "supplier name is required")
        if not purchase.items:
            raise ValidationError("items", "purchase needs at least one item")

    @staticmethod
    def _carry_sale_snapshots(
        stored: list[SaleItem], items: list[SaleItem]
    ) -> None:
        """Keep the stored snapshot of a product's line for fields an edit leaves unset."""
        previous: dict[str, SaleItem] = {}
        for item in stored:
            previous.setdefault(item.product_id, item)

        for item in items:
            old = previous.get(item.product_id)
            if old is None:
                continue
            if item.name is None:
                item.name = old.name
            if item.unit is None:
                item.unit = old.unit
            if item.gst is None:
                item.gst = old.gst
            if item.cost_price is None:
                item.cost_price = old.cost_price

    @staticmethod
    async def _fill_sale_snapshots(
        session: ILedgerSession, items: list[SaleItem]
    ) -> None:
        """Copy name/unit/GST/cost from the product onto lines that lack them."""
        cache: dict[str, Product | None] = {}
        for item in items:
            if None not in (item.name, item.unit, item.gst, item.cost_price):
                continue
            if item.product_id not in cache:
                cache[item.product_id] = await session.get_product(item.product_id)
            product = cache[item.product_id]
            if product is None:
                raise ProductNotFoundError(item.product_id)

            if item.name is None:
                item.name = product.name
            if item.unit is None:
                item.unit = product.unit
            if item.gst is None:
                item.gst = product.gst
            if item.cost_price is None:
                item.cost_price = product.purchase_price

    async def _resolve_purchase_products(
        self, session: ILedgerSession, items: list[PurchaseItem]
    ) -> None:
        """
        Create products for new lines and refresh cost/GST for known ones.

        A line without a GST rate takes the product's rate, or the ledger
        default when the line creates the product.
        """
        now = datetime.now()
        for item in items:
            if item.product_id is None:
                if item.gst is None:
                    item.gst = self._ledger.default_gst
                product = await session.insert_product(
                    Product(
                        name=item.name,
                        category=item.category or self._ledger.default_category,
                        unit=item.unit or self._ledger.default_unit,
                        gst=item.gst,
                        purchase_price=item.rate_incl,
                        stock=0,
                        min_stock=self._ledger.default_min_stock,
                        created_at=now,
                        updated_at=now,
                    )
                )
                item.product_id = product.id
                item.category = product.category
                item.unit = product.unit
                logger.info(
                    "product_created_from_purchase",
                    product_id=product.id,
                    name=product.name,
                )
                continue

            product = await session.get_product(item.product_id)
            if product is None:
                raise ProductNotFoundError(item.product_id)
            if item.gst is None:
                item.gst = product.gst
            product.purchase_price = item.rate_incl
            product.gst = item.gst
            product.updated_at = now
            await session.save_product(product)
            if item.unit is None:
                item.unit = product.unit

    def _replicate(self, record: BackupRecord) -> None:
        if self._dispatcher is not None:
            self._dispatcher.dispatch(record)
