"""SQLite persistence for sales invoices."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from invoiceflow.core.entities.invoice import Invoice, PaymentMode, SaleItem
from invoiceflow.core.interfaces.stores import IInvoiceStore
from invoiceflow.infrastructure.storage.sqlite.connection import get_snapshot


def _decimal_or_none(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


def row_to_sale_item(row: aiosqlite.Row) -> SaleItem:
    return SaleItem(
        product_id=row["product_id"],
        name=row["name"],
        unit=row["unit"],
        gst=_decimal_or_none(row["gst"]),
        cost_price=_decimal_or_none(row["cost_price"]),
        price=Decimal(row["price"]),
        quantity=row["quantity"],
    )


def row_to_invoice(row: aiosqlite.Row, items: list[SaleItem]) -> Invoice:
    return Invoice(
        id=row["id"],
        invoice_no=row["invoice_no"],
        invoice_date=date.fromisoformat(row["invoice_date"]),
        customer_name=row["customer_name"],
        customer_phone=row["customer_phone"],
        customer_address=row["customer_address"],
        items=items,
        discount=Decimal(row["discount"]),
        payment_mode=PaymentMode(row["payment_mode"] or PaymentMode.CASH.value),
        total_amount=Decimal(row["total_amount"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


async def _fetch_items(conn: aiosqlite.Connection, invoice_id: int) -> list[SaleItem]:
    cursor = await conn.execute(
        "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY position",
        (invoice_id,),
    )
    return [row_to_sale_item(r) for r in await cursor.fetchall()]


async def _insert_items(
    conn: aiosqlite.Connection, invoice_id: int, items: list[SaleItem]
) -> None:
    await conn.executemany(
        """
        INSERT INTO invoice_items (
            invoice_id, position, product_id, name, unit, gst,
            cost_price, price, quantity
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                invoice_id,
                position,
                item.product_id,
                item.name,
                item.unit,
                str(item.gst) if item.gst is not None else None,
                str(item.cost_price) if item.cost_price is not None else None,
                str(item.price),
                item.quantity,
            )
            for position, item in enumerate(items)
        ],
    )


def _header_params(invoice: Invoice) -> tuple:
    return (
        invoice.invoice_no,
        invoice.invoice_date.isoformat(),
        invoice.customer_name,
        invoice.customer_phone,
        invoice.customer_address,
        str(invoice.discount),
        invoice.payment_mode.value,
        str(invoice.total_amount),
        invoice.created_at.isoformat(),
        invoice.updated_at.isoformat(),
    )


async def fetch_invoice(conn: aiosqlite.Connection, invoice_id: int) -> Invoice | None:
    cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return row_to_invoice(row, await _fetch_items(conn, invoice_id))


async def fetch_invoices(
    conn: aiosqlite.Connection,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Invoice]:
    clauses, params = [], []
    if date_from is not None:
        clauses.append("invoice_date >= ?")
        params.append(date_from.isoformat())
    if date_to is not None:
        clauses.append("invoice_date <= ?")
        params.append(date_to.isoformat())
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    cursor = await conn.execute(
        f"SELECT * FROM invoices {where} ORDER BY invoice_date DESC, id DESC",
        params,
    )
    rows = await cursor.fetchall()
    return [row_to_invoice(row, await _fetch_items(conn, row["id"])) for row in rows]


async def insert_invoice(conn: aiosqlite.Connection, invoice: Invoice) -> Invoice:
    cursor = await conn.execute(
        """
        INSERT INTO invoices (
            invoice_no, invoice_date, customer_name, customer_phone,
            customer_address, discount, payment_mode, total_amount,
            created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        _header_params(invoice),
    )
    invoice.id = cursor.lastrowid
    await _insert_items(conn, invoice.id, invoice.items)
    return invoice


async def replace_invoice(conn: aiosqlite.Connection, invoice: Invoice) -> bool:
    cursor = await conn.execute(
        """
        UPDATE invoices SET
            invoice_no = ?, invoice_date = ?, customer_name = ?,
            customer_phone = ?, customer_address = ?, discount = ?,
            payment_mode = ?, total_amount = ?, created_at = ?, updated_at = ?
        WHERE id = ?
        """,
        (*_header_params(invoice), invoice.id),
    )
    if cursor.rowcount == 0:
        return False
    await conn.execute("DELETE FROM invoice_items WHERE invoice_id = ?", (invoice.id,))
    await _insert_items(conn, invoice.id, invoice.items)
    return True


async def delete_invoice(conn: aiosqlite.Connection, invoice_id: int) -> bool:
    await conn.execute("DELETE FROM invoice_items WHERE invoice_id = ?", (invoice_id,))
    cursor = await conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
    return cursor.rowcount > 0


class SQLiteInvoiceStore(IInvoiceStore):
    """Committed-state invoice queries."""

    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        async with get_snapshot() as conn:
            return await fetch_invoice(conn, invoice_id)

    async def list_invoices(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> list[Invoice]:
        async with get_snapshot() as conn:
            return await fetch_invoices(conn, date_from, date_to)
