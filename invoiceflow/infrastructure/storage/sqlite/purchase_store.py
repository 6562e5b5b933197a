"""SQLite persistence for purchases."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from invoiceflow.core.entities.purchase import Purchase, PurchaseItem
from invoiceflow.core.interfaces.stores import IPurchaseStore
from invoiceflow.infrastructure.storage.sqlite.connection import get_snapshot


def row_to_purchase_item(row: aiosqlite.Row) -> PurchaseItem:
    return PurchaseItem(
        product_id=row["product_id"],
        name=row["name"],
        category=row["category"],
        unit=row["unit"],
        gst=Decimal(row["gst"]),
        rate_incl=Decimal(row["rate_incl"]),
        quantity=row["quantity"],
    )


def row_to_purchase(row: aiosqlite.Row, items: list[PurchaseItem]) -> Purchase:
    return Purchase(
        id=row["id"],
        purchase_no=row["purchase_no"],
        purchase_date=date.fromisoformat(row["purchase_date"]),
        supplier_name=row["supplier_name"],
        supplier_phone=row["supplier_phone"],
        supplier_address=row["supplier_address"],
        reference_no=row["reference_no"],
        items=items,
        total_amount=Decimal(row["total_amount"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


async def _fetch_items(
    conn: aiosqlite.Connection, purchase_id: int
) -> list[PurchaseItem]:
    cursor = await conn.execute(
        "SELECT * FROM purchase_items WHERE purchase_id = ? ORDER BY position",
        (purchase_id,),
    )
    return [row_to_purchase_item(r) for r in await cursor.fetchall()]


async def _insert_items(
    conn: aiosqlite.Connection, purchase_id: int, items: list[PurchaseItem]
) -> None:
    await conn.executemany(
        """
        INSERT INTO purchase_items (
            purchase_id, position, product_id, name, category, unit,
            gst, rate_incl, quantity
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                purchase_id,
                position,
                item.product_id,
                item.name,
                item.category,
                item.unit,
                str(item.gst),
                str(item.rate_incl),
                item.quantity,
            )
            for position, item in enumerate(items)
        ],
    )


def _header_params(purchase: Purchase) -> tuple:
    return (
        purchase.purchase_no,
        purchase.purchase_date.isoformat(),
        purchase.supplier_name,
        purchase.supplier_phone,
        purchase.supplier_address,
        purchase.reference_no,
        str(purchase.total_amount),
        purchase.created_at.isoformat(),
        purchase.updated_at.isoformat(),
    )


async def fetch_purchase(
    conn: aiosqlite.Connection, purchase_id: int
) -> Purchase | None:
    cursor = await conn.execute("SELECT * FROM purchases WHERE id = ?", (purchase_id,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return row_to_purchase(row, await _fetch_items(conn, purchase_id))


async def fetch_purchases(
    conn: aiosqlite.Connection,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Purchase]:
    clauses, params = [], []
    if date_from is not None:
        clauses.append("purchase_date >= ?")
        params.append(date_from.isoformat())
    if date_to is not None:
        clauses.append("purchase_date <= ?")
        params.append(date_to.isoformat())
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    cursor = await conn.execute(
        f"SELECT * FROM purchases {where} ORDER BY purchase_date DESC, id DESC",
        params,
    )
    rows = await cursor.fetchall()
    return [row_to_purchase(row, await _fetch_items(conn, row["id"])) for row in rows]


async def insert_purchase(conn: aiosqlite.Connection, purchase: Purchase) -> Purchase:
    cursor = await conn.execute(
        """
        INSERT INTO purchases (
            purchase_no, purchase_date, supplier_name, supplier_phone,
            supplier_address, reference_no, total_amount, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        _header_params(purchase),
    )
    purchase.id = cursor.lastrowid
    await _insert_items(conn, purchase.id, purchase.items)
    return purchase


async def replace_purchase(conn: aiosqlite.Connection, purchase: Purchase) -> bool:
    cursor = await conn.execute(
        """
        UPDATE purchases SET
            purchase_no = ?, purchase_date = ?, supplier_name = ?,
            supplier_phone = ?, supplier_address = ?, reference_no = ?,
            total_amount = ?, created_at = ?, updated_at = ?
        WHERE id = ?
        """,
        (*_header_params(purchase), purchase.id),
    )
    if cursor.rowcount == 0:
        return False
    await conn.execute("DELETE FROM purchase_items WHERE purchase_id = ?", (purchase.id,))
    await _insert_items(conn, purchase.id, purchase.items)
    return True


async def delete_purchase(conn: aiosqlite.Connection, purchase_id: int) -> bool:
    await conn.execute("DELETE FROM purchase_items WHERE purchase_id = ?", (purchase_id,))
    cursor = await conn.execute("DELETE FROM purchases WHERE id = ?", (purchase_id,))
    return cursor.rowcount > 0


class SQLitePurchaseStore(IPurchaseStore):
    """Committed-state purchase queries."""

    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        async with get_snapshot() as conn:
            return await fetch_purchase(conn, purchase_id)

    async def list_purchases(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> list[Purchase]:
        async with get_snapshot() as conn:
            return await fetch_purchases(conn, date_from, date_to)
