"""SQLite persistence for products."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from invoiceflow.core.entities.product import Product
from invoiceflow.core.interfaces.stores import IProductStore
from invoiceflow.infrastructure.storage.sqlite.connection import get_connection

_COLUMNS = (
    "id, name, category, unit, gst, stock, purchase_price, min_stock, "
    "expiry_date, created_at, updated_at"
)


def row_to_product(row: aiosqlite.Row) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        category=row["category"],
        unit=row["unit"],
        gst=Decimal(row["gst"]),
        stock=row["stock"],
        purchase_price=Decimal(row["purchase_price"]),
        min_stock=row["min_stock"],
        expiry_date=date.fromisoformat(row["expiry_date"]) if row["expiry_date"] else None,
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _params(product: Product) -> tuple:
    return (
        product.name,
        product.category,
        product.unit,
        str(product.gst),
        product.stock,
        str(product.purchase_price),
        product.min_stock,
        product.expiry_date.isoformat() if product.expiry_date else None,
        product.created_at.isoformat(),
        product.updated_at.isoformat(),
        product.id,
    )


async def fetch_product(conn: aiosqlite.Connection, product_id: str) -> Product | None:
    cursor = await conn.execute(
        f"SELECT {_COLUMNS} FROM products WHERE id = ?", (product_id,)
    )
    row = await cursor.fetchone()
    return row_to_product(row) if row else None


async def fetch_products(conn: aiosqlite.Connection) -> list[Product]:
    cursor = await conn.execute(
        f"SELECT {_COLUMNS} FROM products ORDER BY name COLLATE NOCASE, id"
    )
    return [row_to_product(r) for r in await cursor.fetchall()]


async def insert_product(conn: aiosqlite.Connection, product: Product) -> Product:
    await conn.execute(
        """
        INSERT INTO products (
            name, category, unit, gst, stock, purchase_price, min_stock,
            expiry_date, created_at, updated_at, id
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        _params(product),
    )
    return product


async def update_product(conn: aiosqlite.Connection, product: Product) -> bool:
    cursor = await conn.execute(
        """
        UPDATE products SET
            name = ?, category = ?, unit = ?, gst = ?, stock = ?,
            purchase_price = ?, min_stock = ?, expiry_date = ?,
            created_at = ?, updated_at = ?
        WHERE id = ?
        """,
        _params(product),
    )
    return cursor.rowcount > 0


async def delete_product(conn: aiosqlite.Connection, product_id: str) -> bool:
    cursor = await conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
    return cursor.rowcount > 0


async def add_to_stock(
    conn: aiosqlite.Connection, product_id: str, delta: int
) -> int | None:
    """Atomically add ``delta`` to a product's stock and return the new value."""
    cursor = await conn.execute(
        "UPDATE products SET stock = stock + ?, updated_at = ? WHERE id = ?",
        (delta, datetime.now().isoformat(), product_id),
    )
    if cursor.rowcount == 0:
        return None
    cursor = await conn.execute("SELECT stock FROM products WHERE id = ?", (product_id,))
    row = await cursor.fetchone()
    return row["stock"]


class SQLiteProductStore(IProductStore):
    """Committed-state product queries."""

    async def get_product(self, product_id: str) -> Product | None:
        async with get_connection() as conn:
            return await fetch_product(conn, product_id)

    async def list_products(self) -> list[Product]:
        async with get_connection() as conn:
            return await fetch_products(conn)

    async def list_low_stock(self) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {_COLUMNS} FROM products
                WHERE stock <= min_stock
                ORDER BY stock - min_stock, name COLLATE NOCASE
                """
            )
            return [row_to_product(r) for r in await cursor.fetchall()]
