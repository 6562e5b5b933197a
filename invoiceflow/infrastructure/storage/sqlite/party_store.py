"""SQLite persistence for the customer and supplier directories."""

from datetime import datetime

import aiosqlite

from invoiceflow.core.entities.party import Customer, Party, PartyKind, Supplier
from invoiceflow.core.interfaces.stores import IPartyStore
from invoiceflow.infrastructure.storage.sqlite.connection import get_connection

# Table names are fixed per kind, never taken from input
_TABLES = {
    PartyKind.CUSTOMER: ("customers", Customer),
    PartyKind.SUPPLIER: ("suppliers", Supplier),
}


def row_to_party(kind: PartyKind, row: aiosqlite.Row) -> Party:
    _, model = _TABLES[kind]
    return model(
        key=row["key"],
        name=row["name"],
        phone=row["phone"],
        address=row["address"],
        last_visit=datetime.fromisoformat(row["last_visit"]) if row["last_visit"] else None,
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


async def fetch_party(
    conn: aiosqlite.Connection, kind: PartyKind, key: str
) -> Party | None:
    table, _ = _TABLES[kind]
    cursor = await conn.execute(f"SELECT * FROM {table} WHERE key = ?", (key,))
    row = await cursor.fetchone()
    return row_to_party(kind, row) if row else None


async def fetch_parties(conn: aiosqlite.Connection, kind: PartyKind) -> list[Party]:
    table, _ = _TABLES[kind]
    cursor = await conn.execute(f"SELECT * FROM {table} ORDER BY name COLLATE NOCASE")
    return [row_to_party(kind, r) for r in await cursor.fetchall()]


async def upsert_party(conn: aiosqlite.Connection, kind: PartyKind, party: Party) -> Party:
    table, _ = _TABLES[kind]
    await conn.execute(
        f"""
        INSERT INTO {table} (key, name, phone, address, last_visit, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET
            name = excluded.name,
            phone = excluded.phone,
            address = excluded.address,
            last_visit = excluded.last_visit,
            updated_at = excluded.updated_at
        """,
        (
            party.key,
            party.name,
            party.phone,
            party.address,
            party.last_visit.isoformat() if party.last_visit else None,
            party.created_at.isoformat(),
            party.updated_at.isoformat(),
        ),
    )
    return party


async def delete_party(conn: aiosqlite.Connection, kind: PartyKind, key: str) -> bool:
    table, _ = _TABLES[kind]
    cursor = await conn.execute(f"DELETE FROM {table} WHERE key = ?", (key,))
    return cursor.rowcount > 0


class SQLitePartyStore(IPartyStore):
    """Committed-state directory queries."""

    async def get_party(self, kind: PartyKind, key: str) -> Party | None:
        async with get_connection() as conn:
            return await fetch_party(conn, kind, key)

    async def list_parties(self, kind: PartyKind) -> list[Party]:
        async with get_connection() as conn:
            return await fetch_parties(conn, kind)
