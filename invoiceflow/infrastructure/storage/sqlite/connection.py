"""
Async SQLite connection pool with aiosqlite.

Connections run in autocommit mode; ``transaction()`` opens an explicit
``BEGIN IMMEDIATE`` so the write lock is taken up front. Two writers never
interleave a read-modify-write of the same row, and a writer that cannot
get the lock within the busy timeout fails before touching anything.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from invoiceflow.config import get_logger, get_settings
from invoiceflow.core.exceptions import DatabaseError, TransactionConflictError

logger = get_logger(__name__)


def _is_lock_error(error: aiosqlite.OperationalError) -> bool:
    message = str(error).lower()
    return "locked" in message or "busy" in message


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open all pooled connections."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        # isolation_level=None: transactions are opened explicitly
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection inside a ``BEGIN IMMEDIATE`` transaction.

        Commits on success. Any exception, cancellation included, rolls
        back and is re-raised.

        Raises:
            TransactionConflictError: The write lock was not granted within
                the busy timeout.
        """
        async with self.acquire() as conn:
            try:
                await conn.execute("BEGIN IMMEDIATE")
            except aiosqlite.OperationalError as e:
                if _is_lock_error(e):
                    raise TransactionConflictError("begin", str(e)) from e
                raise DatabaseError("begin", str(e)) from e

            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise

            try:
                await conn.execute("COMMIT")
            except aiosqlite.OperationalError as e:
                await conn.execute("ROLLBACK")
                if _is_lock_error(e):
                    raise TransactionConflictError("commit", str(e)) from e
                raise DatabaseError("commit", str(e)) from e

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection inside a read transaction.

        Every query in the block sees the same committed state, so a
        document and its lines are never read across someone else's commit.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN")
            try:
                yield conn
            finally:
                await conn.execute("COMMIT")

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed")


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Get a connection from the global pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_snapshot() -> AsyncIterator[aiosqlite.Connection]:
    """Get a connection from the global pool inside a read transaction."""
    pool = await get_pool()
    async with pool.snapshot() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Get a connection from the global pool inside a write transaction."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
