"""
aiosqlite connection pool and transaction scopes.

The ledger needs three kinds of scope:

- ``transaction()``: plain deferred transaction, commit or roll back.
- ``write_transaction()``: ``BEGIN IMMEDIATE``. The reserved lock is taken
  before the first read, so a stock check and the insert it guards cannot
  interleave with another writer. A competing writer waits up to
  ``busy_timeout`` and then sees the committed result.
- ``read_snapshot()``: ``BEGIN`` then always roll back. Every query in the
  block reads from the same WAL snapshot.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from inventory_ledger.config import get_logger, get_settings
from inventory_ledger.core.exceptions import DatabaseError

logger = get_logger(__name__)

PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed-size pool of aiosqlite connections to one database file."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._connections)

    async def initialize(self) -> None:
        async with self._open_lock:
            if self.is_open:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._connect()
                self._connections.append(conn)
                self._idle.put_nowait(conn)
            logger.info(
                "connection_pool_opened",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
                busy_timeout_ms=self.busy_timeout,
            )

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        for pragma in PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self, operation: str = "query") -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection; it goes back to the pool when the block exits.

        SQLite failures inside the block surface as ``DatabaseError``.
        """
        if not self.is_open:
            await self.initialize()
        conn = await self._idle.get()
        try:
            yield conn
        except aiosqlite.Error as e:
            logger.error(
                "database_error",
                operation=operation,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise DatabaseError(operation, str(e)) from e
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def _scope(
        self, operation: str, begin: str | None, commit: bool
    ) -> AsyncIterator[aiosqlite.Connection]:
        async with self.acquire(operation) as conn:
            if begin:
                await conn.execute(begin)
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            if commit:
                await conn.commit()
            else:
                await conn.rollback()

    def transaction(self):
        return self._scope("transaction", None, commit=True)

    def write_transaction(self):
        return self._scope("write_transaction", "BEGIN IMMEDIATE", commit=True)

    def read_snapshot(self):
        return self._scope("read_snapshot", "BEGIN", commit=False)

    async def close(self) -> None:
        async with self._open_lock:
            while not self._idle.empty():
                self._idle.get_nowait()
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool over ``settings.storage.db_path``."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn


@asynccontextmanager
async def get_write_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.write_transaction() as conn:
        yield conn


@asynccontextmanager
async def get_read_snapshot() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.read_snapshot() as conn:
        yield conn


class ScopedStore:
    """
    Base for stores that can be bound to an open transaction.

    Unbound, each call takes its own pooled connection; bound, every call
    runs on the given connection and commit is left to the owner.
    """

    def __init__(self, conn: aiosqlite.Connection | None = None) -> None:
        self._conn = conn

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            async with get_connection() as conn:
                yield conn

    @asynccontextmanager
    async def _writing(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            async with get_transaction() as conn:
                yield conn
