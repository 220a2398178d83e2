"""SQLite unit of work: event and reference stores bound to one transaction."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from inventory_ledger.config import get_logger
from inventory_ledger.core.interfaces.unit_of_work import IUnitOfWork
from inventory_ledger.infrastructure.storage.sqlite.connection import (
    get_read_snapshot,
    get_write_transaction,
)
from inventory_ledger.infrastructure.storage.sqlite.event_store import SQLiteEventStore
from inventory_ledger.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    SQLite transaction scopes.

    ``write()`` opens ``BEGIN IMMEDIATE``: SQLite allows one writer per
    database, so every write scope is serialized behind the same lock and a
    read-check-write sequence observes no concurrent commit. The lock is
    database-wide, which is coarser than per material but never weaker.
    """

    def __init__(self, conn: aiosqlite.Connection | None = None) -> None:
        self.events = SQLiteEventStore(conn)
        self.references = SQLiteReferenceStore(conn)

    @asynccontextmanager
    async def write(self, material_id: str | None = None) -> AsyncIterator["SQLiteUnitOfWork"]:
        async with get_write_transaction() as conn:
            logger.debug("write_scope_opened", material_id=material_id)
            yield SQLiteUnitOfWork(conn)

    @asynccontextmanager
    async def read(self) -> AsyncIterator["SQLiteUnitOfWork"]:
        async with get_read_snapshot() as conn:
            yield SQLiteUnitOfWork(conn)
