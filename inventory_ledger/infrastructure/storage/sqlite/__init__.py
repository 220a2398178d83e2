"""SQLite storage implementations."""

from inventory_ledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_read_snapshot,
    get_transaction,
    get_write_transaction,
)
from inventory_ledger.infrastructure.storage.sqlite.event_store import SQLiteEventStore
from inventory_ledger.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore
from inventory_ledger.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork

# Singleton instance
_unit_of_work: SQLiteUnitOfWork | None = None


async def get_unit_of_work() -> SQLiteUnitOfWork:
    """Get singleton unscoped unit of work."""
    global _unit_of_work
    if _unit_of_work is None:
        _unit_of_work = SQLiteUnitOfWork()
    return _unit_of_work


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_write_transaction",
    "get_read_snapshot",
    # Stores
    "SQLiteEventStore",
    "SQLiteReferenceStore",
    "SQLiteUnitOfWork",
    # Singleton getter
    "get_unit_of_work",
]
