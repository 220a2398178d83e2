"""Storage infrastructure implementations."""

from inventory_ledger.infrastructure.storage.sqlite import (
    SQLiteEventStore,
    SQLiteReferenceStore,
    SQLiteUnitOfWork,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteEventStore",
    "SQLiteReferenceStore",
    "SQLiteUnitOfWork",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
