"""Versioned SQL migrations for the ledger schema."""

from inventory_ledger.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationPlan,
    MigrationResult,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    plan_migrations,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "MigrationInfo",
    "MigrationPlan",
    "MigrationResult",
    "discover_migrations",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "plan_migrations",
    "run_migrations",
    "verify_schema_integrity",
]
