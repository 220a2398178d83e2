"""
Versioned schema migrations for the ledger database.

Migration files live next to this module as ``vNNN_name.sql`` and are applied
in version order. Each applied file is recorded in ``schema_migrations``
together with a short checksum; a file whose checksum no longer matches its
record halts the run instead of being re-applied.

An existing database file is copied aside before pending migrations run and
copied back if the run raises.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import aiosqlite

from inventory_ledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(?P<version>\d{3,})_(?P<name>\w+)\.sql$")

REQUIRED_TABLES = (
    "categories",
    "units",
    "projects",
    "materials",
    "material_units",
    "inflows",
    "outflows",
    "schema_migrations",
)


@dataclass
class MigrationInfo:
    """One migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if match is None:
            raise ValueError(f"Migration file name must look like v001_name.sql: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match["version"],
            name=match["name"],
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationPlan:
    """Applied versions on record versus files found on disk."""

    applied: dict[str, str] = field(default_factory=dict)
    pending: list[MigrationInfo] = field(default_factory=list)
    drifted: list[str] = field(default_factory=list)


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in ascending version order."""
    found = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("migration_file_ignored", path=path.name, error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> recorded checksum. Empty on a fresh database."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    if not applied:
        return None
    return max(applied, key=int)


async def plan_migrations(conn: aiosqlite.Connection) -> MigrationPlan:
    plan = MigrationPlan(applied=await get_applied_migrations(conn))
    for migration in discover_migrations():
        recorded = plan.applied.get(migration.version)
        if recorded is None:
            plan.pending.append(migration)
        elif recorded != migration.checksum:
            plan.drifted.append(migration.version)
    return plan


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it."""
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    logger.info("applying_migration", version=migration.version, name=migration.name)
    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=elapsed_ms(),
            error=str(e),
        )

    result = MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed_ms(),
    )
    logger.info(
        "migration_applied",
        version=result.version,
        execution_time_ms=result.execution_time_ms,
    )
    return result


def create_backup(db_path: Path) -> Path:
    stamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the ledger database up to the latest schema version.

    Args:
        db_path: Database file (defaults to ``settings.storage.db_path``)
        create_backup_before: Copy an existing file aside while migrating

    Returns:
        One result per migration attempted; empty when already current
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    existed = db_path.exists()

    results: list[MigrationResult] = []
    backup_path: Path | None = None

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            plan = await plan_migrations(conn)
            if plan.drifted:
                logger.error("migration_checksum_changed", versions=plan.drifted)
                return results
            if not plan.pending:
                logger.debug("database_schema_current", db_path=str(db_path))
                return results

            if create_backup_before and existed:
                backup_path = create_backup(db_path)

            for migration in plan.pending:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break

                cursor = await conn.execute("PRAGMA foreign_key_check")
                violations = await cursor.fetchall()
                if violations:
                    logger.error(
                        "foreign_key_violations_after_migration",
                        version=migration.version,
                        violations=len(violations),
                    )
                    break
    except Exception as e:
        logger.error("database_initialization_failed", db_path=str(db_path), error=str(e))
        if backup_path is not None and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()

    logger.info(
        "database_initialized",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
            "total_migrations": len(discovered),
        }

    async with aiosqlite.connect(db_path) as conn:
        plan = await plan_migrations(conn)
        current = await get_current_version(conn)

    return {
        "exists": True,
        "current_version": current,
        "applied_migrations": sorted(plan.applied, key=int),
        "pending_migrations": [m.version for m in plan.pending],
        "drifted_migrations": plan.drifted,
        "total_migrations": len(discovered),
    }


async def _negative_stock_pairs(conn: aiosqlite.Connection) -> list[tuple[str, str]]:
    """(material, unit) ledgers whose outflows exceed their inflows."""
    balance: dict[tuple[str, str], Decimal] = {}
    for table, sign in (("inflows", 1), ("outflows", -1)):
        cursor = await conn.execute(f"SELECT material_id, unit_id, quantity FROM {table}")
        for material_id, unit_id, quantity in await cursor.fetchall():
            key = (material_id, unit_id)
            balance[key] = balance.get(key, Decimal("0")) + sign * Decimal(quantity)
    return sorted(key for key, value in balance.items() if value < 0)


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Structural and ledger-level checks.

    Each check is a dict with ``check``, ``status`` (PASS/FAIL) and
    check-specific detail.
    """
    db_path = db_path or get_settings().storage.db_path

    def outcome(name: str, ok: bool, **detail) -> dict:
        return {"check": name, "status": "PASS" if ok else "FAIL", **detail}

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = await cursor.fetchall()

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]

        checks = [
            outcome("integrity", integrity == "ok", result=integrity),
            outcome("foreign_keys", not fk_violations, violations=len(fk_violations)),
            outcome("required_tables", not missing, missing=missing),
        ]
        if missing:
            return checks

        negative = await _negative_stock_pairs(conn)
        checks.append(
            outcome(
                "non_negative_stock",
                not negative,
                ledgers=[f"{material}/{unit}" for material, unit in negative],
            )
        )

        cursor = await conn.execute(
            "SELECT material_id, COUNT(*) FROM material_units "
            "WHERE is_primary = 1 GROUP BY material_id HAVING COUNT(*) > 1"
        )
        multi_primary = [row[0] for row in await cursor.fetchall()]
        checks.append(outcome("single_primary_unit", not multi_primary, materials=multi_primary))

    return checks


def main() -> None:
    """``inventory-ledger-migrate`` console entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Inventory ledger schema migrations")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="Show applied and pending versions")
    mode.add_argument("--verify", action="store_true", help="Run integrity and ledger checks")
    parser.add_argument("--no-backup", action="store_true", help="Do not copy the database aside")
    args = parser.parse_args()

    async def status() -> int:
        info = await get_migration_status(args.db_path)
        for key in ("exists", "current_version", "applied_migrations", "pending_migrations"):
            print(f"{key}: {info.get(key)}")
        return 0

    async def verify() -> int:
        checks = await verify_schema_integrity(args.db_path)
        for check in checks:
            detail = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"[{check['status']}] {check['check']} {detail}")
        return 0 if all(c["status"] == "PASS" for c in checks) else 1

    async def migrate() -> int:
        results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
        if not results:
            print("schema is current")
        for result in results:
            label = "OK" if result.success else "FAILED"
            print(f"[{label}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"      {result.error}")
        return 0 if all(r.success for r in results) else 1

    command = status if args.status else verify if args.verify else migrate
    raise SystemExit(asyncio.run(command()))


if __name__ == "__main__":
    main()
