"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from inventory_ledger.core.entities import (
    ActorContext,
    Category,
    InflowEvent,
    Material,
    MaterialUnit,
    OutflowEvent,
    Project,
    Unit,
)
from inventory_ledger.infrastructure.storage.sqlite import connection
from inventory_ledger.infrastructure.storage.sqlite.connection import ConnectionPool
from inventory_ledger.infrastructure.storage.sqlite.migrations import initialize_database
from inventory_ledger.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore

# A Monday
FIXED_NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)


@dataclass
class SeededReferences:
    """Reference rows inserted by the ``seeded`` fixture."""

    category: Category
    unit: Unit
    box: Unit
    project: Project
    material: Material


@pytest.fixture
def actor() -> ActorContext:
    return ActorContext(user_id="user-1", role="storekeeper")


@pytest.fixture
def actor_headers() -> dict[str, str]:
    return {"X-Actor-Id": "user-1", "X-Actor-Role": "storekeeper"}


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def ledger_db(temp_db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Migrated temporary database installed as the global connection pool."""
    await initialize_database(temp_db_path, create_backup_before=False)

    pool = ConnectionPool(temp_db_path, pool_size=3, busy_timeout=5000)
    await pool.initialize()
    connection._pool = pool

    yield pool

    await connection.close_pool()


@pytest.fixture
async def seeded(ledger_db: ConnectionPool) -> SeededReferences:
    """One category, two units, one project and one material linked to both units."""
    store = SQLiteReferenceStore()
    category = await store.create(Category(name="Electrical"))
    unit = await store.create(Unit(name="Meter", abbreviation="m"))
    box = await store.create(Unit(name="Box", abbreviation="bx"))
    project = await store.create(Project(name="Tower A"))
    material = await store.create(
        Material(
            name="Cable 3x2.5mm",
            category_id=category.id,
            min_stock_level=Decimal("20"),
            units=[
                MaterialUnit(material_id="", unit_id=unit.id, is_primary=True),
                MaterialUnit(material_id="", unit_id=box.id),
            ],
        )
    )
    return SeededReferences(
        category=category,
        unit=unit,
        box=box,
        project=project,
        material=material,
    )


@pytest.fixture
def inflow_factory() -> Callable[..., InflowEvent]:
    """Build inflow events with sensible defaults."""

    def make(**overrides: Any) -> InflowEvent:
        data: dict[str, Any] = {
            "material_id": "MAT-001",
            "unit_id": "UNIT-M",
            "project_id": "PRJ-001",
            "quantity": Decimal("100"),
            "unit_price": Decimal("2.50"),
            "delivery_date": FIXED_NOW,
            "received_by": "Ali",
            "supplier_name": "Cables Co",
            "purpose": "Stock replenishment",
            "created_by": "user-1",
        }
        data.update(overrides)
        return InflowEvent(**data)

    return make


@pytest.fixture
def outflow_factory() -> Callable[..., OutflowEvent]:
    """Build outflow events with sensible defaults."""

    def make(**overrides: Any) -> OutflowEvent:
        data: dict[str, Any] = {
            "material_id": "MAT-001",
            "unit_id": "UNIT-M",
            "project_id": "PRJ-001",
            "quantity": Decimal("10"),
            "release_date": FIXED_NOW,
            "authorized_by": "Sara",
            "received_by": "Site crew",
            "purpose": "Floor 3 wiring",
            "created_by": "user-1",
        }
        data.update(overrides)
        return OutflowEvent(**data)

    return make
