"""SQLite implementation of inflow and outflow storage."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

import aiosqlite

from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.common import to_db_timestamp, utcnow
from inventory_ledger.core.entities.events import Event, EventKind, InflowEvent, OutflowEvent
from inventory_ledger.core.interfaces.event_store import IEventStore
from inventory_ledger.infrastructure.storage.sqlite.connection import ScopedStore

logger = get_logger(__name__)

_MODELS: dict[EventKind, type[InflowEvent] | type[OutflowEvent]] = {
    EventKind.INFLOW: InflowEvent,
    EventKind.OUTFLOW: OutflowEvent,
}

# Columns an update may touch; identity and authorship are immutable
_IMMUTABLE = {"id", "created_by", "created_at", "updated_at"}

_REFERENCE_COLUMNS = {"material_id", "unit_id", "project_id"}


def to_db_value(value: Any) -> Any:
    """Convert a model value to its SQLite column representation."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return to_db_timestamp(value)
    if isinstance(value, Enum):
        return value.value
    return value


class SQLiteEventStore(ScopedStore, IEventStore):
    """SQLite storage for the ``inflows`` and ``outflows`` tables."""

    async def append(self, event: Event) -> Event:
        """Insert an event, assigning a UUID when it has none."""
        if event.id is None:
            event.id = str(uuid4())
        row = {k: to_db_value(v) for k, v in event.model_dump().items()}
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)

        async with self._writing() as conn:
            await conn.execute(
                f"INSERT INTO {event.kind.table} ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
        logger.info(
            "event_appended",
            kind=event.kind.value,
            event_id=event.id,
            material_id=event.material_id,
            unit_id=event.unit_id,
            quantity=str(event.quantity),
        )
        return event

    async def get(self, kind: EventKind, event_id: str) -> Event | None:
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {kind.table} WHERE id = ?", (event_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_event(kind, row) if row else None

    async def update(
        self, kind: EventKind, event_id: str, changes: dict[str, Any]
    ) -> Event | None:
        """Write changed columns and bump ``updated_at``."""
        allowed = set(_MODELS[kind].model_fields) - _IMMUTABLE
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update columns on {kind.table}: {sorted(unknown)}")

        values = {k: to_db_value(v) for k, v in changes.items()}
        values["updated_at"] = to_db_timestamp(utcnow())
        assignments = ", ".join(f"{k} = ?" for k in values)

        async with self._writing() as conn:
            cursor = await conn.execute(
                f"UPDATE {kind.table} SET {assignments} WHERE id = ?",
                (*values.values(), event_id),
            )
            if cursor.rowcount == 0:
                return None
            cursor = await conn.execute(
                f"SELECT * FROM {kind.table} WHERE id = ?", (event_id,)
            )
            row = await cursor.fetchone()

        logger.info(
            "event_updated",
            kind=kind.value,
            event_id=event_id,
            columns=sorted(changes),
        )
        return self._row_to_event(kind, row)

    async def remove(self, kind: EventKind, event_id: str) -> bool:
        async with self._writing() as conn:
            cursor = await conn.execute(
                f"DELETE FROM {kind.table} WHERE id = ?", (event_id,)
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("event_removed", kind=kind.value, event_id=event_id)
        return deleted

    async def list_by_material(
        self, kind: EventKind, material_id: str, unit_id: str | None = None
    ) -> list[Event]:
        query = f"SELECT * FROM {kind.table} WHERE material_id = ?"
        params: list[Any] = [material_id]
        if unit_id is not None:
            query += " AND unit_id = ?"
            params.append(unit_id)
        query += f" ORDER BY {kind.date_column}, created_at"
        return await self._fetch(kind, query, params)

    async def list_by_date_range(
        self,
        kind: EventKind,
        start: datetime | None = None,
        end: datetime | None = None,
        material_id: str | None = None,
        project_id: str | None = None,
    ) -> list[Event]:
        conditions = []
        params: list[Any] = []
        if start is not None:
            conditions.append(f"{kind.date_column} >= ?")
            params.append(to_db_timestamp(start))
        if end is not None:
            conditions.append(f"{kind.date_column} <= ?")
            params.append(to_db_timestamp(end))
        if material_id is not None:
            conditions.append("material_id = ?")
            params.append(material_id)
        if project_id is not None:
            conditions.append("project_id = ?")
            params.append(project_id)

        query = f"SELECT * FROM {kind.table}"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += f" ORDER BY {kind.date_column}"
        return await self._fetch(kind, query, params)

    async def list_recent(self, kind: EventKind, limit: int = 10) -> list[Event]:
        return await self.list_events(kind, limit=limit)

    async def list_events(
        self, kind: EventKind, limit: int = 10, offset: int = 0
    ) -> list[Event]:
        return await self._fetch(
            kind,
            f"SELECT * FROM {kind.table} ORDER BY created_at DESC, id LIMIT ? OFFSET ?",
            [limit, offset],
        )

    async def sum_quantity(
        self,
        kind: EventKind,
        material_id: str,
        unit_id: str | None = None,
        exclude_id: str | None = None,
    ) -> Decimal:
        """Sum in Decimal; SQLite's SUM over TEXT would go through floats."""
        query = f"SELECT quantity FROM {kind.table} WHERE material_id = ?"
        params: list[Any] = [material_id]
        if unit_id is not None:
            query += " AND unit_id = ?"
            params.append(unit_id)
        if exclude_id is not None:
            query += " AND id != ?"
            params.append(exclude_id)

        async with self._reading() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
        return sum((Decimal(row["quantity"]) for row in rows), Decimal("0"))

    async def sum_quantity_by_material(
        self, kind: EventKind, unit_id: str | None = None
    ) -> dict[str, Decimal]:
        query = f"SELECT material_id, quantity FROM {kind.table}"
        params: list[Any] = []
        if unit_id is not None:
            query += " WHERE unit_id = ?"
            params.append(unit_id)

        async with self._reading() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()

        totals: dict[str, Decimal] = {}
        for row in rows:
            material_id = row["material_id"]
            totals[material_id] = totals.get(material_id, Decimal("0")) + Decimal(row["quantity"])
        return totals

    async def count_referencing(self, column: str, value: str) -> int:
        if column not in _REFERENCE_COLUMNS:
            raise ValueError(f"Not a reference column: {column}")
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT
                    (SELECT COUNT(*) FROM inflows WHERE {column} = ?)
                  + (SELECT COUNT(*) FROM outflows WHERE {column} = ?)
                """,
                (value, value),
            )
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def list_overdue_returns(self, now: datetime) -> list[OutflowEvent]:
        events = await self._fetch(
            EventKind.OUTFLOW,
            """
            SELECT * FROM outflows
            WHERE is_returned = 0 AND return_date IS NOT NULL AND return_date < ?
            ORDER BY return_date
            """,
            [to_db_timestamp(now)],
        )
        return [e for e in events if isinstance(e, OutflowEvent)]

    async def _fetch(self, kind: EventKind, query: str, params: list[Any]) -> list[Event]:
        async with self._reading() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
        return [self._row_to_event(kind, row) for row in rows]

    @staticmethod
    def _row_to_event(kind: EventKind, row: aiosqlite.Row) -> Event:
        data = dict(row)
        if "is_returned" in data:
            data["is_returned"] = bool(data["is_returned"])
        return _MODELS[kind].model_validate(data)
