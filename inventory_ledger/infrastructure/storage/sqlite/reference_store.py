"""SQLite implementation of reference-data storage."""

from typing import Any
from uuid import uuid4

import aiosqlite

from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.common import to_db_timestamp, utcnow
from inventory_ledger.core.entities.reference import (
    Category,
    Material,
    MaterialUnit,
    Project,
    ReferenceKind,
    Unit,
)
from inventory_ledger.core.interfaces.reference_store import IReferenceStore, Reference
from inventory_ledger.infrastructure.storage.sqlite.connection import ScopedStore
from inventory_ledger.infrastructure.storage.sqlite.event_store import to_db_value

logger = get_logger(__name__)

_MODELS: dict[ReferenceKind, type[Reference]] = {
    ReferenceKind.MATERIAL: Material,
    ReferenceKind.UNIT: Unit,
    ReferenceKind.PROJECT: Project,
    ReferenceKind.CATEGORY: Category,
}

_LOOKUP_FIELDS = {"name", "abbreviation"}
_FIXED_FIELDS = {"id", "units", "created_at", "updated_at"}


def kind_of(entity: Reference) -> ReferenceKind:
    for kind, model in _MODELS.items():
        if isinstance(entity, model):
            return kind
    raise TypeError(f"Not a reference entity: {type(entity).__name__}")


class SQLiteReferenceStore(ScopedStore, IReferenceStore):
    """SQLite storage for materials, units, projects and categories."""

    async def get(self, kind: ReferenceKind, entity_id: str) -> Reference | None:
        if kind is ReferenceKind.MATERIAL:
            return await self.get_material(entity_id)
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {kind.table} WHERE id = ?", (entity_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_entity(kind, row) if row else None

    async def get_material(self, material_id: str) -> Material | None:
        async with self._reading() as conn:
            cursor = await conn.execute("SELECT * FROM materials WHERE id = ?", (material_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            links = await self._load_links(conn, material_id)
        return self._row_to_material(row, links.get(material_id, []))

    async def list_all(
        self, kind: ReferenceKind, active_only: bool = True
    ) -> list[Reference]:
        query = f"SELECT * FROM {kind.table}"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY name COLLATE NOCASE, id"

        async with self._reading() as conn:
            cursor = await conn.execute(query)
            rows = await cursor.fetchall()
            if kind is not ReferenceKind.MATERIAL:
                return [self._row_to_entity(kind, row) for row in rows]
            links = await self._load_links(conn)
        return [self._row_to_material(row, links.get(row["id"], [])) for row in rows]

    async def find_by_name(
        self,
        kind: ReferenceKind,
        name: str,
        field: str = "name",
        exclude_id: str | None = None,
    ) -> Reference | None:
        if field not in _LOOKUP_FIELDS:
            raise ValueError(f"Not a lookup field: {field}")
        # SQLite LOWER() folds ASCII only; match with str.casefold() instead
        target = name.strip().casefold()
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT id, {field} AS value FROM {kind.table}
                WHERE is_active = 1 AND {field} IS NOT NULL
                ORDER BY created_at, id
                """
            )
            rows = await cursor.fetchall()
        for row in rows:
            if row["id"] != exclude_id and row["value"].strip().casefold() == target:
                return await self.get(kind, row["id"])
        return None

    async def create(self, entity: Reference) -> Reference:
        kind = kind_of(entity)
        if entity.id is None:
            entity.id = str(uuid4())
        row = {
            k: to_db_value(v)
            for k, v in entity.model_dump(exclude={"units"}).items()
        }
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)

        async with self._writing() as conn:
            await conn.execute(
                f"INSERT INTO {kind.table} ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
            if isinstance(entity, Material):
                await self._insert_links(conn, entity.id, entity.units)

        logger.info("reference_created", kind=kind.value, entity_id=entity.id, name=entity.name)
        return entity

    async def update(
        self,
        kind: ReferenceKind,
        entity_id: str,
        changes: dict[str, Any],
        units: list[MaterialUnit] | None = None,
    ) -> Reference | None:
        allowed = set(_MODELS[kind].model_fields) - _FIXED_FIELDS
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Not updatable on {kind.value}: {sorted(unknown)}")

        assignments = {k: to_db_value(v) for k, v in changes.items()}
        assignments["updated_at"] = to_db_timestamp(utcnow())
        set_clause = ", ".join(f"{column} = ?" for column in assignments)

        async with self._writing() as conn:
            cursor = await conn.execute(
                f"UPDATE {kind.table} SET {set_clause} WHERE id = ? AND is_active = 1",
                (*assignments.values(), entity_id),
            )
            changed = cursor.rowcount > 0
            if changed and units is not None:
                await conn.execute("DELETE FROM material_units WHERE material_id = ?", (entity_id,))
                await self._insert_links(conn, entity_id, units)
        if not changed:
            return None

        logger.info(
            "reference_updated",
            kind=kind.value,
            entity_id=entity_id,
            fields=sorted(changes),
            relinked=units is not None,
        )
        return await self.get(kind, entity_id)

    async def deactivate(self, kind: ReferenceKind, entity_id: str) -> Reference | None:
        async with self._writing() as conn:
            cursor = await conn.execute(
                f"UPDATE {kind.table} SET is_active = 0, updated_at = ? "
                "WHERE id = ? AND is_active = 1",
                (to_db_timestamp(utcnow()), entity_id),
            )
            changed = cursor.rowcount > 0
        if not changed:
            return None
        logger.info("reference_deactivated", kind=kind.value, entity_id=entity_id)
        return await self.get(kind, entity_id)

    async def count_active_materials(self, column: str, value: str) -> int:
        if column == "category_id":
            query = "SELECT COUNT(*) FROM materials WHERE category_id = ? AND is_active = 1"
        elif column == "unit_id":
            query = """
                SELECT COUNT(*) FROM material_units mu
                JOIN materials m ON m.id = mu.material_id
                WHERE mu.unit_id = ? AND m.is_active = 1
            """
        else:
            raise ValueError(f"Not a material reference column: {column}")

        async with self._reading() as conn:
            cursor = await conn.execute(query, (value,))
            row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    async def _insert_links(
        conn: aiosqlite.Connection, material_id: str, links: list[MaterialUnit]
    ) -> None:
        for link in links:
            link.material_id = material_id
            await conn.execute(
                """
                INSERT INTO material_units (
                    material_id, unit_id, is_primary, conversion_factor
                ) VALUES (?, ?, ?, ?)
                """,
                (material_id, link.unit_id, int(link.is_primary), str(link.conversion_factor)),
            )

    @staticmethod
    async def _load_links(
        conn: aiosqlite.Connection, material_id: str | None = None
    ) -> dict[str, list[MaterialUnit]]:
        query = "SELECT * FROM material_units"
        params: tuple[Any, ...] = ()
        if material_id is not None:
            query += " WHERE material_id = ?"
            params = (material_id,)
        query += " ORDER BY is_primary DESC, unit_id"

        cursor = await conn.execute(query, params)
        links: dict[str, list[MaterialUnit]] = {}
        for row in await cursor.fetchall():
            links.setdefault(row["material_id"], []).append(
                MaterialUnit(
                    material_id=row["material_id"],
                    unit_id=row["unit_id"],
                    is_primary=bool(row["is_primary"]),
                    conversion_factor=row["conversion_factor"],
                )
            )
        return links

    @staticmethod
    def _row_to_material(row: aiosqlite.Row, links: list[MaterialUnit]) -> Material:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        return Material.model_validate({**data, "units": links})

    @staticmethod
    def _row_to_entity(kind: ReferenceKind, row: aiosqlite.Row) -> Reference:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        return _MODELS[kind].model_validate(data)
