"""Tests for SQLite reference store."""

from decimal import Decimal

import pytest

from inventory_ledger.core.entities import (
    Category,
    Material,
    MaterialUnit,
    Project,
    ReferenceKind,
    Unit,
)
from inventory_ledger.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore


@pytest.fixture
def store(ledger_db):
    return SQLiteReferenceStore()


class TestSQLiteReferenceStore:
    async def test_create_assigns_id(self, store):
        project = await store.create(Project(name="Depot"))
        assert project.id is not None
        loaded = await store.get(ReferenceKind.PROJECT, project.id)
        assert loaded.name == "Depot"
        assert loaded.is_active is True

    async def test_material_round_trip_with_links(self, store, seeded):
        material = await store.get_material(seeded.material.id)
        assert material.min_stock_level == Decimal("20.00")
        assert material.category_id == seeded.category.id
        assert {link.unit_id for link in material.units} == {seeded.unit.id, seeded.box.id}
        assert material.units[0].is_primary is True

    async def test_get_material_via_generic_get(self, store, seeded):
        material = await store.get(ReferenceKind.MATERIAL, seeded.material.id)
        assert isinstance(material, Material)
        assert len(material.units) == 2

    async def test_list_all_sorted_by_name(self, store):
        await store.create(Category(name="plumbing"))
        await store.create(Category(name="Electrical"))
        names = [c.name for c in await store.list_all(ReferenceKind.CATEGORY)]
        assert names == ["Electrical", "plumbing"]

    async def test_list_all_active_only(self, store):
        kept = await store.create(Project(name="Kept"))
        gone = await store.create(Project(name="Gone"))
        await store.deactivate(ReferenceKind.PROJECT, gone.id)

        active = await store.list_all(ReferenceKind.PROJECT)
        everything = await store.list_all(ReferenceKind.PROJECT, active_only=False)
        assert [p.id for p in active] == [kept.id]
        assert len(everything) == 2

    async def test_find_by_name_is_case_insensitive(self, store, seeded):
        found = await store.find_by_name(ReferenceKind.MATERIAL, "CABLE 3X2.5MM")
        assert found.id == seeded.material.id

    async def test_find_by_abbreviation(self, store, seeded):
        found = await store.find_by_name(ReferenceKind.UNIT, "M", field="abbreviation")
        assert found.id == seeded.unit.id

    async def test_find_by_name_ignores_inactive(self, store):
        unit = await store.create(Unit(name="Roll"))
        await store.deactivate(ReferenceKind.UNIT, unit.id)
        assert await store.find_by_name(ReferenceKind.UNIT, "roll") is None

    async def test_find_by_name_rejects_unknown_field(self, store):
        with pytest.raises(ValueError):
            await store.find_by_name(ReferenceKind.UNIT, "x", field="description")

    async def test_deactivate_twice(self, store):
        category = await store.create(Category(name="Spare"))
        first = await store.deactivate(ReferenceKind.CATEGORY, category.id)
        assert first.is_active is False
        assert await store.deactivate(ReferenceKind.CATEGORY, category.id) is None

    async def test_count_active_materials(self, store, seeded):
        assert await store.count_active_materials("category_id", seeded.category.id) == 1
        assert await store.count_active_materials("unit_id", seeded.box.id) == 1

        await store.deactivate(ReferenceKind.MATERIAL, seeded.material.id)
        assert await store.count_active_materials("unit_id", seeded.box.id) == 0

    async def test_deactivated_material_keeps_links(self, store, seeded):
        await store.deactivate(ReferenceKind.MATERIAL, seeded.material.id)
        material = await store.get_material(seeded.material.id)
        assert material.is_active is False
        assert len(material.units) == 2

    async def test_material_links_assigned_material_id(self, store, seeded):
        material = await store.create(
            Material(
                name="Conduit",
                category_id=seeded.category.id,
                units=[MaterialUnit(material_id="", unit_id=seeded.unit.id, is_primary=True)],
            )
        )
        loaded = await store.get_material(material.id)
        assert loaded.units[0].material_id == material.id

    async def test_find_by_name_folds_non_ascii(self, store):
        category = await store.create(Category(name="Éclairage"))
        found = await store.find_by_name(ReferenceKind.CATEGORY, "éCLAIRAGE")
        assert found.id == category.id

    async def test_find_by_name_skips_excluded_id(self, store, seeded):
        assert (
            await store.find_by_name(
                ReferenceKind.MATERIAL, "cable 3x2.5mm", exclude_id=seeded.material.id
            )
            is None
        )

    async def test_update_columns(self, store, seeded):
        updated = await store.update(
            ReferenceKind.MATERIAL,
            seeded.material.id,
            {"name": "Cable 3x4mm", "min_stock_level": Decimal("45.00")},
        )
        assert updated.name == "Cable 3x4mm"
        assert updated.min_stock_level == Decimal("45.00")
        assert updated.updated_at >= seeded.material.updated_at
        assert len(updated.units) == 2

    async def test_update_replaces_links(self, store, seeded):
        updated = await store.update(
            ReferenceKind.MATERIAL,
            seeded.material.id,
            {},
            units=[MaterialUnit(material_id="", unit_id=seeded.box.id, is_primary=True)],
        )
        assert [(link.unit_id, link.is_primary) for link in updated.units] == [
            (seeded.box.id, True)
        ]
        assert await store.count_active_materials("unit_id", seeded.unit.id) == 0

    async def test_update_inactive_returns_none(self, store):
        project = await store.create(Project(name="Closed"))
        await store.deactivate(ReferenceKind.PROJECT, project.id)
        assert await store.update(ReferenceKind.PROJECT, project.id, {"name": "Reopened"}) is None

    async def test_update_rejects_unknown_column(self, store, seeded):
        with pytest.raises(ValueError):
            await store.update(ReferenceKind.UNIT, seeded.unit.id, {"min_stock_level": "1"})
