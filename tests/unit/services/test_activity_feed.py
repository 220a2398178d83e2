"""Tests for ActivityFeed."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from inventory_ledger.core.entities import (
    EventKind,
    Material,
    Project,
    ReferenceKind,
    Unit,
)
from inventory_ledger.core.services import ActivityFeed


@pytest.fixture
def mock_reference_store():
    store = AsyncMock()

    async def list_all(kind, active_only=True):
        return {
            ReferenceKind.MATERIAL: [Material(id="MAT-001", name="Cable", category_id="CAT-1")],
            ReferenceKind.PROJECT: [Project(id="PRJ-001", name="Tower A")],
            ReferenceKind.UNIT: [Unit(id="UNIT-M", name="Meter")],
        }.get(kind, [])

    store.list_all.side_effect = list_all
    return store


class TestActivityFeed:
    async def test_merges_newest_first(self, mock_reference_store, inflow_factory, outflow_factory, now):
        oldest = inflow_factory(id="IN-1", created_at=now - timedelta(hours=3))
        newest = outflow_factory(id="OUT-1", created_at=now)
        middle = inflow_factory(id="IN-2", created_at=now - timedelta(hours=1))

        events = AsyncMock()
        events.list_recent.side_effect = lambda kind, limit: (
            [middle, oldest] if kind == EventKind.INFLOW else [newest]
        )

        records = await ActivityFeed(events, mock_reference_store).recent(limit=2)

        assert [r.id for r in records] == ["OUT-1", "IN-2"]
        assert records[0].type == EventKind.OUTFLOW
        assert records[0].person == "Sara"
        assert records[1].material_name == "Cable"
        assert records[1].project_name == "Tower A"
        assert records[1].unit_name == "Meter"
        assert records[1].category_id == "CAT-1"

    async def test_unknown_references_keep_none(self, mock_reference_store, inflow_factory):
        event = inflow_factory(id="IN-9", material_id="GONE", project_id="GONE")
        records = await ActivityFeed(AsyncMock(), mock_reference_store).to_records([event])
        assert records[0].material_name is None
        assert records[0].project_name is None

    async def test_overdue_returns_delegates(self, mock_reference_store, now):
        events = AsyncMock()
        events.list_overdue_returns.return_value = []
        await ActivityFeed(events, mock_reference_store).overdue_returns(now)
        events.list_overdue_returns.assert_awaited_once_with(now)
