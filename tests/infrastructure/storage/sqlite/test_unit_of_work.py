"""Tests for SQLite unit of work scopes and concurrent outflows."""

import asyncio
from decimal import Decimal

import pytest

from inventory_ledger.application.dto.requests import RecordOutflowRequest
from inventory_ledger.application.use_cases import RecordOutflowUseCase
from inventory_ledger.core.entities import EventKind
from inventory_ledger.core.exceptions import InsufficientStockError
from inventory_ledger.infrastructure.storage.sqlite import SQLiteUnitOfWork
from inventory_ledger.infrastructure.storage.sqlite.event_store import SQLiteEventStore


@pytest.fixture
def uow(ledger_db):
    return SQLiteUnitOfWork()


@pytest.fixture
def refs(seeded):
    return {
        "material_id": seeded.material.id,
        "unit_id": seeded.unit.id,
        "project_id": seeded.project.id,
    }


class TestSQLiteUnitOfWork:
    async def test_write_scope_commits(self, uow, refs, inflow_factory):
        async with uow.write(refs["material_id"]) as scope:
            event = await scope.events.append(inflow_factory(**refs))

        assert await SQLiteEventStore().get(EventKind.INFLOW, event.id) is not None

    async def test_write_scope_rolls_back_on_error(self, uow, refs, inflow_factory):
        with pytest.raises(RuntimeError):
            async with uow.write() as scope:
                event = await scope.events.append(inflow_factory(**refs))
                raise RuntimeError("abort")

        assert await SQLiteEventStore().get(EventKind.INFLOW, event.id) is None

    async def test_read_scope_sees_committed_data(self, uow, refs, inflow_factory):
        await SQLiteEventStore().append(inflow_factory(**refs, quantity=Decimal("8")))

        async with uow.read() as scope:
            total = await scope.events.sum_quantity(EventKind.INFLOW, refs["material_id"])
            material = await scope.references.get_material(refs["material_id"])

        assert total == Decimal("8")
        assert material is not None

    async def test_concurrent_outflows_cannot_overdraw(
        self, uow, refs, inflow_factory, now, actor
    ):
        await SQLiteEventStore().append(inflow_factory(**refs, quantity=Decimal("10")))

        use_case = RecordOutflowUseCase(unit_of_work=uow)
        request = RecordOutflowRequest(
            **refs,
            quantity=Decimal("6"),
            release_date=now,
            authorized_by="Sara",
            received_by="Crew",
            purpose="Site work",
        )

        results = await asyncio.gather(
            use_case.execute(request, actor),
            use_case.execute(request, actor),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        successes = [r for r in results if not isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockError)
        assert failures[0].available == Decimal("4")

        store = SQLiteEventStore()
        total_out = await store.sum_quantity(EventKind.OUTFLOW, refs["material_id"])
        assert total_out == Decimal("6")
