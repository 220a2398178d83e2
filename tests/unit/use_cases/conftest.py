"""Fixtures for use case tests: a unit of work over mocked stores."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from inventory_ledger.core.entities import (
    EventKind,
    Material,
    Project,
    ReferenceKind,
    Unit,
)
from inventory_ledger.core.interfaces import IUnitOfWork


class MockUnitOfWork(IUnitOfWork):
    """Scopes yield the same mocked stores; counts how often each opened."""

    def __init__(self) -> None:
        self.events = AsyncMock()
        self.references = AsyncMock()
        self.writes = 0
        self.reads = 0

    @asynccontextmanager
    async def write(self, material_id: str | None = None) -> AsyncIterator["MockUnitOfWork"]:
        self.writes += 1
        yield self

    @asynccontextmanager
    async def read(self) -> AsyncIterator["MockUnitOfWork"]:
        self.reads += 1
        yield self


@pytest.fixture
def material():
    return Material(
        id="MAT-001",
        name="Cable 3x2.5mm",
        category_id="CAT-1",
        min_stock_level=Decimal("20"),
    )


@pytest.fixture
def mock_uow(material):
    """Unit of work whose references all resolve and whose stock is 125."""
    uow = MockUnitOfWork()

    async def get(kind, entity_id):
        return {
            ReferenceKind.UNIT: Unit(id=entity_id, name="Meter"),
            ReferenceKind.PROJECT: Project(id=entity_id, name="Tower A"),
        }.get(kind)

    uow.references.get_material.return_value = material
    uow.references.get.side_effect = get

    async def sum_quantity(kind, material_id, unit_id=None, exclude_id=None):
        return Decimal("175") if kind == EventKind.INFLOW else Decimal("50")

    uow.events.sum_quantity.side_effect = sum_quantity

    async def append(event):
        event.id = event.id or "EV-NEW"
        return event

    uow.events.append.side_effect = append
    return uow
