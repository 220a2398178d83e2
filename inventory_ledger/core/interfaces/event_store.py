"""Abstract interface for ledger event storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any

from inventory_ledger.core.entities.events import Event, EventKind, OutflowEvent


class IEventStore(ABC):
    """
    Persistence for inflow and outflow records.

    Performs no business validation; availability checks belong to the
    caller and must run in the same write scope as the mutation.
    """

    @abstractmethod
    async def append(self, event: Event) -> Event:
        """Insert a new event and return it with its id."""
        pass

    @abstractmethod
    async def get(self, kind: EventKind, event_id: str) -> Event | None:
        """Get an event by id."""
        pass

    @abstractmethod
    async def update(
        self, kind: EventKind, event_id: str, changes: dict[str, Any]
    ) -> Event | None:
        """Apply column changes in place. Returns None if the event is missing."""
        pass

    @abstractmethod
    async def remove(self, kind: EventKind, event_id: str) -> bool:
        """Hard-delete an event. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_by_material(
        self, kind: EventKind, material_id: str, unit_id: str | None = None
    ) -> list[Event]:
        """All events for a material, optionally restricted to one unit."""
        pass

    @abstractmethod
    async def list_by_date_range(
        self,
        kind: EventKind,
        start: datetime | None = None,
        end: datetime | None = None,
        material_id: str | None = None,
        project_id: str | None = None,
    ) -> list[Event]:
        """Events whose domain date falls in [start, end]; open bounds when None."""
        pass

    @abstractmethod
    async def list_recent(self, kind: EventKind, limit: int = 10) -> list[Event]:
        """Most recently created events, newest first."""
        pass

    @abstractmethod
    async def list_events(
        self, kind: EventKind, limit: int = 10, offset: int = 0
    ) -> list[Event]:
        """Paginated listing, newest first."""
        pass

    @abstractmethod
    async def sum_quantity(
        self,
        kind: EventKind,
        material_id: str,
        unit_id: str | None = None,
        exclude_id: str | None = None,
    ) -> Decimal:
        """Exact sum of quantities for a material (and unit)."""
        pass

    @abstractmethod
    async def sum_quantity_by_material(
        self, kind: EventKind, unit_id: str | None = None
    ) -> dict[str, Decimal]:
        """Exact per-material quantity sums in a single pass."""
        pass

    @abstractmethod
    async def count_referencing(self, column: str, value: str) -> int:
        """Count inflows plus outflows whose ``column`` equals ``value``."""
        pass

    @abstractmethod
    async def list_overdue_returns(self, now: datetime) -> list[OutflowEvent]:
        """Outflows with a past return date that are not yet returned."""
        pass
