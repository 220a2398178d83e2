"""
Activity feed.

Merges the newest inflows and outflows into one reverse-chronological
stream. Holds no state between calls.
"""

from datetime import datetime

from inventory_ledger.core.entities.common import utcnow
from inventory_ledger.core.entities.events import (
    ActivityRecord,
    Event,
    EventKind,
    OutflowEvent,
)
from inventory_ledger.core.entities.reference import ReferenceKind
from inventory_ledger.core.interfaces.event_store import IEventStore
from inventory_ledger.core.interfaces.reference_store import IReferenceStore


class ActivityFeed:
    """Builds activity records from the two event tables."""

    def __init__(self, event_store: IEventStore, reference_store: IReferenceStore) -> None:
        self._events = event_store
        self._references = reference_store

    async def recent_events(self, limit: int = 10) -> list[Event]:
        """Newest ``limit`` events across both kinds, by creation time."""
        inflows = await self._events.list_recent(EventKind.INFLOW, limit)
        outflows = await self._events.list_recent(EventKind.OUTFLOW, limit)
        merged: list[Event] = [*inflows, *outflows]
        merged.sort(key=lambda e: e.created_at, reverse=True)
        return merged[:limit]

    async def recent(self, limit: int = 10) -> list[ActivityRecord]:
        events = await self.recent_events(limit)
        return await self.to_records(events)

    async def to_records(self, events: list[Event]) -> list[ActivityRecord]:
        """Attach display names; events pointing at deleted references keep None."""
        materials = await self._names(ReferenceKind.MATERIAL)
        projects = await self._names(ReferenceKind.PROJECT)
        units = await self._names(ReferenceKind.UNIT)
        categories = {
            m.id: m.category_id
            for m in await self._references.list_all(ReferenceKind.MATERIAL, active_only=False)
        }

        return [
            ActivityRecord(
                id=event.id,  # type: ignore[arg-type]
                type=event.kind,
                material_id=event.material_id,
                material_name=materials.get(event.material_id),
                category_id=categories.get(event.material_id),
                quantity=event.quantity,
                unit_name=units.get(event.unit_id),
                project_id=event.project_id,
                project_name=projects.get(event.project_id),
                date=event.event_date,
                person=event.person,
                total_value=event.total_value,
                created_at=event.created_at,
            )
            for event in events
        ]

    async def overdue_returns(self, now: datetime | None = None) -> list[OutflowEvent]:
        """Outflows whose return date has passed without a return."""
        return await self._events.list_overdue_returns(now or utcnow())

    async def _names(self, kind: ReferenceKind) -> dict[str, str]:
        entities = await self._references.list_all(kind, active_only=False)
        return {e.id: e.name for e in entities if e.id is not None}
