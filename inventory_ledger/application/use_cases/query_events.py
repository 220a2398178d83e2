"""Event listing and lookup."""

from inventory_ledger.core.entities.events import Event, EventKind
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.exceptions import EventNotFoundError
from inventory_ledger.core.interfaces import IUnitOfWork


class ListEventsUseCase:
    """Paginated inflows or outflows, newest first."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self,
        kind: EventKind,
        actor: ActorContext,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Event]:
        uow = await self._get_uow()
        return await uow.events.list_events(kind, limit=limit, offset=offset)


class GetEventUseCase:
    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, kind: EventKind, event_id: str, actor: ActorContext) -> Event:
        uow = await self._get_uow()
        event = await uow.events.get(kind, event_id)
        if event is None:
            raise EventNotFoundError(kind.value, event_id)
        return event
