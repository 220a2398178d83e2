"""Activity feed and return-tracking use cases."""

from datetime import datetime

from inventory_ledger.application.services import get_activity_feed
from inventory_ledger.config import get_settings
from inventory_ledger.core.entities.events import ActivityRecord, OutflowEvent
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.interfaces import IUnitOfWork


class GetActivityFeedUseCase:
    """Newest inflows and outflows merged into one stream."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, actor: ActorContext, limit: int | None = None) -> list[ActivityRecord]:
        limit = limit or get_settings().ledger.activity_feed_limit
        uow = await self._get_uow()
        async with uow.read() as scope:
            return await get_activity_feed(scope).recent(limit)


class ListOverdueReturnsUseCase:
    """Outflows past their return date and not yet returned."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self, actor: ActorContext, now: datetime | None = None
    ) -> list[OutflowEvent]:
        uow = await self._get_uow()
        return await get_activity_feed(uow).overdue_returns(now)
