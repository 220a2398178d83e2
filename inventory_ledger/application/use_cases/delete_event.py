"""Delete Event Use Case: hard delete of an inflow or outflow."""

from inventory_ledger.application.dto.responses import DeleteResponse
from inventory_ledger.application.use_cases.update_event import ensure_inflow_removable
from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.events import EventKind, InflowEvent
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.exceptions import EventNotFoundError
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)


class DeleteEventUseCase:
    """Remove an event; inflows only when their ledger stays non-negative."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, kind: EventKind, event_id: str, actor: ActorContext) -> str:
        """Delete the event and return its id."""
        uow = await self._get_uow()
        async with uow.write() as scope:
            existing = await scope.events.get(kind, event_id)
            if existing is None:
                raise EventNotFoundError(kind.value, event_id)

            if isinstance(existing, InflowEvent):
                await ensure_inflow_removable(scope, existing)

            if not await scope.events.remove(kind, event_id):
                raise EventNotFoundError(kind.value, event_id)

        logger.info(
            "event_deleted",
            kind=kind.value,
            event_id=event_id,
            material_id=existing.material_id,
            actor=actor.user_id,
        )
        return event_id

    def to_response(self, kind: EventKind, event_id: str) -> DeleteResponse:
        return DeleteResponse(
            id=event_id,
            message=f"{kind.value.capitalize()} deleted successfully",
        )
