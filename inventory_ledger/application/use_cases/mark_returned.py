"""Mark Returned Use Case: close the return tracking of an outflow."""

from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.events import EventKind, OutflowEvent
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.exceptions import EventNotFoundError, ValidationError
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)


class MarkReturnedUseCase:
    """
    Set ``is_returned`` on an outflow. Returned is terminal.

    Only outflows with a ``return_date`` (pending or overdue) can be returned;
    a plain release has nothing to return until edited to add one.
    """

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, outflow_id: str, actor: ActorContext) -> OutflowEvent:
        uow = await self._get_uow()
        async with uow.write() as scope:
            outflow = await scope.events.get(EventKind.OUTFLOW, outflow_id)
            if outflow is None:
                raise EventNotFoundError(EventKind.OUTFLOW.value, outflow_id)
            if outflow.is_returned:  # type: ignore[union-attr]
                return outflow  # type: ignore[return-value]
            if outflow.return_date is None:  # type: ignore[union-attr]
                raise ValidationError("return_date", "outflow has no return date")

            updated = await scope.events.update(
                EventKind.OUTFLOW, outflow_id, {"is_returned": True}
            )
            if updated is None:
                raise EventNotFoundError(EventKind.OUTFLOW.value, outflow_id)

        logger.info("outflow_returned", event_id=outflow_id, actor=actor.user_id)
        return updated  # type: ignore[return-value]
