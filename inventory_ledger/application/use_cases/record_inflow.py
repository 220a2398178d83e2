"""Record Inflow Use Case: receipt of stock."""

from inventory_ledger.application.dto.requests import RecordInflowRequest
from inventory_ledger.application.dto.responses import InflowResponse
from inventory_ledger.application.validation import ensure_event_references
from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.events import InflowEvent
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)


class RecordInflowUseCase:
    """Append an inflow after checking its references are live."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, request: RecordInflowRequest, actor: ActorContext) -> InflowEvent:
        """Execute record inflow use case."""
        logger.info(
            "record_inflow_started",
            material_id=request.material_id,
            unit_id=request.unit_id,
            quantity=str(request.quantity),
            actor=actor.user_id,
        )

        uow = await self._get_uow()
        async with uow.write(request.material_id) as scope:
            await ensure_event_references(
                scope.references,
                request.material_id,
                request.unit_id,
                request.project_id,
            )
            event = InflowEvent(
                **request.model_dump(),
                created_by=actor.user_id,
            )
            event = await scope.events.append(event)

        logger.info(
            "inflow_recorded",
            event_id=event.id,
            material_id=event.material_id,
            quantity=str(event.quantity),
        )
        return event  # type: ignore[return-value]

    def to_response(self, event: InflowEvent) -> InflowResponse:
        """Convert result to API response."""
        return InflowResponse.from_entity(event)
