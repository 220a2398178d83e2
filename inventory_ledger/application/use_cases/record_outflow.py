"""Record Outflow Use Case: release of stock with availability check."""

from inventory_ledger.application.dto.requests import RecordOutflowRequest
from inventory_ledger.application.dto.responses import OutflowResponse
from inventory_ledger.application.services import get_availability_validator
from inventory_ledger.application.validation import ensure_event_references
from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.events import OutflowEvent
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)


class RecordOutflowUseCase:
    """
    Release stock.

    The availability read and the append share one write scope, so two
    concurrent releases of the same material cannot both pass the check
    against the same balance.
    """

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, request: RecordOutflowRequest, actor: ActorContext) -> OutflowEvent:
        """Execute record outflow use case.

        Raises:
            MaterialNotFoundError: material missing or inactive
            ReferenceNotFoundError: unit or project missing or inactive
            InsufficientStockError: quantity exceeds the unit's current stock
        """
        logger.info(
            "record_outflow_started",
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
            event = OutflowEvent(
                **request.model_dump(),
                created_by=actor.user_id,
            )
            validator = get_availability_validator(scope)
            result = await validator.authorize(event.material_id, event.unit_id, event.quantity)
            event = await scope.events.append(event)

        logger.info(
            "outflow_recorded",
            event_id=event.id,
            material_id=event.material_id,
            quantity=str(event.quantity),
            remaining=str(result.available - event.quantity),
        )
        return event  # type: ignore[return-value]

    def to_response(self, event: OutflowEvent) -> OutflowResponse:
        """Convert result to API response."""
        return OutflowResponse.from_entity(event)
