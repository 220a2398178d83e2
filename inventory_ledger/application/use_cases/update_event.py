"""
Update Event Use Case: in-place edits of inflows and outflows.

Edits that could drive a unit ledger negative re-run the availability check
inside the same write scope as the update:

- an outflow whose quantity grows, or that moves to another material or unit
- an inflow whose quantity shrinks, or that moves away from its ledger
"""

from decimal import Decimal
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from inventory_ledger.application.services import (
    get_availability_validator,
    get_stock_aggregator,
)
from inventory_ledger.application.validation import (
    ensure_event_references,
    to_validation_error,
)
from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.common import utcnow
from inventory_ledger.core.entities.events import Event, EventKind, InflowEvent
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.exceptions import EventNotFoundError, InsufficientStockError
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)

_LEDGER_FIELDS = ("material_id", "unit_id")


async def ensure_inflow_removable(
    scope: IUnitOfWork,
    inflow: InflowEvent,
    replacement_quantity: Decimal | None = None,
) -> None:
    """
    Raise if dropping ``inflow`` from its ledger (optionally putting back
    ``replacement_quantity``) would leave outflows exceeding inflows.
    """
    aggregator = get_stock_aggregator(scope)
    totals = await aggregator.compute_stock(
        inflow.material_id, inflow.unit_id, exclude_event_id=inflow.id
    )
    remaining_in = totals.total_inflow + (replacement_quantity or Decimal("0"))
    if totals.total_outflow > remaining_in:
        material = await scope.references.get_material(inflow.material_id)
        raise InsufficientStockError(
            material_id=inflow.material_id,
            material_name=material.name if material else inflow.material_id,
            requested=totals.total_outflow,
            available=remaining_in,
            unit_id=inflow.unit_id,
        )


class UpdateEventUseCase:
    """Patch an event, keeping every unit ledger non-negative."""

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
        event_id: str,
        patch: dict[str, Any],
        actor: ActorContext,
    ) -> Event:
        """Apply ``patch`` (only the fields being changed) to an event."""
        logger.info(
            "update_event_started",
            kind=kind.value,
            event_id=event_id,
            fields=sorted(patch),
            actor=actor.user_id,
        )

        uow = await self._get_uow()
        async with uow.write() as scope:
            existing = await scope.events.get(kind, event_id)
            if existing is None:
                raise EventNotFoundError(kind.value, event_id)

            try:
                merged = type(existing).model_validate(
                    {**existing.model_dump(), **patch, "updated_at": utcnow()}
                )
            except PydanticValidationError as e:
                raise to_validation_error(e) from e

            if any(f in patch for f in ("material_id", "unit_id", "project_id")):
                await ensure_event_references(
                    scope.references,
                    merged.material_id,
                    merged.unit_id,
                    merged.project_id,
                )

            moved = any(getattr(merged, f) != getattr(existing, f) for f in _LEDGER_FIELDS)

            if kind is EventKind.OUTFLOW:
                if moved or merged.quantity > existing.quantity:
                    validator = get_availability_validator(scope)
                    await validator.authorize(
                        merged.material_id,
                        merged.unit_id,
                        merged.quantity,
                        exclude_event_id=event_id,
                    )
            elif moved:
                await ensure_inflow_removable(scope, existing)
            elif merged.quantity < existing.quantity:
                await ensure_inflow_removable(scope, existing, merged.quantity)

            changes = {field: getattr(merged, field) for field in patch}
            changes["total_value"] = merged.total_value
            updated = await scope.events.update(kind, event_id, changes)
            if updated is None:
                raise EventNotFoundError(kind.value, event_id)

        logger.info(
            "event_updated",
            kind=kind.value,
            event_id=event_id,
            quantity=str(updated.quantity),
        )
        return updated
