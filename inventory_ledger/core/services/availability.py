"""Outflow authorization against current stock."""

from dataclasses import dataclass
from decimal import Decimal

from inventory_ledger.config import get_logger
from inventory_ledger.core.exceptions import InsufficientStockError, MaterialNotFoundError
from inventory_ledger.core.interfaces.reference_store import IReferenceStore
from inventory_ledger.core.services.stock_aggregator import StockAggregator

logger = get_logger(__name__)


@dataclass
class AvailabilityResult:
    """Outcome of an availability check."""

    material_id: str
    material_name: str
    unit_id: str | None
    requested: Decimal
    available: Decimal

    @property
    def ok(self) -> bool:
        return self.requested <= self.available


class AvailabilityValidator:
    """
    Decides whether a proposed outflow fits in current stock.

    Callers must run ``authorize`` and the subsequent write inside one
    ``IUnitOfWork.write()`` scope; on its own the check is only advisory.
    """

    def __init__(
        self,
        reference_store: IReferenceStore,
        aggregator: StockAggregator,
    ) -> None:
        self._references = reference_store
        self._aggregator = aggregator

    async def check(
        self,
        material_id: str,
        unit_id: str | None,
        requested: Decimal,
        exclude_event_id: str | None = None,
    ) -> AvailabilityResult:
        """Return the check result without raising on a shortfall."""
        material = await self._references.get_material(material_id)
        if material is None or not material.is_active:
            raise MaterialNotFoundError(material_id)

        totals = await self._aggregator.compute_stock(
            material_id, unit_id, exclude_event_id=exclude_event_id
        )
        return AvailabilityResult(
            material_id=material_id,
            material_name=material.name,
            unit_id=unit_id,
            requested=requested,
            available=totals.current_stock,
        )

    async def authorize(
        self,
        material_id: str,
        unit_id: str | None,
        requested: Decimal,
        exclude_event_id: str | None = None,
    ) -> AvailabilityResult:
        """Raise ``InsufficientStockError`` when ``requested`` exceeds stock."""
        result = await self.check(material_id, unit_id, requested, exclude_event_id)
        if not result.ok:
            logger.info(
                "insufficient_stock",
                material_id=material_id,
                unit_id=unit_id,
                requested=str(requested),
                available=str(result.available),
            )
            raise InsufficientStockError(
                material_id=material_id,
                material_name=result.material_name,
                requested=requested,
                available=result.available,
                unit_id=unit_id,
            )
        return result
