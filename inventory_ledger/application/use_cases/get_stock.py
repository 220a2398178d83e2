"""Stock snapshot and low-stock alert use cases."""

from inventory_ledger.application.services import get_classifier, get_stock_aggregator
from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.entities.stock import StockSnapshot
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)


class GetStockSnapshotUseCase:
    """
    Current stock, derived from the full event history.

    With ``material_id`` returns one snapshot (MaterialNotFoundError when the
    material is missing or inactive); without it, one per active material.
    ``unit_id`` restricts the sums to that unit's ledger.
    """

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self,
        actor: ActorContext,
        material_id: str | None = None,
        unit_id: str | None = None,
    ) -> StockSnapshot | list[StockSnapshot]:
        uow = await self._get_uow()
        async with uow.read() as scope:
            aggregator = get_stock_aggregator(scope)
            if material_id is not None:
                return await aggregator.snapshot(material_id, unit_id)
            return await aggregator.compute_all_stock(unit_id)


class GetLowStockAlertsUseCase:
    """Active materials classified LowStock or OutOfStock."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, actor: ActorContext) -> list[StockSnapshot]:
        uow = await self._get_uow()
        async with uow.read() as scope:
            snapshots = await get_stock_aggregator(scope).compute_all_stock()

        alerts = get_classifier().alerts(snapshots)
        logger.debug("low_stock_alerts", count=len(alerts), materials=len(snapshots))
        return alerts
