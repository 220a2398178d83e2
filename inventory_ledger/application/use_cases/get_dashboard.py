"""Get Dashboard Use Case: inventory overview."""

from inventory_ledger.application.dto.responses import DashboardResponse, DashboardSummary
from inventory_ledger.application.services import (
    get_activity_feed,
    get_classifier,
    get_stock_aggregator,
)
from inventory_ledger.config import get_settings
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.entities.stock import StockStatus
from inventory_ledger.core.interfaces import IUnitOfWork


class GetDashboardUseCase:
    """Summary counts, stock levels, recent activity and alerts in one snapshot."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(self, actor: ActorContext) -> DashboardResponse:
        settings = get_settings().ledger
        classifier = get_classifier()

        uow = await self._get_uow()
        async with uow.read() as scope:
            snapshots = await get_stock_aggregator(scope).compute_all_stock()
            activity = await get_activity_feed(scope).recent(settings.activity_feed_limit)

        alerts = classifier.alerts(snapshots)
        return DashboardResponse(
            summary=DashboardSummary(
                total_materials=len(snapshots),
                low_stock_count=sum(1 for s in alerts if s.status == StockStatus.LOW_STOCK),
                out_of_stock_count=sum(
                    1 for s in alerts if s.status == StockStatus.OUT_OF_STOCK
                ),
                stock_health=classifier.fleet_health(snapshots),
            ),
            stock_levels=snapshots[: settings.dashboard_stock_limit],
            recent_activities=activity,
            low_stock_alerts=alerts[: settings.dashboard_alert_limit],
            efficiency=classifier.efficiency(snapshots),
        )
