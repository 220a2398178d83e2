"""Trend, turnover, criticality, efficiency and summary analytics."""

from datetime import datetime, timedelta

from inventory_ledger.application.services import (
    get_activity_feed,
    get_classifier,
    get_report_aggregator,
    get_stock_aggregator,
)
from inventory_ledger.application.use_cases.get_report import load_period_events
from inventory_ledger.config import get_logger, get_settings
from inventory_ledger.core.entities.common import utc, utcnow
from inventory_ledger.core.entities.events import EventKind
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.entities.report import (
    ActivitySummary,
    CriticalMaterialRow,
    EfficiencyReport,
    ReportPeriod,
    TrendReport,
    TurnoverRow,
)
from inventory_ledger.core.interfaces import IUnitOfWork

logger = get_logger(__name__)


class GetAnalyticsUseCase:
    """Analytics over stock snapshots and event windows."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work
        self._settings = get_settings().ledger

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def trends(self, actor: ActorContext, now: datetime | None = None) -> TrendReport:
        """Current window against the one before it, on domain dates."""
        now = utc(now) if now is not None else utcnow()
        window = self._settings.trend_window_days
        start = now - timedelta(days=window * 2)

        uow = await self._get_uow()
        async with uow.read() as scope:
            inflows = await scope.events.list_by_date_range(EventKind.INFLOW, start=start, end=now)
            outflows = await scope.events.list_by_date_range(
                EventKind.OUTFLOW, start=start, end=now
            )

        return get_report_aggregator().trends([*inflows, *outflows], now, window_days=window)

    async def turnover(self, actor: ActorContext, limit: int | None = None) -> list[TurnoverRow]:
        uow = await self._get_uow()
        async with uow.read() as scope:
            snapshots = await get_stock_aggregator(scope).compute_all_stock()
        return get_report_aggregator().turnover(
            snapshots, limit=limit or self._settings.turnover_limit
        )

    async def criticality(
        self, actor: ActorContext, limit: int | None = None
    ) -> list[CriticalMaterialRow]:
        """Low-stock materials ranked by recent activity times deficit."""
        uow = await self._get_uow()
        async with uow.read() as scope:
            snapshots = await get_stock_aggregator(scope).compute_all_stock()
            recent = await get_activity_feed(scope).recent_events(
                self._settings.recent_activity_window
            )

        alerts = get_classifier().alerts(snapshots)
        return get_report_aggregator().criticality(
            alerts, recent, limit=limit or self._settings.critical_limit
        )

    async def efficiency(self, actor: ActorContext) -> EfficiencyReport:
        uow = await self._get_uow()
        async with uow.read() as scope:
            snapshots = await get_stock_aggregator(scope).compute_all_stock()
        return get_classifier().efficiency(snapshots)

    async def summary(
        self,
        period: ReportPeriod,
        actor: ActorContext,
        now: datetime | None = None,
    ) -> ActivitySummary:
        now = utc(now) if now is not None else utcnow()
        uow = await self._get_uow()
        async with uow.read() as scope:
            inflows, outflows = await load_period_events(scope, period, now)

        summary = get_report_aggregator().summary(inflows, outflows)
        logger.info(
            "summary_generated",
            period=period.value,
            inflows=summary.inflows,
            outflows=summary.outflows,
            actor=actor.user_id,
        )
        return summary
