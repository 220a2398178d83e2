"""Get Report Use Case: period-filtered aggregates by dimension."""

from datetime import datetime

from inventory_ledger.application.dto.requests import ReportRequest
from inventory_ledger.application.dto.responses import ReportResponse
from inventory_ledger.application.services import get_report_aggregator, get_stock_aggregator
from inventory_ledger.config import get_logger, get_settings
from inventory_ledger.core.entities.common import utc, utcnow
from inventory_ledger.core.entities.events import EventKind, InflowEvent, OutflowEvent
from inventory_ledger.core.entities.reference import ActorContext, ReferenceKind
from inventory_ledger.core.entities.report import ReportDimension, ReportPeriod
from inventory_ledger.core.interfaces import IUnitOfWork
from inventory_ledger.core.services import period_cutoff

logger = get_logger(__name__)


async def load_period_events(
    scope: IUnitOfWork,
    period: ReportPeriod,
    now: datetime,
) -> tuple[list[InflowEvent], list[OutflowEvent]]:
    """Inflows and outflows whose domain date falls inside the period."""
    cutoff = period_cutoff(period, now)
    inflows = await scope.events.list_by_date_range(EventKind.INFLOW, start=cutoff)
    outflows = await scope.events.list_by_date_range(EventKind.OUTFLOW, start=cutoff)
    return inflows, outflows  # type: ignore[return-value]


async def reference_names(scope: IUnitOfWork, kind: ReferenceKind, active_only: bool) -> dict[str, str]:
    entities = await scope.references.list_all(kind, active_only=active_only)
    return {e.id: e.name for e in entities if e.id is not None}


class GetReportUseCase:
    """
    Grouped report for one dimension.

    The category dimension groups current stock snapshots and ignores the
    period; project, material and weekday group the period's events.
    All queries run in one read snapshot.
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
        request: ReportRequest,
        actor: ActorContext,
        now: datetime | None = None,
    ) -> ReportResponse:
        now = utc(now) if now is not None else utcnow()
        aggregator = get_report_aggregator()
        uow = await self._get_uow()

        async with uow.read() as scope:
            if request.dimension is ReportDimension.CATEGORY:
                snapshots = await get_stock_aggregator(scope).compute_all_stock()
                rows = aggregator.by_category(snapshots)
            else:
                inflows, outflows = await load_period_events(scope, request.period, now)
                if request.dimension is ReportDimension.PROJECT:
                    names = await reference_names(scope, ReferenceKind.PROJECT, active_only=True)
                    rows = aggregator.by_project(inflows, outflows, names)
                elif request.dimension is ReportDimension.MATERIAL:
                    names = await reference_names(scope, ReferenceKind.MATERIAL, active_only=False)
                    limit = request.limit or get_settings().ledger.top_movers_limit
                    rows = aggregator.by_material(inflows, outflows, names, limit=limit)
                else:
                    rows = aggregator.by_weekday([*inflows, *outflows])

        logger.info(
            "report_generated",
            period=request.period.value,
            dimension=request.dimension.value,
            rows=len(rows),
            actor=actor.user_id,
        )
        return ReportResponse(
            period=request.period,
            dimension=request.dimension,
            generated_at=now,
            rows=rows,
        )
