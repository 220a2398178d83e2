"""Reporting and analytics endpoints."""

from fastapi import APIRouter, Depends, Query

from inventory_ledger.api.dependencies import (
    get_actor,
    get_analytics_use_case,
    get_dashboard_use_case,
    get_report_use_case,
)
from inventory_ledger.application.dto.requests import ReportRequest
from inventory_ledger.application.dto.responses import (
    CriticalMaterialsResponse,
    DashboardResponse,
    ReportResponse,
    SummaryResponse,
    TrendResponse,
    TurnoverResponse,
)
from inventory_ledger.application.use_cases import (
    GetAnalyticsUseCase,
    GetDashboardUseCase,
    GetReportUseCase,
)
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.entities.report import EfficiencyReport, ReportDimension, ReportPeriod

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("", response_model=ReportResponse)
async def get_report(
    period: ReportPeriod = ReportPeriod.MONTH,
    dimension: ReportDimension = ReportDimension.CATEGORY,
    limit: int | None = Query(default=None, ge=1, le=100),
    actor: ActorContext = Depends(get_actor),
    use_case: GetReportUseCase = Depends(get_report_use_case),
) -> ReportResponse:
    """
    Grouped report.

    ``dimension`` is one of category, project, material or weekday;
    ``period`` one of week, month, quarter, year or all.
    """
    request = ReportRequest(period=period, dimension=dimension, limit=limit)
    return await use_case.execute(request, actor)


@router.get("/trends", response_model=TrendResponse)
async def get_trends(
    actor: ActorContext = Depends(get_actor),
    use_case: GetAnalyticsUseCase = Depends(get_analytics_use_case),
) -> TrendResponse:
    return TrendResponse(trends=await use_case.trends(actor))


@router.get("/turnover", response_model=TurnoverResponse)
async def get_turnover(
    limit: int | None = Query(default=None, ge=1, le=100),
    actor: ActorContext = Depends(get_actor),
    use_case: GetAnalyticsUseCase = Depends(get_analytics_use_case),
) -> TurnoverResponse:
    return TurnoverResponse(items=await use_case.turnover(actor, limit=limit))


@router.get("/critical", response_model=CriticalMaterialsResponse)
async def get_critical_materials(
    limit: int | None = Query(default=None, ge=1, le=100),
    actor: ActorContext = Depends(get_actor),
    use_case: GetAnalyticsUseCase = Depends(get_analytics_use_case),
) -> CriticalMaterialsResponse:
    """Low-stock materials ranked by recent activity times deficit."""
    return CriticalMaterialsResponse(items=await use_case.criticality(actor, limit=limit))


@router.get("/efficiency", response_model=EfficiencyReport)
async def get_efficiency(
    actor: ActorContext = Depends(get_actor),
    use_case: GetAnalyticsUseCase = Depends(get_analytics_use_case),
) -> EfficiencyReport:
    return await use_case.efficiency(actor)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    period: ReportPeriod = ReportPeriod.MONTH,
    actor: ActorContext = Depends(get_actor),
    use_case: GetAnalyticsUseCase = Depends(get_analytics_use_case),
) -> SummaryResponse:
    return SummaryResponse(period=period, summary=await use_case.summary(period, actor))


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    actor: ActorContext = Depends(get_actor),
    use_case: GetDashboardUseCase = Depends(get_dashboard_use_case),
) -> DashboardResponse:
    return await use_case.execute(actor)
