"""Stock level endpoints."""

from fastapi import APIRouter, Depends

from inventory_ledger.api.dependencies import (
    get_actor,
    get_low_stock_alerts_use_case,
    get_stock_snapshot_use_case,
)
from inventory_ledger.application.dto.responses import (
    ErrorResponse,
    LowStockAlertsResponse,
    StockListResponse,
)
from inventory_ledger.application.use_cases import (
    GetLowStockAlertsUseCase,
    GetStockSnapshotUseCase,
)
from inventory_ledger.core.entities.reference import ActorContext
from inventory_ledger.core.entities.stock import StockSnapshot

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.get("", response_model=StockListResponse)
async def list_stock(
    unit_id: str | None = None,
    actor: ActorContext = Depends(get_actor),
    use_case: GetStockSnapshotUseCase = Depends(get_stock_snapshot_use_case),
) -> StockListResponse:
    """Current stock for every active material."""
    snapshots = await use_case.execute(actor, unit_id=unit_id)
    items = snapshots if isinstance(snapshots, list) else [snapshots]
    return StockListResponse(items=items, total=len(items), unit_id=unit_id)


@router.get("/alerts", response_model=LowStockAlertsResponse)
async def low_stock_alerts(
    actor: ActorContext = Depends(get_actor),
    use_case: GetLowStockAlertsUseCase = Depends(get_low_stock_alerts_use_case),
) -> LowStockAlertsResponse:
    alerts = await use_case.execute(actor)
    return LowStockAlertsResponse(alerts=alerts, total=len(alerts))


@router.get(
    "/{material_id}",
    response_model=StockSnapshot,
    responses={404: {"model": ErrorResponse}},
)
async def get_material_stock(
    material_id: str,
    unit_id: str | None = None,
    actor: ActorContext = Depends(get_actor),
    use_case: GetStockSnapshotUseCase = Depends(get_stock_snapshot_use_case),
) -> StockSnapshot:
    """Stock for one material, optionally restricted to one unit."""
    return await use_case.execute(actor, material_id=material_id, unit_id=unit_id)  # type: ignore[return-value]
