"""Inflow (receipt) endpoints."""

from fastapi import APIRouter, Depends, Query, status

from inventory_ledger.api.dependencies import (
    get_actor,
    get_delete_event_use_case,
    get_event_use_case,
    get_list_events_use_case,
    get_record_inflow_use_case,
    get_update_event_use_case,
)
from inventory_ledger.application.dto.requests import RecordInflowRequest, UpdateInflowRequest
from inventory_ledger.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    InflowListResponse,
    InflowResponse,
)
from inventory_ledger.application.use_cases import (
    DeleteEventUseCase,
    GetEventUseCase,
    ListEventsUseCase,
    RecordInflowUseCase,
    UpdateEventUseCase,
)
from inventory_ledger.core.entities.events import EventKind
from inventory_ledger.core.entities.reference import ActorContext

router = APIRouter(prefix="/api/inflows", tags=["inflows"])


@router.post(
    "",
    response_model=InflowResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def record_inflow(
    request: RecordInflowRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: RecordInflowUseCase = Depends(get_record_inflow_use_case),
) -> InflowResponse:
    """Record a receipt of stock."""
    event = await use_case.execute(request, actor)
    return use_case.to_response(event)


@router.get("", response_model=InflowListResponse)
async def list_inflows(
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    actor: ActorContext = Depends(get_actor),
    use_case: ListEventsUseCase = Depends(get_list_events_use_case),
) -> InflowListResponse:
    """List receipts, newest first."""
    events = await use_case.execute(EventKind.INFLOW, actor, limit=limit, offset=offset)
    return InflowListResponse(
        items=[InflowResponse.from_entity(e) for e in events],  # type: ignore[arg-type]
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{inflow_id}",
    response_model=InflowResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_inflow(
    inflow_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: GetEventUseCase = Depends(get_event_use_case),
) -> InflowResponse:
    event = await use_case.execute(EventKind.INFLOW, inflow_id, actor)
    return InflowResponse.from_entity(event)  # type: ignore[arg-type]


@router.put(
    "/{inflow_id}",
    response_model=InflowResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_inflow(
    inflow_id: str,
    request: UpdateInflowRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: UpdateEventUseCase = Depends(get_update_event_use_case),
) -> InflowResponse:
    """
    Edit a receipt.

    Lowering the quantity is refused when the outflows already recorded
    against the material would exceed what remains.
    """
    patch = request.model_dump(exclude_unset=True)
    event = await use_case.execute(EventKind.INFLOW, inflow_id, patch, actor)
    return InflowResponse.from_entity(event)  # type: ignore[arg-type]


@router.delete(
    "/{inflow_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_inflow(
    inflow_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: DeleteEventUseCase = Depends(get_delete_event_use_case),
) -> DeleteResponse:
    deleted_id = await use_case.execute(EventKind.INFLOW, inflow_id, actor)
    return use_case.to_response(EventKind.INFLOW, deleted_id)
