"""Outflow (release) endpoints."""

from fastapi import APIRouter, Depends, Query, status

from inventory_ledger.api.dependencies import (
    get_actor,
    get_delete_event_use_case,
    get_event_use_case,
    get_list_events_use_case,
    get_mark_returned_use_case,
    get_overdue_returns_use_case,
    get_record_outflow_use_case,
    get_update_event_use_case,
)
from inventory_ledger.application.dto.requests import RecordOutflowRequest, UpdateOutflowRequest
from inventory_ledger.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    OutflowListResponse,
    OutflowResponse,
    OverdueReturnsResponse,
)
from inventory_ledger.application.use_cases import (
    DeleteEventUseCase,
    GetEventUseCase,
    ListEventsUseCase,
    ListOverdueReturnsUseCase,
    MarkReturnedUseCase,
    RecordOutflowUseCase,
    UpdateEventUseCase,
)
from inventory_ledger.core.entities.events import EventKind
from inventory_ledger.core.entities.reference import ActorContext

router = APIRouter(prefix="/api/outflows", tags=["outflows"])


@router.post(
    "",
    response_model=OutflowResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def record_outflow(
    request: RecordOutflowRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: RecordOutflowUseCase = Depends(get_record_outflow_use_case),
) -> OutflowResponse:
    """
    Release stock.

    Returns 409 INSUFFICIENT_STOCK with the available and requested
    quantities when the release exceeds current stock.
    """
    event = await use_case.execute(request, actor)
    return use_case.to_response(event)


@router.get("", response_model=OutflowListResponse)
async def list_outflows(
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    actor: ActorContext = Depends(get_actor),
    use_case: ListEventsUseCase = Depends(get_list_events_use_case),
) -> OutflowListResponse:
    """List releases, newest first."""
    events = await use_case.execute(EventKind.OUTFLOW, actor, limit=limit, offset=offset)
    return OutflowListResponse(
        items=[OutflowResponse.from_entity(e) for e in events],  # type: ignore[arg-type]
        limit=limit,
        offset=offset,
    )


@router.get("/overdue", response_model=OverdueReturnsResponse)
async def list_overdue_returns(
    actor: ActorContext = Depends(get_actor),
    use_case: ListOverdueReturnsUseCase = Depends(get_overdue_returns_use_case),
) -> OverdueReturnsResponse:
    """Releases past their return date that have not come back."""
    events = await use_case.execute(actor)
    return OverdueReturnsResponse(
        items=[OutflowResponse.from_entity(e) for e in events],
        total=len(events),
    )


@router.get(
    "/{outflow_id}",
    response_model=OutflowResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_outflow(
    outflow_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: GetEventUseCase = Depends(get_event_use_case),
) -> OutflowResponse:
    event = await use_case.execute(EventKind.OUTFLOW, outflow_id, actor)
    return OutflowResponse.from_entity(event)  # type: ignore[arg-type]


@router.put(
    "/{outflow_id}",
    response_model=OutflowResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_outflow(
    outflow_id: str,
    request: UpdateOutflowRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: UpdateEventUseCase = Depends(get_update_event_use_case),
) -> OutflowResponse:
    """Edit a release; raising the quantity re-checks available stock."""
    patch = request.model_dump(exclude_unset=True)
    event = await use_case.execute(EventKind.OUTFLOW, outflow_id, patch, actor)
    return OutflowResponse.from_entity(event)  # type: ignore[arg-type]


@router.post(
    "/{outflow_id}/return",
    response_model=OutflowResponse,
    responses={404: {"model": ErrorResponse}},
)
async def mark_returned(
    outflow_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: MarkReturnedUseCase = Depends(get_mark_returned_use_case),
) -> OutflowResponse:
    event = await use_case.execute(outflow_id, actor)
    return OutflowResponse.from_entity(event)


@router.delete(
    "/{outflow_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_outflow(
    outflow_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: DeleteEventUseCase = Depends(get_delete_event_use_case),
) -> DeleteResponse:
    deleted_id = await use_case.execute(EventKind.OUTFLOW, outflow_id, actor)
    return use_case.to_response(EventKind.OUTFLOW, deleted_id)
