"""Activity feed endpoint."""

from fastapi import APIRouter, Depends, Query

from inventory_ledger.api.dependencies import get_activity_feed_use_case, get_actor
from inventory_ledger.application.dto.responses import ActivityFeedResponse
from inventory_ledger.application.use_cases import GetActivityFeedUseCase
from inventory_ledger.core.entities.reference import ActorContext

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=ActivityFeedResponse)
async def get_activity(
    limit: int | None = Query(default=None, ge=1, le=100),
    actor: ActorContext = Depends(get_actor),
    use_case: GetActivityFeedUseCase = Depends(get_activity_feed_use_case),
) -> ActivityFeedResponse:
    """Newest inflows and outflows, merged by creation time."""
    return ActivityFeedResponse(items=await use_case.execute(actor, limit=limit))
