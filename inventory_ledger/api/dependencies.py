"""
Dependency injection container for FastAPI.

Provides use case instances and the caller's actor context to route handlers.
"""

from fastapi import Header, HTTPException, status

from inventory_ledger.application.use_cases import (
    CreateReferenceUseCase,
    DeactivateReferenceUseCase,
    DeleteEventUseCase,
    GetActivityFeedUseCase,
    GetAnalyticsUseCase,
    GetDashboardUseCase,
    GetEventUseCase,
    GetLowStockAlertsUseCase,
    GetReferenceUseCase,
    GetReportUseCase,
    GetStockSnapshotUseCase,
    ListEventsUseCase,
    ListOverdueReturnsUseCase,
    ListReferencesUseCase,
    MarkReturnedUseCase,
    RecordInflowUseCase,
    RecordOutflowUseCase,
    UpdateEventUseCase,
    UpdateReferenceUseCase,
)
from inventory_ledger.core.entities.reference import ActorContext


def get_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> ActorContext:
    """
    Actor context issued by the authentication layer in front of the API.

    The ledger records the id as the event author and does no role checks.
    """
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Actor-Id header",
        )
    return ActorContext(user_id=x_actor_id, role=x_actor_role)


# Event use cases
def get_record_inflow_use_case() -> RecordInflowUseCase:
    return RecordInflowUseCase()


def get_record_outflow_use_case() -> RecordOutflowUseCase:
    return RecordOutflowUseCase()


def get_update_event_use_case() -> UpdateEventUseCase:
    return UpdateEventUseCase()


def get_delete_event_use_case() -> DeleteEventUseCase:
    return DeleteEventUseCase()


def get_mark_returned_use_case() -> MarkReturnedUseCase:
    return MarkReturnedUseCase()


def get_list_events_use_case() -> ListEventsUseCase:
    return ListEventsUseCase()


def get_event_use_case() -> GetEventUseCase:
    return GetEventUseCase()


# Stock and reports
def get_stock_snapshot_use_case() -> GetStockSnapshotUseCase:
    return GetStockSnapshotUseCase()


def get_low_stock_alerts_use_case() -> GetLowStockAlertsUseCase:
    return GetLowStockAlertsUseCase()


def get_report_use_case() -> GetReportUseCase:
    return GetReportUseCase()


def get_analytics_use_case() -> GetAnalyticsUseCase:
    return GetAnalyticsUseCase()


def get_dashboard_use_case() -> GetDashboardUseCase:
    return GetDashboardUseCase()


# Activity
def get_activity_feed_use_case() -> GetActivityFeedUseCase:
    return GetActivityFeedUseCase()


def get_overdue_returns_use_case() -> ListOverdueReturnsUseCase:
    return ListOverdueReturnsUseCase()


# Reference data
def get_create_reference_use_case() -> CreateReferenceUseCase:
    return CreateReferenceUseCase()


def get_deactivate_reference_use_case() -> DeactivateReferenceUseCase:
    return DeactivateReferenceUseCase()


def get_list_references_use_case() -> ListReferencesUseCase:
    return ListReferencesUseCase()


def get_update_reference_use_case() -> UpdateReferenceUseCase:
    return UpdateReferenceUseCase()


def get_reference_use_case() -> GetReferenceUseCase:
    return GetReferenceUseCase()
