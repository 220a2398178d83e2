"""Application use cases."""

from inventory_ledger.application.use_cases.delete_event import DeleteEventUseCase
from inventory_ledger.application.use_cases.get_activity_feed import (
    GetActivityFeedUseCase,
    ListOverdueReturnsUseCase,
)
from inventory_ledger.application.use_cases.get_analytics import GetAnalyticsUseCase
from inventory_ledger.application.use_cases.get_dashboard import GetDashboardUseCase
from inventory_ledger.application.use_cases.get_report import GetReportUseCase
from inventory_ledger.application.use_cases.get_stock import (
    GetLowStockAlertsUseCase,
    GetStockSnapshotUseCase,
)
from inventory_ledger.application.use_cases.manage_references import (
    CreateReferenceUseCase,
    DeactivateReferenceUseCase,
    GetReferenceUseCase,
    ListReferencesUseCase,
    UpdateReferenceUseCase,
    to_reference_response,
)
from inventory_ledger.application.use_cases.mark_returned import MarkReturnedUseCase
from inventory_ledger.application.use_cases.query_events import GetEventUseCase, ListEventsUseCase
from inventory_ledger.application.use_cases.record_inflow import RecordInflowUseCase
from inventory_ledger.application.use_cases.record_outflow import RecordOutflowUseCase
from inventory_ledger.application.use_cases.update_event import UpdateEventUseCase

__all__ = [
    "RecordInflowUseCase",
    "RecordOutflowUseCase",
    "UpdateEventUseCase",
    "DeleteEventUseCase",
    "MarkReturnedUseCase",
    "ListEventsUseCase",
    "GetEventUseCase",
    "GetStockSnapshotUseCase",
    "GetLowStockAlertsUseCase",
    "GetReportUseCase",
    "GetAnalyticsUseCase",
    "GetDashboardUseCase",
    "GetActivityFeedUseCase",
    "ListOverdueReturnsUseCase",
    "CreateReferenceUseCase",
    "DeactivateReferenceUseCase",
    "ListReferencesUseCase",
    "UpdateReferenceUseCase",
    "GetReferenceUseCase",
    "to_reference_response",
]
