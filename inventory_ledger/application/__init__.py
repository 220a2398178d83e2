"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates ledger logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from inventory_ledger.application.use_cases import (
    CreateReferenceUseCase,
    DeactivateReferenceUseCase,
    DeleteEventUseCase,
    GetActivityFeedUseCase,
    GetAnalyticsUseCase,
    GetDashboardUseCase,
    GetLowStockAlertsUseCase,
    GetReportUseCase,
    GetStockSnapshotUseCase,
    MarkReturnedUseCase,
    RecordInflowUseCase,
    RecordOutflowUseCase,
    UpdateEventUseCase,
)

__all__ = [
    "RecordInflowUseCase",
    "RecordOutflowUseCase",
    "UpdateEventUseCase",
    "DeleteEventUseCase",
    "MarkReturnedUseCase",
    "GetStockSnapshotUseCase",
    "GetLowStockAlertsUseCase",
    "GetReportUseCase",
    "GetAnalyticsUseCase",
    "GetDashboardUseCase",
    "GetActivityFeedUseCase",
    "CreateReferenceUseCase",
    "DeactivateReferenceUseCase",
]
