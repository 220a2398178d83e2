"""Data transfer objects for API contracts."""

from inventory_ledger.application.dto.requests import (
    CreateCategoryRequest,
    CreateMaterialRequest,
    CreateProjectRequest,
    CreateUnitRequest,
    MaterialUnitRequest,
    RecordInflowRequest,
    RecordOutflowRequest,
    ReportRequest,
    UpdateCategoryRequest,
    UpdateInflowRequest,
    UpdateMaterialRequest,
    UpdateOutflowRequest,
    UpdateProjectRequest,
    UpdateUnitRequest,
)
from inventory_ledger.application.dto.responses import (
    ActivityFeedResponse,
    CriticalMaterialsResponse,
    DashboardResponse,
    DashboardSummary,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    InflowListResponse,
    InflowResponse,
    LowStockAlertsResponse,
    OutflowListResponse,
    OutflowResponse,
    OverdueReturnsResponse,
    ReferenceListResponse,
    ReferenceResponse,
    ReportResponse,
    StockListResponse,
    SummaryResponse,
    TrendResponse,
    TurnoverResponse,
)

__all__ = [
    # Requests
    "RecordInflowRequest",
    "RecordOutflowRequest",
    "UpdateInflowRequest",
    "UpdateOutflowRequest",
    "ReportRequest",
    "MaterialUnitRequest",
    "CreateMaterialRequest",
    "CreateUnitRequest",
    "CreateProjectRequest",
    "CreateCategoryRequest",
    "UpdateMaterialRequest",
    "UpdateUnitRequest",
    "UpdateProjectRequest",
    "UpdateCategoryRequest",
    # Responses
    "InflowResponse",
    "OutflowResponse",
    "InflowListResponse",
    "OutflowListResponse",
    "DeleteResponse",
    "StockListResponse",
    "LowStockAlertsResponse",
    "ReportResponse",
    "TrendResponse",
    "TurnoverResponse",
    "CriticalMaterialsResponse",
    "SummaryResponse",
    "DashboardSummary",
    "DashboardResponse",
    "ActivityFeedResponse",
    "OverdueReturnsResponse",
    "ReferenceResponse",
    "ReferenceListResponse",
    "HealthResponse",
    "ErrorResponse",
]
