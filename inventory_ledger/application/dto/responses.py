"""
Response DTOs for API endpoints.

These models define the contract for outgoing API responses.
Decimals serialize as strings so quantities never pass through floats.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from inventory_ledger.core.entities.common import utcnow
from inventory_ledger.core.entities.events import (
    ActivityRecord,
    InflowEvent,
    OutflowEvent,
    ReturnStatus,
)
from inventory_ledger.core.entities.report import (
    ActivitySummary,
    CategoryStockRow,
    CriticalMaterialRow,
    EfficiencyReport,
    MaterialActivityRow,
    ProjectActivityRow,
    ReportDimension,
    ReportPeriod,
    TrendReport,
    TurnoverRow,
    WeekdayActivityRow,
)
from inventory_ledger.core.entities.stock import StockSnapshot

# --- Ledger events ---


class InflowResponse(BaseModel):
    """Receipt response DTO."""

    id: str
    material_id: str
    unit_id: str
    project_id: str
    quantity: Decimal
    unit_price: Decimal | None = None
    total_value: Decimal | None = None
    delivery_date: datetime
    received_by: str
    supplier_name: str
    purpose: str
    batch_number: str | None = None
    expiry_date: datetime | None = None
    support_document: str | None = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, event: InflowEvent) -> "InflowResponse":
        return cls.model_validate(event.model_dump())


class OutflowResponse(BaseModel):
    """Release response DTO with derived return state."""

    id: str
    material_id: str
    unit_id: str
    project_id: str
    quantity: Decimal
    unit_price: Decimal | None = None
    total_value: Decimal | None = None
    release_date: datetime
    authorized_by: str
    received_by: str
    purpose: str
    return_date: datetime | None = None
    is_returned: bool = False
    return_status: ReturnStatus
    support_document: str | None = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls, event: OutflowEvent, now: datetime | None = None
    ) -> "OutflowResponse":
        return cls.model_validate(
            {**event.model_dump(), "return_status": event.return_status(now)}
        )


class InflowListResponse(BaseModel):
    """Paginated receipts."""

    items: list[InflowResponse]
    limit: int
    offset: int


class OutflowListResponse(BaseModel):
    """Paginated releases."""

    items: list[OutflowResponse]
    limit: int
    offset: int


class DeleteResponse(BaseModel):
    """Acknowledgement of a hard delete."""

    id: str
    message: str


# --- Stock ---


class StockListResponse(BaseModel):
    """Current stock for all active materials."""

    items: list[StockSnapshot]
    total: int
    unit_id: str | None = None


class LowStockAlertsResponse(BaseModel):
    """Materials at or below their minimum level."""

    alerts: list[StockSnapshot]
    total: int


# --- Reports ---


class ReportResponse(BaseModel):
    """Grouped report rows for one period and dimension."""

    period: ReportPeriod
    dimension: ReportDimension
    generated_at: datetime = Field(default_factory=utcnow)
    rows: (
        list[CategoryStockRow]
        | list[ProjectActivityRow]
        | list[MaterialActivityRow]
        | list[WeekdayActivityRow]
    )


class TrendResponse(BaseModel):
    """Week-over-week trend deltas."""

    trends: TrendReport

    @computed_field
    @property
    def total_activity(self) -> int:
        return self.trends.total_activity


class TurnoverResponse(BaseModel):
    items: list[TurnoverRow]


class CriticalMaterialsResponse(BaseModel):
    items: list[CriticalMaterialRow]


class SummaryResponse(BaseModel):
    """Window totals for the reports page."""

    period: ReportPeriod
    summary: ActivitySummary

    @computed_field
    @property
    def total_value(self) -> Decimal:
        return self.summary.total_value


class DashboardSummary(BaseModel):
    total_materials: int
    low_stock_count: int
    out_of_stock_count: int
    stock_health: float


class DashboardResponse(BaseModel):
    """Inventory overview."""

    summary: DashboardSummary
    stock_levels: list[StockSnapshot]
    recent_activities: list[ActivityRecord]
    low_stock_alerts: list[StockSnapshot]
    efficiency: EfficiencyReport


# --- Activity ---


class ActivityFeedResponse(BaseModel):
    items: list[ActivityRecord]


class OverdueReturnsResponse(BaseModel):
    items: list[OutflowResponse]
    total: int


# --- Reference data ---


class ReferenceResponse(BaseModel):
    """Material, unit, project or category."""

    id: str
    kind: str
    name: str
    description: str | None = None
    is_active: bool
    abbreviation: str | None = None
    category_id: str | None = None
    min_stock_level: Decimal | None = None
    unit_ids: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ReferenceListResponse(BaseModel):
    items: list[ReferenceResponse]
    total: int


# --- System ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: dict | str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=utcnow)
