"""Report row types produced by the report aggregator."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class ReportPeriod(str, Enum):
    """Look-back window presets."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    ALL = "all"

    @property
    def days(self) -> int | None:
        return {
            ReportPeriod.WEEK: 7,
            ReportPeriod.MONTH: 30,
            ReportPeriod.QUARTER: 90,
            ReportPeriod.YEAR: 365,
            ReportPeriod.ALL: None,
        }[self]


class ReportDimension(str, Enum):
    """Grouping dimensions for ``get_report``."""

    CATEGORY = "category"
    PROJECT = "project"
    MATERIAL = "material"
    WEEKDAY = "weekday"


class CategoryStockRow(BaseModel):
    category_id: str | None = None
    category_name: str
    total_stock: Decimal = Decimal("0")
    material_count: int = 0
    low_stock: int = 0
    out_of_stock: int = 0


class ProjectActivityRow(BaseModel):
    project_id: str
    project_name: str
    inflow_count: int = 0
    inflow_quantity: Decimal = Decimal("0")
    inflow_value: Decimal = Decimal("0")
    outflow_count: int = 0
    outflow_quantity: Decimal = Decimal("0")
    outflow_value: Decimal = Decimal("0")
    activities: int = 0
    last_activity: datetime | None = None


class MaterialActivityRow(BaseModel):
    material_id: str
    material_name: str | None = None
    inflow_quantity: Decimal = Decimal("0")
    outflow_quantity: Decimal = Decimal("0")
    activities: int = 0

    @computed_field
    @property
    def net_quantity(self) -> Decimal:
        return self.inflow_quantity - self.outflow_quantity


class WeekdayActivityRow(BaseModel):
    day: str
    iso_weekday: int
    activities: int = 0
    inflows: int = 0
    outflows: int = 0
    percentage: float = 0.0


class TrendReport(BaseModel):
    """Current window vs the window immediately before it."""

    window_days: int
    current_inflows: int = 0
    current_outflows: int = 0
    previous_inflows: int = 0
    previous_outflows: int = 0
    inflow_trend: float = 0.0
    outflow_trend: float = 0.0
    activity_trend: float = 0.0

    @computed_field
    @property
    def total_activity(self) -> int:
        return self.current_inflows + self.current_outflows


class TurnoverRow(BaseModel):
    material_id: str
    material_name: str
    total_inflow: Decimal
    total_outflow: Decimal
    current_stock: Decimal
    turnover_rate: Decimal
    velocity: Decimal


class CriticalMaterialRow(BaseModel):
    material_id: str
    material_name: str
    current_stock: Decimal
    min_stock_level: Decimal
    recent_activity: int
    criticality: Decimal


class CategoryEfficiencyRow(BaseModel):
    category_id: str | None = None
    category_name: str
    total: int
    efficient: int
    efficiency: float


class EfficiencyReport(BaseModel):
    efficiency: float = 0.0
    categories: list[CategoryEfficiencyRow] = Field(default_factory=list)


class ActivitySummary(BaseModel):
    """Window totals across both event kinds."""

    inflows: int = 0
    outflows: int = 0
    inflow_quantity: Decimal = Decimal("0")
    outflow_quantity: Decimal = Decimal("0")
    inflow_value: Decimal = Decimal("0")
    outflow_value: Decimal = Decimal("0")

    @computed_field
    @property
    def total_value(self) -> Decimal:
        return self.inflow_value + self.outflow_value
