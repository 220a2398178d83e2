"""Core domain entities."""

from inventory_ledger.core.entities.events import (
    ActivityRecord,
    Event,
    EventKind,
    InflowEvent,
    LedgerEvent,
    OutflowEvent,
    ReturnStatus,
)
from inventory_ledger.core.entities.reference import (
    ActorContext,
    Category,
    Material,
    MaterialUnit,
    Project,
    ReferenceKind,
    Unit,
)
from inventory_ledger.core.entities.report import (
    ActivitySummary,
    CategoryEfficiencyRow,
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
from inventory_ledger.core.entities.stock import StockSnapshot, StockStatus, StockTotals

__all__ = [
    # Events
    "Event",
    "EventKind",
    "LedgerEvent",
    "InflowEvent",
    "OutflowEvent",
    "ReturnStatus",
    "ActivityRecord",
    # Reference data
    "ActorContext",
    "Category",
    "Material",
    "MaterialUnit",
    "Project",
    "ReferenceKind",
    "Unit",
    # Stock
    "StockSnapshot",
    "StockStatus",
    "StockTotals",
    # Reports
    "ReportPeriod",
    "ReportDimension",
    "ActivitySummary",
    "CategoryStockRow",
    "CategoryEfficiencyRow",
    "CriticalMaterialRow",
    "EfficiencyReport",
    "MaterialActivityRow",
    "ProjectActivityRow",
    "TrendReport",
    "TurnoverRow",
    "WeekdayActivityRow",
]
