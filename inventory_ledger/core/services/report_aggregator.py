"""
Report aggregation.

Pure grouping functions over already-loaded events and stock snapshots.
Every grouping is keyed by entity id, never by display name, so two
materials or projects that share a name stay separate rows.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from decimal import Decimal

from inventory_ledger.core.entities.common import utc
from inventory_ledger.core.entities.events import Event, EventKind, InflowEvent, OutflowEvent
from inventory_ledger.core.entities.report import (
    ActivitySummary,
    CategoryStockRow,
    CriticalMaterialRow,
    MaterialActivityRow,
    ProjectActivityRow,
    ReportPeriod,
    TrendReport,
    TurnoverRow,
    WeekdayActivityRow,
)
from inventory_ledger.core.entities.stock import StockSnapshot, StockStatus
from inventory_ledger.core.services.threshold_classifier import UNCATEGORIZED, ThresholdClassifier

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

ONE = Decimal("1")
ZERO = Decimal("0")


def period_cutoff(period: ReportPeriod, now: datetime) -> datetime | None:
    """Start of the look-back window, or None for ``all``."""
    if period.days is None:
        return None
    return utc(now) - timedelta(days=period.days)


def percent_change(current: int, previous: int) -> float:
    """Relative change; 100 when growing from nothing, 0 when both are empty."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def turnover_rate(total_outflow: Decimal, current_stock: Decimal) -> Decimal:
    """Stock-equivalents moved: outflow over current stock floored at one."""
    return total_outflow / max(current_stock, ONE)


class ReportAggregator:
    """Groups events and snapshots into report rows."""

    def __init__(self, classifier: ThresholdClassifier | None = None) -> None:
        self._classifier = classifier or ThresholdClassifier()

    @staticmethod
    def filter_by_period(
        events: Iterable[Event], period: ReportPeriod, now: datetime
    ) -> list[Event]:
        cutoff = period_cutoff(period, now)
        if cutoff is None:
            return list(events)
        return [e for e in events if e.event_date >= cutoff]

    def by_category(self, snapshots: Sequence[StockSnapshot]) -> list[CategoryStockRow]:
        rows: dict[str | None, CategoryStockRow] = {}
        for snapshot in snapshots:
            row = rows.get(snapshot.category_id)
            if row is None:
                row = CategoryStockRow(
                    category_id=snapshot.category_id,
                    category_name=snapshot.category_name or UNCATEGORIZED,
                )
                rows[snapshot.category_id] = row
            row.total_stock += snapshot.current_stock
            row.material_count += 1

            status = self._classifier.classify(snapshot.current_stock, snapshot.min_stock_level)
            if status == StockStatus.OUT_OF_STOCK:
                row.out_of_stock += 1
            elif status == StockStatus.LOW_STOCK:
                row.low_stock += 1

        return sorted(rows.values(), key=lambda r: r.total_stock, reverse=True)

    @staticmethod
    def by_project(
        inflows: Sequence[InflowEvent],
        outflows: Sequence[OutflowEvent],
        project_names: dict[str, str],
    ) -> list[ProjectActivityRow]:
        """Activity per project; every known project gets a row, active or idle."""
        rows: dict[str, ProjectActivityRow] = {
            pid: ProjectActivityRow(project_id=pid, project_name=name)
            for pid, name in project_names.items()
        }

        def row_for(project_id: str) -> ProjectActivityRow:
            if project_id not in rows:
                rows[project_id] = ProjectActivityRow(
                    project_id=project_id, project_name=project_id
                )
            return rows[project_id]

        for event in inflows:
            row = row_for(event.project_id)
            row.inflow_count += 1
            row.inflow_quantity += event.quantity
            row.inflow_value += event.total_value or ZERO
            _touch(row, event)

        for event in outflows:
            row = row_for(event.project_id)
            row.outflow_count += 1
            row.outflow_quantity += event.quantity
            row.outflow_value += event.total_value or ZERO
            _touch(row, event)

        return sorted(rows.values(), key=lambda r: r.activities, reverse=True)

    @staticmethod
    def by_material(
        inflows: Sequence[InflowEvent],
        outflows: Sequence[OutflowEvent],
        material_names: dict[str, str],
        limit: int = 10,
    ) -> list[MaterialActivityRow]:
        """Top movers by number of events."""
        rows: dict[str, MaterialActivityRow] = {}

        def row_for(material_id: str) -> MaterialActivityRow:
            if material_id not in rows:
                rows[material_id] = MaterialActivityRow(
                    material_id=material_id,
                    material_name=material_names.get(material_id),
                )
            return rows[material_id]

        for event in inflows:
            row = row_for(event.material_id)
            row.inflow_quantity += event.quantity
            row.activities += 1
        for event in outflows:
            row = row_for(event.material_id)
            row.outflow_quantity += event.quantity
            row.activities += 1

        ranked = sorted(rows.values(), key=lambda r: r.activities, reverse=True)
        return ranked[:limit]

    @staticmethod
    def by_weekday(events: Iterable[Event]) -> list[WeekdayActivityRow]:
        """Monday-first buckets on the event's domain date."""
        rows = [
            WeekdayActivityRow(day=name, iso_weekday=i + 1)
            for i, name in enumerate(WEEKDAYS)
        ]
        for event in events:
            row = rows[event.event_date.isoweekday() - 1]
            row.activities += 1
            if event.kind == EventKind.INFLOW:
                row.inflows += 1
            else:
                row.outflows += 1

        peak = max(max(r.activities for r in rows), 1)
        for row in rows:
            row.percentage = row.activities / peak * 100
        return rows

    @staticmethod
    def trends(
        events: Iterable[Event], now: datetime, window_days: int = 7
    ) -> TrendReport:
        """Compare the last ``window_days`` with the window before it."""
        now = utc(now)
        current_start = now - timedelta(days=window_days)
        previous_start = now - timedelta(days=window_days * 2)

        report = TrendReport(window_days=window_days)
        for event in events:
            is_inflow = event.kind == EventKind.INFLOW
            if event.event_date >= current_start:
                if is_inflow:
                    report.current_inflows += 1
                else:
                    report.current_outflows += 1
            elif event.event_date >= previous_start:
                if is_inflow:
                    report.previous_inflows += 1
                else:
                    report.previous_outflows += 1

        report.inflow_trend = percent_change(report.current_inflows, report.previous_inflows)
        report.outflow_trend = percent_change(report.current_outflows, report.previous_outflows)
        report.activity_trend = percent_change(
            report.current_inflows + report.current_outflows,
            report.previous_inflows + report.previous_outflows,
        )
        return report

    @staticmethod
    def turnover(snapshots: Iterable[StockSnapshot], limit: int | None = None) -> list[TurnoverRow]:
        rows = [
            TurnoverRow(
                material_id=s.material_id,
                material_name=s.material_name,
                total_inflow=s.total_inflow,
                total_outflow=s.total_outflow,
                current_stock=s.current_stock,
                turnover_rate=turnover_rate(s.total_outflow, s.current_stock),
                velocity=s.total_inflow + s.total_outflow,
            )
            for s in snapshots
        ]
        rows.sort(key=lambda r: r.turnover_rate, reverse=True)
        return rows if limit is None else rows[:limit]

    @staticmethod
    def criticality(
        alerts: Iterable[StockSnapshot],
        recent_events: Iterable[Event],
        limit: int = 5,
    ) -> list[CriticalMaterialRow]:
        """Rank low-stock alerts by recent activity times stock deficit."""
        activity: dict[str, int] = {}
        for event in recent_events:
            activity[event.material_id] = activity.get(event.material_id, 0) + 1

        rows = []
        for snapshot in alerts:
            recent = activity.get(snapshot.material_id, 0)
            deficit = max(ZERO, snapshot.min_stock_level - snapshot.current_stock)
            rows.append(
                CriticalMaterialRow(
                    material_id=snapshot.material_id,
                    material_name=snapshot.material_name,
                    current_stock=snapshot.current_stock,
                    min_stock_level=snapshot.min_stock_level,
                    recent_activity=recent,
                    criticality=recent * deficit,
                )
            )
        rows.sort(key=lambda r: r.criticality, reverse=True)
        return rows[:limit]

    @staticmethod
    def summary(
        inflows: Sequence[InflowEvent], outflows: Sequence[OutflowEvent]
    ) -> ActivitySummary:
        return ActivitySummary(
            inflows=len(inflows),
            outflows=len(outflows),
            inflow_quantity=sum((e.quantity for e in inflows), ZERO),
            outflow_quantity=sum((e.quantity for e in outflows), ZERO),
            inflow_value=sum((e.total_value or ZERO for e in inflows), ZERO),
            outflow_value=sum((e.total_value or ZERO for e in outflows), ZERO),
        )


def _touch(row: ProjectActivityRow, event: Event) -> None:
    row.activities += 1
    if row.last_activity is None or event.created_at > row.last_activity:
        row.last_activity = event.created_at
