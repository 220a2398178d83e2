"""
Stock health classification.

Labels each material in-stock, low-stock or out-of-stock against its
minimum level and derives the fleet-wide health and efficiency scores.
"""

from decimal import Decimal

from inventory_ledger.core.entities.report import CategoryEfficiencyRow, EfficiencyReport
from inventory_ledger.core.entities.stock import StockSnapshot, StockStatus

UNCATEGORIZED = "Uncategorized"


class ThresholdClassifier:
    """Pure classification over stock snapshots."""

    def __init__(self, efficiency_buffer: Decimal = Decimal("1.2")) -> None:
        self._buffer = efficiency_buffer

    @staticmethod
    def classify(current_stock: Decimal, min_stock_level: Decimal) -> StockStatus:
        """
        OutOfStock at or below zero regardless of the minimum; LowStock when a
        minimum is configured and stock is at or below it; InStock otherwise.
        """
        if current_stock <= 0:
            return StockStatus.OUT_OF_STOCK
        if min_stock_level > 0 and current_stock <= min_stock_level:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def classify_snapshot(self, snapshot: StockSnapshot) -> StockSnapshot:
        snapshot.status = self.classify(snapshot.current_stock, snapshot.min_stock_level)
        return snapshot

    def classify_all(self, snapshots: list[StockSnapshot]) -> list[StockSnapshot]:
        return [self.classify_snapshot(s) for s in snapshots]

    def alerts(self, snapshots: list[StockSnapshot]) -> list[StockSnapshot]:
        """Snapshots classified LowStock or OutOfStock."""
        return [
            s
            for s in self.classify_all(snapshots)
            if s.status in (StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK)
        ]

    def fleet_health(self, snapshots: list[StockSnapshot]) -> float:
        """Percentage of materials not out of stock; 0 for an empty fleet."""
        if not snapshots:
            return 0.0
        available = sum(
            1
            for s in snapshots
            if self.classify(s.current_stock, s.min_stock_level) != StockStatus.OUT_OF_STOCK
        )
        return available / len(snapshots) * 100

    def is_efficient(self, snapshot: StockSnapshot) -> bool:
        if snapshot.min_stock_level <= 0:
            return True
        return snapshot.current_stock >= snapshot.min_stock_level * self._buffer

    def efficiency(self, snapshots: list[StockSnapshot]) -> EfficiencyReport:
        """Fleet efficiency with a per-category breakdown, best category first."""
        if not snapshots:
            return EfficiencyReport()

        groups: dict[str | None, CategoryEfficiencyRow] = {}
        efficient_total = 0
        for snapshot in snapshots:
            row = groups.get(snapshot.category_id)
            if row is None:
                row = CategoryEfficiencyRow(
                    category_id=snapshot.category_id,
                    category_name=snapshot.category_name or UNCATEGORIZED,
                    total=0,
                    efficient=0,
                    efficiency=0.0,
                )
                groups[snapshot.category_id] = row
            row.total += 1
            if self.is_efficient(snapshot):
                row.efficient += 1
                efficient_total += 1

        for row in groups.values():
            row.efficiency = row.efficient / row.total * 100

        return EfficiencyReport(
            efficiency=efficient_total / len(snapshots) * 100,
            categories=sorted(groups.values(), key=lambda r: r.efficiency, reverse=True),
        )
