"""Core domain services."""

from inventory_ledger.core.services.activity_feed import ActivityFeed
from inventory_ledger.core.services.availability import AvailabilityResult, AvailabilityValidator
from inventory_ledger.core.services.report_aggregator import (
    ReportAggregator,
    percent_change,
    period_cutoff,
    turnover_rate,
)
from inventory_ledger.core.services.stock_aggregator import StockAggregator
from inventory_ledger.core.services.threshold_classifier import ThresholdClassifier

__all__ = [
    "ActivityFeed",
    "AvailabilityResult",
    "AvailabilityValidator",
    "ReportAggregator",
    "StockAggregator",
    "ThresholdClassifier",
    "percent_change",
    "period_cutoff",
    "turnover_rate",
]
