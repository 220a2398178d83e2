"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services.
Use cases should import from here.

Services that read storage are built per unit of work so that, inside a
``read()`` or ``write()`` scope, every query they issue runs on the scoped
connection.
"""

from typing import TYPE_CHECKING

from inventory_ledger.config import get_settings
from inventory_ledger.core.services import (
    ActivityFeed,
    AvailabilityValidator,
    ReportAggregator,
    StockAggregator,
    ThresholdClassifier,
)

if TYPE_CHECKING:
    from inventory_ledger.core.interfaces import IUnitOfWork


async def get_unit_of_work() -> "IUnitOfWork":
    """Get the unscoped unit of work backed by the configured storage."""
    # Lazy import infrastructure to avoid circular imports
    from inventory_ledger.infrastructure.storage.sqlite import get_unit_of_work as _get

    return await _get()


def get_classifier() -> ThresholdClassifier:
    return ThresholdClassifier(efficiency_buffer=get_settings().ledger.efficiency_buffer)


def get_stock_aggregator(uow: "IUnitOfWork") -> StockAggregator:
    return StockAggregator(uow.events, uow.references, get_classifier())


def get_availability_validator(uow: "IUnitOfWork") -> AvailabilityValidator:
    return AvailabilityValidator(uow.references, get_stock_aggregator(uow))


def get_report_aggregator() -> ReportAggregator:
    return ReportAggregator(get_classifier())


def get_activity_feed(uow: "IUnitOfWork") -> ActivityFeed:
    return ActivityFeed(uow.events, uow.references)
