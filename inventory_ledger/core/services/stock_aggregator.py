"""
Stock aggregation.

Current stock is never stored: it is recomputed from the full inflow and
outflow history on every call.
"""

from decimal import Decimal

from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.events import EventKind
from inventory_ledger.core.entities.reference import Category, Material, ReferenceKind
from inventory_ledger.core.entities.stock import StockSnapshot, StockTotals
from inventory_ledger.core.exceptions import MaterialNotFoundError
from inventory_ledger.core.interfaces.event_store import IEventStore
from inventory_ledger.core.interfaces.reference_store import IReferenceStore
from inventory_ledger.core.services.threshold_classifier import ThresholdClassifier

logger = get_logger(__name__)

ZERO = Decimal("0")


class StockAggregator:
    """Reduces the event history to per-material stock figures."""

    def __init__(
        self,
        event_store: IEventStore,
        reference_store: IReferenceStore,
        classifier: ThresholdClassifier | None = None,
    ) -> None:
        self._events = event_store
        self._references = reference_store
        self._classifier = classifier or ThresholdClassifier()

    async def compute_stock(
        self,
        material_id: str,
        unit_id: str | None = None,
        exclude_event_id: str | None = None,
    ) -> StockTotals:
        """
        Sum inflows and outflows for one material.

        With ``unit_id`` only that unit's events count; units are independent
        ledgers and no conversion is applied between them.
        ``exclude_event_id`` drops one event (the one being edited) from both sums.
        """
        total_in = await self._events.sum_quantity(
            EventKind.INFLOW, material_id, unit_id, exclude_id=exclude_event_id
        )
        total_out = await self._events.sum_quantity(
            EventKind.OUTFLOW, material_id, unit_id, exclude_id=exclude_event_id
        )
        return StockTotals(total_inflow=total_in, total_outflow=total_out)

    async def snapshot(self, material_id: str, unit_id: str | None = None) -> StockSnapshot:
        """Classified snapshot for a single active material."""
        material = await self._references.get_material(material_id)
        if material is None or not material.is_active:
            raise MaterialNotFoundError(material_id)

        totals = await self.compute_stock(material_id, unit_id)
        category = await self._references.get(ReferenceKind.CATEGORY, material.category_id)
        return self._classifier.classify_snapshot(
            self._build(material, category, totals, unit_id)
        )

    async def compute_all_stock(self, unit_id: str | None = None) -> list[StockSnapshot]:
        """Snapshots for every active material from one grouped pass per event table."""
        materials = await self._references.list_all(ReferenceKind.MATERIAL)
        categories = {
            c.id: c
            for c in await self._references.list_all(ReferenceKind.CATEGORY, active_only=False)
        }
        inflows = await self._events.sum_quantity_by_material(EventKind.INFLOW, unit_id)
        outflows = await self._events.sum_quantity_by_material(EventKind.OUTFLOW, unit_id)

        snapshots = []
        for material in materials:
            totals = StockTotals(
                total_inflow=inflows.get(material.id, ZERO),
                total_outflow=outflows.get(material.id, ZERO),
            )
            category = categories.get(material.category_id)
            snapshots.append(self._build(material, category, totals, unit_id))

        logger.debug("stock_computed", materials=len(snapshots), unit_id=unit_id)
        return self._classifier.classify_all(snapshots)

    @staticmethod
    def _build(
        material: Material,
        category: Category | None,
        totals: StockTotals,
        unit_id: str | None,
    ) -> StockSnapshot:
        return StockSnapshot(
            material_id=material.id,  # type: ignore[arg-type]
            material_name=material.name,
            category_id=material.category_id,
            category_name=category.name if category else None,
            unit_id=unit_id,
            total_inflow=totals.total_inflow,
            total_outflow=totals.total_outflow,
            current_stock=totals.current_stock,
            min_stock_level=material.min_stock_level,
        )
