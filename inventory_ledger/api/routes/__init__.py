"""API route modules."""

from inventory_ledger.api.routes.activity import router as activity_router
from inventory_ledger.api.routes.health import router as health_router
from inventory_ledger.api.routes.inflows import router as inflows_router
from inventory_ledger.api.routes.outflows import router as outflows_router
from inventory_ledger.api.routes.references import router as references_router
from inventory_ledger.api.routes.reports import router as reports_router
from inventory_ledger.api.routes.stock import router as stock_router

__all__ = [
    "health_router",
    "inflows_router",
    "outflows_router",
    "stock_router",
    "reports_router",
    "activity_router",
    "references_router",
]
