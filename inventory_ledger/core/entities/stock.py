"""Derived stock figures. Never persisted."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class StockStatus(str, Enum):
    """Stock health label against the material's minimum level."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class StockTotals(BaseModel):
    """Inflow/outflow sums for one material (optionally one unit)."""

    total_inflow: Decimal = Decimal("0")
    total_outflow: Decimal = Decimal("0")

    @property
    def current_stock(self) -> Decimal:
        return self.total_inflow - self.total_outflow


class StockSnapshot(BaseModel):
    """Current stock position of a material."""

    material_id: str
    material_name: str
    category_id: str | None = None
    category_name: str | None = None
    unit_id: str | None = None
    total_inflow: Decimal = Decimal("0")
    total_outflow: Decimal = Decimal("0")
    current_stock: Decimal = Decimal("0")
    min_stock_level: Decimal = Decimal("0")
    status: StockStatus | None = None
