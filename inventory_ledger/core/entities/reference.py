"""
Reference-data entities read by the ledger.

Materials, units, projects and categories are owned by the reference-data
subsystem; the ledger reads their ids, names, minimum levels and active flags.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from inventory_ledger.core.entities.common import to_decimal, utc, utcnow


class ReferenceKind(str, Enum):
    """Reference entity tables that can be created and deactivated."""

    MATERIAL = "material"
    UNIT = "unit"
    PROJECT = "project"
    CATEGORY = "category"

    @property
    def table(self) -> str:
        return {
            ReferenceKind.MATERIAL: "materials",
            ReferenceKind.UNIT: "units",
            ReferenceKind.PROJECT: "projects",
            ReferenceKind.CATEGORY: "categories",
        }[self]


class Category(BaseModel):
    """Material grouping dimension."""

    id: str | None = None
    name: str
    description: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Project(BaseModel):
    """Project that receives or consumes materials."""

    id: str | None = None
    name: str
    description: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Unit(BaseModel):
    """Unit of measure; display only, no conversion is performed."""

    id: str | None = None
    name: str
    abbreviation: str | None = None
    description: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class MaterialUnit(BaseModel):
    """
    Link between a material and a unit it is tracked in.

    ``conversion_factor`` is stored for the reference-data screens but the
    ledger never applies it: each (material, unit) pair is its own ledger.
    """

    material_id: str
    unit_id: str
    is_primary: bool = False
    conversion_factor: Decimal = Decimal("1")


class Material(BaseModel):
    """A stocked material."""

    id: str | None = None
    name: str
    description: str | None = None
    category_id: str
    min_stock_level: Decimal = Decimal("0")
    is_active: bool = True
    units: list[MaterialUnit] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("min_stock_level", mode="before")
    @classmethod
    def _min_level(cls, v: object) -> Decimal:
        if v is None:
            return Decimal("0")
        return to_decimal(v)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return utc(v)


class ActorContext(BaseModel):
    """
    Capability token passed into every ledger-boundary call.

    Issued by the authentication layer; the ledger records ``user_id`` as the
    event author and performs no role checks of its own.
    """

    user_id: str
    role: str | None = None
