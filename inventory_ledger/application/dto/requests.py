"""
Request DTOs for API endpoints.

These models define the contract for incoming API requests.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from inventory_ledger.core.entities.report import ReportDimension, ReportPeriod

MIN_QUANTITY = Decimal("0.01")


# --- Ledger events ---


class RecordInflowRequest(BaseModel):
    """Request to record a receipt."""

    material_id: str = Field(..., description="Material ID")
    unit_id: str = Field(..., description="Unit the quantity is counted in")
    project_id: str = Field(..., description="Receiving project")
    quantity: Decimal = Field(..., ge=MIN_QUANTITY, description="Quantity received")
    unit_price: Decimal | None = Field(default=None, ge=0, description="Price per unit")
    delivery_date: datetime = Field(..., description="Date the goods arrived")
    received_by: str = Field(..., min_length=1, max_length=255, description="Receiver")
    supplier_name: str = Field(..., min_length=1, max_length=255, description="Supplier")
    purpose: str = Field(..., min_length=1, description="Purpose of the receipt")
    batch_number: str | None = Field(default=None, max_length=100, description="Batch number")
    expiry_date: datetime | None = Field(default=None, description="Expiry date")
    support_document: str | None = Field(
        default=None,
        max_length=500,
        description="Reference to an uploaded supporting document",
    )


class RecordOutflowRequest(BaseModel):
    """Request to release stock."""

    material_id: str = Field(..., description="Material ID")
    unit_id: str = Field(..., description="Unit the quantity is counted in")
    project_id: str = Field(..., description="Consuming project")
    quantity: Decimal = Field(..., ge=MIN_QUANTITY, description="Quantity released")
    unit_price: Decimal | None = Field(default=None, ge=0, description="Price per unit")
    release_date: datetime = Field(..., description="Date the goods left the warehouse")
    authorized_by: str = Field(..., min_length=1, max_length=255, description="Approver")
    received_by: str = Field(..., min_length=1, max_length=255, description="Recipient")
    purpose: str = Field(..., min_length=1, description="Purpose of the release")
    return_date: datetime | None = Field(
        default=None,
        description="Expected return date for borrowed items",
    )
    support_document: str | None = Field(default=None, max_length=500)


class UpdateInflowRequest(BaseModel):
    """Partial update of a receipt. Omitted fields are left unchanged."""

    material_id: str | None = None
    unit_id: str | None = None
    project_id: str | None = None
    quantity: Decimal | None = Field(default=None, ge=MIN_QUANTITY)
    unit_price: Decimal | None = Field(default=None, ge=0)
    delivery_date: datetime | None = None
    received_by: str | None = Field(default=None, min_length=1, max_length=255)
    supplier_name: str | None = Field(default=None, min_length=1, max_length=255)
    purpose: str | None = Field(default=None, min_length=1)
    batch_number: str | None = Field(default=None, max_length=100)
    expiry_date: datetime | None = None
    support_document: str | None = Field(default=None, max_length=500)


class UpdateOutflowRequest(BaseModel):
    """Partial update of a release. Omitted fields are left unchanged."""

    material_id: str | None = None
    unit_id: str | None = None
    project_id: str | None = None
    quantity: Decimal | None = Field(default=None, ge=MIN_QUANTITY)
    unit_price: Decimal | None = Field(default=None, ge=0)
    release_date: datetime | None = None
    authorized_by: str | None = Field(default=None, min_length=1, max_length=255)
    received_by: str | None = Field(default=None, min_length=1, max_length=255)
    purpose: str | None = Field(default=None, min_length=1)
    return_date: datetime | None = None
    support_document: str | None = Field(default=None, max_length=500)


# --- Queries ---


class ReportRequest(BaseModel):
    """Report selection."""

    period: ReportPeriod = Field(default=ReportPeriod.MONTH, description="Look-back window")
    dimension: ReportDimension = Field(
        default=ReportDimension.CATEGORY,
        description="Grouping dimension",
    )
    limit: int | None = Field(default=None, ge=1, le=100, description="Row cap where ranked")


# --- Reference data ---


class MaterialUnitRequest(BaseModel):
    """Unit link for a new material."""

    unit_id: str = Field(..., description="Unit ID")
    is_primary: bool = Field(default=False)
    conversion_factor: Decimal = Field(default=Decimal("1"), gt=0)


class CreateMaterialRequest(BaseModel):
    """Request to create a material."""

    name: str = Field(..., min_length=1, max_length=255, description="Material name")
    description: str | None = Field(default=None, description="Description")
    category_id: str = Field(..., description="Category ID")
    min_stock_level: Decimal = Field(default=Decimal("0"), ge=0, description="Reorder point")
    units: list[MaterialUnitRequest] = Field(
        default_factory=list,
        description="Units the material is tracked in",
    )


class CreateUnitRequest(BaseModel):
    """Request to create a unit of measure."""

    name: str = Field(..., min_length=1, max_length=255)
    abbreviation: str | None = Field(default=None, max_length=20)
    description: str | None = None


class CreateProjectRequest(BaseModel):
    """Request to create a project."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class CreateCategoryRequest(BaseModel):
    """Request to create a category."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class UpdateMaterialRequest(BaseModel):
    """
    Partial material update. Omitted fields keep their value.

    ``units``, when given, replaces the whole set of unit links.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category_id: str | None = None
    min_stock_level: Decimal | None = Field(default=None, ge=0, description="Reorder point")
    units: list[MaterialUnitRequest] | None = None


class UpdateUnitRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    abbreviation: str | None = Field(default=None, max_length=20)
    description: str | None = None


class UpdateProjectRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
