"""Inflow and outflow ledger events."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from inventory_ledger.core.entities.common import to_decimal, utc, utcnow


class EventKind(str, Enum):
    """Direction of a stock movement."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"

    @property
    def table(self) -> str:
        return "inflows" if self is EventKind.INFLOW else "outflows"

    @property
    def date_column(self) -> str:
        """Column holding the event's domain date."""
        return "delivery_date" if self is EventKind.INFLOW else "release_date"


class ReturnStatus(str, Enum):
    """Return-tracking state of an outflow."""

    RELEASED = "released"
    PENDING_RETURN = "pending_return"
    OVERDUE_RETURN = "overdue_return"
    RETURNED = "returned"


class LedgerEvent(BaseModel):
    """
    Fields shared by inflows and outflows.

    Only the two subclasses are ever stored; each supplies ``kind``,
    ``event_date`` and ``person``. Code that needs those takes ``Event``.
    """

    id: str | None = None
    material_id: str
    unit_id: str
    project_id: str
    quantity: Decimal
    unit_price: Decimal | None = None
    total_value: Decimal | None = None
    purpose: str
    support_document: str | None = None
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v: object) -> Decimal:
        qty = to_decimal(v)
        if qty <= 0:
            raise ValueError("quantity must be greater than 0")
        return qty

    @field_validator("unit_price", "total_value", mode="before")
    @classmethod
    def _money(cls, v: object) -> Decimal | None:
        if v is None:
            return None
        amount = to_decimal(v)
        if amount < 0:
            raise ValueError("amount must be non-negative")
        return amount

    @model_validator(mode="after")
    def _derive_total(self) -> "LedgerEvent":
        # total_value follows unit_price: present only when a price is known
        if self.unit_price is None:
            self.total_value = None
        else:
            self.total_value = to_decimal(self.quantity * self.unit_price)
        self.created_at = utc(self.created_at)
        self.updated_at = utc(self.updated_at)
        return self


class InflowEvent(LedgerEvent):
    """A receipt that increases a material's stock."""

    delivery_date: datetime
    received_by: str
    supplier_name: str
    batch_number: str | None = None
    expiry_date: datetime | None = None

    @field_validator("delivery_date", "expiry_date")
    @classmethod
    def _aware(cls, v: datetime | None) -> datetime | None:
        return utc(v) if v is not None else None

    @property
    def kind(self) -> EventKind:
        return EventKind.INFLOW

    @property
    def event_date(self) -> datetime:
        return self.delivery_date

    @property
    def person(self) -> str:
        return self.received_by


class OutflowEvent(LedgerEvent):
    """A release that decreases a material's stock."""

    release_date: datetime
    authorized_by: str
    received_by: str
    return_date: datetime | None = None
    is_returned: bool = False

    @field_validator("release_date", "return_date")
    @classmethod
    def _aware(cls, v: datetime | None) -> datetime | None:
        return utc(v) if v is not None else None

    @property
    def kind(self) -> EventKind:
        return EventKind.OUTFLOW

    @property
    def event_date(self) -> datetime:
        return self.release_date

    @property
    def person(self) -> str:
        return self.authorized_by

    def return_status(self, now: datetime | None = None) -> ReturnStatus:
        """Derive the return state; overdue is purely a function of ``now``."""
        if self.is_returned:
            return ReturnStatus.RETURNED
        if self.return_date is None:
            return ReturnStatus.RELEASED
        now = utc(now) if now is not None else utcnow()
        if self.return_date < now:
            return ReturnStatus.OVERDUE_RETURN
        return ReturnStatus.PENDING_RETURN


Event = InflowEvent | OutflowEvent


class ActivityRecord(BaseModel):
    """One line of the merged inflow/outflow activity feed."""

    id: str
    type: EventKind
    material_id: str
    material_name: str | None = None
    category_id: str | None = None
    quantity: Decimal
    unit_name: str | None = None
    project_id: str
    project_name: str | None = None
    date: datetime
    person: str
    total_value: Decimal | None = None
    created_at: datetime
