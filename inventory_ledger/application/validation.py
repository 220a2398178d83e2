"""Reference checks shared by the event-writing use cases."""

from pydantic import ValidationError as PydanticValidationError

from inventory_ledger.core.entities.reference import ReferenceKind
from inventory_ledger.core.exceptions import (
    MaterialNotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from inventory_ledger.core.interfaces import IReferenceStore


async def ensure_event_references(
    references: IReferenceStore,
    material_id: str,
    unit_id: str,
    project_id: str,
) -> None:
    """Reject events that point at missing or deactivated reference data."""
    material = await references.get_material(material_id)
    if material is None or not material.is_active:
        raise MaterialNotFoundError(material_id)

    unit = await references.get(ReferenceKind.UNIT, unit_id)
    if unit is None or not unit.is_active:
        raise ReferenceNotFoundError("unit", unit_id)

    project = await references.get(ReferenceKind.PROJECT, project_id)
    if project is None or not project.is_active:
        raise ReferenceNotFoundError("project", project_id)


def to_validation_error(error: PydanticValidationError) -> ValidationError:
    """Map the first pydantic error onto the domain ValidationError."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return ValidationError(field, first.get("msg", "invalid value"), first.get("input"))
