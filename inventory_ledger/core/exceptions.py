"""
Domain exceptions for the inventory ledger.

Every business-meaningful failure has its own type so callers can branch on
the kind; ``InternalError`` is the only one meant for catch-log-fail handling.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Not found
class NotFoundError(LedgerError):
    """Referenced entity does not exist or is inactive."""

    def __init__(self, entity: str, entity_id: str, code: str | None = None):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code=code or "NOT_FOUND",
            details={"entity": entity, "entity_id": entity_id},
        )


class MaterialNotFoundError(NotFoundError):
    """Material missing or deactivated."""

    def __init__(self, material_id: str):
        super().__init__("material", material_id, code="MATERIAL_NOT_FOUND")


class EventNotFoundError(NotFoundError):
    """Inflow or outflow record not found."""

    def __init__(self, kind: str, event_id: str):
        super().__init__(kind, event_id, code=f"{kind.upper()}_NOT_FOUND")


class ReferenceNotFoundError(NotFoundError):
    """Unit, project or category missing or deactivated."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(entity, entity_id, code=f"{entity.upper()}_NOT_FOUND")


# Business rules
class InsufficientStockError(LedgerError):
    """Requested outflow exceeds the material's current stock."""

    def __init__(
        self,
        material_id: str,
        material_name: str,
        requested: Decimal,
        available: Decimal,
        unit_id: str | None = None,
    ):
        self.material_id = material_id
        self.material_name = material_name
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient stock for '{material_name}': "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "material_name": material_name,
                "unit_id": unit_id,
                "requested": str(requested),
                "available": str(available),
                "shortfall": str(self.shortfall),
            },
        )


class DuplicateNameError(LedgerError):
    """Case-insensitive name collision on a reference entity."""

    def __init__(self, entity: str, name: str, existing_id: str, field: str = "name"):
        super().__init__(
            f"A {entity} with this {field} already exists: '{name}'",
            code="DUPLICATE_NAME",
            details={
                "entity": entity,
                "field": field,
                "name": name,
                "existing_id": existing_id,
            },
        )


class ReferentialIntegrityError(LedgerError):
    """Entity still has live dependents and cannot be deactivated."""

    def __init__(self, entity: str, entity_id: str, dependent: str, count: int):
        super().__init__(
            f"Cannot delete {entity} {entity_id}: referenced by {count} {dependent}",
            code="REFERENTIAL_INTEGRITY",
            details={
                "entity": entity,
                "entity_id": entity_id,
                "dependent": dependent,
                "count": count,
            },
        )


# Infrastructure
class InternalError(LedgerError):
    """Storage or transport failure; message is safe to show callers."""

    def __init__(self, operation: str):
        super().__init__(
            f"Internal error during {operation}",
            code="INTERNAL_ERROR",
            details={"operation": operation},
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(operation)
        # Kept off the public message, logged by the caller
        self.error = error

