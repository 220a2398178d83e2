"""Abstract interface for reference-data reads and the minimal writes the ledger guards."""

from abc import ABC, abstractmethod
from typing import Any

from inventory_ledger.core.entities.reference import (
    Category,
    Material,
    MaterialUnit,
    Project,
    ReferenceKind,
    Unit,
)

Reference = Material | Unit | Project | Category


class IReferenceStore(ABC):
    """Interface for materials, units, projects and categories."""

    @abstractmethod
    async def get(self, kind: ReferenceKind, entity_id: str) -> Reference | None:
        """Get a reference entity by id, active or not."""
        pass

    @abstractmethod
    async def get_material(self, material_id: str) -> Material | None:
        """Get a material with its unit links."""
        pass

    @abstractmethod
    async def list_all(
        self, kind: ReferenceKind, active_only: bool = True
    ) -> list[Reference]:
        """List entities of a kind ordered by name."""
        pass

    @abstractmethod
    async def find_by_name(
        self,
        kind: ReferenceKind,
        name: str,
        field: str = "name",
        exclude_id: str | None = None,
    ) -> Reference | None:
        """Case-insensitive lookup among active entities, skipping ``exclude_id``."""
        pass

    @abstractmethod
    async def create(self, entity: Reference) -> Reference:
        """Insert a new entity and return it with its id."""
        pass

    @abstractmethod
    async def update(
        self,
        kind: ReferenceKind,
        entity_id: str,
        changes: dict[str, Any],
        units: list[MaterialUnit] | None = None,
    ) -> Reference | None:
        """
        Apply column changes to an active entity.

        ``units``, when given, replaces the material's unit links. Returns None
        if the entity is missing or inactive.
        """
        pass

    @abstractmethod
    async def deactivate(self, kind: ReferenceKind, entity_id: str) -> Reference | None:
        """Soft-delete. Returns None if the entity is missing or already inactive."""
        pass

    @abstractmethod
    async def count_active_materials(self, column: str, value: str) -> int:
        """Count active materials whose ``column`` equals ``value``."""
        pass
