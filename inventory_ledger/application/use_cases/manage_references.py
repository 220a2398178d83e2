"""
Reference data use cases.

Creation and renaming reject case-insensitive duplicate names among active
entities. Deactivation is a soft delete, refused while live records still
point at the entity:

- material: any inflow or outflow
- project: any inflow or outflow
- category: any active material
- unit: any active material linked to it, or any inflow or outflow
"""

from uuid import uuid4

from inventory_ledger.application.dto.requests import (
    CreateCategoryRequest,
    CreateMaterialRequest,
    CreateProjectRequest,
    CreateUnitRequest,
    MaterialUnitRequest,
    UpdateCategoryRequest,
    UpdateMaterialRequest,
    UpdateProjectRequest,
    UpdateUnitRequest,
)
from inventory_ledger.application.dto.responses import ReferenceResponse
from inventory_ledger.config import get_logger
from inventory_ledger.core.entities.reference import (
    ActorContext,
    Category,
    Material,
    MaterialUnit,
    Project,
    ReferenceKind,
    Unit,
)
from inventory_ledger.core.exceptions import (
    DuplicateNameError,
    ReferenceNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from inventory_ledger.core.interfaces import IUnitOfWork, Reference

logger = get_logger(__name__)

CreateReferenceRequest = (
    CreateMaterialRequest | CreateUnitRequest | CreateProjectRequest | CreateCategoryRequest
)
UpdateReferenceRequest = (
    UpdateMaterialRequest | UpdateUnitRequest | UpdateProjectRequest | UpdateCategoryRequest
)


def to_reference_response(entity: Reference) -> ReferenceResponse:
    """Flatten any reference entity into the shared response shape."""
    kind = {
        Material: ReferenceKind.MATERIAL,
        Unit: ReferenceKind.UNIT,
        Project: ReferenceKind.PROJECT,
        Category: ReferenceKind.CATEGORY,
    }[type(entity)]
    return ReferenceResponse(
        id=entity.id,  # type: ignore[arg-type]
        kind=kind.value,
        name=entity.name,
        description=entity.description,
        is_active=entity.is_active,
        abbreviation=getattr(entity, "abbreviation", None),
        category_id=getattr(entity, "category_id", None),
        min_stock_level=getattr(entity, "min_stock_level", None),
        unit_ids=[link.unit_id for link in getattr(entity, "units", [])],
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


async def _unique_name(
    scope: IUnitOfWork,
    kind: ReferenceKind,
    name: str,
    exclude_id: str | None = None,
) -> str:
    """Strip ``name`` and make sure no other active entity of ``kind`` uses it."""
    stripped = name.strip()
    if not stripped:
        raise ValidationError("name", "must not be blank", name)
    existing = await scope.references.find_by_name(kind, stripped, exclude_id=exclude_id)
    if existing is not None:
        raise DuplicateNameError(kind.value, stripped, existing.id)  # type: ignore[arg-type]
    return stripped


async def _unique_abbreviation(
    scope: IUnitOfWork, abbreviation: str, exclude_id: str | None = None
) -> None:
    clash = await scope.references.find_by_name(
        ReferenceKind.UNIT, abbreviation, field="abbreviation", exclude_id=exclude_id
    )
    if clash is not None:
        raise DuplicateNameError(
            ReferenceKind.UNIT.value, abbreviation, clash.id, field="abbreviation"  # type: ignore[arg-type]
        )


async def _active_category(scope: IUnitOfWork, category_id: str) -> None:
    category = await scope.references.get(ReferenceKind.CATEGORY, category_id)
    if category is None or not category.is_active:
        raise ReferenceNotFoundError("category", category_id)


async def _unit_links(
    scope: IUnitOfWork, material_id: str, links: list[MaterialUnitRequest]
) -> list[MaterialUnit]:
    """Validate requested unit links: active units, at most one primary."""
    if sum(1 for link in links if link.is_primary) > 1:
        raise ValidationError("units", "at most one unit can be primary")

    for link in links:
        unit = await scope.references.get(ReferenceKind.UNIT, link.unit_id)
        if unit is None or not unit.is_active:
            raise ReferenceNotFoundError("unit", link.unit_id)

    return [
        MaterialUnit(
            material_id=material_id,
            unit_id=link.unit_id,
            is_primary=link.is_primary,
            conversion_factor=link.conversion_factor,
        )
        for link in links
    ]


class CreateReferenceUseCase:
    """Create a material, unit, project or category."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self,
        kind: ReferenceKind,
        request: CreateReferenceRequest,
        actor: ActorContext,
    ) -> Reference:
        uow = await self._get_uow()
        async with uow.write() as scope:
            name = await _unique_name(scope, kind, request.name)
            if isinstance(request, CreateUnitRequest) and request.abbreviation:
                await _unique_abbreviation(scope, request.abbreviation)

            entity = await self._build(scope, kind, request, name)
            entity = await scope.references.create(entity)

        logger.info(
            "reference_created",
            kind=kind.value,
            entity_id=entity.id,
            actor=actor.user_id,
        )
        return entity

    @staticmethod
    async def _build(
        scope: IUnitOfWork,
        kind: ReferenceKind,
        request: CreateReferenceRequest,
        name: str,
    ) -> Reference:
        if isinstance(request, CreateMaterialRequest):
            await _active_category(scope, request.category_id)
            material = Material(
                id=str(uuid4()),
                name=name,
                description=request.description,
                category_id=request.category_id,
                min_stock_level=request.min_stock_level,
            )
            material.units = await _unit_links(scope, material.id, request.units)
            return material

        if isinstance(request, CreateUnitRequest):
            return Unit(
                name=name,
                abbreviation=request.abbreviation,
                description=request.description,
            )
        if kind is ReferenceKind.PROJECT:
            return Project(name=name, description=request.description)
        return Category(name=name, description=request.description)


class UpdateReferenceUseCase:
    """
    Edit an active reference entity.

    Only the fields present in the request change. A material's
    ``min_stock_level`` feeds stock classification from the next read on;
    a new ``units`` list replaces its unit links.
    """

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self,
        kind: ReferenceKind,
        entity_id: str,
        request: UpdateReferenceRequest,
        actor: ActorContext,
    ) -> Reference:
        uow = await self._get_uow()
        async with uow.write() as scope:
            entity = await scope.references.get(kind, entity_id)
            if entity is None or not entity.is_active:
                raise ReferenceNotFoundError(kind.value, entity_id)

            changes = request.model_dump(exclude_unset=True, exclude={"units"})
            for field in ("name", "category_id", "min_stock_level"):
                if field in changes and changes[field] is None:
                    raise ValidationError(field, "must not be null")

            if "name" in changes:
                changes["name"] = await _unique_name(scope, kind, changes["name"], entity_id)
            if changes.get("abbreviation"):
                await _unique_abbreviation(scope, changes["abbreviation"], entity_id)
            if "category_id" in changes:
                await _active_category(scope, changes["category_id"])

            links = None
            if isinstance(request, UpdateMaterialRequest) and request.units is not None:
                links = await _unit_links(scope, entity_id, request.units)

            # Re-validate so Decimals and names come back normalized
            merged = type(entity).model_validate({**entity.model_dump(), **changes})
            changes = {field: getattr(merged, field) for field in changes}

            updated = await scope.references.update(kind, entity_id, changes, units=links)
            if updated is None:
                raise ReferenceNotFoundError(kind.value, entity_id)

        logger.info(
            "reference_updated",
            kind=kind.value,
            entity_id=entity_id,
            fields=sorted(changes) + (["units"] if links is not None else []),
            actor=actor.user_id,
        )
        return updated


class GetReferenceUseCase:
    """Fetch one reference entity by id, active or not."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self, kind: ReferenceKind, entity_id: str, actor: ActorContext
    ) -> Reference:
        uow = await self._get_uow()
        entity = await uow.references.get(kind, entity_id)
        if entity is None:
            raise ReferenceNotFoundError(kind.value, entity_id)
        return entity


class DeactivateReferenceUseCase:
    """Soft-delete a reference entity once nothing live depends on it."""

    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self, kind: ReferenceKind, entity_id: str, actor: ActorContext
    ) -> Reference:
        uow = await self._get_uow()
        async with uow.write() as scope:
            entity = await scope.references.get(kind, entity_id)
            if entity is None or not entity.is_active:
                raise ReferenceNotFoundError(kind.value, entity_id)

            await self._check_dependents(scope, kind, entity_id)

            deactivated = await scope.references.deactivate(kind, entity_id)
            if deactivated is None:
                raise ReferenceNotFoundError(kind.value, entity_id)

        logger.info(
            "reference_deactivated",
            kind=kind.value,
            entity_id=entity_id,
            actor=actor.user_id,
        )
        return deactivated

    @staticmethod
    async def _check_dependents(scope: IUnitOfWork, kind: ReferenceKind, entity_id: str) -> None:
        if kind is ReferenceKind.CATEGORY:
            count = await scope.references.count_active_materials("category_id", entity_id)
            if count:
                raise ReferentialIntegrityError(kind.value, entity_id, "materials", count)
            return

        if kind is ReferenceKind.UNIT:
            count = await scope.references.count_active_materials("unit_id", entity_id)
            if count:
                raise ReferentialIntegrityError(kind.value, entity_id, "materials", count)

        column = f"{kind.value}_id"
        count = await scope.events.count_referencing(column, entity_id)
        if count:
            raise ReferentialIntegrityError(kind.value, entity_id, "events", count)


class ListReferencesUseCase:
    def __init__(self, unit_of_work: IUnitOfWork | None = None):
        self._uow = unit_of_work

    async def _get_uow(self) -> IUnitOfWork:
        if self._uow is None:
            from inventory_ledger.application.services import get_unit_of_work

            self._uow = await get_unit_of_work()
        return self._uow

    async def execute(
        self, kind: ReferenceKind, actor: ActorContext, active_only: bool = True
    ) -> list[Reference]:
        uow = await self._get_uow()
        return await uow.references.list_all(kind, active_only=active_only)
