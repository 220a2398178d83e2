"""Reference data endpoints: materials, units, projects and categories."""

from fastapi import APIRouter, Depends, HTTPException, status

from inventory_ledger.api.dependencies import (
    get_actor,
    get_create_reference_use_case,
    get_deactivate_reference_use_case,
    get_list_references_use_case,
    get_reference_use_case,
    get_update_reference_use_case,
)
from inventory_ledger.application.dto.requests import (
    CreateCategoryRequest,
    CreateMaterialRequest,
    CreateProjectRequest,
    CreateUnitRequest,
    UpdateCategoryRequest,
    UpdateMaterialRequest,
    UpdateProjectRequest,
    UpdateUnitRequest,
)
from inventory_ledger.application.dto.responses import (
    ErrorResponse,
    ReferenceListResponse,
    ReferenceResponse,
)
from inventory_ledger.application.use_cases import (
    CreateReferenceUseCase,
    DeactivateReferenceUseCase,
    GetReferenceUseCase,
    ListReferencesUseCase,
    UpdateReferenceUseCase,
    to_reference_response,
)
from inventory_ledger.core.entities.reference import ActorContext, ReferenceKind

router = APIRouter(prefix="/api/references", tags=["references"])

COLLECTIONS: dict[str, ReferenceKind] = {kind.table: kind for kind in ReferenceKind}

_CREATE_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _kind(collection: str) -> ReferenceKind:
    kind = COLLECTIONS.get(collection)
    if kind is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown reference collection: {collection}",
        )
    return kind


@router.post(
    "/materials",
    response_model=ReferenceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_CREATE_RESPONSES,
)
async def create_material(
    request: CreateMaterialRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: CreateReferenceUseCase = Depends(get_create_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.MATERIAL, request, actor)
    return to_reference_response(entity)


@router.post(
    "/units",
    response_model=ReferenceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_CREATE_RESPONSES,
)
async def create_unit(
    request: CreateUnitRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: CreateReferenceUseCase = Depends(get_create_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.UNIT, request, actor)
    return to_reference_response(entity)


@router.post(
    "/projects",
    response_model=ReferenceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_CREATE_RESPONSES,
)
async def create_project(
    request: CreateProjectRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: CreateReferenceUseCase = Depends(get_create_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.PROJECT, request, actor)
    return to_reference_response(entity)


@router.post(
    "/categories",
    response_model=ReferenceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_CREATE_RESPONSES,
)
async def create_category(
    request: CreateCategoryRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: CreateReferenceUseCase = Depends(get_create_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.CATEGORY, request, actor)
    return to_reference_response(entity)


_UPDATE_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.put("/materials/{entity_id}", response_model=ReferenceResponse, responses=_UPDATE_RESPONSES)
async def update_material(
    entity_id: str,
    request: UpdateMaterialRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: UpdateReferenceUseCase = Depends(get_update_reference_use_case),
) -> ReferenceResponse:
    """
    Edit a material.

    A new ``min_stock_level`` changes its stock status on the next read;
    ``units``, when sent, replaces the unit links.
    """
    entity = await use_case.execute(ReferenceKind.MATERIAL, entity_id, request, actor)
    return to_reference_response(entity)


@router.put("/units/{entity_id}", response_model=ReferenceResponse, responses=_UPDATE_RESPONSES)
async def update_unit(
    entity_id: str,
    request: UpdateUnitRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: UpdateReferenceUseCase = Depends(get_update_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.UNIT, entity_id, request, actor)
    return to_reference_response(entity)


@router.put("/projects/{entity_id}", response_model=ReferenceResponse, responses=_UPDATE_RESPONSES)
async def update_project(
    entity_id: str,
    request: UpdateProjectRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: UpdateReferenceUseCase = Depends(get_update_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.PROJECT, entity_id, request, actor)
    return to_reference_response(entity)


@router.put(
    "/categories/{entity_id}", response_model=ReferenceResponse, responses=_UPDATE_RESPONSES
)
async def update_category(
    entity_id: str,
    request: UpdateCategoryRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: UpdateReferenceUseCase = Depends(get_update_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(ReferenceKind.CATEGORY, entity_id, request, actor)
    return to_reference_response(entity)


@router.get("/{collection}", response_model=ReferenceListResponse)
async def list_references(
    collection: str,
    include_inactive: bool = False,
    actor: ActorContext = Depends(get_actor),
    use_case: ListReferencesUseCase = Depends(get_list_references_use_case),
) -> ReferenceListResponse:
    entities = await use_case.execute(
        _kind(collection), actor, active_only=not include_inactive
    )
    items = [to_reference_response(e) for e in entities]
    return ReferenceListResponse(items=items, total=len(items))


@router.get(
    "/{collection}/{entity_id}",
    response_model=ReferenceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_reference(
    collection: str,
    entity_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: GetReferenceUseCase = Depends(get_reference_use_case),
) -> ReferenceResponse:
    entity = await use_case.execute(_kind(collection), entity_id, actor)
    return to_reference_response(entity)


@router.delete(
    "/{collection}/{entity_id}",
    response_model=ReferenceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def deactivate_reference(
    collection: str,
    entity_id: str,
    actor: ActorContext = Depends(get_actor),
    use_case: DeactivateReferenceUseCase = Depends(get_deactivate_reference_use_case),
) -> ReferenceResponse:
    """
    Soft-delete a reference entity.

    Refused with 409 REFERENTIAL_INTEGRITY while events or active materials
    still reference it.
    """
    entity = await use_case.execute(_kind(collection), entity_id, actor)
    return to_reference_response(entity)
