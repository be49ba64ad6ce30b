"""Boats router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from boathub.api.deps import get_boat_service, get_current_principal, get_session, verify_csrf
from boathub.api.schemas.boat import (
    BoatResponse,
    CreateBoatRequest,
    UpdateBoatDescriptionRequest,
    UpdateBoatNameRequest,
    UpdateBoatTypeRequest,
)
from boathub.api.schemas.common import PageMeta, PaginatedResponse
from boathub.models.boat import Boat
from boathub.services import NotFoundError
from boathub.services.auth_service import Principal
from boathub.services.boat_service import (
    PAGE_SIZE_DEFAULT,
    SORT_BY_DEFAULT,
    SORT_DIRECTION_DEFAULT,
    BoatInput,
    BoatService,
)

router = APIRouter()


def _found(boat: Boat | None) -> BoatResponse:
    if boat is None:
        raise NotFoundError("boat not found")
    return BoatResponse.model_validate(boat)


@router.get("", response_model=PaginatedResponse[BoatResponse])
async def list_boats(
    page: int = Query(0, description="Page requested (0-based)"),
    size: int = Query(PAGE_SIZE_DEFAULT, description="Page size, 1 to 50"),
    sort_by: str = Query(SORT_BY_DEFAULT, alias="sortBy"),
    sort_direction: str = Query(SORT_DIRECTION_DEFAULT, alias="sortDirection"),
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> PaginatedResponse[BoatResponse]:
    result = await svc.list(
        session,
        page=page,
        page_size=size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    return PaginatedResponse(
        data=[BoatResponse.model_validate(b) for b in result.data],
        meta=PageMeta(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_more=result.has_more,
        ),
    )


@router.get("/{boat_id}", response_model=BoatResponse)
async def get_boat(
    boat_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> BoatResponse:
    return _found(await svc.get(session, boat_id))


@router.post(
    "",
    response_model=BoatResponse,
    status_code=201,
    dependencies=[Depends(verify_csrf)],
)
async def create_boat(
    body: CreateBoatRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> BoatResponse:
    boat = await svc.create(
        session,
        BoatInput(name=body.name, description=body.description, boat_type=body.boat_type),
    )
    response.headers["Location"] = f"/api/v1/boats/{boat.id}"
    return BoatResponse.model_validate(boat)


@router.patch(
    "/{boat_id}/name",
    response_model=BoatResponse,
    dependencies=[Depends(verify_csrf)],
)
async def update_boat_name(
    boat_id: uuid.UUID,
    body: UpdateBoatNameRequest,
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> BoatResponse:
    return _found(await svc.update_name(session, boat_id, body.name))


@router.patch(
    "/{boat_id}/description",
    response_model=BoatResponse,
    dependencies=[Depends(verify_csrf)],
)
async def update_boat_description(
    boat_id: uuid.UUID,
    body: UpdateBoatDescriptionRequest,
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> BoatResponse:
    return _found(await svc.update_description(session, boat_id, body.description))


@router.patch(
    "/{boat_id}/type",
    response_model=BoatResponse,
    dependencies=[Depends(verify_csrf)],
)
async def update_boat_type(
    boat_id: uuid.UUID,
    body: UpdateBoatTypeRequest,
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> BoatResponse:
    return _found(await svc.update_type(session, boat_id, body.boat_type))


@router.delete(
    "/{boat_id}",
    status_code=204,
    dependencies=[Depends(verify_csrf)],
)
async def delete_boat(
    boat_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    _user: Principal = Depends(get_current_principal),
    svc: BoatService = Depends(get_boat_service),
) -> Response:
    if not await svc.delete(session, boat_id):
        raise NotFoundError("boat not found")
    return Response(status_code=204)
