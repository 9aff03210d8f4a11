from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.rbac import require_roles
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import Role
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse
from hr_portal.db.session import get_db

from .schemas import CareerPathCreate, CareerPathResponse, CareerPathUpdate, CareerSummary
from . import service

router = APIRouter(prefix="/api/v1/career-paths", tags=["career-paths"])


@router.get(
    "",
    response_model=ApiResponse[Union[List[CareerPathResponse], Optional[CareerPathResponse]]],
)
async def list_career_paths(
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
):
    """Admins and HR get a list; an employee gets their own career path or null."""
    return ApiResponse(data=await service.list_career_paths(db, actor))


@router.post(
    "",
    response_model=ApiResponse[CareerPathResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(Role.ADMIN, Role.RH))],
)
async def create_career_path(
    payload: CareerPathCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CareerPathResponse]:
    try:
        cp = await service.create_career_path(db, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Career path created successfully", data=cp)


# Declared before /{career_path_id} so "me" is not parsed as an id
@router.get("/me", response_model=ApiResponse[CareerSummary])
async def get_my_career_path(
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[CareerSummary]:
    try:
        summary = await service.get_my_career_summary(db, actor)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=summary)


@router.get("/employee/{employee_id}", response_model=ApiResponse[CareerPathResponse])
async def get_career_path_for_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[CareerPathResponse]:
    try:
        cp = await service.get_career_path_for_employee(db, actor, employee_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=cp)


@router.get("/{career_path_id}", response_model=ApiResponse[CareerPathResponse])
async def get_career_path(
    career_path_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[CareerPathResponse]:
    try:
        cp = await service.get_career_path(db, actor, career_path_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=cp)


@router.put(
    "/{career_path_id}",
    response_model=ApiResponse[CareerPathResponse],
    dependencies=[Depends(require_roles(Role.ADMIN, Role.RH))],
)
async def update_career_path(
    career_path_id: int,
    payload: CareerPathUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CareerPathResponse]:
    try:
        cp = await service.update_career_path(db, career_path_id, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Career path updated successfully", data=cp)
