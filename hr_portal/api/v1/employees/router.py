from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.rbac import require_roles
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import Role
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse, MessageResponse
from hr_portal.core.storage import BlobStorage, get_blob_storage
from hr_portal.db.session import get_db

from .schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from . import service

router = APIRouter(
    prefix="/api/v1/employees",
    tags=["employees"],
    dependencies=[Depends(require_roles(Role.ADMIN, Role.RH))],
)


@router.get("", response_model=ApiResponse[List[EmployeeResponse]])
async def list_employees(
    role: Optional[Role] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[EmployeeResponse]]:
    return ApiResponse(data=await service.list_employees(db, role))


@router.post("", response_model=ApiResponse[EmployeeResponse], status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(require_roles(Role.ADMIN, Role.RH)),
) -> ApiResponse[EmployeeResponse]:
    try:
        employee = await service.create_employee(db, actor, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Employee created successfully", data=employee)


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeResponse])
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EmployeeResponse]:
    employee = await service.get_employee(db, employee_id)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return ApiResponse(data=employee)


@router.put("/{employee_id}", response_model=ApiResponse[EmployeeResponse])
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(require_roles(Role.ADMIN, Role.RH)),
) -> ApiResponse[EmployeeResponse]:
    try:
        employee = await service.update_employee(db, actor, employee_id, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return ApiResponse(message="Employee updated successfully", data=employee)


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(require_roles(Role.ADMIN, Role.RH)),
    storage: BlobStorage = Depends(get_blob_storage),
) -> MessageResponse:
    try:
        deleted = await service.delete_employee(db, actor, employee_id, storage)
    except ServiceError as e:
        raise to_http_exception(e)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return MessageResponse(message="Employee deleted successfully")
