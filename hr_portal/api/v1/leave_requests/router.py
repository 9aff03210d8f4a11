from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.rbac import require_roles
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import RequestStatus, Role
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse, MessageResponse
from hr_portal.db.session import get_db

from .schemas import LeaveRequestCreate, LeaveRequestResponse, LeaveRequestStatusUpdate, LeaveRequestUpdate
from . import service

router = APIRouter(prefix="/api/v1/leave-requests", tags=["leave-requests"])


@router.get("", response_model=ApiResponse[List[LeaveRequestResponse]])
async def list_leave_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[List[LeaveRequestResponse]]:
    """Admins and HR see every request; employees only their own. Newest first."""
    try:
        rows = await service.list_leave_requests(db, actor, status_filter.value if status_filter else None)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=rows)


@router.post(
    "",
    response_model=ApiResponse[LeaveRequestResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_leave_request(
    payload: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[LeaveRequestResponse]:
    try:
        req = await service.create_leave_request(db, actor, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Leave request submitted successfully", data=req)


@router.get("/{leave_id}", response_model=ApiResponse[LeaveRequestResponse])
async def get_leave_request(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[LeaveRequestResponse]:
    try:
        req = await service.get_leave_request(db, actor, leave_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=req)


@router.put("/{leave_id}", response_model=ApiResponse[LeaveRequestResponse])
async def update_leave_request(
    leave_id: int,
    payload: LeaveRequestUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[LeaveRequestResponse]:
    """Edit a pending request. Only the employee who submitted it."""
    try:
        req = await service.update_leave_request(db, actor, leave_id, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Leave request updated successfully", data=req)


@router.post("/{leave_id}/status", response_model=ApiResponse[LeaveRequestResponse])
async def update_leave_request_status(
    leave_id: int,
    payload: LeaveRequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(require_roles(Role.ADMIN, Role.RH)),
) -> ApiResponse[LeaveRequestResponse]:
    """Approve or reject a pending request. Approval deducts the duration from the leave balance."""
    try:
        req = await service.update_leave_request_status(db, actor, leave_id, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message=f"Leave request {payload.status} successfully", data=req)


@router.delete("/{leave_id}", response_model=MessageResponse)
async def cancel_leave_request(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> MessageResponse:
    try:
        await service.cancel_leave_request(db, actor, leave_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Leave request cancelled successfully")
