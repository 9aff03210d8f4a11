from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.rbac import require_roles
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import RequestStatus, Role
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse, MessageResponse, NonBlankLabel, NonBlankNote
from hr_portal.core.storage import BlobStorage, get_blob_storage
from hr_portal.db.session import get_db

from .schemas import (
    AbsenceJustificationCreate,
    AbsenceJustificationResponse,
    AbsenceJustificationStatusUpdate,
    AbsenceJustificationUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/absence-justifications", tags=["absence-justifications"])


@router.get("", response_model=ApiResponse[List[AbsenceJustificationResponse]])
async def list_absence_justifications(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[List[AbsenceJustificationResponse]]:
    try:
        rows = await service.list_absence_justifications(
            db, actor, storage, status_filter.value if status_filter else None
        )
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=rows)


@router.post(
    "",
    response_model=ApiResponse[AbsenceJustificationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_absence_justification(
    absence_date: date = Form(...),
    duration: int = Form(..., ge=1),
    type: NonBlankLabel = Form(...),
    reason: NonBlankNote = Form(...),
    document: Optional[UploadFile] = File(None, description="pdf, doc, docx, jpg, jpeg or png; 10 MB max"),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[AbsenceJustificationResponse]:
    """Submit a justification for the current employee. Sent as multipart/form-data."""
    payload = AbsenceJustificationCreate(absence_date=absence_date, duration=duration, type=type, reason=reason)
    try:
        record = await service.create_absence_justification(db, actor, storage, payload, document)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Absence justification submitted successfully", data=record)


@router.get("/{justification_id}", response_model=ApiResponse[AbsenceJustificationResponse])
async def get_absence_justification(
    justification_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[AbsenceJustificationResponse]:
    try:
        record = await service.get_absence_justification(db, actor, storage, justification_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=record)


@router.put("/{justification_id}", response_model=ApiResponse[AbsenceJustificationResponse])
async def update_absence_justification(
    justification_id: int,
    absence_date: Optional[date] = Form(None),
    duration: Optional[int] = Form(None, ge=1),
    type: Optional[NonBlankLabel] = Form(None),
    reason: Optional[NonBlankNote] = Form(None),
    document: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[AbsenceJustificationResponse]:
    payload = AbsenceJustificationUpdate(absence_date=absence_date, duration=duration, type=type, reason=reason)
    try:
        record = await service.update_absence_justification(
            db, actor, storage, justification_id, payload, document
        )
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Absence justification updated successfully", data=record)


@router.post("/{justification_id}/status", response_model=ApiResponse[AbsenceJustificationResponse])
async def update_absence_justification_status(
    justification_id: int,
    payload: AbsenceJustificationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(require_roles(Role.ADMIN, Role.RH)),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[AbsenceJustificationResponse]:
    try:
        record = await service.update_absence_justification_status(
            db, actor, storage, justification_id, payload
        )
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message=f"Absence justification {payload.status} successfully", data=record)


@router.delete("/{justification_id}", response_model=MessageResponse)
async def delete_absence_justification(
    justification_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> MessageResponse:
    try:
        await service.delete_absence_justification(db, actor, storage, justification_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Absence justification deleted successfully")
