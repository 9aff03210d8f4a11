from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.rbac import require_roles
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import ComplaintStatus, Role
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse, MessageResponse, NonBlankText, NonBlankTitle
from hr_portal.core.storage import BlobStorage, get_blob_storage
from hr_portal.db.session import get_db

from .schemas import ComplaintCreate, ComplaintResponse, ComplaintStatusUpdate, ComplaintUpdate
from . import service

router = APIRouter(prefix="/api/v1/complaints", tags=["complaints"])


@router.get("", response_model=ApiResponse[List[ComplaintResponse]])
async def list_complaints(
    status_filter: Optional[ComplaintStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[List[ComplaintResponse]]:
    try:
        rows = await service.list_complaints(db, actor, storage, status_filter.value if status_filter else None)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=rows)


@router.post("", response_model=ApiResponse[ComplaintResponse], status_code=status.HTTP_201_CREATED)
async def create_complaint(
    subject: NonBlankTitle = Form(...),
    description: NonBlankText = Form(...),
    attachment: Optional[UploadFile] = File(None, description="pdf, doc, docx, jpg, jpeg or png; 10 MB max"),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[ComplaintResponse]:
    payload = ComplaintCreate(subject=subject, description=description)
    try:
        complaint = await service.create_complaint(db, actor, storage, payload, attachment)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Complaint submitted successfully", data=complaint)


@router.get("/{complaint_id}", response_model=ApiResponse[ComplaintResponse])
async def get_complaint(
    complaint_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[ComplaintResponse]:
    try:
        complaint = await service.get_complaint(db, actor, storage, complaint_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=complaint)


@router.put("/{complaint_id}", response_model=ApiResponse[ComplaintResponse])
async def update_complaint(
    complaint_id: int,
    subject: Optional[NonBlankTitle] = Form(None),
    description: Optional[NonBlankText] = Form(None),
    attachment: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[ComplaintResponse]:
    payload = ComplaintUpdate(subject=subject, description=description)
    try:
        complaint = await service.update_complaint(db, actor, storage, complaint_id, payload, attachment)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Complaint updated successfully", data=complaint)


@router.post("/{complaint_id}/status", response_model=ApiResponse[ComplaintResponse])
async def update_complaint_status(
    complaint_id: int,
    payload: ComplaintStatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(require_roles(Role.ADMIN, Role.RH)),
    storage: BlobStorage = Depends(get_blob_storage),
) -> ApiResponse[ComplaintResponse]:
    try:
        complaint = await service.update_complaint_status(db, actor, storage, complaint_id, payload)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(message="Complaint status updated successfully", data=complaint)


@router.delete("/{complaint_id}", response_model=MessageResponse)
async def delete_complaint(
    complaint_id: int,
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
    storage: BlobStorage = Depends(get_blob_storage),
) -> MessageResponse:
    try:
        await service.delete_complaint(db, actor, storage, complaint_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Complaint deleted successfully")
