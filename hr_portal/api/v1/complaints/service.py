import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import ServiceError
from hr_portal.core.models import Complaint
from hr_portal.core.storage import BlobStorage, has_upload
from hr_portal.core.workflow import operations
from hr_portal.core.workflow.authorization import Action, ensure_can_act
from hr_portal.core.workflow.definitions import COMPLAINT_WORKFLOW
from hr_portal.core.workflow.query import load_record

from .schemas import ComplaintCreate, ComplaintResponse, ComplaintStatusUpdate, ComplaintUpdate

logger = logging.getLogger(__name__)

WORKFLOW = COMPLAINT_WORKFLOW
ATTACHMENT_FOLDER = "complaint-attachments"
ATTACHMENT_FIELD = "attachment"


def _complaint_to_response(c: Complaint, storage: BlobStorage) -> ComplaintResponse:
    return ComplaintResponse(
        id=c.id,
        employee_id=c.employee_id,
        employee_name=c.employee.user.name if c.employee and c.employee.user else None,
        subject=c.subject,
        description=c.description,
        attachment_url=storage.url_for(c.attachment_path),
        status=c.status,
        resolution_details=c.resolution_details,
        handled_by=c.handled_by,
        handler_name=c.handler.name if c.handler else None,
        resolved_at=c.resolved_at,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


async def list_complaints(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    status: Optional[str] = None,
) -> List[ComplaintResponse]:
    rows = await operations.list_records(db, WORKFLOW, actor, status)
    return [_complaint_to_response(c, storage) for c in rows]


async def get_complaint(
    db: AsyncSession, actor: ActorContext, storage: BlobStorage, complaint_id: int
) -> ComplaintResponse:
    return _complaint_to_response(await operations.get_record(db, WORKFLOW, actor, complaint_id), storage)


async def create_complaint(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    payload: ComplaintCreate,
    attachment: Optional[UploadFile] = None,
) -> ComplaintResponse:
    ensure_can_act(actor, Action.CREATE, WORKFLOW)

    attachment_path = (
        await storage.store(attachment, ATTACHMENT_FOLDER, ATTACHMENT_FIELD) if has_upload(attachment) else None
    )
    complaint = Complaint(
        employee_id=actor.employee_id,
        subject=payload.subject.strip(),
        description=payload.description.strip(),
        attachment_path=attachment_path,
        status=WORKFLOW.initial_status,
    )
    db.add(complaint)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        if attachment_path:
            await storage.delete(attachment_path)
        raise
    logger.info("Complaint %s submitted by employee %s", complaint.id, actor.employee_id)
    return _complaint_to_response(await load_record(db, WORKFLOW, complaint.id), storage)


async def update_complaint(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    complaint_id: int,
    payload: ComplaintUpdate,
    attachment: Optional[UploadFile] = None,
) -> ComplaintResponse:
    complaint = await operations.get_owned_pending_record(db, WORKFLOW, actor, complaint_id)
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    try:
        if payload.subject is not None:
            complaint.subject = payload.subject.strip()
        if payload.description is not None:
            complaint.description = payload.description.strip()
        if has_upload(attachment):
            new_path = await storage.store(attachment, ATTACHMENT_FOLDER, ATTACHMENT_FIELD)
            old_path = complaint.attachment_path
            complaint.attachment_path = new_path
        await db.commit()
    except ServiceError:
        await db.rollback()
        if new_path:
            await storage.delete(new_path)
        raise

    if old_path:
        await storage.delete(old_path)
    return _complaint_to_response(await load_record(db, WORKFLOW, complaint_id), storage)


async def update_complaint_status(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    complaint_id: int,
    payload: ComplaintStatusUpdate,
) -> ComplaintResponse:
    """in_review leaves the handler unset; resolved and rejected stamp handler and resolved_at."""
    complaint = await operations.change_status(
        db, WORKFLOW, actor, complaint_id, payload.status, payload.resolution_details
    )
    return _complaint_to_response(complaint, storage)


async def delete_complaint(
    db: AsyncSession, actor: ActorContext, storage: BlobStorage, complaint_id: int
) -> None:
    await operations.remove_record(db, WORKFLOW, actor, complaint_id, storage)
