import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import ServiceError
from hr_portal.core.models import AbsenceJustification
from hr_portal.core.storage import BlobStorage, has_upload
from hr_portal.core.workflow import operations
from hr_portal.core.workflow.authorization import Action, ensure_can_act
from hr_portal.core.workflow.definitions import ABSENCE_JUSTIFICATION_WORKFLOW
from hr_portal.core.workflow.durations import display_end_date, ensure_positive_duration
from hr_portal.core.workflow.query import load_record

from .schemas import (
    AbsenceJustificationCreate,
    AbsenceJustificationResponse,
    AbsenceJustificationStatusUpdate,
    AbsenceJustificationUpdate,
)

logger = logging.getLogger(__name__)

WORKFLOW = ABSENCE_JUSTIFICATION_WORKFLOW
DOCUMENT_FOLDER = "absence-documents"


def _justification_to_response(
    j: AbsenceJustification, storage: BlobStorage
) -> AbsenceJustificationResponse:
    return AbsenceJustificationResponse(
        id=j.id,
        employee_id=j.employee_id,
        employee_name=j.employee.user.name if j.employee and j.employee.user else None,
        type=j.type,
        absence_date=j.absence_date,
        start_date=j.absence_date,
        end_date=display_end_date(j.absence_date, j.duration),
        duration=j.duration,
        reason=j.reason,
        status=j.status,
        rejection_reason=j.rejection_reason,
        document_url=storage.url_for(j.document_path),
        processed_by=j.processed_by,
        processor_name=j.processor.name if j.processor else None,
        processed_at=j.processed_at,
        created_at=j.created_at,
        updated_at=j.updated_at,
    )


async def list_absence_justifications(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    status: Optional[str] = None,
) -> List[AbsenceJustificationResponse]:
    rows = await operations.list_records(db, WORKFLOW, actor, status)
    return [_justification_to_response(j, storage) for j in rows]


async def get_absence_justification(
    db: AsyncSession, actor: ActorContext, storage: BlobStorage, justification_id: int
) -> AbsenceJustificationResponse:
    record = await operations.get_record(db, WORKFLOW, actor, justification_id)
    return _justification_to_response(record, storage)


async def create_absence_justification(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    payload: AbsenceJustificationCreate,
    document: Optional[UploadFile] = None,
) -> AbsenceJustificationResponse:
    ensure_can_act(actor, Action.CREATE, WORKFLOW)
    ensure_positive_duration(payload.duration)

    document_path = await storage.store(document, DOCUMENT_FOLDER) if has_upload(document) else None
    record = AbsenceJustification(
        employee_id=actor.employee_id,
        absence_date=payload.absence_date,
        duration=payload.duration,
        type=payload.type.strip(),
        reason=payload.reason.strip(),
        document_path=document_path,
        status=WORKFLOW.initial_status,
    )
    db.add(record)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        if document_path:
            await storage.delete(document_path)
        raise
    logger.info("Absence justification %s submitted by employee %s", record.id, actor.employee_id)
    return _justification_to_response(await load_record(db, WORKFLOW, record.id), storage)


async def update_absence_justification(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    justification_id: int,
    payload: AbsenceJustificationUpdate,
    document: Optional[UploadFile] = None,
) -> AbsenceJustificationResponse:
    """
    Owner edit of a pending justification. A new document replaces the old one;
    the old file is removed only after the row points at the new one.
    """
    record = await operations.get_owned_pending_record(db, WORKFLOW, actor, justification_id)
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    try:
        if payload.duration is not None:
            ensure_positive_duration(payload.duration)
            record.duration = payload.duration
        if payload.absence_date is not None:
            record.absence_date = payload.absence_date
        if payload.type is not None:
            record.type = payload.type.strip()
        if payload.reason is not None:
            record.reason = payload.reason.strip()
        if has_upload(document):
            new_path = await storage.store(document, DOCUMENT_FOLDER)
            old_path = record.document_path
            record.document_path = new_path
        await db.commit()
    except ServiceError:
        await db.rollback()
        if new_path:
            await storage.delete(new_path)
        raise

    if old_path:
        await storage.delete(old_path)
    return _justification_to_response(await load_record(db, WORKFLOW, justification_id), storage)


async def update_absence_justification_status(
    db: AsyncSession,
    actor: ActorContext,
    storage: BlobStorage,
    justification_id: int,
    payload: AbsenceJustificationStatusUpdate,
) -> AbsenceJustificationResponse:
    record = await operations.change_status(
        db, WORKFLOW, actor, justification_id, payload.status, payload.rejection_reason
    )
    return _justification_to_response(record, storage)


async def delete_absence_justification(
    db: AsyncSession, actor: ActorContext, storage: BlobStorage, justification_id: int
) -> None:
    await operations.remove_record(db, WORKFLOW, actor, justification_id, storage)
