"""
Operations shared by the three request types: role-scoped listing, guarded reads,
status transitions and owner cancellation. Entity services add create and edit.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import ServiceError
from hr_portal.core.storage import BlobStorage

from .authorization import Action, ensure_can_act
from .engine import WorkflowConfig, apply_transition
from .query import load_record, scoped_select

logger = logging.getLogger(__name__)


async def list_records(
    db: AsyncSession,
    workflow: WorkflowConfig,
    actor: ActorContext,
    status: Optional[str] = None,
) -> List[Any]:
    ensure_can_act(actor, Action.LIST, workflow)
    result = await db.execute(scoped_select(workflow, actor, status))
    return list(result.scalars().all())


async def get_record(
    db: AsyncSession,
    workflow: WorkflowConfig,
    actor: ActorContext,
    record_id: int,
) -> Any:
    record = await load_record(db, workflow, record_id)
    ensure_can_act(
        actor, Action.VIEW, workflow, owner_employee_id=record.employee_id, status=record.status
    )
    return record


async def get_owned_pending_record(
    db: AsyncSession,
    workflow: WorkflowConfig,
    actor: ActorContext,
    record_id: int,
    action: Action = Action.UPDATE,
) -> Any:
    """Load and lock a record the actor may edit or remove. Rolls back (releasing the lock) when denied."""
    try:
        record = await load_record(db, workflow, record_id, lock=True)
        ensure_can_act(
            actor, action, workflow, owner_employee_id=record.employee_id, status=record.status
        )
    except ServiceError:
        await db.rollback()
        raise
    return record


async def change_status(
    db: AsyncSession,
    workflow: WorkflowConfig,
    actor: ActorContext,
    record_id: int,
    target: str,
    note: Optional[str] = None,
) -> Any:
    """Guard, transition, side effects and commit as one unit. The row lock keeps a second approval out."""
    try:
        record = await load_record(db, workflow, record_id, lock=True)
        ensure_can_act(
            actor, Action.UPDATE_STATUS, workflow, owner_employee_id=record.employee_id, status=record.status
        )
        await apply_transition(db, workflow, record, target, actor, note)
        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    except Exception:
        await db.rollback()
        logger.exception("Status update failed for %s %s", workflow.label, record_id)
        raise
    return await load_record(db, workflow, record_id)


async def remove_record(
    db: AsyncSession,
    workflow: WorkflowConfig,
    actor: ActorContext,
    record_id: int,
    storage: Optional[BlobStorage] = None,
) -> None:
    """Hard-delete a pending record owned by the actor, then drop its attachment."""
    record = await get_owned_pending_record(db, workflow, actor, record_id, Action.DELETE)
    attachment = getattr(record, workflow.attachment_field) if workflow.attachment_field else None
    await db.delete(record)
    await db.commit()
    logger.info("%s %s removed by user %s", workflow.label, record_id, actor.user_id)
    if attachment and storage is not None:
        await storage.delete(attachment)
