from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import NotFoundError
from hr_portal.core.models import Employee

from .engine import WorkflowConfig


def _with_relations(workflow: WorkflowConfig, stmt: Select) -> Select:
    model = workflow.model
    return stmt.options(
        selectinload(model.employee).selectinload(Employee.user),
        selectinload(getattr(model, workflow.actor_relationship)),
    )


def scoped_select(workflow: WorkflowConfig, actor: ActorContext, status: Optional[str] = None) -> Select:
    """Staff see every record, employees their own; newest first, no pagination."""
    model = workflow.model
    stmt = _with_relations(workflow, select(model))
    if not actor.is_staff:
        stmt = stmt.where(model.employee_id == actor.employee_id)
    if status:
        stmt = stmt.where(model.status == status)
    return stmt.order_by(model.created_at.desc(), model.id.desc())


async def load_record(
    db: AsyncSession,
    workflow: WorkflowConfig,
    record_id: int,
    *,
    lock: bool = False,
) -> Any:
    model = workflow.model
    stmt = _with_relations(workflow, select(model).where(model.id == record_id)).execution_options(
        populate_existing=True
    )
    if lock:
        stmt = stmt.with_for_update()
    record = (await db.execute(stmt)).scalar_one_or_none()
    if record is None:
        raise NotFoundError(f"{workflow.label.capitalize()} not found")
    return record
