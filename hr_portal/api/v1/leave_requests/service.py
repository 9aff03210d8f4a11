"""Leave requests: submit, edit while pending, review (with balance deduction), cancel."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.datetime_utils import today as current_date
from hr_portal.core.exceptions import ServiceError, ValidationError
from hr_portal.core.models import Employee, LeaveRequest
from hr_portal.core.workflow import operations
from hr_portal.core.workflow.authorization import Action, ensure_can_act
from hr_portal.core.workflow.definitions import LEAVE_REQUEST_WORKFLOW
from hr_portal.core.workflow.durations import validate_range
from hr_portal.core.workflow.ledger import ensure_sufficient_balance
from hr_portal.core.workflow.query import load_record

from .schemas import LeaveRequestCreate, LeaveRequestResponse, LeaveRequestStatusUpdate, LeaveRequestUpdate

logger = logging.getLogger(__name__)

WORKFLOW = LEAVE_REQUEST_WORKFLOW


def _request_to_response(r: LeaveRequest) -> LeaveRequestResponse:
    return LeaveRequestResponse(
        id=r.id,
        employee_id=r.employee_id,
        employee_name=r.employee.user.name if r.employee and r.employee.user else None,
        type=r.type,
        start_date=r.start_date,
        end_date=r.end_date,
        duration=r.duration,
        reason=r.reason,
        status=r.status,
        rejection_reason=r.rejection_reason,
        processed_by=r.processed_by,
        processor_name=r.processor.name if r.processor else None,
        processed_at=r.processed_at,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def _ensure_not_in_past(start_date: date, today: date) -> None:
    if start_date < today:
        raise ValidationError(
            "Validation failed",
            {"start_date": ["The start date must be a date after or equal to today."]},
        )


async def _lock_employee(db: AsyncSession, employee_id: int) -> Employee:
    return (
        await db.execute(
            select(Employee)
            .where(Employee.id == employee_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
    ).scalar_one()


async def list_leave_requests(
    db: AsyncSession,
    actor: ActorContext,
    status: Optional[str] = None,
) -> List[LeaveRequestResponse]:
    rows = await operations.list_records(db, WORKFLOW, actor, status)
    return [_request_to_response(r) for r in rows]


async def get_leave_request(db: AsyncSession, actor: ActorContext, leave_id: int) -> LeaveRequestResponse:
    return _request_to_response(await operations.get_record(db, WORKFLOW, actor, leave_id))


async def create_leave_request(
    db: AsyncSession,
    actor: ActorContext,
    payload: LeaveRequestCreate,
    today: Optional[date] = None,
) -> LeaveRequestResponse:
    """Submit a leave request for the actor's own employee profile; duration counts both end dates."""
    ensure_can_act(actor, Action.CREATE, WORKFLOW)
    _ensure_not_in_past(payload.start_date, today or current_date())
    duration = validate_range(payload.start_date, payload.end_date)

    employee = await db.get(Employee, actor.employee_id)
    ensure_sufficient_balance(
        employee,
        duration,
        f"Insufficient leave balance. Available: {employee.leave_balance} days.",
    )

    req = LeaveRequest(
        employee_id=actor.employee_id,
        type=payload.type.strip(),
        start_date=payload.start_date,
        end_date=payload.end_date,
        duration=duration,
        reason=payload.reason.strip(),
        status=WORKFLOW.initial_status,
    )
    db.add(req)
    await db.commit()
    logger.info("Leave request %s submitted by employee %s (%s days)", req.id, actor.employee_id, duration)
    return _request_to_response(await load_record(db, WORKFLOW, req.id))


async def update_leave_request(
    db: AsyncSession,
    actor: ActorContext,
    leave_id: int,
    payload: LeaveRequestUpdate,
    today: Optional[date] = None,
) -> LeaveRequestResponse:
    """Owner edit of a pending request. A new date range is re-checked against the current balance."""
    req = await operations.get_owned_pending_record(db, WORKFLOW, actor, leave_id)
    try:
        if payload.start_date is not None or payload.end_date is not None:
            if payload.start_date is not None:
                _ensure_not_in_past(payload.start_date, today or current_date())
            start_date = payload.start_date or req.start_date
            end_date = payload.end_date or req.end_date
            duration = validate_range(start_date, end_date)
            employee = await _lock_employee(db, req.employee_id)
            ensure_sufficient_balance(employee, duration, "Insufficient leave balance for the updated request")
            req.start_date = start_date
            req.end_date = end_date
            req.duration = duration
        if payload.type is not None:
            req.type = payload.type.strip()
        if payload.reason is not None:
            req.reason = payload.reason.strip()
        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    return _request_to_response(await load_record(db, WORKFLOW, leave_id))


async def update_leave_request_status(
    db: AsyncSession,
    actor: ActorContext,
    leave_id: int,
    payload: LeaveRequestStatusUpdate,
) -> LeaveRequestResponse:
    req = await operations.change_status(
        db, WORKFLOW, actor, leave_id, payload.status, payload.rejection_reason
    )
    return _request_to_response(req)


async def cancel_leave_request(db: AsyncSession, actor: ActorContext, leave_id: int) -> None:
    """Cancelling removes the request; only the owner may do it while it is pending."""
    await operations.remove_record(db, WORKFLOW, actor, leave_id)
