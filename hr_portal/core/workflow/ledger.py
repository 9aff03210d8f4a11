"""Leave balance bookkeeping. Balances only move through approval of a leave request."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import BusinessRuleError
from hr_portal.core.models import Employee

logger = logging.getLogger(__name__)


def ensure_sufficient_balance(employee: Employee, days: int, message: str) -> None:
    if days > employee.leave_balance:
        raise BusinessRuleError(message)


def apply_approval(employee: Employee, duration: int) -> int:
    """Deduct an approved leave from the balance. Approvals never drive the balance below zero."""
    ensure_sufficient_balance(
        employee,
        duration,
        f"Insufficient leave balance to approve this request. Available: {employee.leave_balance} days.",
    )
    employee.leave_balance -= duration
    return employee.leave_balance


async def deduct_on_approval(db: AsyncSession, leave_request: Any, actor: ActorContext) -> None:
    # Lock the employee row so concurrent approvals for the same employee serialize
    employee = (
        await db.execute(
            select(Employee)
            .where(Employee.id == leave_request.employee_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    remaining = apply_approval(employee, leave_request.duration)
    logger.info(
        "Deducted %s days from employee %s (remaining %s)",
        leave_request.duration,
        employee.id,
        remaining,
    )
