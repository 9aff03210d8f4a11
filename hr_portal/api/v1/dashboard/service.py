from typing import Dict, Type

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_portal.auth.models import User
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import ComplaintStatus, EmployeeStatus, RequestStatus, Role
from hr_portal.core.exceptions import NotFoundError
from hr_portal.core.models import AbsenceJustification, Complaint, Employee, LeaveRequest

from .schemas import (
    EmployeeDashboard,
    EmployeeSummary,
    RecentEmployee,
    RecentLeaveRequest,
    StaffDashboard,
    StaffStats,
)

RECENT_EMPLOYEES = 5
RECENT_LEAVE_REQUESTS = 3


async def _count(db: AsyncSession, stmt) -> int:
    return (await db.execute(stmt)).scalar_one()


async def _pending_count(db: AsyncSession, model) -> int:
    return await _count(db, select(func.count(model.id)).where(model.status == RequestStatus.PENDING.value))


async def _status_counts(db: AsyncSession, model, employee_id: int, statuses: Type) -> Dict[str, int]:
    rows = await db.execute(
        select(model.status, func.count(model.id))
        .where(model.employee_id == employee_id)
        .group_by(model.status)
    )
    counts = {s.value: 0 for s in statuses}
    counts.update({status: n for status, n in rows.all()})
    return counts


async def get_staff_dashboard(db: AsyncSession) -> StaffDashboard:
    """Headcount covers accounts with the employee role only; admins and HR are not counted."""
    employees = select(func.count(Employee.id)).join(Employee.user).where(User.role == Role.EMPLOYEE.value)
    stats = StaffStats(
        total_employees=await _count(db, employees),
        active_employees=await _count(db, employees.where(Employee.status == EmployeeStatus.ACTIVE.value)),
        inactive_employees=await _count(db, employees.where(Employee.status == EmployeeStatus.INACTIVE.value)),
        pending_leaves=await _pending_count(db, LeaveRequest),
        pending_complaints=await _pending_count(db, Complaint),
        pending_absences=await _pending_count(db, AbsenceJustification),
    )

    result = await db.execute(
        select(Employee)
        .join(Employee.user)
        .where(User.role == Role.EMPLOYEE.value)
        .options(selectinload(Employee.user))
        .order_by(Employee.created_at.desc(), Employee.id.desc())
        .limit(RECENT_EMPLOYEES)
    )
    recent = [
        RecentEmployee(
            id=e.id,
            name=e.user.name,
            email=e.user.email,
            position=e.position,
            grade=e.grade,
            hire_date=e.hire_date,
            status=e.status,
        )
        for e in result.scalars().all()
    ]
    return StaffDashboard(stats=stats, recent_employees=recent)


async def get_employee_dashboard(db: AsyncSession, actor: ActorContext) -> EmployeeDashboard:
    if actor.employee_id is None:
        raise NotFoundError("Employee profile not found")
    employee = (
        await db.execute(
            select(Employee).where(Employee.id == actor.employee_id).options(selectinload(Employee.user))
        )
    ).scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee profile not found")

    stats = {
        "leave_requests": await _status_counts(db, LeaveRequest, employee.id, RequestStatus),
        "absence_justifications": await _status_counts(db, AbsenceJustification, employee.id, RequestStatus),
        "complaints": await _status_counts(db, Complaint, employee.id, ComplaintStatus),
    }

    result = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.employee_id == employee.id)
        .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        .limit(RECENT_LEAVE_REQUESTS)
    )
    recent = [
        RecentLeaveRequest(
            id=r.id,
            type=r.type,
            start_date=r.start_date,
            end_date=r.end_date,
            duration=r.duration,
            status=r.status,
            created_at=r.created_at,
        )
        for r in result.scalars().all()
    ]

    return EmployeeDashboard(
        employee=EmployeeSummary(
            id=employee.id,
            name=employee.user.name,
            position=employee.position,
            department=employee.department,
            leave_balance=employee.leave_balance,
            status=employee.status,
        ),
        stats=stats,
        recent_leave_requests=recent,
    )
