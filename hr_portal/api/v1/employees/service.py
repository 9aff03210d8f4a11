import logging
import secrets
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_portal.auth.models import User
from hr_portal.auth.schemas import ActorContext
from hr_portal.auth.security import hash_password
from hr_portal.core.config import settings
from hr_portal.core.datetime_utils import today
from hr_portal.core.enums import Role
from hr_portal.core.exceptions import AuthorizationError, ConflictError
from hr_portal.core.models import AbsenceJustification, Complaint, Employee
from hr_portal.core.storage import BlobStorage

from .schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate

logger = logging.getLogger(__name__)

DEFAULT_NAME = "New Employee"
DEFAULT_POSITION = "Unspecified"
DEFAULT_DEPARTMENT = "General"


def _employee_to_response(employee: Employee) -> EmployeeResponse:
    user = employee.user
    return EmployeeResponse(
        id=employee.id,
        user_id=employee.user_id,
        name=user.name,
        email=user.email,
        role=user.role,
        position=employee.position,
        department=employee.department,
        employee_code=employee.employee_code,
        hire_date=employee.hire_date,
        leave_balance=employee.leave_balance,
        status=employee.status,
        grade=employee.grade,
        created_at=employee.created_at,
        updated_at=employee.updated_at,
    )


def _generate_employee_code() -> str:
    """e.g. EMP-7F2A09C1. Identification only, never used as a key."""
    return "EMP-" + secrets.token_hex(4).upper()


async def _check_duplicate_email(db: AsyncSession, email: str, exclude_user_id: Optional[int] = None) -> bool:
    stmt = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return (await db.execute(stmt)).scalar_one_or_none() is not None


async def _check_duplicate_code(db: AsyncSession, code: str, exclude_employee_id: Optional[int] = None) -> bool:
    stmt = select(Employee.id).where(Employee.employee_code == code)
    if exclude_employee_id is not None:
        stmt = stmt.where(Employee.id != exclude_employee_id)
    return (await db.execute(stmt)).scalar_one_or_none() is not None


async def _load_employee(db: AsyncSession, employee_id: int) -> Optional[Employee]:
    result = await db.execute(
        select(Employee)
        .where(Employee.id == employee_id)
        .options(selectinload(Employee.user))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_employee(db: AsyncSession, actor: ActorContext, payload: EmployeeCreate) -> EmployeeResponse:
    """Create the login account and its employee profile together. Raises ConflictError on duplicates."""
    if payload.role != Role.EMPLOYEE and actor.role != Role.ADMIN:
        raise AuthorizationError("Only administrators can create admin or HR accounts")
    if await _check_duplicate_email(db, payload.email):
        raise ConflictError("The email has already been taken.")

    if payload.employee_code:
        if await _check_duplicate_code(db, payload.employee_code):
            raise ConflictError("The employee code has already been taken.")
        employee_code = payload.employee_code
    else:
        employee_code = _generate_employee_code()
        while await _check_duplicate_code(db, employee_code):
            employee_code = _generate_employee_code()

    try:
        user = User(
            name=(payload.name or DEFAULT_NAME).strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role.value,
        )
        db.add(user)
        await db.flush()

        employee = Employee(
            user_id=user.id,
            position=payload.position or DEFAULT_POSITION,
            department=payload.department or DEFAULT_DEPARTMENT,
            employee_code=employee_code,
            hire_date=payload.hire_date or today(),
            leave_balance=(
                payload.leave_balance if payload.leave_balance is not None else settings.default_leave_balance
            ),
            status=payload.status.value,
            grade=payload.grade,
        )
        db.add(employee)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Duplicate email or employee code")

    logger.info("Employee %s (%s) created by user %s", employee.id, employee_code, actor.user_id)
    return _employee_to_response(await _load_employee(db, employee.id))


async def list_employees(db: AsyncSession, role: Optional[Role] = None) -> List[EmployeeResponse]:
    stmt = select(Employee).join(Employee.user).options(selectinload(Employee.user))
    if role is not None:
        stmt = stmt.where(User.role == role.value)
    result = await db.execute(stmt.order_by(User.name, Employee.id))
    return [_employee_to_response(e) for e in result.scalars().all()]


def _ensure_can_manage(actor: ActorContext, employee: Employee, verb: str) -> None:
    if employee.user.role != Role.EMPLOYEE.value and actor.role != Role.ADMIN:
        raise AuthorizationError(f"Only administrators can {verb} admin or HR accounts")


async def get_employee(db: AsyncSession, employee_id: int) -> Optional[EmployeeResponse]:
    employee = await _load_employee(db, employee_id)
    return _employee_to_response(employee) if employee else None


async def update_employee(
    db: AsyncSession,
    actor: ActorContext,
    employee_id: int,
    payload: EmployeeUpdate,
) -> Optional[EmployeeResponse]:
    employee = await _load_employee(db, employee_id)
    if not employee:
        return None
    _ensure_can_manage(actor, employee, "update")

    if payload.email is not None and await _check_duplicate_email(db, payload.email, exclude_user_id=employee.user_id):
        raise ConflictError("The email has already been taken.")
    if payload.employee_code is not None and await _check_duplicate_code(
        db, payload.employee_code, exclude_employee_id=employee.id
    ):
        raise ConflictError("The employee code has already been taken.")

    if payload.position is not None:
        employee.position = payload.position
    if payload.department is not None:
        employee.department = payload.department
    if payload.employee_code is not None:
        employee.employee_code = payload.employee_code
    if payload.hire_date is not None:
        employee.hire_date = payload.hire_date
    if payload.leave_balance is not None:
        employee.leave_balance = payload.leave_balance
    if payload.status is not None:
        employee.status = payload.status.value
    if "grade" in payload.model_fields_set:
        employee.grade = payload.grade
    if payload.name is not None:
        employee.user.name = payload.name.strip()
    if payload.email is not None:
        employee.user.email = payload.email

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Duplicate email or employee code")
    return _employee_to_response(await _load_employee(db, employee_id))


async def delete_employee(
    db: AsyncSession,
    actor: ActorContext,
    employee_id: int,
    storage: Optional[BlobStorage] = None,
) -> bool:
    """Remove the employee, everything it owns and its user account."""
    employee = await _load_employee(db, employee_id)
    if not employee:
        return False
    _ensure_can_manage(actor, employee, "delete")

    attachments = list(
        (
            await db.execute(
                select(AbsenceJustification.document_path).where(
                    AbsenceJustification.employee_id == employee_id,
                    AbsenceJustification.document_path.is_not(None),
                )
            )
        ).scalars()
    ) + list(
        (
            await db.execute(
                select(Complaint.attachment_path).where(
                    Complaint.employee_id == employee_id,
                    Complaint.attachment_path.is_not(None),
                )
            )
        ).scalars()
    )

    await db.delete(employee.user)
    await db.commit()
    logger.info("Employee %s and user %s deleted by user %s", employee_id, employee.user_id, actor.user_id)

    if storage is not None:
        for path in attachments:
            await storage.delete(path)
    return True
