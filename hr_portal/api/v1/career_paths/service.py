import logging
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_portal.auth.schemas import ActorContext
from hr_portal.core.exceptions import AuthorizationError, BusinessRuleError, NotFoundError
from hr_portal.core.models import CareerPath, Employee

from .schemas import CareerPathCreate, CareerPathResponse, CareerPathUpdate, CareerSummary

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "current_position",
    "target_position",
    "last_promotion",
    "next_review",
    "skills_to_develop",
    "achievements",
)


def _career_path_to_response(cp: CareerPath) -> CareerPathResponse:
    return CareerPathResponse(
        id=cp.id,
        employee_id=cp.employee_id,
        employee_name=cp.employee.user.name if cp.employee and cp.employee.user else None,
        current_position=cp.current_position,
        target_position=cp.target_position,
        last_promotion=cp.last_promotion,
        next_review=cp.next_review,
        skills_to_develop=cp.skills_to_develop,
        achievements=cp.achievements,
        created_at=cp.created_at,
        updated_at=cp.updated_at,
    )


def _select_career_paths():
    return select(CareerPath).options(selectinload(CareerPath.employee).selectinload(Employee.user))


async def _get_by_id(db: AsyncSession, career_path_id: int) -> CareerPath:
    result = await db.execute(
        _select_career_paths()
        .where(CareerPath.id == career_path_id)
        .execution_options(populate_existing=True)
    )
    cp = result.scalar_one_or_none()
    if cp is None:
        raise NotFoundError("Career path not found")
    return cp


async def _get_for_employee(db: AsyncSession, employee_id: int) -> Optional[CareerPath]:
    result = await db.execute(_select_career_paths().where(CareerPath.employee_id == employee_id))
    return result.scalars().first()


async def list_career_paths(
    db: AsyncSession, actor: ActorContext
) -> Union[List[CareerPathResponse], Optional[CareerPathResponse]]:
    """Staff get every career path; an employee gets their own, or None."""
    if not actor.is_staff:
        if actor.employee_id is None:
            return None
        cp = await _get_for_employee(db, actor.employee_id)
        return _career_path_to_response(cp) if cp else None
    result = await db.execute(_select_career_paths().order_by(CareerPath.id))
    return [_career_path_to_response(cp) for cp in result.scalars().all()]


async def create_career_path(db: AsyncSession, payload: CareerPathCreate) -> CareerPathResponse:
    if await db.get(Employee, payload.employee_id) is None:
        raise NotFoundError("Employee not found")
    # One per employee; there is no unique constraint on the column
    if await _get_for_employee(db, payload.employee_id) is not None:
        raise BusinessRuleError("Career path already exists for this employee")

    cp = CareerPath(**payload.model_dump())
    db.add(cp)
    await db.commit()
    logger.info("Career path %s created for employee %s", cp.id, cp.employee_id)
    return _career_path_to_response(await _get_by_id(db, cp.id))


async def get_career_path(db: AsyncSession, actor: ActorContext, career_path_id: int) -> CareerPathResponse:
    cp = await _get_by_id(db, career_path_id)
    if not actor.is_staff and actor.employee_id != cp.employee_id:
        raise AuthorizationError("Unauthorized to view this career path")
    return _career_path_to_response(cp)


async def get_career_path_for_employee(
    db: AsyncSession, actor: ActorContext, employee_id: int
) -> CareerPathResponse:
    if await db.get(Employee, employee_id) is None:
        raise NotFoundError("Employee not found")
    if not actor.is_staff and actor.employee_id != employee_id:
        raise AuthorizationError("Unauthorized to view this employee's career path")
    cp = await _get_for_employee(db, employee_id)
    if cp is None:
        raise NotFoundError("Career path not found for this employee")
    return _career_path_to_response(cp)


async def update_career_path(
    db: AsyncSession, career_path_id: int, payload: CareerPathUpdate
) -> CareerPathResponse:
    cp = await _get_by_id(db, career_path_id)
    for field in _UPDATABLE_FIELDS:
        if field in payload.model_fields_set:
            value = getattr(payload, field)
            if field == "current_position" and value is None:
                continue
            setattr(cp, field, value)
    await db.commit()
    return _career_path_to_response(await _get_by_id(db, career_path_id))


async def get_my_career_summary(db: AsyncSession, actor: ActorContext) -> CareerSummary:
    """Falls back to the employee record when no career path has been set up yet."""
    if actor.employee_id is None:
        raise NotFoundError("Employee profile not found")
    employee = await db.get(Employee, actor.employee_id)
    if employee is None:
        raise NotFoundError("Employee profile not found")

    cp = await _get_for_employee(db, employee.id)
    if cp is None:
        return CareerSummary(
            current_position=employee.position,
            current_grade=employee.grade,
            hire_date=employee.hire_date,
            has_career_path=False,
        )
    return CareerSummary(
        current_position=cp.current_position,
        current_grade=employee.grade,
        hire_date=employee.hire_date,
        target_position=cp.target_position,
        next_review=cp.next_review,
        skills_to_develop=cp.skills_to_develop,
        achievements=cp.achievements,
        has_career_path=True,
    )
