from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.rbac import require_roles
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import Role
from hr_portal.core.exceptions import ServiceError, to_http_exception
from hr_portal.core.schemas import ApiResponse
from hr_portal.db.session import get_db

from .schemas import EmployeeDashboard, StaffDashboard
from . import service

router = APIRouter(prefix="/api/v1", tags=["dashboard"])


@router.get(
    "/admin/dashboard-stats",
    response_model=ApiResponse[StaffDashboard],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)
async def admin_dashboard_stats(db: AsyncSession = Depends(get_db)) -> ApiResponse[StaffDashboard]:
    return ApiResponse(data=await service.get_staff_dashboard(db))


@router.get(
    "/rh/dashboard-stats",
    response_model=ApiResponse[StaffDashboard],
    dependencies=[Depends(require_roles(Role.RH))],
)
async def rh_dashboard_stats(db: AsyncSession = Depends(get_db)) -> ApiResponse[StaffDashboard]:
    return ApiResponse(data=await service.get_staff_dashboard(db))


@router.get("/employee/dashboard-stats", response_model=ApiResponse[EmployeeDashboard])
async def employee_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    actor: ActorContext = Depends(get_current_actor),
) -> ApiResponse[EmployeeDashboard]:
    try:
        dashboard = await service.get_employee_dashboard(db, actor)
    except ServiceError as e:
        raise to_http_exception(e)
    return ApiResponse(data=dashboard)
